"""
Best-match assignment of competitor dishes against our catalog
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from menu_benchmark.models import CandidateItem, ReferenceItem
from menu_benchmark.utils import MatchStatus, classify_score, match_status_to_display
from .similarity_scorer import SimilarityScore, SimilarityScorer


@dataclass(frozen=True)
class MatchResult:
    """Best catalog match for a single competitor dish"""
    candidate: CandidateItem
    best_reference: Optional[ReferenceItem]
    score: float  # percentage, one decimal
    status: str  # MatchStatus constant
    similarity: float = 0.0  # raw 0-1 score
    detailed_scores: Optional[SimilarityScore] = None

    def __repr__(self):
        ours = self.best_reference.name[:40] if self.best_reference else None
        return f"MatchResult(candidate='{self.candidate.name[:40]}', ours={ours!r}, score={self.score:.1f}%, status={self.status})"

    def to_dict(self) -> Dict:
        return {
            'competitor': self.candidate.to_dict(),
            'ours': self.best_reference.to_dict() if self.best_reference else None,
            'matchScore': self.score,
            'status': self.status,
            'statusLabel': match_status_to_display(self.status),
        }


def _as_reference(record) -> ReferenceItem:
    return ReferenceItem.from_dict(record) if isinstance(record, Mapping) else record


def _as_candidate(record) -> CandidateItem:
    return CandidateItem.from_dict(record) if isinstance(record, Mapping) else record


class DishMatcher:
    """
    Finds, for every competitor dish, the highest scoring dish of ours

    Every candidate is scored against every reference. Ties keep the
    reference that comes first in the given order. Plain mappings (stored
    JSON, API bodies) are accepted for both sides.
    """

    def __init__(self, scorer: SimilarityScorer = None):
        self.scorer = scorer or SimilarityScorer()

    def find_best_match(
        self,
        references: Sequence[ReferenceItem],
        candidate: CandidateItem
    ) -> MatchResult:
        """Score one candidate against all references"""
        candidate = _as_candidate(candidate)
        best_reference = None
        best_details = None

        for reference in map(_as_reference, references):
            details = self.scorer.calculate_similarity(reference, candidate)
            if best_details is None or details.total_score > best_details.total_score:
                best_reference = reference
                best_details = details

        if best_details is None:
            return MatchResult(
                candidate=candidate,
                best_reference=None,
                score=0.0,
                status=MatchStatus.NO_MATCH
            )

        similarity = best_details.total_score
        return MatchResult(
            candidate=candidate,
            best_reference=best_reference,
            score=round(similarity * 100, 1),
            status=classify_score(similarity),
            similarity=similarity,
            detailed_scores=best_details
        )

    def compare(
        self,
        references: Sequence[ReferenceItem],
        candidates: Sequence[CandidateItem]
    ) -> List[MatchResult]:
        """
        Match every candidate against the reference catalog

        Args:
            references: Our dishes, already filtered to the relevant brand
            candidates: Dishes extracted from a competitor page

        Returns:
            One MatchResult per candidate, in candidate order
        """
        references = [_as_reference(r) for r in references]
        results = [self.find_best_match(references, candidate) for candidate in candidates]

        logger.debug(
            "Compared {} candidates against {} references ({} matches)",
            len(results),
            len(references),
            sum(1 for r in results if r.status == MatchStatus.MATCH)
        )
        return results


def compare(
    references: Sequence[ReferenceItem],
    candidates: Sequence[CandidateItem]
) -> List[MatchResult]:
    """Match candidates against references with the default scoring policy"""
    return DishMatcher().compare(references, candidates)
