"""
Semantic similarity scoring between our dishes and competitor dishes
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from menu_benchmark import config
from menu_benchmark.utils import parse_price
from .metrics import (
    containment_bonus,
    edit_similarity,
    price_similarity,
    token_dice,
    token_jaccard,
)


@dataclass(frozen=True)
class SimilarityScore:
    """Container for similarity scores (all in [0, 1])"""
    total_score: float
    name_jaccard: float
    name_dice: float
    name_edit: float
    description_jaccard: float
    cross_signal: float
    containment: float
    price: float

    def __repr__(self):
        return (
            f"SimilarityScore(total={self.total_score * 100:.1f}%, "
            f"name={self.name_jaccard * 100:.0f}/{self.name_dice * 100:.0f}/{self.name_edit * 100:.0f}%, "
            f"desc={self.description_jaccard * 100:.0f}%, cross={self.cross_signal * 100:.0f}%, "
            f"contains={self.containment:.0f}, price={self.price * 100:.0f}%)"
        )

    def to_dict(self) -> dict:
        return {
            'total': round(self.total_score, 4),
            'nameJaccard': round(self.name_jaccard, 4),
            'nameDice': round(self.name_dice, 4),
            'nameEdit': round(self.name_edit, 4),
            'descriptionJaccard': round(self.description_jaccard, 4),
            'crossSignal': round(self.cross_signal, 4),
            'containment': round(self.containment, 4),
            'price': round(self.price, 4),
        }


def _field(record, name: str, default=None):
    """Read a field from a dataclass-like object or a mapping"""
    if record is None:
        return default
    if isinstance(record, Mapping):
        value = record.get(name)
        if value is None:
            # Host JSON uses camelCase (fullPrice)
            head, *rest = name.split('_')
            value = record.get(head + ''.join(part.title() for part in rest))
    else:
        value = getattr(record, name, default)
    return default if value is None else value


class SimilarityScorer:
    """
    Calculate weighted similarity between a reference dish and a candidate

    Weights:
    - Name token overlap (Jaccard): 30%
    - Name token overlap (Dice): 20%
    - Name edit distance: 16%
    - Description token overlap: 12%
    - Category+name vs name+description: 12%
    - Name containment: 5%
    - Price closeness: 5%
    """

    WEIGHTS = config.SCORE_WEIGHTS

    def __init__(
        self,
        weights: Optional[Mapping[str, float]] = None,
        price_absent_score: float = config.PRICE_ABSENT_SCORE
    ):
        """Initialize the similarity scorer, optionally overriding the policy"""
        if weights is not None:
            self._validate_weights(weights)
            self.weights = dict(weights)
        else:
            self.weights = dict(self.WEIGHTS)

        if not 0.0 <= price_absent_score <= 1.0:
            raise ValueError(f"price_absent_score must be within [0, 1], got {price_absent_score}")
        self.price_absent_score = price_absent_score

    @classmethod
    def _validate_weights(cls, weights: Mapping[str, float]) -> None:
        missing = set(cls.WEIGHTS) - set(weights)
        unknown = set(weights) - set(cls.WEIGHTS)
        if missing or unknown:
            raise ValueError(
                f"Weights must define exactly {sorted(cls.WEIGHTS)} "
                f"(missing: {sorted(missing)}, unknown: {sorted(unknown)})"
            )
        if any(w < 0 for w in weights.values()):
            raise ValueError("Weights must be non-negative")
        if abs(sum(weights.values()) - 1.0) > 1e-9:
            raise ValueError(f"Weights must sum to 1, got {sum(weights.values())}")

    def calculate_similarity(self, reference, candidate) -> SimilarityScore:
        """
        Calculate weighted similarity between two dishes

        Args:
            reference: ReferenceItem (or mapping) with name, description,
                category and full_price
            candidate: CandidateItem (or mapping) with name, description
                and full_price

        Returns:
            SimilarityScore with the total and every component
        """
        ref_name = str(_field(reference, 'name', ''))
        ref_desc = str(_field(reference, 'description', ''))
        ref_category = str(_field(reference, 'category', ''))
        cand_name = str(_field(candidate, 'name', ''))
        cand_desc = str(_field(candidate, 'description', ''))

        name_jaccard = token_jaccard(ref_name, cand_name)
        name_dice = token_dice(ref_name, cand_name)
        name_edit = edit_similarity(ref_name, cand_name)
        description_jaccard = token_jaccard(ref_desc, cand_desc)
        cross_signal = token_jaccard(f"{ref_category} {ref_name}", f"{cand_name} {cand_desc}")
        containment = containment_bonus(ref_name, cand_name)
        price = price_similarity(
            parse_price(_field(reference, 'full_price')),
            parse_price(_field(candidate, 'full_price')),
            absent_score=self.price_absent_score
        )

        total_score = (
            name_jaccard * self.weights['name_jaccard'] +
            name_dice * self.weights['name_dice'] +
            name_edit * self.weights['name_edit'] +
            description_jaccard * self.weights['description_jaccard'] +
            cross_signal * self.weights['cross_signal'] +
            containment * self.weights['containment'] +
            price * self.weights['price']
        )

        # Float sums can land a hair outside [0, 1]
        total_score = max(0.0, min(1.0, total_score))

        return SimilarityScore(
            total_score=total_score,
            name_jaccard=name_jaccard,
            name_dice=name_dice,
            name_edit=name_edit,
            description_jaccard=description_jaccard,
            cross_signal=cross_signal,
            containment=containment,
            price=price
        )

    def score(self, reference, candidate) -> float:
        """Weighted similarity as a single value in [0, 1]"""
        return self.calculate_similarity(reference, candidate).total_score
