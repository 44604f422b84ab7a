"""
Pairwise similarity metrics, each returning a value in [0, 1]
"""

from collections import Counter
from typing import Optional

from rapidfuzz.distance import Levenshtein

from menu_benchmark import config
from .text import normalize_text, tokenize


def token_jaccard(a: str, b: str) -> float:
    """Set overlap of canonical tokens: |A & B| / |A | B|"""
    set_a = set(tokenize(a))
    set_b = set(tokenize(b))

    if not set_a or not set_b:
        return 0.0

    return len(set_a & set_b) / len(set_a | set_b)


def token_dice(a: str, b: str) -> float:
    """
    Multiset overlap of canonical tokens

    Each token of b consumes at most one matching occurrence in a, so
    repeated words only count as often as they appear on both sides.
    """
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)

    if not tokens_a or not tokens_b:
        return 0.0

    remaining = Counter(tokens_a)
    hits = 0
    for token in tokens_b:
        if remaining[token] > 0:
            remaining[token] -= 1
            hits += 1

    return 2 * hits / (len(tokens_a) + len(tokens_b))


def edit_similarity(a: str, b: str) -> float:
    """Levenshtein similarity of the normalized strings: 1 - dist / max_len"""
    norm_a = normalize_text(a)
    norm_b = normalize_text(b)

    if not norm_a and not norm_b:
        return 1.0
    if not norm_a or not norm_b:
        return 0.0

    distance = Levenshtein.distance(norm_a, norm_b)
    return 1.0 - distance / max(len(norm_a), len(norm_b))


def containment_bonus(a: str, b: str) -> float:
    """1 when one normalized string contains the other, else 0"""
    norm_a = normalize_text(a)
    norm_b = normalize_text(b)

    if not norm_a or not norm_b:
        return 0.0

    if norm_a in norm_b or norm_b in norm_a:
        return 1.0
    return 0.0


def price_similarity(
    price_a: Optional[float],
    price_b: Optional[float],
    absent_score: float = config.PRICE_ABSENT_SCORE
) -> float:
    """
    Relative closeness of two prices

    Returns absent_score when either price is missing, zero or negative.
    """
    if not price_a or not price_b or price_a < 0 or price_b < 0:
        return absent_score

    diff = abs(price_a - price_b)
    return max(0.0, 1.0 - diff / max(price_a, price_b))
