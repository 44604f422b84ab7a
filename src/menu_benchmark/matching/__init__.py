"""Matching module - Dish similarity matching"""

from .text import normalize_text, tokenize
from .similarity_scorer import SimilarityScorer, SimilarityScore
from .dish_matcher import DishMatcher, MatchResult, compare

__all__ = [
    'normalize_text', 'tokenize',
    'SimilarityScorer', 'SimilarityScore',
    'DishMatcher', 'MatchResult', 'compare',
]
