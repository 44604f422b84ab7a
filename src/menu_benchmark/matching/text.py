"""
Text normalization and tokenization for dish matching
"""

import re
import unicodedata
from types import MappingProxyType
from typing import List


# Filler words dropped before comparing (Spanish and English menus)
STOPWORDS = frozenset({
    'con', 'sin', 'para', 'por', 'del', 'las', 'los',
    'una', 'unos', 'unas', 'que', 'the', 'and',
})

# Near-synonymous menu terms folded into one canonical token
TOKEN_SYNONYMS = MappingProxyType({
    'burger': 'hamburguesa',
    'hamburguesa': 'hamburguesa',
    'hamburguesas': 'hamburguesa',
    'papas': 'fritas',
    'fries': 'fritas',
    'pizza': 'pizza',
    'pizzeta': 'pizza',
    'gaseosa': 'bebida',
    'bebida': 'bebida',
    'soda': 'bebida',
    'pollo': 'pollo',
    'chicken': 'pollo',
    'carne': 'carne',
    'beef': 'carne',
    'queso': 'queso',
    'cheese': 'queso',
    'vegano': 'vegano',
    'vegan': 'vegano',
})

MIN_TOKEN_LENGTH = 3

_NON_ALNUM_RE = re.compile(r'[^a-z0-9 ]')
_SPACES_RE = re.compile(r'\s+')


def normalize_text(text) -> str:
    """
    Normalize text for comparison

    Lowercases, drops diacritics ("café" -> "cafe"), replaces everything
    outside [a-z0-9 ] with a space and collapses whitespace.

    Examples:
        >>> normalize_text("  Hamburguesa CLÁSICA!! ")
        'hamburguesa clasica'
        >>> normalize_text(None)
        ''
    """
    if not text:
        return ""

    text = str(text).lower()

    # Decompose accents and drop the combining marks
    text = unicodedata.normalize('NFD', text)
    text = ''.join(ch for ch in text if not unicodedata.combining(ch))

    text = _NON_ALNUM_RE.sub(' ', text)
    text = _SPACES_RE.sub(' ', text)

    return text.strip()


def tokenize(text) -> List[str]:
    """
    Split text into canonical tokens

    Tokens shorter than three characters and stopwords are dropped, the
    rest are folded through TOKEN_SYNONYMS. Order follows the input text.
    """
    tokens = []
    for word in normalize_text(text).split(' '):
        if len(word) < MIN_TOKEN_LENGTH or word in STOPWORDS:
            continue
        tokens.append(TOKEN_SYNONYMS.get(word, word))
    return tokens
