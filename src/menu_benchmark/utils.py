"""
Utility functions and constants for menu benchmarking
"""

import math
import re
from typing import Optional

from menu_benchmark import config


# Match status constants
class MatchStatus:
    """Constants for match status values"""
    MATCH = "match"
    PARTIAL_MATCH = "partial_match"
    NO_MATCH = "no_match"


# Match type constants (for display)
class MatchType:
    """Constants for match type display values"""
    MATCH = "Coincidencia"
    PARTIAL_MATCH = "Coincidencia parcial"
    NO_MATCH = "Sin coincidencia fuerte"


def match_status_to_display(status: str) -> str:
    """
    Convert match status to display string

    Args:
        status: Match status constant from MatchStatus

    Returns:
        Display string from MatchType
    """
    mapping = {
        MatchStatus.MATCH: MatchType.MATCH,
        MatchStatus.PARTIAL_MATCH: MatchType.PARTIAL_MATCH,
        MatchStatus.NO_MATCH: MatchType.NO_MATCH,
    }
    return mapping.get(status, status)


def classify_score(similarity: float) -> str:
    """Band a 0-1 similarity into a MatchStatus value"""
    if similarity >= config.MATCH_THRESHOLD:
        return MatchStatus.MATCH
    if similarity >= config.PARTIAL_MATCH_THRESHOLD:
        return MatchStatus.PARTIAL_MATCH
    return MatchStatus.NO_MATCH


_PRICE_CHARS_RE = re.compile(r'[^\d.,\-]')


def parse_price(value) -> Optional[float]:
    """
    Normalize a price from CSV/JSON/string input

    Handles:
    - Numbers (5, 5.5)
    - Currency strings ("$5.50", "$ 5,50")
    - Blank and null values

    Args:
        value: Raw price value

    Returns:
        Price as float, or None when missing, invalid or not positive

    Examples:
        >>> parse_price("$5.50")
        5.5
        >>> parse_price("5,50")
        5.5
        >>> parse_price("")
        None
        >>> parse_price(0)
        None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            price = float(value)
        except OverflowError:
            return None
    else:
        price_str = _PRICE_CHARS_RE.sub('', str(value).strip())
        if not price_str:
            return None

        # "1.234,50" and "1,234.50" keep the last separator as the decimal point
        if ',' in price_str and '.' in price_str:
            if price_str.rfind(',') > price_str.rfind('.'):
                price_str = price_str.replace('.', '').replace(',', '.')
            else:
                price_str = price_str.replace(',', '')
        else:
            price_str = price_str.replace(',', '.')

        try:
            price = float(price_str)
        except ValueError:
            return None

    if math.isnan(price) or math.isinf(price) or price <= 0:
        return None

    return price
