"""
Best-effort extraction of menu dishes from competitor HTML pages

Two passes:
1. JSON-LD structured data (schema.org Menu / MenuSection / ItemList)
2. Heuristic mining of repeated container blocks (article, li, div, section)

Markup is handled with regular expressions only; pages with unusual
structure may yield few or no dishes, which is not an error.
"""

import html
import itertools
import json
import re
from typing import List, Optional, Set, Tuple

from loguru import logger

from menu_benchmark import config
from menu_benchmark.matching.text import normalize_text
from menu_benchmark.models import CandidateItem
from menu_benchmark.utils import parse_price


_JSON_LD_RE = re.compile(
    r'<script[^>]*type=["\']application/ld\+json["\'][^>]*>([\s\S]*?)</script\s*>',
    re.IGNORECASE
)
_BLOCK_RE = re.compile(r'<(article|li|div|section)\b[^>]*>[\s\S]*?</\1\s*>', re.IGNORECASE)
_COMMENT_RE = re.compile(r'<!--[\s\S]*?-->')
_SCRIPT_STYLE_RE = re.compile(r'<(script|style|noscript)\b[\s\S]*?</\1\s*>', re.IGNORECASE)
_INLINE_TAG_RE = re.compile(r'</?(?:a|abbr|b|em|i|mark|small|strong|sub|sup|u)\b[^>]*>', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]*>')
_IMG_SRC_RE = re.compile(r'<img\b[^>]*?\bsrc=["\']([^"\']+)["\']', re.IGNORECASE)
_LINE_SPLIT_RE = re.compile(r'\s{2,}|\n')
_SPACES_RE = re.compile(r'\s+')
_PRICE_RE = re.compile(re.escape(config.CURRENCY_MARKER) + r'\s?(\d+(?:[.,]\d+)?)')

# Keys that list menu entries inside a JSON-LD node
_JSON_LD_ITEM_KEYS = ('hasMenuSection', 'hasMenuItem', 'itemListElement')


def strip_tags(markup: str) -> str:
    """
    Remove markup and decode entities

    Block-level tags become line breaks so that titles, prices and
    descriptions in separate elements end up on separate lines. Inline
    formatting tags are dropped without a break.
    """
    if not markup:
        return ""
    text = _COMMENT_RE.sub(' ', markup)
    text = _SCRIPT_STYLE_RE.sub(' ', text)
    text = _INLINE_TAG_RE.sub('', text)
    text = _TAG_RE.sub('\n', text)
    return html.unescape(text)


def split_lines(text: str) -> List[str]:
    """Split plain text on newlines or runs of 2+ whitespace into clean lines"""
    lines = []
    for part in _LINE_SPLIT_RE.split(text):
        line = _SPACES_RE.sub(' ', part).strip()
        if line:
            lines.append(line)
    return lines


def find_prices(text: str) -> List[float]:
    """Currency-prefixed amounts in order of appearance ("$5.00", "$ 7,50")"""
    prices = []
    for match in _PRICE_RE.finditer(text):
        price = parse_price(match.group(1))
        if price:
            prices.append(price)
    return prices


def dedupe_key(dish: CandidateItem) -> Tuple[str, str]:
    """Case- and accent-insensitive identity of a dish"""
    return normalize_text(dish.name), normalize_text(dish.description)


def _looks_like_title(line: str) -> bool:
    return (
        config.TITLE_MIN_LENGTH <= len(line) <= config.TITLE_MAX_LENGTH
        and any(ch.isalpha() for ch in line)
    )


def _json_text(value) -> str:
    """Scalar JSON value as clean text; objects and arrays give ''"""
    if isinstance(value, str):
        return _SPACES_RE.sub(' ', html.unescape(value)).strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _json_image(value) -> str:
    """schema.org image may be a URL, a list of URLs or an ImageObject"""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get('url') or value.get('contentUrl')
    return _json_text(value)


def _dish_from_json_ld(item) -> Optional[CandidateItem]:
    if not isinstance(item, dict):
        return None

    # ItemList entries wrap the dish in "item"
    candidate = item.get('item') if isinstance(item.get('item'), dict) else item

    name = _json_text(candidate.get('name'))
    if not name:
        return None

    offer = candidate.get('offers')
    if isinstance(offer, list):
        offer = offer[0] if offer else None
    offer_price = offer.get('price') if isinstance(offer, dict) else None

    return CandidateItem(
        name=name,
        description=_json_text(candidate.get('description')),
        full_price=parse_price(offer_price) or parse_price(candidate.get('price')),
        promo_price=None,
        image=_json_image(candidate.get('image'))
    )


def extract_from_json_ld(markup: str) -> List[CandidateItem]:
    """
    Extract dishes from JSON-LD script blocks

    Each top-level node (or each element of a top-level array) is checked
    for hasMenuSection, hasMenuItem or itemListElement; entries of that
    list become dishes. Blocks that are not valid JSON are skipped.

    Args:
        markup: Raw HTML document

    Returns:
        Dishes in document order (not deduplicated)
    """
    dishes = []
    if not markup:
        return dishes

    for block_num, match in enumerate(_JSON_LD_RE.finditer(markup), start=1):
        try:
            parsed = json.loads(match.group(1).strip())
        except (ValueError, RecursionError) as e:
            logger.debug("Skipping JSON-LD block {}: {}", block_num, e)
            continue

        nodes = parsed if isinstance(parsed, list) else [parsed]
        for node in nodes:
            if not isinstance(node, dict):
                continue

            items = []
            for key in _JSON_LD_ITEM_KEYS:
                if node.get(key):
                    items = node[key]
                    break
            if not isinstance(items, list):
                items = [items]

            for item in items:
                dish = _dish_from_json_ld(item)
                if dish:
                    dishes.append(dish)

    return dishes


def _dish_from_block(block: str) -> Optional[CandidateItem]:
    """Build a dish from one container block, or None if it carries too little signal"""
    lines = split_lines(strip_tags(block))

    name_index = next((i for i, line in enumerate(lines) if _looks_like_title(line)), None)
    if name_index is None:
        return None

    prices = find_prices(' '.join(lines))
    if not prices and len(lines) < 2:
        return None

    following = lines[name_index + 1:name_index + 1 + config.MAX_DESCRIPTION_LINES]
    image = _IMG_SRC_RE.search(block)

    return CandidateItem(
        name=lines[name_index],
        description=' '.join(following),
        full_price=prices[0] if prices else None,
        promo_price=prices[1] if len(prices) > 1 else None,
        image=html.unescape(image.group(1)) if image else ""
    )


def extract_competitor_dishes(
    markup: str,
    max_candidates: int = config.MAX_CANDIDATES,
    max_blocks: int = config.MAX_BLOCKS
) -> List[CandidateItem]:
    """
    Extract menu dishes from a competitor page

    Structured data is taken first, then container blocks are mined until
    max_candidates dishes are collected. Dishes repeating an earlier
    (name, description) pair, compared without case or accents, are dropped.

    Args:
        markup: Raw HTML document (the caller bounds its size)
        max_candidates: Maximum number of dishes returned
        max_blocks: Maximum number of container blocks inspected

    Returns:
        List of CandidateItem, possibly empty
    """
    dishes: List[CandidateItem] = []
    seen: Set[Tuple[str, str]] = set()

    if not markup:
        return dishes

    def add(dish: CandidateItem) -> None:
        key = dedupe_key(dish)
        if key in seen:
            return
        seen.add(key)
        dishes.append(dish)

    for dish in extract_from_json_ld(markup):
        if len(dishes) >= max_candidates:
            break
        add(dish)
    structured_count = len(dishes)

    for match in itertools.islice(_BLOCK_RE.finditer(markup), max_blocks):
        if len(dishes) >= max_candidates:
            break
        dish = _dish_from_block(match.group(0))
        if dish:
            add(dish)

    logger.info(
        "Extracted {} dishes ({} from structured data, {} from page blocks)",
        len(dishes), structured_count, len(dishes) - structured_count
    )
    return dishes


extract = extract_competitor_dishes
