"""Extraction module - Competitor dish mining from HTML"""

from .html_extractor import extract, extract_competitor_dishes, extract_from_json_ld, strip_tags

__all__ = ['extract', 'extract_competitor_dishes', 'extract_from_json_ld', 'strip_tags']
