import pytest

from menu_benchmark.utils import (
    MatchStatus,
    classify_score,
    match_status_to_display,
    parse_price,
)


@pytest.mark.parametrize("value, expected", [
    (5, 5.0),
    (5.5, 5.5),
    ("$5.50", 5.5),
    ("$ 5,50", 5.5),
    ("1.234,50", 1234.5),
    ("1,234.50", 1234.5),
    ("", None),
    (None, None),
    (0, None),
    ("-3", None),
    ("abc", None),
    (True, None),
    (float("nan"), None),
])
def test_parse_price(value, expected):
    assert parse_price(value) == expected


def test_classify_score_bands():
    assert classify_score(0.50) == MatchStatus.MATCH
    assert classify_score(0.4999) == MatchStatus.PARTIAL_MATCH
    assert classify_score(0.30) == MatchStatus.PARTIAL_MATCH
    assert classify_score(0.2999) == MatchStatus.NO_MATCH


def test_match_status_labels():
    assert match_status_to_display(MatchStatus.MATCH) == "Coincidencia"
    assert match_status_to_display(MatchStatus.PARTIAL_MATCH) == "Coincidencia parcial"
    assert match_status_to_display(MatchStatus.NO_MATCH) == "Sin coincidencia fuerte"
    assert match_status_to_display("other") == "other"


def test_parse_price_rejects_integers_beyond_float_range():
    assert parse_price(10 ** 400) is None
    assert parse_price("1" + "0" * 400) is None
