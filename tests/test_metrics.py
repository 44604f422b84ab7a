import pytest

from menu_benchmark.matching.metrics import (
    containment_bonus,
    edit_similarity,
    price_similarity,
    token_dice,
    token_jaccard,
)


def test_jaccard_uses_canonical_tokens():
    assert token_jaccard("Hamburguesa Doble", "Doble Burger") == 1.0
    assert token_jaccard("pizza muzzarella", "pizza napolitana") == pytest.approx(1 / 3)


def test_jaccard_is_symmetric_and_bounded():
    pairs = [
        ("pizza muzzarella", "pizza napolitana"),
        ("Pollo frito con papas", "chicken fries"),
        ("", "algo"),
    ]
    for a, b in pairs:
        assert token_jaccard(a, b) == token_jaccard(b, a)
        assert 0.0 <= token_jaccard(a, b) <= 1.0


def test_jaccard_identity():
    assert token_jaccard("Milanesa napolitana", "Milanesa napolitana") == 1.0


def test_empty_token_sets_score_zero():
    assert token_jaccard("de la", "pizza") == 0.0
    assert token_dice("de la", "pizza") == 0.0
    assert token_jaccard("pizza", "") == 0.0
    assert token_dice("", "pizza") == 0.0


def test_dice_counts_repeated_tokens_once_per_match():
    # [pollo, pollo, frito] vs [pollo, frito] -> 2 hits
    assert token_dice("pollo pollo frito", "pollo frito") == pytest.approx(0.8)
    assert token_dice("pollo frito", "pollo pollo frito") == pytest.approx(0.8)


def test_edit_similarity_edge_cases():
    assert edit_similarity("", "") == 1.0
    assert edit_similarity("abc", "") == 0.0
    assert edit_similarity("", "abc") == 0.0
    assert edit_similarity("abc", "abc") == 1.0
    assert edit_similarity("Café", "cafe") == 1.0


def test_edit_similarity_levenshtein():
    assert edit_similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)
    assert edit_similarity("sitting", "kitten") == edit_similarity("kitten", "sitting")


def test_containment_bonus():
    assert containment_bonus("Hamburguesa", "Hamburguesa Doble") == 1.0
    assert containment_bonus("HAMBURGUESA DOBLE", "hamburguesa") == 1.0
    assert containment_bonus("pizza", "pasta") == 0.0
    assert containment_bonus("", "pizza") == 0.0


def test_price_similarity():
    assert price_similarity(None, 5.0) == 0.25
    assert price_similarity(0, 5.0) == 0.25
    assert price_similarity(5.0, 5.0) == 1.0
    assert price_similarity(10.0, 5.0) == pytest.approx(0.5)
    assert price_similarity(5.0, 10.0) == price_similarity(10.0, 5.0)
    assert price_similarity(None, None, absent_score=0.0) == 0.0
