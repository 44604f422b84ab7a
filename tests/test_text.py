import re

import pytest

from menu_benchmark.matching.text import STOPWORDS, TOKEN_SYNONYMS, normalize_text, tokenize


NORMALIZED_RE = re.compile(r"(?:[a-z0-9]+(?: [a-z0-9]+)*)?")


def test_normalize_strips_accents_and_punctuation():
    assert normalize_text("Café Crème  Brûlée!!") == "cafe creme brulee"
    assert normalize_text("  Hamburguesa CLÁSICA (x2) ") == "hamburguesa clasica x2"


def test_normalize_handles_missing_input():
    assert normalize_text(None) == ""
    assert normalize_text("") == ""
    assert normalize_text("¡¿?!") == ""


def test_normalize_output_shape():
    samples = [
        "Ñandú asado\t\ncon   papas",
        "  -- $5.00 / 2x1 --  ",
        "ÀÉÎÕÜ ß 東京 emoji 🍔 ok",
        "<b>Pizza</b>&nbsp;Muzza",
    ]
    for sample in samples:
        result = normalize_text(sample)
        assert NORMALIZED_RE.fullmatch(result), result
        assert result == result.strip()
        assert "  " not in result


def test_tokenize_drops_short_words_and_stopwords():
    assert tokenize("Hamburguesas con papas y queso") == ["hamburguesa", "fritas", "queso"]
    assert tokenize("la de el") == []
    assert tokenize(None) == []


def test_tokenize_folds_synonyms():
    assert tokenize("Burger with fries") == ["hamburguesa", "with", "fritas"]
    assert tokenize("Chicken Soda") == ["pollo", "bebida"]
    assert tokenize("Chicken Soda") == tokenize("Pollo Gaseosa")


def test_tables_are_read_only():
    assert "con" in STOPWORDS
    with pytest.raises(TypeError):
        TOKEN_SYNONYMS["beef"] = "pollo"
    with pytest.raises(AttributeError):
        STOPWORDS.add("pizza")
    assert TOKEN_SYNONYMS["beef"] == "carne"
