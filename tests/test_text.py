"""Tests for text, name and URL normalization."""

import pytest

from brew_signals.text import (
    normalize_name,
    normalize_text,
    normalize_url,
    significant_words,
    strip_legal_suffix,
    word_count,
)


@pytest.mark.parametrize("value", [None, "", "   ", "\n\t", "!!!", "---"])
def test_normalize_text_is_total_for_empty_inputs(value):
    assert normalize_text(value) == ""


def test_normalize_text_collapses_punctuation_and_case():
    assert normalize_text("  Great IPA!!  Friendly-staff,  outdoor_patio. ") == "great ipa friendly staff outdoor patio"


def test_normalize_text_strips_diacritics():
    assert normalize_text("Café Brauhaus Über") == "cafe brauhaus uber"


def test_word_count_uses_normalized_tokens():
    assert word_count("one, two -- three") == 3
    assert word_count(None) == 0


def test_normalize_url_strips_scheme_www_and_slash():
    assert normalize_url("https://www.Foo.com/") == "foo.com"
    assert normalize_url("www.Foo.com/") == "foo.com"
    assert normalize_url("http://foo.com/taproom/") == "foo.com/taproom"


@pytest.mark.parametrize("value", [None, "", "  "])
def test_normalize_url_empty_is_none(value):
    assert normalize_url(value) is None


def test_normalize_name_keeps_alphanumerics():
    assert normalize_name("Union Craft Brewing Co.") == "union craft brewing co"
    assert normalize_name("Jailbreak's Brewing") == "jailbreak s brewing"


def test_strip_legal_suffix_prefers_longest():
    assert strip_legal_suffix("heavy seas brewing company") == "heavy seas"
    assert strip_legal_suffix("heavy seas brewing") == "heavy seas"
    assert strip_legal_suffix("flying dog brewery") == "flying dog"
    assert strip_legal_suffix("brewing") == "brewing"


def test_significant_words_drops_short_words():
    assert significant_words("the old line ale co") == ["the", "old", "line", "ale"]
