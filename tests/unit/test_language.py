"""Unit tests for language tag utilities."""

import pytest

from subfetch.utils.language import (
    LanguageSet,
    display_name,
    missing,
    normalize_tag,
)


class TestNormalizeTag:
    """Test BCP-47 normalization."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("en", "en"),
            ("EN", "en"),
            ("eng", "en"),
            ("ger", "de"),
            ("pt_br", "pt-BR"),
            ("en-us", "en-US"),
            ("zh-hant", "zh-Hant"),
            ("", "und"),
            (None, "und"),
            ("not a language", "und"),
        ],
    )
    def test_normalize(self, code, expected):
        assert normalize_tag(code) == expected


class TestDisplayName:
    def test_plain_language(self):
        assert display_name("en") == "English"

    def test_language_with_region(self):
        assert display_name("pt-br") == "Portuguese (BR)"

    def test_unknown_language(self):
        assert display_name("xx") == "xx"


class TestMissing:
    """Test wanted/present set difference."""

    def test_difference(self):
        assert missing(["en", "fr", "de"], ["fr"]) == LanguageSet(["en", "de"])

    def test_nothing_missing(self):
        result = missing(["en", "fr"], ["fr", "en"])
        assert result == LanguageSet()
        assert not result

    def test_order_independent(self):
        assert missing(["en", "fr", "de"], ["de"]) == missing(["de", "fr", "en"], ["de"])

    def test_tag_value_based(self):
        """Should compare normalized tags, not raw strings."""
        assert missing(["eng", "FR"], ["en"]) == LanguageSet(["fr"])

    def test_extra_present_languages_ignored(self):
        assert missing(["en"], ["en", "es", "it"]) == LanguageSet()

    def test_result_is_language_set(self):
        result = missing(["fr", "en", "de"], [])
        assert isinstance(result, LanguageSet)
        assert result.ordered() == ["de", "en", "fr"]


class TestLanguageSet:
    """Test set operations keep normalized LanguageSet results."""

    def test_normalizes_members(self):
        assert LanguageSet(["ENG", "pt_br"]) == {"en", "pt-BR"}

    def test_union(self):
        result = LanguageSet(["en"]) | ["fre"]
        assert isinstance(result, LanguageSet)
        assert result.ordered() == ["en", "fr"]

    def test_intersection(self):
        result = LanguageSet(["en", "da"]) & {"dan", "de"}
        assert isinstance(result, LanguageSet)
        assert result == LanguageSet(["da"])

    def test_difference_with_plain_iterable(self):
        result = LanguageSet(["en", "da"]) - ["eng"]
        assert isinstance(result, LanguageSet)
        assert result.ordered() == ["da"]
