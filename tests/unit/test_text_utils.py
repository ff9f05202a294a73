"""
Unit tests for text utilities.
"""

import pytest

from utils.text_utils import normalize_org_nr, format_org_nr, clean_text


class TestNormalizeOrgNr:
    """Tests for normalize_org_nr."""

    @pytest.mark.parametrize("raw", [
        "987 654 321",
        "987-654-321",
        "NO987654321MVA",
        "987654321",
        " 987.654.321 ",
    ])
    def test_formats_normalize_to_digits(self, raw):
        assert normalize_org_nr(raw) == "987654321"

    @pytest.mark.parametrize("raw", [None, "", "   ", "MVA", "-"])
    def test_no_digits_means_private(self, raw):
        """Nothing left after stripping means no org.nr."""
        assert normalize_org_nr(raw) is None

    def test_does_not_enforce_length(self):
        """Registry lookups check length; normalization does not."""
        assert normalize_org_nr("12345") == "12345"


class TestFormatOrgNr:

    def test_groups_nine_digits(self):
        assert format_org_nr("987654321") == "987 654 321"

    def test_leaves_other_lengths(self):
        assert format_org_nr("12345") == "12345"
        assert format_org_nr(None) == ""


class TestCleanText:

    def test_strips_and_truncates(self):
        assert clean_text("  Acme AS  ") == "Acme AS"
        assert clean_text("x" * 300) == "x" * 255
        assert clean_text("abcdef", max_length=3) == "abc"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_is_none(self, raw):
        assert clean_text(raw) is None
