# ABOUTME: Unit tests for field extraction from decoded XML trees.
# ABOUTME: Validates absence propagation, int/float coercion, list splitting, and date composition.

from datetime import date

import pytest

from shelfmark.metadata.extract import (
    compose_date,
    extract_float,
    extract_int,
    extract_list,
    extract_string,
    parse_float,
    parse_int,
    split_list,
)
from shelfmark.metadata.xmltree import parse_xml

TREE = parse_xml(
    b"""<ComicInfo>
  <Title>  The   Title </Title>
  <Nested kind="x">Nested value</Nested>
  <Empty></Empty>
  <Number>12</Number>
  <Decimal>3.5</Decimal>
  <Word>abc</Word>
  <Rating>4.50</Rating>
  <Writer>Alice, Bob,  Carol</Writer>
  <Sparse>, Alice,, ,Bob,</Sparse>
</ComicInfo>"""
)


class TestAbsence:
    """Missing keys resolve to the type's absent value."""

    @pytest.mark.parametrize("key", ["Missing", "Empty"])
    def test_absent_or_empty_key(self, key: str) -> None:
        """Absent and empty elements give None, None, None and []."""
        assert extract_string(TREE, key) is None
        assert extract_int(TREE, key) is None
        assert extract_float(TREE, key) is None
        assert extract_list(TREE, key) == []


class TestExtractString:
    """Tests for extract_string."""

    def test_normalizes(self) -> None:
        """Whitespace is collapsed and trimmed."""
        assert extract_string(TREE, "Title") == "The Title"

    def test_unwraps_nested_node(self) -> None:
        """An element with attributes is unwrapped to its text."""
        assert extract_string(TREE, "Nested") == "Nested value"


class TestExtractInt:
    """Tests for extract_int and parse_int."""

    def test_integer(self) -> None:
        assert extract_int(TREE, "Number") == 12

    def test_leading_integer_of_decimal(self) -> None:
        """Only the leading integer part is kept."""
        assert extract_int(TREE, "Decimal") == 3

    def test_non_numeric(self) -> None:
        """Text with no leading digits is absent, not zero."""
        assert extract_int(TREE, "Word") is None

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("7", 7), ("-2", -2), ("+4", 4), (" 08 ", 8), ("12abc", 12), ("x12", None), ("", None)],
    )
    def test_parse_int(self, text: str, expected: int | None) -> None:
        assert parse_int(text) == expected


class TestExtractFloat:
    """Tests for extract_float and parse_float."""

    def test_decimal(self) -> None:
        assert extract_float(TREE, "Rating") == 4.5

    def test_non_numeric(self) -> None:
        assert extract_float(TREE, "Word") is None

    @pytest.mark.parametrize("text", ["nan", "inf", "-Infinity"])
    def test_non_finite_is_absent(self, text: str) -> None:
        """NaN and infinities are rejected."""
        assert parse_float(text) is None

    def test_out_of_range_kept(self) -> None:
        """Values are not clamped to any scale."""
        assert parse_float("9.9") == 9.9


class TestExtractList:
    """Tests for extract_list and split_list."""

    def test_comma_separated(self) -> None:
        """Items are split on commas and trimmed, order preserved."""
        assert extract_list(TREE, "Writer") == ["Alice", "Bob", "Carol"]

    def test_drops_empty_items(self) -> None:
        """Empty segments between commas are skipped."""
        assert extract_list(TREE, "Sparse") == ["Alice", "Bob"]

    def test_single_item(self) -> None:
        assert extract_list(TREE, "Title") == ["The Title"]

    def test_no_global_dedup(self) -> None:
        """Repeated names are kept as given."""
        assert split_list("Tim Sale, Tim Sale") == ["Tim Sale", "Tim Sale"]


class TestComposeDate:
    """Tests for compose_date."""

    def test_year_only_defaults_to_january_first(self) -> None:
        assert compose_date(1999, None, None) == date(1999, 1, 1)

    def test_full_date(self) -> None:
        assert compose_date(1996, 12, 24) == date(1996, 12, 24)

    def test_missing_day(self) -> None:
        assert compose_date(2001, 6, None) == date(2001, 6, 1)

    def test_no_year(self) -> None:
        """Without a year there is no date, whatever month and day say."""
        assert compose_date(None, 6, 15) is None

    def test_impossible_date(self) -> None:
        """An impossible calendar day yields None instead of raising."""
        assert compose_date(2001, 13, 40) is None

    def test_zero_month_and_day_are_not_defaulted(self) -> None:
        """A present 0 token is impossible, not missing."""
        assert compose_date(1999, 0, 0) is None
        assert compose_date(1999, 5, 0) is None
