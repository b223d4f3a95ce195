"""Tests for Austrian callsign format rules."""

from oeradio.rules import (
    build_callsign,
    district_name,
    is_club_suffix,
    license_class_name,
    parse_callsign,
    validate_callsign,
    validate_suffix,
)


class TestParseCallsign:
    """Tests for parse_callsign."""

    def test_personal_callsign(self) -> None:
        """Test splitting a personal callsign."""
        parsed = parse_callsign("OE8YML")
        assert parsed is not None
        assert parsed.prefix == "OE"
        assert parsed.district == 8
        assert parsed.suffix == "YML"

    def test_normalizes_case_and_whitespace(self) -> None:
        """Test lower case input with surrounding spaces."""
        parsed = parse_callsign("  oe1abc ")
        assert parsed is not None
        assert parsed.district == 1

    def test_foreign_callsign(self) -> None:
        """Test a non-Austrian callsign is rejected."""
        assert parse_callsign("DL1ABC") is None

    def test_single_letter_suffix(self) -> None:
        """Test a one-letter suffix is not a valid callsign."""
        assert parse_callsign("OE1A") is None


class TestValidateCallsign:
    """Tests for validate_callsign."""

    def test_valid_personal(self) -> None:
        """Test a regular personal callsign."""
        result = validate_callsign("OE8YML")
        assert result.valid
        assert result.errors == []
        assert result.parsed is not None

    def test_empty(self) -> None:
        """Test empty input."""
        result = validate_callsign("")
        assert not result.valid
        assert result.errors

    def test_wrong_prefix(self) -> None:
        """Test the prefix explanation."""
        result = validate_callsign("DL1ABC")
        assert not result.valid
        assert "OE" in result.errors[0]

    def test_personal_suffix_too_long(self) -> None:
        """Test 4-letter suffixes are reserved for club stations."""
        result = validate_callsign("OE1ABCD")
        assert not result.valid
        assert any("too long" in e for e in result.errors)

    def test_club_station_four_letters(self) -> None:
        """Test a 4-letter club suffix is valid with a warning."""
        result = validate_callsign("OE8XKVC")
        assert result.valid
        assert any("Club station" in w for w in result.warnings)

    def test_district_zero_warning(self) -> None:
        """Test district 0 produces a warning, not an error."""
        result = validate_callsign("OE0ABC")
        assert result.valid
        assert any("District 0" in w for w in result.warnings)

    def test_confusable_letters_warning(self) -> None:
        """Test O and I in the suffix produce a warning."""
        result = validate_callsign("OE1OIA")
        assert result.valid
        assert any("O or I" in w for w in result.warnings)

    def test_invalid_characters(self) -> None:
        """Test punctuation is rejected."""
        result = validate_callsign("OE1A-B")
        assert not result.valid


class TestValidateSuffix:
    """Tests for validate_suffix."""

    def test_personal(self) -> None:
        """Test 2 and 3 letter personal suffixes."""
        assert validate_suffix("ab").valid
        assert validate_suffix("ABC").valid

    def test_personal_starting_with_club_letter(self) -> None:
        """Test personal suffixes must not start with X."""
        assert not validate_suffix("XAB").valid

    def test_club(self) -> None:
        """Test club suffixes allow up to 4 letters."""
        assert validate_suffix("XABC", is_club=True).valid
        assert not validate_suffix("XABCD", is_club=True).valid

    def test_club_without_club_letter(self) -> None:
        """Test club suffixes must start with X."""
        assert not validate_suffix("ABC", is_club=True).valid

    def test_digits(self) -> None:
        """Test digits are not allowed."""
        result = validate_suffix("A1")
        assert not result.valid
        assert result.errors


class TestHelpers:
    """Tests for small helpers."""

    def test_is_club_suffix(self) -> None:
        """Test detection of the club letter."""
        assert is_club_suffix("xab")
        assert not is_club_suffix("ABX")

    def test_build_callsign(self) -> None:
        """Test composing a callsign."""
        assert build_callsign(3, "abc") == "OE3ABC"

    def test_district_name(self) -> None:
        """Test region names and the unknown fallback."""
        assert district_name(1) == "Wien"
        assert district_name(12) == "Unbekannt"

    def test_license_class_name(self) -> None:
        """Test license class descriptions."""
        assert "Einsteiger" in license_class_name(4)
        assert license_class_name(2) == "Unbekannt"
