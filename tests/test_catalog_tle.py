"""Tests for TLE text parsing, validation and field access."""

import pytest

from orbitview.catalog import (
    ElementSet,
    ObjectCategory,
    catalog_number,
    classify_element_set,
    compute_checksum,
    parse_bstar,
    parse_eccentricity,
    parse_mean_motion,
    parse_tle_text,
    validate_element_set,
    validate_tle_line,
)


def _with_bad_checksum(line: str) -> str:
    return line[:68] + str((int(line[68]) + 1) % 10)


class TestChecksum:
    def test_digits_and_minus(self):
        body = "1 00005U 58002B   00179.78495062  .00000023  00000-0  28098-4 0  475"
        # Pad to 68 columns
        body = body.ljust(68)
        expected = (sum(int(c) for c in body if c.isdigit()) + body.count("-")) % 10
        assert compute_checksum(body) == expected

    def test_ignores_column_69(self, element_set_factory):
        es = element_set_factory(90001)
        assert compute_checksum(es.line1) == compute_checksum(es.line1[:68])
        assert compute_checksum(es.line1) == int(es.line1[68])


class TestValidateLine:
    def test_valid(self, element_set_factory):
        es = element_set_factory(90001)
        validate_tle_line(es.line1, 1)
        validate_tle_line(es.line2, 2)

    def test_too_short(self):
        with pytest.raises(ValueError, match="too short"):
            validate_tle_line("1 25544U 98067A", 1)

    def test_wrong_line_number(self, element_set_factory):
        es = element_set_factory(90001)
        with pytest.raises(ValueError, match="does not start"):
            validate_tle_line(es.line1, 2)

    def test_checksum_mismatch(self, element_set_factory):
        line = _with_bad_checksum(element_set_factory(90001).line1)
        with pytest.raises(ValueError, match="checksum mismatch"):
            validate_tle_line(line, 1)

    def test_checksum_optional(self, element_set_factory):
        line = _with_bad_checksum(element_set_factory(90001).line1)
        validate_tle_line(line, 1, verify_checksum=False)

    def test_non_digit_checksum(self, element_set_factory):
        line = element_set_factory(90001).line1[:68] + "X"
        with pytest.raises(ValueError, match="non-digit"):
            validate_tle_line(line, 1)


class TestValidateElementSet:
    def test_valid(self, element_set_factory):
        validate_element_set(element_set_factory(90001))

    def test_catalog_number_mismatch(self, element_set_factory):
        a = element_set_factory(90001)
        b = element_set_factory(90002)
        with pytest.raises(ValueError, match="disagree"):
            validate_element_set(ElementSet("x", a.line1, b.line2))

    def test_catalog_number(self, iss_element_set):
        assert catalog_number(iss_element_set.line1) == "25544"
        assert catalog_number(iss_element_set.line2) == "25544"


class TestParseText:
    def test_three_line_form(self, iss_element_set):
        text = "\n".join([f"0 {iss_element_set.name}", iss_element_set.line1, iss_element_set.line2])
        (es,) = parse_tle_text(text)
        assert es.identifier == "25544"
        assert es.name == "ISS (ZARYA)"
        assert es.line1 == iss_element_set.line1
        assert es.line2 == iss_element_set.line2

    def test_two_line_form(self, element_set_factory):
        src = element_set_factory(90001)
        (es,) = parse_tle_text(f"{src.line1}\n{src.line2}\n")
        assert es.identifier == "90001"
        assert es.name == "SAT 90001"

    def test_mixed_forms_and_crlf(self, element_set_factory):
        a = element_set_factory(90001, name="ALPHA")
        b = element_set_factory(90002)
        text = "\r\n".join([a.name, a.line1, a.line2, b.line1, b.line2]) + "\r\n"
        parsed = parse_tle_text(text)
        assert [es.identifier for es in parsed] == ["90001", "90002"]
        assert parsed[0].name == "ALPHA"

    def test_skips_garbage(self, element_set_factory):
        a = element_set_factory(90001)
        text = "\n".join(["<html>", "not a tle", "", "NAME", a.line1, a.line2, "trailing"])
        parsed = parse_tle_text(text)
        assert len(parsed) == 1
        assert parsed[0].name == "NAME"

    def test_duplicate_identifiers_are_unique(self, element_set_factory):
        a = element_set_factory(90001)
        text = "\n".join([a.line1, a.line2] * 3)
        ids = [es.identifier for es in parse_tle_text(text)]
        assert ids == ["90001", "SAT-90001-1", "SAT-90001-2"]

    def test_deterministic(self, element_set_factory):
        text = "\n".join(
            line for k in range(5) for line in (element_set_factory(90001 + k).line1, element_set_factory(90001 + k).line2)
        )
        assert parse_tle_text(text) == parse_tle_text(text)

    def test_empty(self):
        assert parse_tle_text("") == []


class TestFields:
    def test_bstar(self, iss_element_set):
        assert parse_bstar(iss_element_set.line1) == pytest.approx(0.30142e-3, rel=1e-12)

    def test_bstar_negative(self, element_set_factory):
        es = element_set_factory(90001, bstar="-11606-4")
        assert parse_bstar(es.line1) == pytest.approx(-0.11606e-4, rel=1e-12)

    def test_bstar_zero(self, element_set_factory):
        assert parse_bstar(element_set_factory(90001).line1) == 0.0

    def test_bstar_short_line(self):
        assert parse_bstar("short") == 0.0

    def test_mean_motion(self, iss_element_set):
        assert parse_mean_motion(iss_element_set.line2) == pytest.approx(15.49520176)

    def test_eccentricity(self, iss_element_set):
        assert parse_eccentricity(iss_element_set.line2) == pytest.approx(0.0004124)


class TestClassify:
    def test_leo(self, iss_element_set):
        assert classify_element_set(iss_element_set) == ObjectCategory.LEO

    def test_debris_by_name(self, element_set_factory):
        es = element_set_factory(90001, name="COSMOS 2251 DEB")
        assert classify_element_set(es) == ObjectCategory.DEBRIS

    def test_geo(self, element_set_factory):
        es = element_set_factory(90001, mean_motion=1.00271, eccentricity=0.0002)
        assert classify_element_set(es) == ObjectCategory.GEO

    def test_heo(self, element_set_factory):
        es = element_set_factory(90001, mean_motion=2.006, eccentricity=0.72)
        assert classify_element_set(es) == ObjectCategory.HEO

    def test_meo(self, element_set_factory):
        es = element_set_factory(90001, mean_motion=2.0056, eccentricity=0.005)
        assert classify_element_set(es) == ObjectCategory.MEO

    def test_unreadable(self):
        es = ElementSet("x", "1 bad", "2 bad")
        assert classify_element_set(es) == ObjectCategory.UNKNOWN
