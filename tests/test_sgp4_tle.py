"""Tests for TLE parsing, validation, and gravity constants."""

from math import pi, sqrt

import pytest

from tlejax.sgp4 import (
    GRAVITY_MODELS,
    WGS72,
    WGS72OLD,
    WGS84,
    Classification,
    ErrorKind,
    InvalidElementsError,
    MeanElements,
    alpha5_to_int,
    compute_checksum,
    parse_tle,
    resolve_gravity,
    validate_tle_line,
)

# ISS TLE from the sgp4 reference test suite
ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"

# Polar orbit test TLE (blank classification and designator)
POLAR_LINE1 = "1     1U          20  1.00000000  .00000000  00000-0  00000-0 0    07"
POLAR_LINE2 = "2     1  90.0000   0.0000 0010000   0.0000   0.0000 15.21936719    07"

# ISS elements under an Alpha-5 catalog number
ALPHA5_LINE1 = "1 A0001U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2928"
ALPHA5_LINE2 = "2 A0001  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563538"


def _with_checksum(line: str) -> str:
    """Replace the checksum column of a (possibly edited) line."""
    return line[:68] + str(compute_checksum(line))


class TestEarthGravityConstants:
    """Test gravity constant sets match reference sgp4 library."""

    def test_wgs72old_values(self) -> None:
        assert WGS72OLD.mu == 398600.79964
        assert WGS72OLD.radiusearthkm == 6378.135
        assert WGS72OLD.xke == pytest.approx(0.0743669161, rel=1e-8)
        assert WGS72OLD.j2 == 0.001082616
        assert WGS72OLD.j3oj2 == pytest.approx(WGS72OLD.j3 / WGS72OLD.j2, rel=1e-12)

    def test_wgs72_values(self) -> None:
        assert WGS72.mu == 398600.8
        assert WGS72.radiusearthkm == 6378.135
        assert WGS72.j2 == 0.001082616
        assert WGS72.j3 == -0.00000253881
        assert WGS72.j4 == -0.00000165597

    def test_wgs84_values(self) -> None:
        assert WGS84.mu == 398600.5
        assert WGS84.radiusearthkm == 6378.137
        assert WGS84.j2 == 0.00108262998905
        assert WGS84.j3 == -0.00000253215306
        assert WGS84.j4 == -0.00000161098761

    def test_xke_derived(self) -> None:
        """xke should be 60/sqrt(re^3/mu)."""
        for grav in (WGS72, WGS84):
            expected = 60.0 / sqrt(grav.radiusearthkm**3 / grav.mu)
            assert grav.xke == pytest.approx(expected, rel=1e-10)

    def test_tumin_is_inverse_xke(self) -> None:
        for grav in (WGS72OLD, WGS72, WGS84):
            assert grav.tumin == pytest.approx(1.0 / grav.xke, rel=1e-12)

    def test_resolve_by_name(self) -> None:
        assert resolve_gravity("wgs84") is WGS84
        assert resolve_gravity("WGS72") is WGS72
        assert resolve_gravity(WGS72OLD) is WGS72OLD
        assert set(GRAVITY_MODELS) == {"wgs72old", "wgs72", "wgs84"}

    def test_resolve_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown gravity model"):
            resolve_gravity("egm96")


class TestChecksum:
    """Test TLE checksum computation."""

    def test_iss_checksums(self) -> None:
        assert compute_checksum(ISS_LINE1) == 7
        assert compute_checksum(ISS_LINE2) == 7

    def test_polar_checksums(self) -> None:
        assert compute_checksum(POLAR_LINE1) == 7
        assert compute_checksum(POLAR_LINE2) == 7

    def test_minus_contributes_one(self) -> None:
        line = "1" + " " * 10 + "-" + " " * 56
        assert compute_checksum(line) == 2

    def test_letters_contribute_nothing(self) -> None:
        line = "1" + "ABC" + " " * 64
        assert compute_checksum(line) == 1

    def test_non_ascii_digits_contribute_nothing(self) -> None:
        line = "1" + "²٣" + " " * 65
        assert compute_checksum(line) == 1


class TestValidateTleLine:
    """Test line structure and checksum validation."""

    def test_valid_lines(self) -> None:
        validate_tle_line(ISS_LINE1, 1)
        validate_tle_line(ISS_LINE2, 2)

    def test_too_short_raises(self) -> None:
        with pytest.raises(InvalidElementsError, match="too short"):
            validate_tle_line(ISS_LINE1[:60], 1)

    def test_wrong_line_number_raises(self) -> None:
        with pytest.raises(InvalidElementsError, match="does not start with '2'"):
            validate_tle_line(ISS_LINE1, 2)

    def test_bad_checksum_raises(self) -> None:
        bad = ISS_LINE1[:68] + "3"
        with pytest.raises(InvalidElementsError, match="checksum mismatch"):
            validate_tle_line(bad, 1)

    def test_non_digit_checksum_raises(self) -> None:
        bad = ISS_LINE1[:68] + "X"
        with pytest.raises(InvalidElementsError, match="non-digit checksum"):
            validate_tle_line(bad, 1)

    def test_trailing_whitespace_ignored(self) -> None:
        validate_tle_line(ISS_LINE1 + "   \n", 1)


class TestAlpha5:
    """Test Alpha-5 catalog number decoding."""

    def test_numeric(self) -> None:
        assert alpha5_to_int("25544") == 25544
        assert alpha5_to_int("    5") == 5

    def test_letters(self) -> None:
        assert alpha5_to_int("A0000") == 100000
        assert alpha5_to_int("A0001") == 100001
        assert alpha5_to_int("H1234") == 171234
        assert alpha5_to_int("J0000") == 180000  # I is skipped
        assert alpha5_to_int("P0000") == 230000  # O is skipped
        assert alpha5_to_int("Z9999") == 339999

    def test_excluded_letters_raise(self) -> None:
        with pytest.raises(ValueError):
            alpha5_to_int("I0000")
        with pytest.raises(ValueError):
            alpha5_to_int("O0000")

    def test_non_ascii_digits_raise(self) -> None:
        with pytest.raises(ValueError):
            alpha5_to_int("A²345")
        with pytest.raises(ValueError):
            alpha5_to_int("٢5544")

    def test_parse_alpha5_tle(self) -> None:
        elem = parse_tle(ALPHA5_LINE1, ALPHA5_LINE2)
        assert elem.satnum == 100001
        assert elem.satnum_str == "A0001"


class TestParseTle:
    """Test field extraction and unit conversion."""

    @pytest.fixture()
    def iss(self) -> MeanElements:
        return parse_tle(ISS_LINE1, ISS_LINE2)

    def test_iss_identification(self, iss) -> None:
        assert iss.satnum == 25544
        assert iss.satnum_str == "25544"
        assert iss.classification is Classification.UNCLASSIFIED
        assert iss.intldesg == "98067A"
        assert iss.elnum == 292
        assert iss.revnum == 56353
        assert iss.ephtype == 0

    def test_iss_epoch(self, iss) -> None:
        assert iss.epochyr == 8
        assert iss.epoch_year == 2008
        assert iss.epochdays == pytest.approx(264.51782528, rel=1e-12)
        assert iss.jdsatepoch == 2454729.5
        assert iss.jdsatepochF == pytest.approx(0.51782528, abs=1e-12)
        assert iss.jd_epoch == pytest.approx(2454730.01782528, abs=1e-9)

    def test_iss_angles_radians(self, iss) -> None:
        assert iss.inclo == pytest.approx(51.6416 * pi / 180.0, rel=1e-10)
        assert iss.nodeo == pytest.approx(247.4627 * pi / 180.0, rel=1e-10)
        assert iss.argpo == pytest.approx(130.5360 * pi / 180.0, rel=1e-10)
        assert iss.mo == pytest.approx(325.0288 * pi / 180.0, rel=1e-10)

    def test_iss_eccentricity(self, iss) -> None:
        assert iss.ecco == pytest.approx(0.0006703, rel=1e-10)

    def test_iss_mean_motion_rad_per_min(self, iss) -> None:
        xpdotp = 1440.0 / (2.0 * pi)
        assert iss.no_kozai == pytest.approx(15.72125391 / xpdotp, rel=1e-10)

    def test_iss_drag_terms(self, iss) -> None:
        xpdotp = 1440.0 / (2.0 * pi)
        assert iss.bstar == pytest.approx(-0.11606e-4, rel=1e-10)
        assert iss.ndot == pytest.approx(-0.00002182 / (xpdotp * 1440.0), rel=1e-10)
        assert iss.nddot == 0.0

    def test_exponent_field_decoding(self) -> None:
        line1 = _with_checksum(ISS_LINE1[:44] + "-12345-6" + ISS_LINE1[52:53] + "+98765+1" + ISS_LINE1[61:])
        elem = parse_tle(line1, ISS_LINE2)
        xpdotp = 1440.0 / (2.0 * pi)
        assert elem.nddot == pytest.approx(-0.12345e-6 / (xpdotp * 1440.0 * 1440.0), rel=1e-10)
        assert elem.bstar == pytest.approx(0.98765e1, rel=1e-10)

    def test_iss_matches_reference_sgp4(self) -> None:
        """Verify parsed elements match the python-sgp4 library."""
        from sgp4.api import WGS72 as SGP4_WGS72
        from sgp4.api import Satrec

        ref = Satrec.twoline2rv(ISS_LINE1, ISS_LINE2, SGP4_WGS72)
        elem = parse_tle(ISS_LINE1, ISS_LINE2)

        assert elem.satnum == ref.satnum
        assert elem.classification.value == ref.classification
        assert elem.epochyr == ref.epochyr
        assert elem.epochdays == pytest.approx(ref.epochdays, rel=1e-12)
        assert elem.bstar == pytest.approx(ref.bstar, rel=1e-10)
        assert elem.ndot == pytest.approx(ref.ndot, rel=1e-10)
        assert elem.inclo == pytest.approx(ref.inclo, rel=1e-10)
        assert elem.nodeo == pytest.approx(ref.nodeo, rel=1e-10)
        assert elem.ecco == pytest.approx(ref.ecco, rel=1e-10)
        assert elem.argpo == pytest.approx(ref.argpo, rel=1e-10)
        assert elem.mo == pytest.approx(ref.mo, rel=1e-10)
        assert elem.no_kozai == pytest.approx(ref.no_kozai, rel=1e-10)
        assert elem.jdsatepoch == pytest.approx(ref.jdsatepoch, abs=1e-9)
        assert elem.jd_epoch == pytest.approx(ref.jdsatepoch + ref.jdsatepochF, abs=1e-8)

    def test_polar_orbit(self) -> None:
        elem = parse_tle(POLAR_LINE1, POLAR_LINE2)
        assert elem.satnum == 1
        assert elem.intldesg == ""
        assert elem.inclo == pytest.approx(90.0 * pi / 180.0, rel=1e-10)
        assert elem.ecco == pytest.approx(0.001, rel=1e-10)

    def test_blank_classification_defaults_to_unclassified(self) -> None:
        line1 = _with_checksum(ISS_LINE1[:7] + " " + ISS_LINE1[8:])
        elem = parse_tle(line1, ISS_LINE2)
        assert elem.classification is Classification.UNCLASSIFIED

    def test_classified(self) -> None:
        line1 = _with_checksum(ISS_LINE1[:7] + "C" + ISS_LINE1[8:])
        elem = parse_tle(line1, ISS_LINE2)
        assert elem.classification is Classification.CLASSIFIED

    def test_two_digit_year_1900s(self) -> None:
        """Years 57-99 map to 1957-1999."""
        line1 = _with_checksum(ISS_LINE1[:18] + "99" + ISS_LINE1[20:])
        elem = parse_tle(line1, ISS_LINE2)
        assert elem.epochyr == 99
        assert elem.epoch_year == 1999

    def test_two_digit_year_boundary(self) -> None:
        line1 = _with_checksum(ISS_LINE1[:18] + "57" + ISS_LINE1[20:])
        assert parse_tle(line1, ISS_LINE2).epoch_year == 1957
        line1 = _with_checksum(ISS_LINE1[:18] + "56" + ISS_LINE1[20:])
        assert parse_tle(line1, ISS_LINE2).epoch_year == 2056

    def test_frozen(self) -> None:
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        with pytest.raises(AttributeError):
            elem.ecco = 0.5


class TestParseTleErrors:
    """Malformed TLE text raises InvalidElementsError naming the field."""

    def test_invalid_eccentricity_column(self) -> None:
        # 'X' and '0' both count as zero toward the checksum
        line2 = ISS_LINE2[:26] + "X" + ISS_LINE2[27:]
        assert compute_checksum(line2) == compute_checksum(ISS_LINE2)
        with pytest.raises(InvalidElementsError, match="eccentricity") as excinfo:
            parse_tle(ISS_LINE1, line2)
        assert excinfo.value.kind is ErrorKind.INVALID_ELEMENTS

    def test_invalid_elements_is_value_error(self) -> None:
        line2 = ISS_LINE2[:26] + "X" + ISS_LINE2[27:]
        with pytest.raises(ValueError):
            parse_tle(ISS_LINE1, line2)

    def test_non_ascii_digit_in_data_column(self) -> None:
        # Superscript two counts as zero toward the checksum
        line2 = ISS_LINE2[:27] + "²" + ISS_LINE2[28:]
        assert compute_checksum(line2) == compute_checksum(ISS_LINE2)
        with pytest.raises(InvalidElementsError, match="eccentricity"):
            parse_tle(ISS_LINE1, line2)

    def test_arabic_indic_digit_raises(self) -> None:
        line2 = _with_checksum(ISS_LINE2[:8] + " ٥1.6416" + ISS_LINE2[16:])
        with pytest.raises(InvalidElementsError, match="inclination"):
            parse_tle(ISS_LINE1, line2)

    def test_nan_inclination_raises(self) -> None:
        line2 = _with_checksum(ISS_LINE2[:8] + "     nan" + ISS_LINE2[16:])
        with pytest.raises(InvalidElementsError, match="inclination"):
            parse_tle(ISS_LINE1, line2)

    def test_infinite_mean_motion_raises(self) -> None:
        line2 = _with_checksum(ISS_LINE2[:52] + "        inf" + ISS_LINE2[63:])
        with pytest.raises(InvalidElementsError, match="mean motion"):
            parse_tle(ISS_LINE1, line2)

    def test_underscore_separator_raises(self) -> None:
        line2 = _with_checksum(ISS_LINE2[:8] + " 51_6416" + ISS_LINE2[16:])
        with pytest.raises(InvalidElementsError, match="inclination"):
            parse_tle(ISS_LINE1, line2)

    def test_invalid_mean_motion(self) -> None:
        line2 = _with_checksum(ISS_LINE2[:52] + "15.7212539a" + ISS_LINE2[63:])
        with pytest.raises(InvalidElementsError, match="mean motion"):
            parse_tle(ISS_LINE1, line2)

    def test_invalid_bstar(self) -> None:
        line1 = _with_checksum(ISS_LINE1[:53] + "-1160x" + ISS_LINE1[59:])
        with pytest.raises(InvalidElementsError, match="bstar"):
            parse_tle(line1, ISS_LINE2)

    def test_invalid_classification(self) -> None:
        line1 = _with_checksum(ISS_LINE1[:7] + "X" + ISS_LINE1[8:])
        with pytest.raises(InvalidElementsError, match="classification"):
            parse_tle(line1, ISS_LINE2)

    def test_mismatched_satnum_raises(self) -> None:
        line2 = _with_checksum("2 99999" + ISS_LINE2[7:])
        with pytest.raises(InvalidElementsError, match="do not match"):
            parse_tle(ISS_LINE1, line2)

    def test_swapped_lines_raise(self) -> None:
        with pytest.raises(InvalidElementsError):
            parse_tle(ISS_LINE2, ISS_LINE1)
