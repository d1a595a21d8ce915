"""
TLE parsing for the SGP4 propagator.

Provides pure-Python functions to validate and parse Two-Line Element (TLE)
sets into ``MeanElements`` suitable for SGP4 initialization. Parsing never
returns a partial record: any malformed field raises
:class:`~tlejax.sgp4.InvalidElementsError`.
"""

from __future__ import annotations

from collections.abc import Callable
from math import isfinite
from typing import TypeVar

from tlejax.constants import DEG2RAD, MIN_PER_DAY, XPDOTP
from tlejax.sgp4._errors import InvalidElementsError
from tlejax.sgp4._types import Classification, MeanElements

_T = TypeVar("_T")

# Alpha-5 leading letters; I and O are skipped to avoid confusion with 1 and 0
_ALPHA5_LETTERS = "ABCDEFGHJKLMNPQRSTUVWXYZ"

_DIGITS = "0123456789"


def compute_checksum(line: str) -> int:
    """Compute the TLE checksum for a line.

    The checksum is the sum of all digit characters plus 1 for each
    minus sign, modulo 10, computed over the first 68 characters.

    Args:
        line: A TLE line string (at least 68 characters).

    Returns:
        The checksum digit (0-9).
    """
    return sum((int(c) if c in _DIGITS else c == "-") for c in line[:68]) % 10


def validate_tle_line(line: str, line_number: int) -> None:
    """Validate a TLE line's format and checksum.

    Args:
        line: A TLE line string.
        line_number: Expected line number (1 or 2).

    Raises:
        InvalidElementsError: If the line fails format or checksum validation.
    """
    line = line.rstrip()

    if len(line) < 69:
        raise InvalidElementsError(
            f"TLE line {line_number} is too short ({len(line)} chars, expected 69): {line}"
        )

    if line[0] != str(line_number):
        raise InvalidElementsError(
            f"TLE line {line_number} does not start with '{line_number}': {line}"
        )

    checksum_char = line[68]
    if checksum_char not in _DIGITS:
        raise InvalidElementsError(f"TLE line {line_number} has non-digit checksum: {line}")

    expected = compute_checksum(line)
    actual = int(checksum_char)
    if expected != actual:
        raise InvalidElementsError(
            f"TLE line {line_number} checksum mismatch: computed {expected}, found {actual}: {line}"
        )


def alpha5_to_int(satnum_str: str) -> int:
    """Decode a five-character catalog number, including the Alpha-5 scheme.

    Alpha-5 replaces the leading digit with a letter for catalog numbers
    above 99999: ``A0000`` is 100000, ``Z9999`` is 339999.

    Args:
        satnum_str: Catalog number columns from a TLE line.

    Returns:
        The catalog number as an integer.

    Raises:
        ValueError: If the string is not a valid catalog number.
    """
    text = satnum_str.strip()
    if text and text[0].isalpha():
        index = _ALPHA5_LETTERS.find(text[0].upper())
        if index < 0 or not text[1:] or any(c not in _DIGITS for c in text[1:]):
            raise ValueError(f"invalid Alpha-5 catalog number {satnum_str!r}")
        return (index + 10) * 10000 + int(text[1:])
    if not text or any(c not in _DIGITS for c in text):
        raise ValueError(f"invalid catalog number {satnum_str!r}")
    return int(text)


def _parse_field(name: str, text: str, convert: Callable[[str], _T]) -> _T:
    """Convert one TLE field, naming the field if it is malformed.

    Python's numeric constructors accept spellings that never appear in a
    TLE (``nan``, ``inf``, ``1_0``, non-ASCII digits); these are rejected.
    """
    try:
        if not text.isascii() or "_" in text:
            raise ValueError("not a TLE numeric or code field")
        value = convert(text)
        if isinstance(value, float) and not isfinite(value):
            raise ValueError("value is not finite")
    except ValueError as exc:
        raise InvalidElementsError(f"Invalid TLE {name} field {text!r}: {exc}") from exc
    return value


def _parse_classification(char: str) -> Classification:
    if char.strip() == "":
        return Classification.UNCLASSIFIED
    return Classification(char)


def _parse_exponential(name: str, mantissa: str, exponent: str) -> float:
    """Decode an assumed-decimal field such as ``-11606-4`` (-0.11606e-4)."""
    value = _parse_field(name, mantissa[0] + "." + mantissa[1:], float)
    power = _parse_field(name + " exponent", exponent, int)
    return value * 10.0**power


def parse_tle(line1: str, line2: str) -> MeanElements:
    """Parse a Two-Line Element set into SGP4 mean elements.

    Follows the fixed-column TLE format specification. Angular values are
    converted to radians and mean motion to rad/min for SGP4 internal use.

    Args:
        line1: First TLE line (69 characters including checksum).
        line2: Second TLE line (69 characters including checksum).

    Returns:
        Parsed mean elements ready for SGP4 initialization.

    Raises:
        InvalidElementsError: If lines fail format validation or checksum
            check, a field does not parse, or satellite numbers don't match.
    """
    validate_tle_line(line1, 1)
    validate_tle_line(line2, 2)

    l1 = line1.rstrip()
    l2 = line2.rstrip()

    # Line 1
    satnum_str = l1[2:7]
    satnum = _parse_field("satellite number", satnum_str, alpha5_to_int)
    classification = _parse_field("classification", l1[7], _parse_classification)
    intldesg = l1[9:17].rstrip()
    two_digit_year = _parse_field("epoch year", l1[18:20], int)
    epochdays = _parse_field("epoch day", l1[20:32], float)
    ndot = _parse_field("first mean motion derivative", l1[33:43], float)
    nddot = _parse_exponential("second mean motion derivative", l1[44:50], l1[50:52])
    bstar = _parse_exponential("bstar", l1[53:59], l1[59:61])
    ephtype = _parse_field("ephemeris type", l1[62].strip() or "0", int)
    elnum = _parse_field("element set number", l1[64:68], int)

    # Line 2
    if satnum_str != l2[2:7]:
        raise InvalidElementsError("Object numbers in lines 1 and 2 do not match")

    inclo = _parse_field("inclination", l2[8:16], float)
    nodeo = _parse_field("right ascension", l2[17:25], float)
    ecco = _parse_field("eccentricity", "0." + l2[26:33].replace(" ", "0"), float)
    argpo = _parse_field("argument of perigee", l2[34:42], float)
    mo = _parse_field("mean anomaly", l2[43:51], float)
    no_kozai = _parse_field("mean motion", l2[52:63], float)
    revnum = _parse_field("revolution number", l2[63:68].strip() or "0", int)

    # Convert to SGP4 internal units
    no_kozai = no_kozai / XPDOTP  # rad/min
    ndot = ndot / (XPDOTP * MIN_PER_DAY)  # rad/min^2
    nddot = nddot / (XPDOTP * MIN_PER_DAY * MIN_PER_DAY)  # rad/min^3

    inclo = inclo * DEG2RAD
    nodeo = nodeo * DEG2RAD
    argpo = argpo * DEG2RAD
    mo = mo * DEG2RAD

    if two_digit_year < 57:
        year = two_digit_year + 2000
    else:
        year = two_digit_year + 1900

    # Split Julian date: whole days (ending in .5) plus fraction of day
    days_int, fraction = divmod(epochdays, 1.0)
    jdsatepoch = year * 365 + (year - 1) // 4 + int(days_int) + 1721044.5
    jdsatepochF = round(fraction, 8)

    return MeanElements(
        satnum=satnum,
        satnum_str=satnum_str,
        classification=classification,
        intldesg=intldesg,
        epochyr=two_digit_year,
        epochdays=epochdays,
        jdsatepoch=jdsatepoch,
        jdsatepochF=jdsatepochF,
        ndot=ndot,
        nddot=nddot,
        bstar=bstar,
        ephtype=ephtype,
        elnum=elnum,
        revnum=revnum,
        inclo=inclo,
        nodeo=nodeo,
        ecco=ecco,
        argpo=argpo,
        mo=mo,
        no_kozai=no_kozai,
    )
