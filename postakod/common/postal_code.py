"""Turkish postal code normalisation and validation."""

from __future__ import annotations

import re

from postakod.common.constants import POSTAL_CODE_LENGTH, PROVINCE_BY_PLATE_CODE
from postakod.common.errors import InvalidInputError

POSTAL_CODE_RE = re.compile(r"^[0-9]{5}$")
_DIGITS_RE = re.compile(r"^[0-9]+$")


def is_valid_postal_code(value: str) -> bool:
    return bool(POSTAL_CODE_RE.fullmatch(value))


def is_ascii_digits(value: str) -> bool:
    return bool(_DIGITS_RE.fullmatch(value))


def normalise_postal_code(raw: str | None) -> str | None:
    """Return the 5-digit form of a source value, or None when it cannot be one.

    Spreadsheet exports drop leading zeros (``1000`` for Adana's ``01000``), so
    shorter all-digit values are left-padded.
    """
    if raw is None:
        return None

    cleaned = raw.strip()
    if not cleaned or not is_ascii_digits(cleaned):
        return None
    if len(cleaned) > POSTAL_CODE_LENGTH:
        return None

    cleaned = cleaned.zfill(POSTAL_CODE_LENGTH)
    if not is_valid_postal_code(cleaned):
        return None
    return cleaned


def require_postal_code(value: str) -> str:
    if not isinstance(value, str) or not is_valid_postal_code(value):
        raise InvalidInputError(f"Postal code must be exactly {POSTAL_CODE_LENGTH} digits: {value!r}")
    return value


def plate_code(postal_code: str) -> str:
    return require_postal_code(postal_code)[:2]


def expected_province(postal_code: str) -> str | None:
    return PROVINCE_BY_PLATE_CODE.get(plate_code(postal_code))
