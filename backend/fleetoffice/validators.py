"""Field-level validation rules shared by schemas and services."""
from __future__ import annotations

import logging
import re
from datetime import date

logger = logging.getLogger(__name__)

FISCAL_CODE_PATTERN = re.compile(r"^[A-Z]{6}[0-9]{2}[A-Z][0-9]{2}[A-Z][0-9]{3}[A-Z]$")
PLATE_PATTERNS = (
    re.compile(r"^[A-Z]{2}[0-9]{3}[A-Z]{2}$"),
    re.compile(r"^[A-Z]{2}[0-9]{6}$"),
)
ITALIAN_POSTAL_CODE = re.compile(r"^[0-9]{5}$")
PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-.()]{6,20}$")
IBAN_PATTERN = re.compile(r"^IT[0-9]{2}[A-Z][0-9]{10}[0-9A-Z]{12}$")

MINIMUM_AGE = 16
ADULT_AGE = 18

# Values for characters in odd (1-based) positions
_ODD_LETTER_VALUES = [
    1, 0, 5, 7, 9, 13, 15, 17, 19, 21, 2, 4, 18,
    20, 11, 3, 6, 8, 12, 14, 16, 10, 22, 25, 24, 23,
]
_ODD_DIGIT_VALUES = [1, 0, 5, 7, 9, 13, 15, 17, 19, 21]


def normalize_fiscal_code(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip().upper()


def fiscal_code_check_char(first_fifteen: str) -> str:
    """Return the control character for the first 15 characters of a fiscal code."""

    total = 0
    for index, char in enumerate(first_fifteen):
        if index % 2 == 0:
            if char.isdigit():
                total += _ODD_DIGIT_VALUES[int(char)]
            else:
                total += _ODD_LETTER_VALUES[ord(char) - ord("A")]
        else:
            total += int(char) if char.isdigit() else ord(char) - ord("A")
    return chr(ord("A") + total % 26)


def is_valid_fiscal_code(value: str | None) -> bool:
    """Format and check-character validation of an Italian fiscal code."""

    code = normalize_fiscal_code(value)
    if not code or len(code) != 16 or not FISCAL_CODE_PATTERN.match(code):
        return False
    return fiscal_code_check_char(code[:15]) == code[15]


def normalize_plate(value: str | None) -> str | None:
    if value is None:
        return None
    return re.sub(r"\s+", "", value).upper()


def is_valid_plate(value: str | None) -> bool:
    plate = normalize_plate(value)
    if not plate:
        return False
    return any(pattern.match(plate) for pattern in PLATE_PATTERNS)


def age_on(birth_date: date, today: date | None = None) -> int:
    today = today or date.today()
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def birth_date_errors(birth_date: date | None, today: date | None = None) -> list[str]:
    """Return the problems with a birth date; warns when the person is a minor."""

    today = today or date.today()
    if birth_date is None:
        return ["Birth date is required"]
    if birth_date > today:
        return ["Birth date cannot be in the future"]
    age = age_on(birth_date, today)
    if age < MINIMUM_AGE:
        return [f"Employee must be at least {MINIMUM_AGE} years old"]
    if age < ADULT_AGE:
        logger.warning("Registering a minor (age %s)", age)
    return []


def is_valid_postal_code(country_code: str | None, postal_code: str | None) -> bool:
    """Italian addresses (or addresses with no country) need a five-digit postal code."""

    if not postal_code:
        return True
    if country_code and country_code.upper() != "IT":
        return True
    return bool(ITALIAN_POSTAL_CODE.match(postal_code.strip()))


def is_valid_phone(value: str | None) -> bool:
    return not value or bool(PHONE_PATTERN.match(value.strip()))


def is_valid_iban(value: str | None) -> bool:
    return not value or bool(IBAN_PATTERN.match(value.replace(" ", "").upper()))
