"""Unit tests for field validation rules."""
from datetime import date

import pytest

from fleetoffice.validators import (
    age_on,
    birth_date_errors,
    fiscal_code_check_char,
    is_valid_fiscal_code,
    is_valid_iban,
    is_valid_phone,
    is_valid_plate,
    is_valid_postal_code,
    normalize_plate,
)


@pytest.mark.parametrize("code", ["RSSMRA85T10A562S", "rssmra85t10a562s", " VRDLGU80A01H501Q "])
def test_valid_fiscal_codes(code: str) -> None:
    assert is_valid_fiscal_code(code)


@pytest.mark.parametrize(
    "code",
    [
        None,
        "",
        "RSSMRA85T10A562",  # too short
        "RSSMRA85T10A562X",  # wrong check character
        "123MRA85T10A562S",  # digits where letters belong
    ],
)
def test_invalid_fiscal_codes(code) -> None:
    assert not is_valid_fiscal_code(code)


def test_check_character() -> None:
    assert fiscal_code_check_char("BNCGPP75M20F205") == "E"


def test_plate_formats() -> None:
    assert normalize_plate(" ab 123 cd ") == "AB123CD"
    assert is_valid_plate("ab 123 cd")
    assert is_valid_plate("AB123456")
    assert not is_valid_plate("A1234BCD")
    assert not is_valid_plate("")


def test_age_counts_birthday() -> None:
    assert age_on(date(2000, 6, 15), date(2016, 6, 14)) == 15
    assert age_on(date(2000, 6, 15), date(2016, 6, 15)) == 16


def test_birth_date_rules() -> None:
    today = date(2024, 5, 1)
    assert birth_date_errors(None, today) == ["Birth date is required"]
    assert birth_date_errors(date(2024, 6, 1), today) == ["Birth date cannot be in the future"]
    assert birth_date_errors(date(2010, 1, 1), today) == ["Employee must be at least 16 years old"]
    assert birth_date_errors(date(2007, 1, 1), today) == []
    assert birth_date_errors(date(1980, 1, 1), today) == []


def test_postal_code_only_checked_for_italy() -> None:
    assert is_valid_postal_code("IT", "20121")
    assert is_valid_postal_code(None, "20121")
    assert not is_valid_postal_code("IT", "2012")
    assert not is_valid_postal_code("it", "ABCDE")
    assert is_valid_postal_code("DE", "1234")
    assert is_valid_postal_code("IT", None)


def test_phone_and_iban() -> None:
    assert is_valid_phone(None)
    assert is_valid_phone("+39 333 1234567")
    assert is_valid_phone("+39 (06) 123-4567")
    assert is_valid_phone("06.1234.567")
    assert not is_valid_phone("call me")
    assert not is_valid_phone("+39 06 x123")
    assert is_valid_iban("IT60X0542811101000000123456")
    assert is_valid_iban("it60 x054 2811 1010 0000 0123 456")
    assert not is_valid_iban("DE89370400440532013000")
