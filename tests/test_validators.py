# File: tests/test_validators.py

from datetime import date

import pytest

from gearshare.core.validators import (
    normalize_us_phone_number,
    password_requirements,
    safe_callback_url,
    validate_birthday,
)


@pytest.mark.parametrize(
    "raw",
    ["+15551234567", "+1 5551234567", "(555) 123-4567", "555.123.4567", "1-555-123-4567"],
)
def test_phone_numbers_normalise(raw):
    assert normalize_us_phone_number(raw) == "+15551234567"


@pytest.mark.parametrize("raw", [None, "", "   ", "+1", "+1 "])
def test_blank_phone_number_is_none(raw):
    assert normalize_us_phone_number(raw) is None


@pytest.mark.parametrize("raw", ["555123456", "+44 20 7946 0958", "+1 55512345678", "phone"])
def test_invalid_phone_numbers(raw):
    with pytest.raises(ValueError):
        normalize_us_phone_number(raw)


def test_password_requirements_all_met():
    assert all(item["met"] for item in password_requirements("Abcdefg1!"))


def test_password_requirements_report_each_rule():
    result = {item["label"]: item["met"] for item in password_requirements("ABC")}
    assert result == {
        "Enter at least 8 characters": False,
        "Enter at least one uppercase letter": True,
        "Enter at least one lowercase letter": False,
        "Enter at least one digit": False,
        "Enter at least one special character (e.g., !, @, #, $)": False,
    }


def test_birthday_minimum_age_boundary():
    today = date(2024, 6, 15)
    assert validate_birthday(date(2008, 6, 15), today=today) == date(2008, 6, 15)
    with pytest.raises(ValueError, match="at least 16"):
        validate_birthday(date(2008, 6, 16), today=today)


def test_birthday_in_future_rejected():
    with pytest.raises(ValueError, match="future"):
        validate_birthday(date(2030, 1, 1), today=date(2024, 1, 1))


def test_birthday_none_passes_through():
    assert validate_birthday(None) is None


@pytest.mark.parametrize(
    "url, expected",
    [
        ("/lend", "/lend"),
        ("/gear?id=1", "/gear?id=1"),
        (None, "/"),
        ("", "/"),
        ("https://evil.example", "/"),
        ("//evil.example", "/"),
        ("/\\evil.example", "/"),
    ],
)
def test_safe_callback_url(url, expected):
    assert safe_callback_url(url) == expected
