# File: gearshare/core/validators.py

"""
Input rules shared by the request schemas and the signup / onboarding screens.
"""

import re
from datetime import date
from typing import Callable, Optional

MIN_AGE_YEARS = 16

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100
# bcrypt only accepts this many bytes of input
PASSWORD_MAX_BYTES = 72
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50

US_PHONE_PATTERN = re.compile(r"^\+1\d{10}$")

PASSWORD_REQUIREMENTS: list[tuple[str, Callable[[str], bool]]] = [
    ("Enter at least 8 characters", lambda pw: len(pw) >= PASSWORD_MIN_LENGTH),
    ("Enter at least one uppercase letter", lambda pw: re.search(r"[A-Z]", pw) is not None),
    ("Enter at least one lowercase letter", lambda pw: re.search(r"[a-z]", pw) is not None),
    ("Enter at least one digit", lambda pw: re.search(r"[0-9]", pw) is not None),
    (
        "Enter at least one special character (e.g., !, @, #, $)",
        lambda pw: re.search(r"[^a-zA-Z0-9]", pw) is not None,
    ),
]


def password_requirements(password: str) -> list[dict]:
    """Checklist shown next to the password field while the user types."""
    return [{"label": label, "met": check(password)} for label, check in PASSWORD_REQUIREMENTS]


def normalize_us_phone_number(value: Optional[str]) -> Optional[str]:
    """
    Canonicalise a US phone number to ``+1XXXXXXXXXX``.

    Accepts what the phone input produces ("+1 5551234567") as well as
    common hand-typed forms ("(555) 123-4567", "1-555-123-4567").
    Blank input means "no phone number" and returns None.
    """
    if value is None:
        return None
    raw = value.strip()
    if not raw or raw in ("+1", "+"):
        return None

    if raw.startswith("+1"):
        raw = raw[2:]
    elif raw.startswith("+"):
        raise ValueError("Phone number must be a valid US number")

    digits = re.sub(r"\D", "", raw)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]

    normalized = f"+1{digits}"
    if not US_PHONE_PATTERN.match(normalized):
        raise ValueError("Phone number must be a valid US number")
    return normalized


def age_on(birthday: date, today: date) -> int:
    years = today.year - birthday.year
    if (today.month, today.day) < (birthday.month, birthday.day):
        years -= 1
    return years


def validate_birthday(birthday: Optional[date], today: Optional[date] = None) -> Optional[date]:
    if birthday is None:
        return None
    today = today or date.today()
    if birthday > today:
        raise ValueError("Birthday cannot be in the future.")
    if age_on(birthday, today) < MIN_AGE_YEARS:
        raise ValueError(f"You must be at least {MIN_AGE_YEARS} years old.")
    return birthday


def safe_callback_url(url: Optional[str], default: str = "/") -> str:
    """Only site-relative paths are allowed as post-login destinations."""
    if not url or not url.startswith("/") or url.startswith("//") or "\\" in url:
        return default
    return url
