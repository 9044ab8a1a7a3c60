# utils/validators.py
import re
from typing import Optional

EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)*"
)
OTP_PATTERN = re.compile(r"[0-9]{6}")

MIN_FULL_NAME_LENGTH = 3


def normalize_email(value: Optional[str]) -> str:
    """Strip surrounding whitespace and lower-case the address."""
    return (value or "").strip().lower()


def validate_email(value: Optional[str]) -> bool:
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None


def validate_full_name(value: Optional[str]) -> bool:
    if not isinstance(value, str):
        return False
    return len(value.strip()) >= MIN_FULL_NAME_LENGTH


def validate_otp_code(value: Optional[str]) -> bool:
    if not isinstance(value, str):
        return False
    return OTP_PATTERN.fullmatch(value) is not None
