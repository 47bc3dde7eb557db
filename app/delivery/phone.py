import re

_NON_DIGITS = re.compile(r"\D")


def digits_only(phone_number: str) -> str:
    return _NON_DIGITS.sub("", phone_number)


def is_valid_phone_number(phone_number: str) -> bool:
    """7-15 digits once punctuation is stripped, not starting with 0."""
    cleaned = digits_only(phone_number)
    if len(cleaned) < 7 or len(cleaned) > 15:
        return False
    return not cleaned.startswith("0")


def format_whatsapp_number(phone_number: str) -> str:
    """Format as whatsapp:+<digits>; bare 10-digit numbers get the US country code."""
    cleaned = digits_only(phone_number)
    if len(cleaned) == 10:
        cleaned = "1" + cleaned
    return f"whatsapp:+{cleaned}"
