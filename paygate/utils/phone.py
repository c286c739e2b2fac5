"""Phone number normalization for Ugandan mobile-money providers."""

import re

COUNTRY_CODE = "256"


def digits_only(phone: str) -> str:
    """Strip every non-digit character."""
    return re.sub(r"\D", "", phone or "")


def to_international(phone: str) -> str:
    """Normalize a phone number to international format.

    Accepted formats:
    - 256770123456 (already international)
    - 0770123456 (national)
    - 770123456 (subscriber digits only)

    Args:
        phone: Phone number in any format

    Returns:
        str: Phone number as 256XXXXXXXXX, or the bare digits if the
        shape is not recognised (the provider will reject it)
    """
    cleaned = digits_only(phone)

    if cleaned.startswith(COUNTRY_CODE) and len(cleaned) == 12:
        return cleaned

    if cleaned.startswith("0") and len(cleaned) == 10:
        return COUNTRY_CODE + cleaned[1:]

    if len(cleaned) == 9:
        return COUNTRY_CODE + cleaned

    return cleaned


def to_national(phone: str) -> str:
    """Normalize a phone number to national dialing format.

    Args:
        phone: Phone number in any format

    Returns:
        str: Phone number as 0XXXXXXXXX, or the bare digits if the
        shape is not recognised
    """
    cleaned = digits_only(phone)

    if cleaned.startswith(COUNTRY_CODE) and len(cleaned) == 12:
        return "0" + cleaned[3:]

    if cleaned.startswith("0") and len(cleaned) == 10:
        return cleaned

    if len(cleaned) == 9:
        return "0" + cleaned

    return cleaned


def mask_phone(phone: str | None, visible_chars: int = 4) -> str:
    """Mask a phone number showing only the last few digits.

    Returns:
        str: Masked string like '********3456'
    """
    if not phone:
        return ""
    if len(phone) <= visible_chars:
        return "*" * len(phone)

    masked_length = len(phone) - visible_chars
    return "*" * masked_length + phone[-visible_chars:]
