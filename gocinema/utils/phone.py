import re
from typing import Optional

from gocinema.core.exceptions import InvalidInputError

# Armenian local format: leading 0 and 8 more digits (e.g. 077123456)
PHONE_PATTERN = re.compile(r"^0[0-9]{8}$")

INVALID_PHONE = "Մուտքագրեք վավեր հեռախոսահամար"


def clean_phone(raw: Optional[str]) -> str:
    """Strip whitespace and the separators people type (dashes, brackets)."""
    if not raw:
        return ""
    return re.sub(r"[\s\-()]", "", raw)


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(phone))


def normalize_phone(raw: Optional[str]) -> str:
    phone = clean_phone(raw)
    if not is_valid_phone(phone):
        raise InvalidInputError(INVALID_PHONE)
    return phone
