import re

POSTAL_CODE_REGEX = re.compile(r"^[A-Z]\d[A-Z]\d[A-Z]\d$")


def normalize_postal_code(code: str | None) -> str | None:
    """Normalize and validate a Canadian postal code.

    Removes all whitespace and uppercases the value, then checks the
    ``A1A1A1`` shape.

    Args:
        code: Raw user input (e.g. "k1a 0a6").

    Returns:
        str | None: Normalized code ("K1A0A6"), or None when missing or malformed.
    """
    if not code or not isinstance(code, str):
        return None
    normalized = re.sub(r"\s+", "", code).upper()
    if not POSTAL_CODE_REGEX.match(normalized):
        return None
    return normalized


def format_postal_code(code: str) -> str:
    """Format a postal code for display as ``A1A 1A1`` when it has six characters."""
    normalized = re.sub(r"\s+", "", code).upper()
    if len(normalized) != 6:
        return code
    return f"{normalized[:3]} {normalized[3:]}"
