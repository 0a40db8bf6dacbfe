import re
from typing import Set

MAX_SHEET_NAME_LENGTH = 31
MAX_TABLE_NAME_LENGTH = 255
DEFAULT_SHEET_NAME = "Screen"
TABLE_NAME_PREFIX = "Spec_"
DEFAULT_TABLE_BASE = "Sheet"

# Characters Excel rejects in sheet names, plus "!" which separates sheet
# and cell in references
ILLEGAL_SHEET_CHARS = re.compile(r"[\\/?*\[\]:!]")
NON_TABLE_CHARS = re.compile(r"[^A-Za-z0-9]")


def sanitize_sheet_name(value: str) -> str:
    sanitized = ILLEGAL_SHEET_CHARS.sub("_", value or "").strip("'")
    sanitized = sanitized[:MAX_SHEET_NAME_LENGTH]
    return sanitized if sanitized.strip() else DEFAULT_SHEET_NAME


def sanitize_table_name(sheet_name: str) -> str:
    base = NON_TABLE_CHARS.sub("", sheet_name or "") or DEFAULT_TABLE_BASE
    return (TABLE_NAME_PREFIX + base)[:MAX_TABLE_NAME_LENGTH]


def ensure_unique_name(base: str, used: Set[str], max_length: int) -> str:
    """
    Return `base`, or `base` with a numeric suffix, that is not in `used`
    (compared case-insensitively, as Excel does), and record it in `used`.
    The base is shortened so the suffixed name still fits `max_length`.
    """
    taken = {name.casefold() for name in used}
    candidate = base
    index = 1
    while candidate.casefold() in taken:
        suffix = f"_{index}"
        candidate = base[:max(0, max_length - len(suffix))] + suffix
        index += 1
    used.add(candidate)
    return candidate
