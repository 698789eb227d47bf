"""Helpers for ``YYYY-MM`` month keys.

Month keys and ISO dates are compared as strings. ``YYYY-MM`` sorts the same
way lexically and chronologically, and ``YYYY-MM-31`` is a valid inclusive
upper bound for any month under string comparison, even short ones.
"""

import re
from typing import Tuple

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
_MONTH_RE = re.compile(MONTH_PATTERN)


def is_month(value: str) -> bool:
    """Return True if ``value`` is a ``YYYY-MM`` month key."""
    return bool(_MONTH_RE.match(value or ""))


def validate_month(value: str) -> str:
    """Return ``value`` unchanged or raise ValueError."""
    if not is_month(value):
        raise ValueError(f"Invalid month {value!r}, expected YYYY-MM")
    return value


def month_of(value: str) -> str:
    """Month key of an ISO date string."""
    return value[:7]


def month_start(month: str) -> str:
    return f"{month}-01"


def month_end(month: str) -> str:
    return f"{month}-31"


def month_bounds(month: str) -> Tuple[str, str]:
    """Inclusive lexical date bounds for ``month``."""
    return month_start(month), month_end(month)
