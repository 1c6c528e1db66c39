"""
Date canonicalization for model-extracted resume dates.
Everything is normalised to "YYYY-MM-DD"; whatever can't be read becomes None.
"""
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

MONTHS = {
    "january": "01", "february": "02", "march": "03", "april": "04",
    "may": "05", "june": "06", "july": "07", "august": "08",
    "september": "09", "october": "10", "november": "11", "december": "12",
}

_FULL_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_MONTH_YEAR = re.compile(r"(\w+)\s+(\d{4})", re.ASCII)
_YEAR_MONTH = re.compile(r"\d{4}-\d{2}", re.ASCII)


def canonicalize_date(value) -> Optional[str]:
    """
    Convert a human-readable date into "YYYY-MM-DD".

    Handles "YYYY-MM-DD" (unchanged), "June 2024" and "2024-06".
    Returns None for None, the literal string "null", unknown month
    names and any other shape. Never raises.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    if value == "null":
        return None

    if _FULL_DATE.fullmatch(value):
        return value

    match = _MONTH_YEAR.fullmatch(value)
    if match:
        month_name, year = match.groups()
        month = MONTHS.get(month_name.lower())
        if month:
            return f"{year}-{month}-01"
        logger.warning(f"Unknown month name in date: {value!r}")
        return None

    if _YEAR_MONTH.fullmatch(value):
        return f"{value}-01"

    logger.warning(f"Could not parse date: {value!r}")
    return None
