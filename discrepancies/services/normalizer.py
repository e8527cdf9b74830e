"""
Normalizer service for discrepancy detection.
Converts raw extracted values into comparable forms.

All normalization is deterministic and total:
- Unparseable dates come back unchanged
- Unparseable amounts come back as None
- Raw values are never modified in place
"""

import re
import logging
from datetime import datetime
from typing import Optional

import Levenshtein

logger = logging.getLogger(__name__)

# Calendar formats accepted by normalize_date, in the order they are tried
DATE_FORMATS = (
    '%m/%d/%Y',   # 03/15/2024
    '%Y/%m/%d',   # 2024/03/15
    '%m-%d-%Y',   # 03-15-2024
    '%Y-%m-%d',   # 2024-03-15
    '%B %d, %Y',  # March 15, 2024
    '%B %d %Y',   # March 15 2024
)

NUMERIC_TOKEN = re.compile(r'[\d,]+(?:\.\d+)?')


def normalize_date(value: str) -> str:
    """
    Normalize a date string to ISO format (YYYY-MM-DD).

    Handles:
    - 03/15/2024
    - 2024/03/15
    - 03-15-2024
    - 2024-3-15
    - March 15, 2024

    Dates must exist on the calendar; 02/30/2024 is not normalized.

    Args:
        value: Raw date string

    Returns:
        ISO format date string, or original if parsing fails
    """
    if not value:
        return value

    candidate = ' '.join(value.split())
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date().isoformat()
        except ValueError:
            continue

    logger.debug(f"Could not normalize date: {value}")
    return value


def parse_amount(value: str) -> Optional[float]:
    """
    Parse the leading numeric value of an amount string.

    Takes the first digit/comma run (with optional decimals), drops the
    thousands separators and reads it as a float.

    Examples:
    - $100,000.00 -> 100000.0
    - 1,250 dollars -> 1250.0
    - 4.5% -> 4.5

    Returns:
        The numeric value, or None when no number can be read
    """
    if not value:
        return None

    match = NUMERIC_TOKEN.search(value)
    if not match:
        return None

    cleaned = match.group(0).replace(',', '')
    try:
        return float(cleaned)
    except ValueError:
        logger.debug(f"Could not parse amount: {value}")
        return None


def edit_distance(a: str, b: str) -> int:
    """Case-insensitive Levenshtein distance between two strings."""
    return Levenshtein.distance(a.lower(), b.lower())
