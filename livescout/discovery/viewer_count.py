"""
Parse localized viewer-count strings ("1.2천 명 시청 중") into integers.
"""
import math
import re
from typing import Optional

VIEWER_COUNT_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?|\.\d+)\s*(천|만|억)?")

UNIT_MULTIPLIERS = {
    None: 1,
    "천": 1_000,
    "만": 10_000,
    "억": 100_000_000,
}


def parse_viewer_count(text: Optional[str]) -> Optional[int]:
    """Convert a viewer-count label to an integer.

    Examples:
        "1.2천" -> 1200, "3만" -> 30000, "1,234명 시청 중" -> 1234

    Returns:
        The rounded count, or None when the text holds no number.
    """
    if not isinstance(text, str) or not text:
        return None

    match = VIEWER_COUNT_RE.search(text)
    if not match:
        return None

    try:
        number = float(match.group(1).replace(",", ""))
    except ValueError:
        return None

    value = number * UNIT_MULTIPLIERS[match.group(2)]
    # Overlong digit runs overflow to inf
    if not math.isfinite(value):
        return None
    # Half-up, not banker's rounding
    return int(value + 0.5)
