"""
Pull the embedded initial-state JSON out of a YouTube results page.

The page embeds its data as a JavaScript assignment, but the exact form
varies between responses, so several extraction strategies are tried in
order. The first one that both matches and decodes to a JSON object wins.
"""
import json
import logging
import re
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Pages shorter than this are consent walls or bot-check interstitials.
MIN_HTML_LENGTH = 1000

INITIAL_STATE_NAME = "ytInitialData"

# var ytInitialData = {...};  on one line, shortest match up to the first `};`
VAR_STATEMENT_RE = re.compile(
    r"(?:^|(?<=[;{}>\s]))var\s+" + INITIAL_STATE_NAME + r"\s*=\s*(\{.+?\});",
    re.MULTILINE,
)

# Start of the same statement; the object itself is read with the JSON decoder
VAR_ASSIGNMENT_RE = re.compile(
    r"(?:^|(?<=[;{}>\s]))var\s+" + INITIAL_STATE_NAME + r"\s*=\s*(?=\{)",
    re.MULTILINE,
)

# window["ytInitialData"] = {...};
WINDOW_ASSIGNMENT_RE = re.compile(
    r"window\[\s*([\"'])" + INITIAL_STATE_NAME + r"\1\s*\]\s*=\s*(?=\{)"
)

SCRIPT_BLOCK_RE = re.compile(r"<script[^>]*>(.*?)</script>", re.DOTALL | re.IGNORECASE)

_decoder = json.JSONDecoder()


def _loads_object(text: str) -> Optional[dict]:
    # Pathologically deep nesting exhausts the decoder's recursion limit
    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return data if isinstance(data, dict) else None


def _decode_object_at(text: str, start: int) -> Optional[dict]:
    """Decode the JSON value starting at `start`; anything but an object is a miss."""
    try:
        data, _ = _decoder.raw_decode(text, start)
    except (ValueError, RecursionError):
        return None
    return data if isinstance(data, dict) else None


def _search_and_decode(pattern: re.Pattern, text: str) -> Optional[dict]:
    for match in pattern.finditer(text):
        data = _decode_object_at(text, match.end())
        if data is not None:
            return data
    return None


def from_var_assignment(html: str) -> Optional[dict]:
    """Strategy 1: a single-line `var ytInitialData = {...};` statement.

    Cheap, but stops at the first `};`, so objects that span lines or hold
    `};` inside a string are left to the later strategies.
    """
    for match in VAR_STATEMENT_RE.finditer(html):
        data = _loads_object(match.group(1))
        if data is not None:
            return data
    return None


def from_window_assignment(html: str) -> Optional[dict]:
    """Strategy 2: `window["ytInitialData"] = {...};`."""
    return _search_and_decode(WINDOW_ASSIGNMENT_RE, html)


def from_script_blocks(html: str) -> Optional[dict]:
    """Strategy 3: decode the `var ytInitialData` object inside each <script> body.

    The JSON decoder finds the end of the object itself, so string contents
    and line breaks do not cut it short.
    """
    for block in SCRIPT_BLOCK_RE.finditer(html):
        body = block.group(1).strip()
        if INITIAL_STATE_NAME not in body:
            continue
        data = _search_and_decode(VAR_ASSIGNMENT_RE, body)
        if data is not None:
            return data
    return None


EXTRACTION_STRATEGIES: list[tuple[str, Callable[[str], Optional[dict]]]] = [
    ("var-assignment", from_var_assignment),
    ("window-assignment", from_window_assignment),
    ("script-blocks", from_script_blocks),
]


def extract_initial_state_json(html: str) -> Optional[dict]:
    """Locate and decode the page's initial-state JSON.

    Args:
        html: Raw HTML of a search results page.

    Returns:
        The decoded object, or None if the page is too short or no
        strategy produced a usable match. Never raises.
    """
    if not isinstance(html, str) or len(html) < MIN_HTML_LENGTH:
        logger.debug(
            "HTML too short (%d chars), likely a blocked page",
            len(html) if isinstance(html, str) else 0,
        )
        return None

    for name, strategy in EXTRACTION_STRATEGIES:
        data = strategy(html)
        if data is not None:
            logger.debug("Initial state extracted via %s", name)
            return data

    logger.warning("Could not find %s in HTML", INITIAL_STATE_NAME)
    return None
