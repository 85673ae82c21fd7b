"""
Final ordering of discovered streams.

Order: default-category streams first, then Korean-language streams,
then by viewer count (missing counts as 0).
"""
import re
from typing import Sequence

from .categories import DEFAULT_CATEGORY_ID
from .models import LiveStream

HANGUL_RE = re.compile(r"[가-힣]")


def has_local_script(text: str) -> bool:
    return bool(text) and HANGUL_RE.search(text) is not None


def rank_key(stream: LiveStream, default_category_id: str = DEFAULT_CATEGORY_ID) -> tuple:
    is_default = stream.primary_category_id == default_category_id
    is_local = has_local_script(stream.title) or has_local_script(stream.channel_title)
    return (not is_default, not is_local, -(stream.viewer_count or 0))


def rank_streams(
    streams: Sequence[LiveStream], default_category_id: str = DEFAULT_CATEGORY_ID
) -> list[LiveStream]:
    """Return a new, ranked list. Ties keep their input order."""
    return sorted(streams, key=lambda s: rank_key(s, default_category_id))
