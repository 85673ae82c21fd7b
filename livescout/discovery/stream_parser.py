"""
Walk a decoded ytInitialData tree and pull out the currently-live videos.

YouTube does not document this structure and it shifts between page
variants, so both the location of the result list and every field inside
an item are looked up through ordered fallback accessors.
"""
import logging
from typing import Any, Callable, Iterable, Optional

from .models import RawDiscoveredStream

logger = logging.getLogger(__name__)

LIVE_BADGE_LABELS = {"LIVE", "LIVE NOW", "실시간"}
LIVE_BADGE_STYLES = {"BADGE_STYLE_TYPE_LIVE_NOW"}
LIVE_OVERLAY_STYLES = {"LIVE", "LIVE_NOW"}
WATCHING_PHRASES = ("watching", "시청 중", "명 시청")


def dig(obj: Any, *path: Any) -> Any:
    """Follow dict keys / list indices, returning None at the first miss."""
    current = obj
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
        elif not isinstance(current, dict):
            return None
        elif key not in current:
            return None
        current = current[key]
    return current


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def text_of(node: Any) -> str:
    """Flatten a YouTube text object ({simpleText} or {runs: [...]})."""
    if isinstance(node, str):
        return node
    simple = dig(node, "simpleText")
    if isinstance(simple, str):
        return simple
    runs = _as_list(dig(node, "runs"))
    return "".join(r["text"] for r in runs if isinstance(dig(r, "text"), str))


def first_text(renderer: dict, paths: Iterable[tuple]) -> str:
    """Return the first non-empty string found along `paths`."""
    for path in paths:
        value = dig(renderer, *path)
        if isinstance(value, str) and value:
            return value
    return ""


# ── Content list locations ────────────────────────────────────────────


def _search_results_path(data: dict) -> Optional[list]:
    return dig(
        data, "contents", "twoColumnSearchResultsRenderer", "primaryContents",
        "sectionListRenderer", "contents",
    )


def _top_level_contents_path(data: dict) -> Optional[list]:
    contents = dig(data, "contents")
    return contents if isinstance(contents, list) else None


def _continuation_path(data: dict) -> Optional[list]:
    items = []
    for command in _as_list(dig(data, "onResponseReceivedCommands")):
        for action in ("appendContinuationItemsAction", "reloadContinuationItemsCommand"):
            items.extend(_as_list(dig(command, action, "continuationItems")))
    return items or None


CONTENT_PATHS: list[tuple[str, Callable[[dict], Optional[list]]]] = [
    ("two-column-search-results", _search_results_path),
    ("top-level-contents", _top_level_contents_path),
    ("continuation-commands", _continuation_path),
]


def _flatten_video_renderers(sections: list) -> list[dict]:
    """Collect videoRenderer payloads, unwrapping itemSectionRenderer blocks."""
    renderers = []
    for section in sections:
        nested = dig(section, "itemSectionRenderer", "contents")
        entries = nested if isinstance(nested, list) else [section]
        for entry in entries:
            renderer = dig(entry, "videoRenderer")
            if isinstance(renderer, dict):
                renderers.append(renderer)
    return renderers


def find_video_renderers(data: Any) -> list[dict]:
    """Try each content path in order; first one yielding videos wins."""
    if not isinstance(data, dict):
        return []
    for name, accessor in CONTENT_PATHS:
        sections = accessor(data)
        if not sections:
            continue
        renderers = _flatten_video_renderers(sections)
        if renderers:
            logger.debug("Found %d video renderers via %s", len(renderers), name)
            return renderers
    return []


# ── Live detection ────────────────────────────────────────────────────


def has_live_badge(renderer: dict) -> bool:
    for badge in _as_list(renderer.get("badges")):
        if dig(badge, "liveBadgeRenderer") is not None:
            return True
        meta = dig(badge, "metadataBadgeRenderer")
        if not isinstance(meta, dict):
            continue
        label = str(meta.get("label", "")).strip().upper()
        if label in LIVE_BADGE_LABELS or meta.get("style") in LIVE_BADGE_STYLES:
            return True
    return False


def has_live_duration(renderer: dict) -> bool:
    """Live items have no fixed length; some show 'N watching' instead."""
    length = text_of(renderer.get("lengthText")).strip()
    if not length:
        return True
    view_text = text_of(renderer.get("viewCountText"))
    return any(p in length.lower() or p in view_text.lower() for p in WATCHING_PHRASES)


def has_live_overlay(renderer: dict) -> bool:
    for overlay in _as_list(renderer.get("thumbnailOverlays")):
        style = dig(overlay, "thumbnailOverlayTimeStatusRenderer", "style")
        if style in LIVE_OVERLAY_STYLES:
            return True
    return False


LIVE_HEURISTICS = (has_live_badge, has_live_duration, has_live_overlay)


def is_live(renderer: dict) -> bool:
    return any(check(renderer) for check in LIVE_HEURISTICS)


# ── Field extraction ──────────────────────────────────────────────────

_CHANNEL_TEXT_KEYS = ("ownerText", "longBylineText", "shortBylineText")


def _title(renderer: dict) -> str:
    for key in ("title", "headline"):
        text = text_of(renderer.get(key))
        if text:
            return text
    return ""


def _channel_title(renderer: dict) -> str:
    return first_text(renderer, [(key, "runs", 0, "text") for key in _CHANNEL_TEXT_KEYS])


def _channel_id(renderer: dict) -> str:
    paths = [
        (key, "runs", 0, "navigationEndpoint", "browseEndpoint", "browseId")
        for key in _CHANNEL_TEXT_KEYS
    ]
    paths.append(("channelThumbnailSupportedRenderers", "channelThumbnailWithLinkRenderer",
                  "navigationEndpoint", "browseEndpoint", "browseId"))
    return first_text(renderer, paths)


def _thumbnail_url(renderer: dict) -> str:
    """Pick the largest thumbnail; fall back to the last listed one."""
    thumbs = [t for t in _as_list(dig(renderer, "thumbnail", "thumbnails")) if isinstance(t, dict)]
    if not thumbs:
        return ""

    def area(thumb: dict) -> int:
        try:
            return int(thumb.get("width", 0)) * int(thumb.get("height", 0))
        except (TypeError, ValueError):
            return 0

    best = max(thumbs, key=area)
    if area(best) == 0:
        best = thumbs[-1]
    return best.get("url", "") or ""


def _viewer_count_raw(renderer: dict) -> Optional[str]:
    for key in ("viewCountText", "shortViewCountText"):
        text = text_of(renderer.get(key)).strip()
        if text:
            return text
    return None


def _published_at(renderer: dict) -> Optional[str]:
    return text_of(renderer.get("publishedTimeText")) or None


def normalize_renderer(renderer: dict) -> Optional[RawDiscoveredStream]:
    """Build a RawDiscoveredStream, or None if id or title is missing."""
    video_id = renderer.get("videoId")
    title = _title(renderer)
    if not isinstance(video_id, str) or not video_id or not title:
        return None

    return RawDiscoveredStream(
        video_id=video_id,
        title=title,
        channel_title=_channel_title(renderer),
        channel_id=_channel_id(renderer),
        thumbnail_url=_thumbnail_url(renderer),
        viewer_count_raw=_viewer_count_raw(renderer),
        published_at=_published_at(renderer),
    )


def extract_live_items(data: Any) -> list[RawDiscoveredStream]:
    """Return every live, well-formed video entry in a decoded page.

    A malformed item is skipped; the rest of the list is still processed.
    """
    items: list[RawDiscoveredStream] = []
    skipped = 0

    for renderer in find_video_renderers(data):
        try:
            if not is_live(renderer):
                continue
            item = normalize_renderer(renderer)
        except Exception as e:
            logger.debug("Skipping malformed item: %s", e)
            item = None
        if item is None:
            skipped += 1
            continue
        items.append(item)

    if skipped:
        logger.debug("Skipped %d live items without id/title", skipped)
    return items
