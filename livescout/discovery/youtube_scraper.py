"""
Scrape YouTube live search results without spending Data API quota.

Fetches the HTML results page with the "Live" filter applied and hands it
to the extractor/parser. Also reads channel RSS feeds, which are free but
cannot tell live streams from uploads.
"""
import logging
import xml.etree.ElementTree as ET
from typing import Optional

import httpx

from ..config import Settings
from .html_extract import extract_initial_state_json
from .models import RawDiscoveredStream
from .stream_parser import extract_live_items

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.youtube.com/results"
FEED_URL = "https://www.youtube.com/feeds/videos.xml"
# "sp" value for the Live filter (EgJAAQ== url-encoded once; httpx encodes the rest)
LIVE_FILTER = "EgJAAQ%3D%3D"

FEED_NAMESPACES = {
    "atom": "http://www.w3.org/2005/Atom",
    "yt": "http://www.youtube.com/xml/schemas/2015",
    "media": "http://search.yahoo.com/mrss/",
}


def build_headers(settings: Optional[Settings] = None) -> dict[str, str]:
    """Browser-like headers; without them YouTube serves a consent page."""
    settings = settings or Settings()
    return {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": settings.accept_language,
        "Referer": "https://www.youtube.com/",
    }


async def scrape_live_search(
    client: httpx.AsyncClient,
    query: str,
    timeout: float = 15.0,
) -> list[RawDiscoveredStream]:
    """Search YouTube for live broadcasts matching `query`.

    Args:
        client: Shared async HTTP client (headers already set).
        query: Search string.
        timeout: Request timeout in seconds.

    Returns:
        Live streams found on the page; empty if the page could not be parsed.

    Raises:
        httpx.HTTPError: On network failure or a non-2xx response. The
            pipeline catches these per query.
    """
    logger.info("Searching live streams for: %s", query)
    resp = await client.get(
        SEARCH_URL,
        params={"search_query": query, "sp": LIVE_FILTER},
        timeout=timeout,
    )
    resp.raise_for_status()

    data = extract_initial_state_json(resp.text)
    if data is None:
        logger.warning("No initial state found for query: %s", query)
        return []

    items = extract_live_items(data)
    logger.info("Found %d live streams for query: %s", len(items), query)
    return items


def parse_channel_feed(xml_text: str, channel_id: str) -> list[RawDiscoveredStream]:
    """Parse a channel Atom feed into stream entries.

    Raises:
        xml.etree.ElementTree.ParseError: If the feed is not well-formed XML.
    """
    root = ET.fromstring(xml_text)
    items = []
    for entry in root.findall("atom:entry", FEED_NAMESPACES):
        video_id = entry.findtext("yt:videoId", default="", namespaces=FEED_NAMESPACES)
        if not video_id:
            continue
        thumb = entry.find("media:group/media:thumbnail", FEED_NAMESPACES)
        items.append(
            RawDiscoveredStream(
                video_id=video_id,
                title=entry.findtext("atom:title", default="", namespaces=FEED_NAMESPACES),
                channel_title=entry.findtext(
                    "atom:author/atom:name", default="", namespaces=FEED_NAMESPACES
                ),
                channel_id=channel_id,
                thumbnail_url=thumb.get("url", "") if thumb is not None else "",
                published_at=entry.findtext(
                    "atom:published", default=None, namespaces=FEED_NAMESPACES
                ),
            )
        )
    return items


async def fetch_channel_feed(
    client: httpx.AsyncClient,
    channel_id: str,
    timeout: float = 15.0,
) -> list[RawDiscoveredStream]:
    """Fetch a channel's latest uploads from its RSS feed.

    Only canonical "UC..." channel ids are supported; @handles cannot be
    resolved without an extra page fetch.

    Returns:
        Recent uploads (live or not), or an empty list on any failure.
    """
    if not channel_id.startswith("UC"):
        logger.warning("Invalid channel id format: %s", channel_id)
        return []

    try:
        resp = await client.get(FEED_URL, params={"channel_id": channel_id}, timeout=timeout)
        resp.raise_for_status()
        items = parse_channel_feed(resp.text, channel_id)
    except httpx.HTTPStatusError as e:
        logger.error("Channel feed request failed for %s: %s", channel_id, e.response.status_code)
        return []
    except (httpx.HTTPError, ET.ParseError) as e:
        logger.error("Channel feed failed for %s: %s", channel_id, e)
        return []

    logger.info("Fetched %d feed entries for channel %s", len(items), channel_id)
    return items
