"""
Discovery pipeline orchestrator.

Fans out the search queries concurrently, merges and de-duplicates what
comes back, classifies each stream and returns a ranked list. A failing
query only costs its own results; the run as a whole never raises for
upstream errors.
"""
import asyncio
import logging
from typing import Iterable, Optional, Sequence

import httpx

from ..config import Settings
from .categories import build_queries, get_active_category_rules, is_news_content
from .category import get_primary_category, match_categories
from .models import CategoryRule, LiveStream, RawDiscoveredStream
from .ranker import has_local_script, rank_streams
from .viewer_count import parse_viewer_count
from .youtube_scraper import build_headers, scrape_live_search

logger = logging.getLogger(__name__)


def merge_results(
    per_query: Iterable[Sequence[RawDiscoveredStream]],
) -> list[RawDiscoveredStream]:
    """Flatten per-query results, keeping the first entry for each video id."""
    seen: set[str] = set()
    merged = []
    for items in per_query:
        for item in items:
            if item.video_id in seen:
                continue
            seen.add(item.video_id)
            merged.append(item)
    return merged


def classify(
    raw: RawDiscoveredStream, rules: Sequence[CategoryRule]
) -> Optional[LiveStream]:
    """Attach viewer count and categories; None if the news denylist hits."""
    text = f"{raw.title} {raw.channel_title}"
    if is_news_content(text):
        logger.debug("Excluding news stream: %s", raw.title[:60])
        return None

    detected = match_categories(text, rules)
    return LiveStream(
        video_id=raw.video_id,
        title=raw.title,
        channel_title=raw.channel_title,
        channel_id=raw.channel_id,
        thumbnail_url=raw.thumbnail_url,
        viewer_count_raw=raw.viewer_count_raw,
        published_at=raw.published_at,
        viewer_count=parse_viewer_count(raw.viewer_count_raw),
        detected_categories=detected,
        primary_category_id=get_primary_category(detected),
    )


class DiscoveryPipeline:
    """Runs one live-stream discovery pass over a set of search queries."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rules: Optional[Sequence[CategoryRule]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: Timeouts, headers, result cap and default category.
            rules: Category rules; defaults to the built-in set.
            client: Optional HTTP client to reuse. When omitted, each run
                opens and closes its own.
        """
        self.settings = settings or Settings()
        self.rules = get_active_category_rules(rules)
        self._client = client

    async def _scrape_one(self, client: httpx.AsyncClient, query: str) -> list[RawDiscoveredStream]:
        return await asyncio.wait_for(
            scrape_live_search(client, query, timeout=self.settings.query_timeout),
            timeout=self.settings.query_timeout,
        )

    async def _gather(self, client: httpx.AsyncClient, queries: Sequence[str]) -> list[list[RawDiscoveredStream]]:
        results = await asyncio.gather(
            *(self._scrape_one(client, q) for q in queries),
            return_exceptions=True,
        )

        per_query = []
        for query, result in zip(queries, results):
            if isinstance(result, asyncio.TimeoutError):
                logger.warning("Query timed out after %.1fs: %s", self.settings.query_timeout, query)
                per_query.append([])
            elif isinstance(result, httpx.HTTPStatusError):
                logger.warning("Query '%s' failed with HTTP %d", query, result.response.status_code)
                per_query.append([])
            elif isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("Query '%s' failed: %s", query, result)
                per_query.append([])
            else:
                per_query.append(result)
        return per_query

    async def scrape(self, queries: Sequence[str]) -> list[list[RawDiscoveredStream]]:
        """Issue every query concurrently; failed queries yield empty lists."""
        if not queries:
            return []
        if self._client is not None:
            return await self._gather(self._client, queries)

        async with httpx.AsyncClient(
            headers=build_headers(self.settings), follow_redirects=True
        ) as client:
            return await self._gather(client, queries)

    async def run(self, queries: Optional[Sequence[str]] = None) -> list[LiveStream]:
        """Run the full discovery pass.

        Steps:
            1. Scrape every query concurrently
            2. Merge and de-duplicate by video id
            3. Drop news streams, classify the rest
            4. Rank and cap to settings.max_results

        Args:
            queries: Search strings. Defaults to build_queries() over the
                configured rules.

        Returns:
            Ranked LiveStreams, possibly empty.
        """
        if queries is None:
            queries = build_queries(self.rules, self.settings.default_category_id)
        queries = list(queries)

        logger.info("Step 1: Scraping %d queries...", len(queries))
        per_query = await self.scrape(queries)
        failed = sum(1 for items in per_query if not items)

        merged = merge_results(per_query)
        logger.info(
            "Step 2: %d unique streams (%d queries returned nothing)", len(merged), failed
        )

        streams = []
        vetoed = 0
        for raw in merged:
            stream = classify(raw, self.rules)
            if stream is None:
                vetoed += 1
                continue
            streams.append(stream)

        ranked = rank_streams(streams, self.settings.default_category_id)
        ranked = ranked[: self.settings.max_results]

        default_hits = sum(
            1 for s in ranked if s.primary_category_id == self.settings.default_category_id
        )
        local = sum(1 for s in ranked if has_local_script(s.title) or has_local_script(s.channel_title))
        logger.info(
            "Pipeline complete: %d streams (%d news excluded, %d in %s, %d Korean)",
            len(ranked),
            vetoed,
            default_hits,
            self.settings.default_category_id,
            local,
        )
        if not ranked:
            logger.warning("No live streams found")
        return ranked


async def discover_live_streams(
    queries: Optional[Sequence[str]] = None,
    settings: Optional[Settings] = None,
    rules: Optional[Sequence[CategoryRule]] = None,
) -> list[LiveStream]:
    """Convenience wrapper: one DiscoveryPipeline run."""
    pipeline = DiscoveryPipeline(settings=settings, rules=rules)
    return await pipeline.run(queries)
