#!/usr/bin/env python3
"""
CLI for live-stream discovery

Usage:
    python -m livescout.cli discover [--query Q ...] [--timeout 15] [--max-results 50]
    python -m livescout.cli classify "엑셀 방송 중 | 채널명"
    python -m livescout.cli parse-html saved_results.html
    python -m livescout.cli channel-feed UCxxxxxxxxxxxxxxxxxxxxxx
    python -m livescout.cli queries
"""
import argparse
import asyncio
import dataclasses
import json
import logging
import sys

import httpx

from .config import LOG_FORMAT, Settings
from .discovery.categories import (
    build_queries,
    get_active_category_rules,
    is_news_content,
    load_category_rules,
)
from .discovery.category import get_primary_category, match_categories
from .discovery.html_extract import extract_initial_state_json
from .discovery.pipeline import DiscoveryPipeline
from .discovery.stream_parser import extract_live_items
from .discovery.youtube_scraper import build_headers, fetch_channel_feed

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Live stream discovery CLI"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--rules",
        default=None,
        help="JSON file with category rules (default: built-in rules)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    discover_parser = subparsers.add_parser(
        "discover",
        help="Scrape YouTube for live streams and rank them"
    )
    discover_parser.add_argument(
        "--query",
        action="append",
        dest="queries",
        help="Search query (repeatable; default: built-in query list)"
    )
    discover_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-query timeout in seconds (default: 15)"
    )
    discover_parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help="Max streams to return (default: 50)"
    )

    classify_parser = subparsers.add_parser(
        "classify",
        help="Show which categories a title matches"
    )
    classify_parser.add_argument("text", help="Title and channel name to classify")

    parse_html_parser = subparsers.add_parser(
        "parse-html",
        help="Extract live streams from a saved search results page"
    )
    parse_html_parser.add_argument("path", help="Path to the HTML file")

    feed_parser = subparsers.add_parser(
        "channel-feed",
        help="List a channel's latest uploads from its RSS feed"
    )
    feed_parser.add_argument("channel_id", help="YouTube channel id (UC...)")

    subparsers.add_parser(
        "queries",
        help="Show the search queries a discover run would issue"
    )

    return parser.parse_args(argv)


def build_settings(args) -> Settings:
    settings = Settings.from_env()
    overrides = {}
    if getattr(args, "timeout", None) is not None:
        overrides["query_timeout"] = args.timeout
    if getattr(args, "max_results", None) is not None:
        overrides["max_results"] = args.max_results
    if args.rules:
        overrides["rules_path"] = args.rules
    return dataclasses.replace(settings, **overrides)


def load_rules(settings: Settings):
    if settings.rules_path:
        return load_category_rules(settings.rules_path)
    return get_active_category_rules()


async def cmd_discover(settings: Settings, rules, args) -> dict:
    """Execute the discover command."""
    pipeline = DiscoveryPipeline(settings=settings, rules=rules)
    queries = args.queries or build_queries(pipeline.rules, settings.default_category_id)
    streams = await pipeline.run(queries)

    return {
        "command": "discover",
        "queries": list(queries),
        "count": len(streams),
        "streams": [s.to_record().model_dump(by_alias=True) for s in streams],
    }


def cmd_classify(settings: Settings, rules, args) -> dict:
    """Execute the classify command."""
    detected = match_categories(args.text, rules)
    return {
        "command": "classify",
        "text": args.text,
        "is_news": is_news_content(args.text),
        "primary_category_id": get_primary_category(detected),
        "detected_categories": [dataclasses.asdict(d) for d in detected],
    }


def cmd_parse_html(settings: Settings, rules, args) -> dict:
    """Execute the parse-html command."""
    with open(args.path, "r", encoding="utf-8") as f:
        html = f.read()

    data = extract_initial_state_json(html)
    items = extract_live_items(data) if data is not None else []
    return {
        "command": "parse-html",
        "path": args.path,
        "extracted": data is not None,
        "count": len(items),
        "items": [dataclasses.asdict(item) for item in items],
    }


async def cmd_channel_feed(settings: Settings, rules, args) -> dict:
    """Execute the channel-feed command."""
    async with httpx.AsyncClient(headers=build_headers(settings), follow_redirects=True) as client:
        items = await fetch_channel_feed(client, args.channel_id, timeout=settings.query_timeout)
    return {
        "command": "channel-feed",
        "channel_id": args.channel_id,
        "count": len(items),
        "items": [dataclasses.asdict(item) for item in items],
    }


def cmd_queries(settings: Settings, rules, args) -> dict:
    """Execute the queries command."""
    return {
        "command": "queries",
        "queries": build_queries(rules, settings.default_category_id),
    }


def print_result(args, result: dict) -> None:
    print(f"\n{'=' * 50}")
    print(f"Command: {result['command']}")
    print(f"{'=' * 50}")

    if args.command == "discover":
        print(f"Queries: {len(result['queries'])}")
        print(f"Live streams: {result['count']}")
        for i, s in enumerate(result["streams"][:20], 1):
            category = s["primaryCategoryId"] or "-"
            viewers = s["viewerCount"]
            viewers_str = f"{viewers:,}" if viewers is not None else "n/a"
            print(f"\n  #{i} [{category}] {s['title'][:60]}")
            print(f"     Channel: {s['name']}")
            print(f"     Viewers: {viewers_str}")
            print(f"     URL: {s['streamUrl']}")

    elif args.command == "classify":
        print(f"Text: {result['text']}")
        if result["is_news"]:
            print("News denylist: HIT (stream would be excluded)")
        print(f"Primary category: {result['primary_category_id'] or 'none'}")
        for d in result["detected_categories"]:
            print(f"  {d['category_id']}: {d['score']:.3f}")

    elif args.command in ("parse-html", "channel-feed"):
        if args.command == "parse-html" and not result["extracted"]:
            print("No initial state JSON found in page.")
        print(f"Items: {result['count']}")
        for item in result["items"]:
            print(f"  {item['video_id']}  {item['title'][:50]}  ({item['channel_title']})")

    elif args.command == "queries":
        for q in result["queries"]:
            print(f"  {q}")

    print(f"{'=' * 50}\n")


async def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    settings = build_settings(args)
    try:
        rules = load_rules(settings)
    except (OSError, ValueError) as e:
        logger.error("Could not load category rules from %s: %s", settings.rules_path, e)
        sys.exit(1)

    if args.command == "discover":
        result = await cmd_discover(settings, rules, args)
    elif args.command == "classify":
        result = cmd_classify(settings, rules, args)
    elif args.command == "parse-html":
        result = cmd_parse_html(settings, rules, args)
    elif args.command == "channel-feed":
        result = await cmd_channel_feed(settings, rules, args)
    elif args.command == "queries":
        result = cmd_queries(settings, rules, args)
    else:
        logger.error("Unknown command: %s", args.command)
        sys.exit(1)

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print_result(args, result)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
