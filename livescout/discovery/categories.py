"""
Category rule configuration, search-query seeds and the news denylist.

"excel-live" is the first production category. More rules can be added
here or supplied as a JSON file (see load_category_rules).
"""
import json
import logging
import re
from pathlib import Path
from typing import Optional, Sequence, Union

from pydantic import TypeAdapter

from .models import CategoryRule

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_ID = "excel-live"

DEFAULT_CATEGORY_RULES: list[CategoryRule] = [
    CategoryRule(
        id="excel-live",
        name="Excel Live",
        include=[
            "엑셀.*방송|방송.*엑셀",
            "엑셀.*라이브|라이브.*엑셀",
            "엑셀.*생방송|생방송.*엑셀",
            "엑셀.*방송중|방송중.*엑셀",
            "엑셀.*방송.*중|방송.*중.*엑셀",
            "엑셀.*스트리밍|스트리밍.*엑셀",
            "^.*엑셀.*방송.*$",
        ],
        exclude=[
            # Schedules and announcements
            "내일.*엑셀|엑셀.*내일",
            "내일의.*엑셀|엑셀.*내일의",
            "엑셀.*일정|일정.*엑셀",
            "엑셀.*스케줄|스케줄.*엑셀",
            "엑셀.*뉴스|뉴스.*엑셀",
            "엑셀.*방송.*일정|방송.*일정.*엑셀",
            "오늘.*엑셀.*일정|엑셀.*오늘.*일정",
            # Spreadsheet tutorials
            "엑셀.*강의|강의.*엑셀",
            "엑셀.*실습|실습.*엑셀",
            "엑셀.*함수|함수.*엑셀",
            "엑셀.*배우기|배우기.*엑셀",
            "엑셀.*튜토리얼|튜토리얼.*엑셀",
            "엑셀.*교육|교육.*엑셀",
            "엑셀.*공부|공부.*엑셀",
            "엑셀.*기초|기초.*엑셀",
            "엑셀.*활용|활용.*엑셀",
            "엑셀.*팁|팁.*엑셀",
            "excel.*tutorial|tutorial.*excel",
            "excel.*lesson|lesson.*excel",
            "excel.*learn|learn.*excel",
            "excel.*how.*to|how.*to.*excel",
            # News channels
            ".*뉴스.*채널|.*news.*channel",
            "YTN|MBC.*뉴스|SBS.*뉴스|KBS.*뉴스|JTBC.*뉴스|채널A.*뉴스|TV조선.*뉴스",
            ".*24.*시간.*뉴스|.*24.*hour.*news",
            ".*뉴스.*24|.*news.*24",
            ".*뉴스.*방송|.*news.*broadcast",
            ".*뉴스.*라이브|.*news.*live",
        ],
        priority=10,
        enabled=True,
    ),
]

# Applied before any category rule; a hit drops the stream entirely.
NEWS_DENYLIST_PATTERN = re.compile(
    r"(YTN|MBC.*뉴스|SBS.*뉴스|KBS.*뉴스|JTBC.*뉴스|채널A.*뉴스|TV조선.*뉴스"
    r"|.*24.*시간.*뉴스|.*뉴스.*채널|.*뉴스.*24|.*뉴스.*방송|.*뉴스.*라이브)",
    re.IGNORECASE,
)

# Search terms tried for the default category, most specific first
CATEGORY_QUERY_TERMS = {
    "excel-live": ["엑셀 방송", "엑셀 라이브", "엑셀"],
}

SEED_QUERIES = ["라이브", "방송", "생방송", "실시간", "게임", "음악", "토크"]

_rules_adapter = TypeAdapter(list[CategoryRule])


def get_active_category_rules(
    rules: Optional[Sequence[CategoryRule]] = None,
) -> list[CategoryRule]:
    """Enabled rules from `rules` (defaults to DEFAULT_CATEGORY_RULES)."""
    source = DEFAULT_CATEGORY_RULES if rules is None else rules
    return [rule for rule in source if rule.enabled]


def get_category_rule_by_id(
    category_id: str, rules: Optional[Sequence[CategoryRule]] = None,
) -> Optional[CategoryRule]:
    source = DEFAULT_CATEGORY_RULES if rules is None else rules
    for rule in source:
        if rule.id == category_id:
            return rule
    return None


def load_category_rules(path: Union[str, Path]) -> list[CategoryRule]:
    """Load rules from a JSON array of rule objects.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the JSON is malformed or a rule fails validation
            (pydantic.ValidationError is a ValueError subclass).
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    rules = _rules_adapter.validate_python(raw)
    ids = [rule.id for rule in rules]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"Duplicate category ids in {path}: {', '.join(duplicates)}")

    logger.info("Loaded %d category rules from %s", len(rules), path)
    return rules


def is_news_content(text: str) -> bool:
    """True if `text` looks like a news channel or news broadcast."""
    return NEWS_DENYLIST_PATTERN.search(text or "") is not None


def build_queries(
    rules: Optional[Sequence[CategoryRule]] = None,
    default_category_id: str = DEFAULT_CATEGORY_ID,
) -> list[str]:
    """Search queries for one discovery run.

    Category terms come first (only for enabled rules, default category
    ahead of the rest), followed by the generic live seeds.
    """
    active = get_active_category_rules(rules)
    ordered = sorted(active, key=lambda r: (r.id != default_category_id, -r.priority))

    queries: list[str] = []
    for rule in ordered:
        queries.extend(CATEGORY_QUERY_TERMS.get(rule.id, []))
    queries.extend(SEED_QUERIES)

    # dict preserves first-seen order
    return list(dict.fromkeys(q.strip() for q in queries if q.strip()))
