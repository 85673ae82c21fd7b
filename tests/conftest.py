"""
Pytest configuration and fixtures.
"""
import json
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Filler that pushes test pages past the blocked-page length check
PAGE_PADDING = "<!-- " + "x" * 1200 + " -->"


def make_page(script_body: str) -> str:
    """Wrap a script body in a minimal results page."""
    return (
        "<!DOCTYPE html><html><head><title>YouTube</title></head><body>"
        f"{PAGE_PADDING}<script nonce=\"abc\">{script_body}</script></body></html>"
    )


def make_video_renderer(
    video_id="abc123",
    title="엑셀 방송 중",
    channel="엑셀TV",
    channel_id="UC0000000000000000000001",
    viewers="1.2천명 시청 중",
    live=True,
):
    renderer = {
        "videoId": video_id,
        "title": {"runs": [{"text": title}]},
        "ownerText": {
            "runs": [{
                "text": channel,
                "navigationEndpoint": {"browseEndpoint": {"browseId": channel_id}},
            }]
        },
        "thumbnail": {
            "thumbnails": [
                {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg", "width": 120, "height": 90},
                {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg", "width": 480, "height": 360},
            ]
        },
        "viewCountText": {"runs": [{"text": viewers}]},
    }
    if live:
        renderer["badges"] = [{
            "metadataBadgeRenderer": {"style": "BADGE_STYLE_TYPE_LIVE_NOW", "label": "LIVE"}
        }]
    else:
        renderer["lengthText"] = {"simpleText": "12:34"}
        renderer["viewCountText"] = {"simpleText": "조회수 1,234회"}
    return renderer


def make_initial_data(*renderers):
    return {
        "contents": {
            "twoColumnSearchResultsRenderer": {
                "primaryContents": {
                    "sectionListRenderer": {
                        "contents": [
                            {"itemSectionRenderer": {
                                "contents": [{"videoRenderer": r} for r in renderers]
                            }}
                        ]
                    }
                }
            }
        }
    }


def make_search_page(*renderers) -> str:
    data = json.dumps(make_initial_data(*renderers), ensure_ascii=False)
    return make_page(f"var ytInitialData = {data};")


@pytest.fixture
def live_renderer():
    return make_video_renderer()
