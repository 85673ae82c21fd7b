"""
Tests for the CLI module.
"""
import json
from unittest.mock import AsyncMock, patch

import pytest

from conftest import make_search_page, make_video_renderer
from livescout.cli import (
    build_settings,
    cmd_classify,
    cmd_discover,
    cmd_parse_html,
    cmd_queries,
    load_rules,
    main,
    parse_args,
)
from livescout.discovery.categories import DEFAULT_CATEGORY_RULES
from livescout.discovery.models import RawDiscoveredStream


class TestParseArgs:
    """Tests for argument parsing."""

    def test_discover_defaults(self):
        args = parse_args(["discover"])
        assert args.command == "discover"
        assert args.queries is None
        assert args.timeout is None
        assert args.json is False

    def test_discover_repeated_queries(self):
        args = parse_args(["--json", "discover", "--query", "엑셀 방송", "--query", "라이브", "--timeout", "3"])
        assert args.queries == ["엑셀 방송", "라이브"]
        assert args.timeout == 3.0
        assert args.json is True

    def test_classify(self):
        args = parse_args(["classify", "엑셀 방송"])
        assert args.text == "엑셀 방송"

    def test_missing_command_fails(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_settings_overrides(self):
        args = parse_args(["--rules", "rules.json", "discover", "--max-results", "5"])
        settings = build_settings(args)
        assert settings.max_results == 5
        assert settings.rules_path == "rules.json"


class TestCommands:
    def test_classify(self):
        args = parse_args(["classify", "엑셀 방송 중"])
        result = cmd_classify(build_settings(args), DEFAULT_CATEGORY_RULES, args)
        assert result["primary_category_id"] == "excel-live"
        assert result["is_news"] is False
        assert result["detected_categories"][0]["category_id"] == "excel-live"

    def test_classify_news(self):
        args = parse_args(["classify", "YTN 뉴스 라이브"])
        result = cmd_classify(build_settings(args), DEFAULT_CATEGORY_RULES, args)
        assert result["is_news"] is True

    def test_queries(self):
        args = parse_args(["queries"])
        result = cmd_queries(build_settings(args), DEFAULT_CATEGORY_RULES, args)
        assert result["queries"][0] == "엑셀 방송"

    def test_parse_html(self, tmp_path):
        path = tmp_path / "results.html"
        path.write_text(make_search_page(make_video_renderer("p1")), encoding="utf-8")
        args = parse_args(["parse-html", str(path)])

        result = cmd_parse_html(build_settings(args), DEFAULT_CATEGORY_RULES, args)

        assert result["extracted"] is True
        assert result["count"] == 1
        assert result["items"][0]["video_id"] == "p1"

    def test_parse_html_unrecognised(self, tmp_path):
        path = tmp_path / "blocked.html"
        path.write_text("<html></html>", encoding="utf-8")
        args = parse_args(["parse-html", str(path)])
        result = cmd_parse_html(build_settings(args), DEFAULT_CATEGORY_RULES, args)
        assert result["extracted"] is False
        assert result["items"] == []

    @pytest.mark.asyncio
    async def test_discover(self):
        raw = RawDiscoveredStream(
            video_id="d1", title="엑셀 방송", channel_title="엑셀TV",
            channel_id="UC1", thumbnail_url="", viewer_count_raw="42",
        )
        args = parse_args(["discover", "--query", "q"])
        with patch("livescout.discovery.pipeline.scrape_live_search", AsyncMock(return_value=[raw])):
            result = await cmd_discover(build_settings(args), DEFAULT_CATEGORY_RULES, args)

        assert result["queries"] == ["q"]
        assert result["count"] == 1
        stream = result["streams"][0]
        assert stream["id"] == "youtube-UC1-d1"
        assert stream["viewerCount"] == 42
        assert stream["primaryCategoryId"] == "excel-live"


class TestRulesLoading:
    def test_builtin_rules(self):
        args = parse_args(["queries"])
        assert [r.id for r in load_rules(build_settings(args))] == ["excel-live"]

    def test_rules_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([{"id": "x", "name": "X", "include": ["x"]}]), encoding="utf-8")
        args = parse_args(["--rules", str(path), "queries"])
        assert [r.id for r in load_rules(build_settings(args))] == ["x"]


class TestMain:
    @pytest.mark.asyncio
    async def test_json_output(self, capsys):
        await main(["--json", "classify", "엑셀 방송"])
        out = json.loads(capsys.readouterr().out)
        assert out["command"] == "classify"
        assert out["primary_category_id"] == "excel-live"

    @pytest.mark.asyncio
    async def test_text_output(self, capsys):
        await main(["queries"])
        out = capsys.readouterr().out
        assert "Command: queries" in out
        assert "엑셀 방송" in out

    @pytest.mark.asyncio
    async def test_bad_rules_file_exits(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(SystemExit):
            await main(["--rules", str(path), "queries"])

    @pytest.mark.asyncio
    async def test_unknown_command_exits(self, caplog):
        args = parse_args(["queries"])
        args.command = "bogus"
        with patch("livescout.cli.parse_args", return_value=args):
            with pytest.raises(SystemExit):
                await main([])
        assert "Unknown command: bogus" in caplog.text
