"""
Tests for viewer-count parsing.
"""
import pytest

from livescout.discovery.viewer_count import parse_viewer_count


class TestParseViewerCount:
    @pytest.mark.parametrize("text,expected", [
        ("1.2천", 1200),
        ("3만", 30000),
        ("87", 87),
        ("2억", 200_000_000),
        ("1.2천명 시청 중", 1200),
        ("1,234명 시청 중", 1234),
        ("5.5", 6),
        ("312 watching", 312),
    ])
    def test_values(self, text, expected):
        assert parse_viewer_count(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "천", ".", None, 42, ["1"]])
    def test_no_number(self, text):
        assert parse_viewer_count(text) is None

    @pytest.mark.parametrize("text", ["9" * 400, "9" * 400 + "명 시청 중", "9" * 320 + "억"])
    def test_overlong_number_is_unparsable(self, text):
        assert parse_viewer_count(text) is None
