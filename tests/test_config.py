"""
Tests for settings loading.
"""
from livescout.config import DEFAULT_ACCEPT_LANGUAGE, Settings


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.query_timeout == 15.0
        assert s.max_results == 50
        assert s.default_category_id == "excel-live"
        assert s.accept_language == DEFAULT_ACCEPT_LANGUAGE
        assert s.rules_path is None

    def test_from_env(self):
        s = Settings.from_env({
            "LIVESCOUT_QUERY_TIMEOUT": "2.5",
            "LIVESCOUT_MAX_RESULTS": "10",
            "LIVESCOUT_DEFAULT_CATEGORY": "ppt-live",
            "LIVESCOUT_RULES_PATH": "/etc/rules.json",
        })
        assert s.query_timeout == 2.5
        assert s.max_results == 10
        assert s.default_category_id == "ppt-live"
        assert s.rules_path == "/etc/rules.json"

    def test_invalid_numbers_fall_back(self):
        s = Settings.from_env({"LIVESCOUT_MAX_RESULTS": "lots", "LIVESCOUT_QUERY_TIMEOUT": ""})
        assert s.max_results == 50
        assert s.query_timeout == 15.0

    def test_instances_are_independent(self):
        assert Settings.from_env({}) == Settings()
