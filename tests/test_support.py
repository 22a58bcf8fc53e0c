"""
Unit tests for the small support modules: cache, config and text cleanup.
"""

from core.cache import SearchHitCache
from core.config import DEFAULT_MAX_CONTENT_LENGTH, Settings, load_settings
from core.models import SearchHit
from core.text import clean_text


class TestSearchHitCache:
    """Tests for SearchHitCache."""

    def test_put_and_get(self):
        cache = SearchHitCache()
        hit = SearchHit(loio="abc", title="T", url="/docs/a/b/c")
        cache.put(hit)
        assert cache.get("abc") is hit
        assert "abc" in cache
        assert cache.get("missing") is None

    def test_last_write_wins(self):
        cache = SearchHitCache()
        cache.put_many([
            SearchHit(loio="abc", title="Old", url=""),
            SearchHit(loio="abc", title="New", url=""),
        ])
        assert len(cache) == 1
        assert cache.get("abc").title == "New"

    def test_instances_are_independent(self):
        first, second = SearchHitCache(), SearchHitCache()
        first.put(SearchHit(loio="abc", title="T", url=""))
        assert len(second) == 0


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self):
        assert load_settings({}) == Settings()

    def test_reads_environment(self):
        settings = load_settings({
            "SAP_HELP_BASE_URL": "https://mirror.test/",
            "MAX_CONTENT_LENGTH": "1000",
            "SEARCH_SNIPPET_CHARS": "50",
            "SAP_HELP_TIMEOUT": "2.5",
            "LOG_LEVEL": "debug",
            "AGENT_MODEL": "openai/gpt-4o-mini",
        })
        assert settings.base_url == "https://mirror.test"
        assert settings.max_content_length == 1000
        assert settings.search_snippet_chars == 50
        assert settings.request_timeout == 2.5
        assert settings.log_level == "DEBUG"
        assert settings.agent_model == "openai/gpt-4o-mini"

    def test_bad_values_fall_back(self, caplog):
        settings = load_settings({"MAX_CONTENT_LENGTH": "lots", "SAP_HELP_TIMEOUT": "-1"})
        assert settings.max_content_length == DEFAULT_MAX_CONTENT_LENGTH
        assert settings.request_timeout == Settings().request_timeout
        assert "MAX_CONTENT_LENGTH" in caplog.text


class TestCleanText:
    """Tests for clean_text."""

    def test_removes_control_characters(self):
        assert clean_text("a\x00b\x07c\x7fd") == "abcd"

    def test_keeps_tabs_and_newlines(self):
        assert clean_text("a\tb\nc") == "a\tb\nc"

    def test_normalizes_line_endings(self):
        assert clean_text("a\r\nb\rc") == "a\nb\nc"

    def test_none_passes_through(self):
        assert clean_text(None) is None
