"""
Tests for environment variable helpers and the config module.
"""
import importlib
import os

import pytest

from qrbill.utils.env import get_env_bool, get_env_choice, get_env_str


class TestGetEnvStr:
    """Tests for utils.env.get_env_str function."""

    def test_strips_whitespace_by_default(self, monkeypatch):
        monkeypatch.setenv("QRBILL_TEST_FONT", "  /fonts/Regular.ttf  ")
        assert get_env_str("QRBILL_TEST_FONT") == "/fonts/Regular.ttf"

    def test_keeps_whitespace_when_strip_false(self, monkeypatch):
        monkeypatch.setenv("QRBILL_TEST_FONT", "  value  ")
        assert get_env_str("QRBILL_TEST_FONT", strip=False) == "  value  "

    def test_missing_returns_default(self, monkeypatch):
        monkeypatch.delenv("QRBILL_TEST_MISSING", raising=False)
        assert get_env_str("QRBILL_TEST_MISSING") is None
        assert get_env_str("QRBILL_TEST_MISSING", default="fallback") == "fallback"

    def test_whitespace_only_returns_default(self, monkeypatch):
        monkeypatch.setenv("QRBILL_TEST_BLANK", "   ")
        assert get_env_str("QRBILL_TEST_BLANK", default="fallback") == "fallback"

    def test_required_missing(self, monkeypatch):
        monkeypatch.delenv("QRBILL_TEST_REQUIRED", raising=False)
        with pytest.raises(ValueError) as exc_info:
            get_env_str("QRBILL_TEST_REQUIRED", required=True)
        assert "not set" in str(exc_info.value)
        assert "QRBILL_TEST_REQUIRED" in str(exc_info.value)

    def test_required_empty(self, monkeypatch):
        monkeypatch.setenv("QRBILL_TEST_REQUIRED", " ")
        with pytest.raises(ValueError, match="empty"):
            get_env_str("QRBILL_TEST_REQUIRED", required=True)


class TestGetEnvBool:

    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_truthy(self, monkeypatch, raw):
        monkeypatch.setenv("QRBILL_TEST_FLAG", raw)
        assert get_env_bool("QRBILL_TEST_FLAG") is True

    @pytest.mark.parametrize("raw", ["0", "false", "no", "off", "maybe"])
    def test_falsy(self, monkeypatch, raw):
        monkeypatch.setenv("QRBILL_TEST_FLAG", raw)
        assert get_env_bool("QRBILL_TEST_FLAG", default=True) is False

    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("QRBILL_TEST_FLAG", raising=False)
        assert get_env_bool("QRBILL_TEST_FLAG", default=True) is True


class TestGetEnvChoice:

    def test_case_insensitive_match_returns_canonical_choice(self, monkeypatch):
        monkeypatch.setenv("QRBILL_TEST_LEVEL", "q")
        assert get_env_choice("QRBILL_TEST_LEVEL", ("L", "M", "Q", "H"), "M") == "Q"

    def test_unknown_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("QRBILL_TEST_LEVEL", "Z")
        assert get_env_choice("QRBILL_TEST_LEVEL", ("L", "M", "Q", "H"), "M") == "M"


@pytest.fixture
def reload_config():
    """Reload qrbill.config under a patched environment, restoring it afterwards."""
    from qrbill import config

    saved = dict(os.environ)
    yield lambda: importlib.reload(config)
    os.environ.clear()
    os.environ.update(saved)
    importlib.reload(config)


class TestConfig:
    """qrbill.config reads its settings once, at import."""

    def test_test_stage_defaults(self, monkeypatch, reload_config):
        for key in ("QRBILL_DEFAULT_LANG", "QRBILL_QR_ERROR_LEVEL", "QRBILL_REQUIRE_FONTS"):
            monkeypatch.delenv(key, raising=False)
        config = reload_config()
        assert config.APP_STAGE == "test"
        assert config.IS_TEST
        assert config.REQUIRE_FONTS is False
        assert config.DEFAULT_LANG == "en"
        assert config.QR_ERROR_LEVEL == "M"

    def test_production_requires_fonts_by_default(self, monkeypatch, reload_config):
        monkeypatch.setenv("QRBILL_STAGE", "prod")
        monkeypatch.delenv("QRBILL_REQUIRE_FONTS", raising=False)
        monkeypatch.setenv("QRBILL_FONT_REGULAR", "/nonexistent/Regular.ttf")
        monkeypatch.setenv("QRBILL_FONT_BOLD", "/nonexistent/Bold.ttf")
        config = reload_config()
        assert config.IS_PRODUCTION
        assert config.REQUIRE_FONTS is True
        assert config.FONT_REGULAR_PATH == "/nonexistent/Regular.ttf"

    def test_overrides(self, monkeypatch, reload_config):
        monkeypatch.setenv("QRBILL_DEFAULT_LANG", "IT")
        monkeypatch.setenv("QRBILL_QR_ERROR_LEVEL", "h")
        monkeypatch.setenv("QRBILL_LOG_JSON", "true")
        config = reload_config()
        assert config.DEFAULT_LANG == "it"
        assert config.QR_ERROR_LEVEL == "H"
        assert config.LOG_JSON is True
