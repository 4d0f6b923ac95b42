"""
Tests for configuration loading and validation.
"""

from core.config import Config, get_config, reload_config


class TestConfig:

    def test_defaults(self, monkeypatch):
        for name in ("TIGER_POLL_INTERVAL", "TIGER_POLL_MAX_ATTEMPTS", "TIGER_IMAGE_PACING"):
            monkeypatch.delenv(name, raising=False)

        config = Config()

        assert config.polling.interval_seconds == 10.0
        assert config.polling.max_attempts == 60
        assert config.polling.ceiling_seconds == 600.0
        assert config.images.pacing_seconds == 1.0
        assert config.images.max_segments == 4
        assert config.images.max_title_length == 60
        assert config.models.image_model == "dall-e-3"
        assert config.default_platform == "youtube"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TIGER_POLL_INTERVAL", "2.5")
        monkeypatch.setenv("TIGER_POLL_MAX_ATTEMPTS", "8")
        monkeypatch.setenv("TIGER_IMAGE_PACING", "0")
        monkeypatch.setenv("RUNWAYML_API_SECRET", "rw-secret")

        config = Config.from_env()

        assert config.polling.interval_seconds == 2.5
        assert config.polling.max_attempts == 8
        assert config.polling.ceiling_seconds == 20.0
        assert config.images.pacing_seconds == 0.0
        assert config.api.runway_api_key == "rw-secret"

    def test_runway_key_fallback(self, monkeypatch):
        monkeypatch.delenv("RUNWAYML_API_SECRET", raising=False)
        monkeypatch.setenv("RUNWAY_API_KEY", "rw-legacy")

        assert Config().api.runway_api_key == "rw-legacy"

    def test_validate_reports_missing_keys(self, monkeypatch):
        for name in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "RUNWAYML_API_SECRET", "RUNWAY_API_KEY"):
            monkeypatch.delenv(name, raising=False)

        issues = Config().validate()

        assert len(issues) == 3
        assert any("OPENAI_API_KEY" in issue for issue in issues)
        assert any("ANTHROPIC_API_KEY" in issue for issue in issues)
        assert any("RUNWAYML_API_SECRET" in issue for issue in issues)

    def test_validate_poll_attempts(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        monkeypatch.setenv("RUNWAYML_API_SECRET", "rw")

        config = Config()
        assert config.validate() == []

        config.polling.max_attempts = 0
        assert config.validate() == ["TIGER_POLL_MAX_ATTEMPTS must be at least 1"]

    def test_reload(self, monkeypatch):
        monkeypatch.setenv("TIGER_POLL_MAX_ATTEMPTS", "3")
        reload_config()
        assert get_config().polling.max_attempts == 3

        monkeypatch.setenv("TIGER_POLL_MAX_ATTEMPTS", "4")
        reload_config()
        assert get_config().polling.max_attempts == 4

        monkeypatch.delenv("TIGER_POLL_MAX_ATTEMPTS")
        reload_config()
