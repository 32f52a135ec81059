import pytest

from creative_review import config


def _clear_analyzer_env(monkeypatch):
    for name in (
        "ANALYZER_PROVIDER",
        "ANALYZER_MODEL",
        "GOOGLE_API_KEY",
        "GEMINI_API_KEY",
        "OPENAI_API_KEY",
        "OPENAI_API_BASE",
        "ANALYZER_TEMPERATURE",
        "ANALYZER_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_analyzer_config_defaults_to_gemini(monkeypatch):
    _clear_analyzer_env(monkeypatch)
    monkeypatch.setenv("GOOGLE_API_KEY", "g-test")

    cfg = config.get_analyzer_config()
    assert cfg.provider == "google"
    assert cfg.model_name == config.DEFAULT_GOOGLE_MODEL
    assert cfg.api_key == "g-test"
    assert cfg.temperature == pytest.approx(0.2)
    assert cfg.timeout_seconds is None


def test_analyzer_config_accepts_gemini_api_key_alias(monkeypatch):
    _clear_analyzer_env(monkeypatch)
    monkeypatch.setenv("GEMINI_API_KEY", "gem-key")

    assert config.get_analyzer_config().api_key == "gem-key"


def test_analyzer_config_openai_provider(monkeypatch):
    _clear_analyzer_env(monkeypatch)
    monkeypatch.setenv("ANALYZER_PROVIDER", "OpenAI")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("ANALYZER_TIMEOUT_SECONDS", "30")

    cfg = config.get_analyzer_config()
    assert cfg.provider == "openai"
    assert cfg.model_name == config.DEFAULT_OPENAI_MODEL
    assert cfg.api_base == "https://api.openai.com/v1"
    assert cfg.timeout_seconds == pytest.approx(30.0)


def test_analyzer_config_missing_key_raises(monkeypatch):
    _clear_analyzer_env(monkeypatch)

    with pytest.raises(RuntimeError):
        config.get_analyzer_config()


def test_analyzer_config_rejects_unknown_provider(monkeypatch):
    _clear_analyzer_env(monkeypatch)
    monkeypatch.setenv("ANALYZER_PROVIDER", "anthropic")

    with pytest.raises(ValueError):
        config.get_analyzer_config()


def test_analyzer_config_rejects_out_of_range_temperature(monkeypatch):
    _clear_analyzer_env(monkeypatch)
    monkeypatch.setenv("GOOGLE_API_KEY", "g-test")
    monkeypatch.setenv("ANALYZER_TEMPERATURE", "3.5")

    with pytest.raises(ValueError):
        config.get_analyzer_config()


def test_app_config_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "CORS_ORIGINS", "PUBLISH_DELAY_SECONDS", "MAX_UPLOAD_MB", "TEST_ASSET_PATH", "SENTRY_DSN"):
        monkeypatch.delenv(name, raising=False)

    cfg = config.get_app_config()
    assert cfg.log_level == "INFO"
    assert cfg.cors_origins == config.DEFAULT_CORS_ORIGINS
    assert cfg.publish_delay_seconds == pytest.approx(2.5)
    assert cfg.max_upload_mb == 100
    assert cfg.test_asset_path.endswith("test-asset.png")
    assert cfg.sentry_dsn is None


def test_app_config_parses_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "https://review.example.com, http://localhost:9000")
    monkeypatch.setenv("PUBLISH_DELAY_SECONDS", "0")
    monkeypatch.setenv("MAX_UPLOAD_MB", "25")

    cfg = config.get_app_config()
    assert cfg.log_level == "DEBUG"
    assert cfg.cors_origins == ("https://review.example.com", "http://localhost:9000")
    assert cfg.publish_delay_seconds == 0
    assert cfg.max_upload_mb == 25


def test_app_config_rejects_bad_integer(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_MB", "lots")

    with pytest.raises(ValueError):
        config.get_app_config()


def test_describe_active_models_reports_configuration_error(monkeypatch):
    _clear_analyzer_env(monkeypatch)

    summary = config.describe_active_models()
    assert summary["configured"] is False
    assert "GOOGLE_API_KEY" in summary["error"]

    monkeypatch.setenv("GOOGLE_API_KEY", "g-test")
    config.clear_config_caches()
    assert config.describe_active_models() == {
        "provider": "google",
        "model": config.DEFAULT_GOOGLE_MODEL,
        "configured": True,
    }
