from pathlib import Path

from src.server.settings import DEFAULT_CORS_ORIGINS, Settings


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCS_ROOT", str(tmp_path))
    monkeypatch.setenv("DOCS_ORDER_FILE", str(tmp_path / "order.yaml"))
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("DOCS_WATCH", "true")
    monkeypatch.setenv("SEARCH_LIMIT", "5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.docs_root == Path(tmp_path)
    assert settings.order_file == tmp_path / "order.yaml"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.watch_enabled is True
    assert settings.default_search_limit == 5
    assert settings.log_level == "DEBUG"


def test_settings_defaults_and_normalization(monkeypatch):
    for name in ["DOCS_ORDER_FILE", "CORS_ORIGINS", "DOCS_WATCH", "DEV_MODE"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOCS_POLL_SECONDS", "-3")
    monkeypatch.setenv("DOCS_DEBOUNCE_SECONDS", "soon")
    monkeypatch.setenv("SEARCH_MAX_LIMIT", "0")

    settings = Settings()

    assert settings.order_file is None
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.watch_enabled is False
    assert settings.poll_interval_seconds == 2.0
    assert settings.debounce_seconds == 0.5
    assert settings.max_search_limit == 10


def test_dev_mode_enables_watching(monkeypatch):
    monkeypatch.delenv("DOCS_WATCH", raising=False)
    monkeypatch.setenv("DEV_MODE", "true")

    assert Settings().watch_enabled is True
