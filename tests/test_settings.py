"""
Settings tests - packaged defaults, user overlay and environment overrides.
"""

import pytest
from pydantic import ValidationError

from deeptrace.config.settings import Settings, get_settings


def _write_config(base, default: str, user: str = None):
    config_dir = base / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text(default, encoding="utf-8")
    if user is not None:
        (config_dir / "user.yaml").write_text(user, encoding="utf-8")


def test_packaged_defaults(settings):
    assert settings.get("tracing.path_prefix") == ""
    assert settings.get("tracing.suppress_listener_errors") is False
    assert settings.get("tracing.recorder.max_events") == 1000
    assert settings.get("tracing.missing", "fallback") == "fallback"


def test_user_config_overlays_defaults(tmp_path):
    _write_config(
        tmp_path,
        "tracing:\n  path_prefix: base\n  recorder:\n    max_events: 10\n",
        "tracing:\n  path_prefix: user\n",
    )
    settings = Settings.initialize(base_dir=str(tmp_path))

    assert settings.get("tracing.path_prefix") == "user"
    assert settings.get("tracing.recorder.max_events") == 10
    assert get_settings() is settings


def test_environment_overrides(tmp_path, monkeypatch):
    _write_config(tmp_path, "tracing:\n  path_prefix: base\n")
    monkeypatch.setenv("DEEPTRACE_TRACING__SUPPRESS_LISTENER_ERRORS", "true")
    monkeypatch.setenv("DEEPTRACE_TRACING__RECORDER__MAX_EVENTS", "5")
    monkeypatch.setenv("DEEPTRACE_TRACING__PATH_PREFIX", "env")

    settings = Settings.initialize(base_dir=str(tmp_path))

    assert settings.get("tracing.suppress_listener_errors") is True
    assert settings.get("tracing.recorder.max_events") == 5
    assert settings.get("tracing.path_prefix") == "env"


def test_set_creates_sections(settings):
    settings.set("new.section.key", 1)
    assert settings.get("new.section.key") == 1


def test_resolve_path(tmp_path):
    settings = Settings.initialize(base_dir=str(tmp_path))
    assert settings.resolve_path("logs/x.log") == tmp_path / "logs" / "x.log"
    assert settings.resolve_path(str(tmp_path / "abs.log")) == tmp_path / "abs.log"


def test_tracing_section_validated(settings):
    assert settings.tracing.recorder.max_events == 1000

    settings.set("tracing.recorder.max_events", 0)
    with pytest.raises(ValidationError):
        settings.tracing
