from pathlib import Path

import pytest
from pydantic import ValidationError

from applog.core.config import Settings


def test_defaults_match_logger_limits() -> None:
    settings = Settings()

    assert settings.buffer_capacity == 500
    assert settings.max_file_bytes == 5 * 1024 * 1024
    assert settings.default_limit == 100
    assert settings.log_path == Path("logs") / "app.log"


def test_env_prefix_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("APPLOG_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("APPLOG_BUFFER_CAPACITY", "10")

    settings = Settings()
    assert settings.log_path == tmp_path / "app.log"
    assert settings.buffer_capacity == 10


def test_rejects_unknown_environment() -> None:
    with pytest.raises(ValidationError):
        Settings(environment="staging")
