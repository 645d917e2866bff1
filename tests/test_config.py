"""Settings tests: env var loading, validation, and the debug switch."""

import pytest
import structlog
from pydantic import ValidationError

from credstore.config import Settings
from credstore.logging import configure_logging


def test_defaults(monkeypatch):
    for var in ("CREDSTORE_STORAGE_BACKEND", "CREDSTORE_SESSION_KEY", "CREDSTORE_REGISTRY_KEY"):
        monkeypatch.delenv(var, raising=False)

    s = Settings()
    assert s.storage_backend == "file"
    assert s.storage_path.endswith("store.json")
    assert s.session_key == "session"
    assert s.registry_key == "registry"


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("CREDSTORE_STORAGE_BACKEND", "redis")
    monkeypatch.setenv("CREDSTORE_REDIS_URL", "redis://cache:6380/2")
    monkeypatch.setenv("CREDSTORE_LOG_JSON", "true")

    s = Settings()
    assert s.storage_backend == "redis"
    assert s.redis_url == "redis://cache:6380/2"
    assert s.log_json is True


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        Settings(storage_backend="sqlite")


def test_file_backend_needs_a_path():
    with pytest.raises(ValidationError, match="CREDSTORE_STORAGE_PATH"):
        Settings(storage_backend="file", storage_path="  ")


def test_memory_backend_ignores_empty_path():
    assert Settings(storage_backend="memory", storage_path="").storage_path == ""


def test_session_and_registry_keys_must_differ():
    with pytest.raises(ValidationError, match="must differ"):
        Settings(session_key="auth", registry_key="auth")


def test_debug_forces_debug_logging(capsys):
    configure_logging(Settings(log_level="ERROR", debug=True))
    structlog.get_logger().debug("test.debug_event")
    assert "test.debug_event" in capsys.readouterr().err


def test_log_level_filters_without_debug(capsys):
    configure_logging(Settings(log_level="ERROR"))
    structlog.get_logger().debug("test.debug_event")
    structlog.get_logger().error("test.error_event")
    err = capsys.readouterr().err
    assert "test.debug_event" not in err
    assert "test.error_event" in err
