import logging

import pytest
import structlog

from grant_permissions.config import Settings

SETTINGS_ENV_VARS = [
    "POSTGRES_URL",
    "PGHOST",
    "PGPORT",
    "PGUSER",
    "PGPASSWORD",
    "PGDATABASE",
    "PGSSLMODE",
    "GRANT_POOL_TIMEOUT",
    "LOG_LEVEL",
    "JSON_LOGS",
]


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.StreamHandler) and isinstance(
            handler.formatter, structlog.stdlib.ProcessorFormatter
        ):
            root_logger.removeHandler(handler)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Remove any database settings inherited from the shell running the tests."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings(clean_env) -> Settings:
    return Settings(postgres_url="postgresql://admin@localhost:5432/chat", _env_file=None)  # pyright: ignore[reportCallIssue]
