from pathlib import Path
from typing import Literal

import psycopg
from psycopg.conninfo import conninfo_to_dict, make_conninfo
from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from grant_permissions.errors import ConfigurationError

DEFAULT_ENV_FILE = ".env"

# Schema holding the chat application's tables and sequences.
SCHEMA_NAME = "ai_chatbot"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Database(BaseModel):
    conninfo: str
    min_size: int = Field(default=1)
    # The grant runner never needs more than one connection.
    max_size: int = Field(default=1)
    timeout: float = Field(default=30.0)

    def describe(self) -> dict[str, str | None]:
        """Connection parameters that are safe to log."""
        params = conninfo_to_dict(self.conninfo)
        return {
            "host": params.get("host"),
            "port": params.get("port"),
            "dbname": params.get("dbname"),
        }


class Settings(BaseSettings):
    """
    Process configuration, read from the environment and an optional env file.

    ``POSTGRES_URL`` wins when set; otherwise the libpq-style ``PG*`` variables
    are combined into a connection string.
    """

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    postgres_url: SecretStr | None = None
    pghost: str | None = None
    pgport: int | None = None
    pguser: str | None = None
    pgpassword: SecretStr | None = None
    pgdatabase: str | None = None
    pgsslmode: str | None = None

    grant_pool_timeout: float = Field(default=30.0, gt=0)
    log_level: LogLevel = Field(default="INFO")
    json_logs: bool = Field(default=False)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def conninfo(self) -> str:
        if self.postgres_url is not None:
            conninfo = self.postgres_url.get_secret_value()
            try:
                conninfo_to_dict(conninfo)
            except psycopg.ProgrammingError as e:
                raise ConfigurationError(f"POSTGRES_URL is not a valid connection string: {e}") from e
            return conninfo

        if not self.pghost:
            raise ConfigurationError(
                "Database configuration required. Please set POSTGRES_URL or PGHOST/PGUSER/PGDATABASE."
            )

        return make_conninfo(
            host=self.pghost,
            port=self.pgport,
            user=self.pguser,
            password=self.pgpassword.get_secret_value() if self.pgpassword is not None else None,
            dbname=self.pgdatabase,
            sslmode=self.pgsslmode,
        )

    def database(self) -> Database:
        return Database(conninfo=self.conninfo(), timeout=self.grant_pool_timeout)


def load_settings(env_file: Path | str | None = DEFAULT_ENV_FILE) -> Settings:
    return Settings(_env_file=env_file)  # pyright: ignore[reportCallIssue]
