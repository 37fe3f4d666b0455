from pathlib import Path

import pytest
from psycopg import Connection
from pytest_postgresql import factories

from grant_permissions.config import Database

SCHEMA_DIR = Path(__file__).parent.parent / "schema"

postgresql_proc = factories.postgresql_proc(
    load=[SCHEMA_DIR / "01-ai-chatbot.sql"],
)

postgresql = factories.postgresql(
    "postgresql_proc",
)


@pytest.fixture
def database(postgresql: Connection) -> Database:
    # dynamically set connection based on pytest_postgresql
    return Database(
        conninfo=f"postgresql://{postgresql.info.user}:@{postgresql.info.host}:{postgresql.info.port}/{postgresql.info.dbname}",
        timeout=10,
    )
