"""
Grant a service principal current and future access to the chat schema.

The five statements run one at a time on a single autocommit connection. The
first failure stops the run; statements already applied are left in place.
Every statement is a GRANT or ALTER DEFAULT PRIVILEGES, so re-running after a
partial failure is safe.
"""

import re
from dataclasses import dataclass

import psycopg
import structlog
from psycopg import sql
from psycopg_pool import ConnectionPool, PoolTimeout

from grant_permissions.config import SCHEMA_NAME
from grant_permissions.errors import ConnectivityError, PreconditionError, StatementExecutionError

logger = structlog.get_logger(__name__)

SCHEMA_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")


@dataclass(frozen=True)
class GrantStep:
    name: str
    description: str
    template: str


GRANT_STEPS: tuple[GrantStep, ...] = (
    GrantStep(
        name="schema_usage",
        description="Granting USAGE on schema {schema}",
        template="GRANT USAGE ON SCHEMA {schema} TO {principal}",
    ),
    GrantStep(
        name="tables",
        description="Granting ALL on all tables in {schema}",
        template="GRANT ALL PRIVILEGES ON ALL TABLES IN SCHEMA {schema} TO {principal}",
    ),
    GrantStep(
        name="sequences",
        description="Granting ALL on all sequences in {schema}",
        template="GRANT ALL PRIVILEGES ON ALL SEQUENCES IN SCHEMA {schema} TO {principal}",
    ),
    GrantStep(
        name="default_tables",
        description="Setting default privileges for future tables in {schema}",
        template="ALTER DEFAULT PRIVILEGES IN SCHEMA {schema} GRANT ALL PRIVILEGES ON TABLES TO {principal}",
    ),
    GrantStep(
        name="default_sequences",
        description="Setting default privileges for future sequences in {schema}",
        template="ALTER DEFAULT PRIVILEGES IN SCHEMA {schema} GRANT ALL PRIVILEGES ON SEQUENCES TO {principal}",
    ),
)


@dataclass(frozen=True)
class GrantRequest:
    principal_id: str
    schema_name: str = SCHEMA_NAME

    def __post_init__(self) -> None:
        if not self.principal_id or not self.principal_id.strip():
            raise PreconditionError("a service principal id is required")

        # The schema is embedded verbatim, so only plain lowercase names are allowed.
        if not SCHEMA_NAME_PATTERN.match(self.schema_name):
            raise PreconditionError(f"invalid schema name: {self.schema_name!r}")


@dataclass(frozen=True)
class Statement:
    step: GrantStep
    query: sql.Composed
    description: str

    def as_string(self) -> str:
        return self.query.as_string()


def build_statement(step: GrantStep, request: GrantRequest) -> Statement:
    query = sql.SQL(step.template).format(  # pyright: ignore[reportArgumentType]
        schema=sql.SQL(request.schema_name),  # pyright: ignore[reportArgumentType]
        principal=sql.Identifier(request.principal_id),
    )
    return Statement(step=step, query=query, description=step.description.format(schema=request.schema_name))


def build_statements(request: GrantRequest) -> list[Statement]:
    return [build_statement(step, request) for step in GRANT_STEPS]


def run_grants(request: GrantRequest, pool: ConnectionPool) -> list[Statement]:
    """
    Apply every grant step for ``request`` in order and return the executed statements.

    Raises StatementExecutionError on the first failing statement and
    ConnectivityError when no connection could be acquired from ``pool``.
    Closing the pool is left to the caller.
    """
    statements = build_statements(request)
    log = logger.bind(principal_id=request.principal_id, schema=request.schema_name)
    log.info("granting_permissions")

    try:
        with pool.connection() as conn:
            for statement in statements:
                log.info("granting", step=statement.step.name, description=statement.description)
                try:
                    conn.execute(statement.query)
                except psycopg.Error as e:
                    raise StatementExecutionError(statement.step, statement, e) from e
    except PoolTimeout as e:
        raise ConnectivityError("timed out waiting for a database connection") from e

    log.info("permissions_granted", statements=len(statements))
    return statements
