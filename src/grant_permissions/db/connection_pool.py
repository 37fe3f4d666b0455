import os

import structlog
from psycopg_pool import ConnectionPool, PoolTimeout

from grant_permissions.config import Database
from grant_permissions.errors import ConnectivityError

logger = structlog.get_logger(__name__)


def create_connection_pool(config: Database) -> ConnectionPool:
    logger.debug(
        "creating_connection_pool",
        min_size=config.min_size,
        max_size=config.max_size,
        **config.describe(),
    )

    # Connections autocommit so every grant is applied as soon as it runs.
    return ConnectionPool(
        conninfo=config.conninfo,
        min_size=config.min_size,
        max_size=config.max_size,
        timeout=config.timeout,
        open=False,
        check=ConnectionPool.check_connection,
        kwargs={"autocommit": True, "application_name": f"grant-permissions:{os.getenv('SHA') or ''}"},
    )


def open_connection_pool(pool: ConnectionPool, timeout: float) -> None:
    """Open the pool and wait until its connection is usable."""
    try:
        pool.open(wait=True, timeout=timeout)
    except PoolTimeout as e:
        raise ConnectivityError(f"could not connect to the database within {timeout}s") from e
