import argparse
import sys
from collections.abc import Sequence

import structlog
from pydantic import ValidationError

from grant_permissions.config import DEFAULT_ENV_FILE, LOG_LEVELS, load_settings
from grant_permissions.db import create_connection_pool, open_connection_pool
from grant_permissions.errors import (
    ConfigurationError,
    ConnectivityError,
    PreconditionError,
    StatementExecutionError,
)
from grant_permissions.grants import GrantRequest, build_statements, run_grants
from grant_permissions.logging import setup_logging

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grant-permissions",
        description="Grant a service principal access to the chat application's database schema.",
    )
    parser.add_argument("service_principal_id", metavar="<service-principal-id>", help="role to grant permissions to")
    parser.add_argument("--env-file", default=DEFAULT_ENV_FILE, help="env file to read settings from (default: .env)")
    parser.add_argument("--dry-run", action="store_true", help="print the statements without connecting")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default=None, help="override LOG_LEVEL"
    )
    parser.add_argument("--json-logs", action="store_true", default=None, help="emit JSON logs")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        request = GrantRequest(principal_id=args.service_principal_id)
    except PreconditionError as e:
        parser.error(str(e))

    if args.dry_run:
        for statement in build_statements(request):
            print(f"{statement.as_string()};")
        return EXIT_OK

    try:
        settings = load_settings(args.env_file)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    setup_logging(
        json_logs=settings.json_logs if args.json_logs is None else args.json_logs,
        log_level=args.log_level or settings.log_level,
    )

    try:
        database = settings.database()
    except ConfigurationError as e:
        logger.error("configuration_invalid", error=str(e))
        return EXIT_FAILURE

    logger.info("connecting", **database.describe())
    pool = create_connection_pool(database)
    try:
        open_connection_pool(pool, timeout=database.timeout)
        run_grants(request, pool)
    except ConnectivityError as e:
        logger.error("connection_failed", error=str(e), cause=str(e.__cause__) if e.__cause__ else None)
        return EXIT_FAILURE
    except StatementExecutionError as e:
        logger.error(
            "grant_failed",
            step=e.step.name,
            statement=e.statement.as_string(),
            error=str(e.error),
            sqlstate=e.error.sqlstate,
        )
        return EXIT_FAILURE
    finally:
        pool.close()

    return EXIT_OK


def run() -> None:
    sys.exit(main())
