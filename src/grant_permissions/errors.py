"""Exception types raised while granting schema permissions."""

from typing import TYPE_CHECKING

import psycopg

if TYPE_CHECKING:
    from grant_permissions.grants import GrantStep, Statement


class GrantError(Exception):
    pass


class PreconditionError(GrantError, ValueError):
    """Raised before any I/O when the request itself is unusable."""


class ConfigurationError(GrantError):
    pass


class ConnectivityError(GrantError):
    pass


class StatementExecutionError(GrantError):
    """
    A single grant statement failed. Statements that ran before it stay applied.
    The database error is kept as ``error`` and chained as ``__cause__``.
    """

    def __init__(self, step: "GrantStep", statement: "Statement", error: psycopg.Error) -> None:
        self.step = step
        self.statement = statement
        self.error = error
        super().__init__(f"{step.name} failed: {error}")


__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "GrantError",
    "PreconditionError",
    "StatementExecutionError",
]
