from grant_permissions.errors import (
    ConfigurationError,
    ConnectivityError,
    GrantError,
    PreconditionError,
    StatementExecutionError,
)
from grant_permissions.grants import GRANT_STEPS, GrantRequest, GrantStep, Statement, build_statements, run_grants

__version__ = "0.1.0"

__all__ = [
    "GRANT_STEPS",
    "ConfigurationError",
    "ConnectivityError",
    "GrantError",
    "GrantRequest",
    "GrantStep",
    "PreconditionError",
    "Statement",
    "StatementExecutionError",
    "build_statements",
    "run_grants",
]
