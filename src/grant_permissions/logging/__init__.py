from grant_permissions.logging.setup import setup_logging

__all__ = ["setup_logging"]
