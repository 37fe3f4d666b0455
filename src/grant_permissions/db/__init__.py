from grant_permissions.db.connection_pool import create_connection_pool, open_connection_pool

__all__ = ["create_connection_pool", "open_connection_pool"]
