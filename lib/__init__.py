# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains the collaborators that consume the validated settings:
# - mongo_client.py: Opens the MongoDB connection
# - logging_config.py: File and console logging, HTTP access log
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.logging_config import RequestLoggingMiddleware, configure_logging
from lib.mongo_client import (
    DatabaseConnectionError,
    MongoConnection,
    connect_database,
    connect_database_or_exit,
)

__all__ = [
    # Logging
    "configure_logging",
    "RequestLoggingMiddleware",
    # MongoDB
    "connect_database",
    "connect_database_or_exit",
    "DatabaseConnectionError",
    "MongoConnection",
]
