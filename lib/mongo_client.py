# =============================================================================
# lib/mongo_client.py - MongoDB Connection
# =============================================================================
# This module opens the application's single MongoDB connection from the
# validated settings.
#
# There is no retry: if the server cannot be reached at startup the error
# is logged and the process exits. The connection is created once by the
# entry point and passed to whatever needs it.
#
# Usage:
#   from lib.mongo_client import connect_database
#   connection = connect_database(settings)
#   users = connection.database["users"]
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.config import EnvironmentSettings

# Set up logging for this module
logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


class DatabaseConnectionError(Exception):
    """
    Error while connecting to MongoDB.

    Provides actionable error messages: the suggestion says how to fix
    the problem, not just what failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "DATABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class MongoConnection:
    """
    An open MongoDB client plus the application database.

    Attributes:
        client: The underlying pymongo client
        database: The database named by MONGODB_DATABASE
        details: host, port and name, safe to log (no credentials)
    """

    def __init__(self, client: MongoClient, database: Database, details: dict[str, Any]):
        self.client = client
        self.database = database
        self.details = details

    def ping(self) -> bool:
        """Return True if the server answers a ping."""
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def close(self) -> None:
        self.client.close()
        logger.info("MongoDB connection closed")


def connect_database(
    settings: EnvironmentSettings,
    client_factory: Callable[..., MongoClient] = MongoClient,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> MongoConnection:
    """
    Connect to MongoDB and verify the server is reachable.

    Args:
        settings: Validated settings (MONGODB_URI and MONGODB_DATABASE are used)
        client_factory: Callable building the client; MongoClient by default
        timeout_ms: Server selection timeout for the initial ping

    Returns:
        MongoConnection for the configured database

    Raises:
        DatabaseConnectionError: If the client cannot be created or the
            server does not answer the ping
    """
    details = {
        "host": settings.MONGODB_HOST,
        "port": settings.MONGODB_PORT,
        "name": settings.MONGODB_DATABASE,
    }

    try:
        client = client_factory(settings.MONGODB_URI, serverSelectionTimeoutMS=timeout_ms)
    except PyMongoError as e:
        raise DatabaseConnectionError(
            message=f"Failed to create MongoDB client: {e}",
            code="CLIENT_INIT_FAILED",
            suggestion="Check the MONGODB_* variables in your .env file",
            details=details,
        ) from e

    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise DatabaseConnectionError(
            message=f"MongoDB connection failed: {e}",
            code="CONNECTION_FAILED",
            suggestion="Check that MongoDB is running and the credentials are correct",
            details=details,
        ) from e

    database = client.get_database(settings.MONGODB_DATABASE)
    logger.info(f"MongoDB connected successfully: {details}")
    return MongoConnection(client, database, details)


def connect_database_or_exit(settings: EnvironmentSettings) -> MongoConnection:
    """Entry-point helper: connect, or log the failure and exit with status 1."""
    try:
        return connect_database(settings)
    except DatabaseConnectionError as e:
        logger.critical(str(e))
        raise SystemExit(1)
