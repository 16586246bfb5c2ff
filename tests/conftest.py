# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures shared by all tests.
#
# Nothing reads os.environ at import time, so tests build their own raw
# environment mappings instead of patching the process environment.
# =============================================================================

import logging

import pytest

from app.config import EnvironmentSettings, load_settings


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def valid_environment():
    """A raw environment that satisfies EnvironmentSettings."""
    return {
        "MONGODB_USERNAME": "u",
        "MONGODB_PASSWORD": "p",
        "MONGODB_HOST": "h",
        "MONGODB_PORT": "27017",
        "MONGODB_DATABASE": "aethel",
        "ACCESS_TOKEN_SECRET": "access-secret",
        "ACCESS_TOKEN_EXPIRY": "15m",
        "REFRESH_TOKEN_SECRET": "refresh-secret",
        "REFRESH_TOKEN_EXPIRY": "7d",
        "CLOUDINARY_CLOUD_NAME": "demo-cloud",
        "CLOUDINARY_API_KEY": "123456789",
        "CLOUDINARY_API_SECRET": "cloudinary-secret",
    }


@pytest.fixture
def settings(valid_environment, tmp_path) -> EnvironmentSettings:
    """Validated settings that log into a temporary directory."""
    return load_settings({**valid_environment, "LOG_DIR": str(tmp_path / "logs")})


@pytest.fixture
def restore_root_logger():
    """Undo any handler/level changes made to the root logger by a test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
