# =============================================================================
# app/config.py - Environment Configuration Loader
# =============================================================================
# This module validates environment variables against a declared schema and
# produces an immutable, typed settings object.
#
# Usage (entry point only - there is no global settings instance):
#   from app.config import read_environment, load_settings_or_exit
#   settings = load_settings_or_exit(read_environment())
#   print(settings.MONGODB_URI)
#
# Environment variables are read from:
# 1. A .env file in the working directory (if it exists)
# 2. System environment variables (these win over .env)
#
# Validation collects every field error before failing, so a broken
# deployment shows all of its configuration problems in one run.
# =============================================================================

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Annotated, Any, Literal, Mapping, TypeVar
from urllib.parse import quote_plus

from dotenv import dotenv_values
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
)
from pydantic_core import PydanticCustomError

RawEnvironment = Mapping[str, "str | None"]

SchemaT = TypeVar("SchemaT", bound=BaseModel)

NUMERIC_PATTERN = re.compile(r"\d+", re.ASCII)
DURATION_PATTERN = re.compile(r"(\d+)([smhd])", re.ASCII)

DURATION_UNITS = {"s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60}

REDACTED = "********"


# =============================================================================
# Errors
# =============================================================================

@dataclass(frozen=True)
class FieldError:
    """A single configuration problem, tied to the variable that caused it."""

    field: str
    message: str


class ConfigValidationError(Exception):
    """
    Raised when the environment does not satisfy the settings schema.

    Carries every field-level error found during validation, in schema
    declaration order. Configuration is a precondition for running at all,
    so callers are expected to report the errors and stop.
    """

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        self.code = "INVALID_CONFIGURATION"
        self.suggestion = "Set the listed variables in the environment or in .env"
        super().__init__(str(self))

    @property
    def fields(self) -> list[str]:
        """Names of the variables that failed validation."""
        return [error.field for error in self.errors]

    def __str__(self) -> str:
        lines = [f"[{self.code}] {len(self.errors)} invalid environment variable(s)"]
        lines.extend(f"  - {error.message}" for error in self.errors)
        return "\n".join(lines)


# =============================================================================
# Field Kinds
# =============================================================================
# Each annotated type below is one kind of field descriptor. A schema is a
# frozen pydantic model whose fields use these types.

def _require_digits(value: Any) -> Any:
    if isinstance(value, str) and not NUMERIC_PATTERN.fullmatch(value):
        raise PydanticCustomError(
            "numeric_string",
            "must be a valid port number (digits only), got '{value}'",
            {"value": value},
        )
    return value


def _require_duration(value: str) -> str:
    if not DURATION_PATTERN.fullmatch(value):
        raise PydanticCustomError(
            "duration_format",
            "must be a duration like '15m' or '7d', got '{value}'",
            {"value": value},
        )
    return value


# Required, non-empty string
RequiredString = Annotated[str, Field(min_length=1)]

# Digits-only string coerced to int
NumericString = Annotated[int, BeforeValidator(_require_digits)]

# <number><unit> where unit is one of s, m, h, d
Duration = Annotated[str, AfterValidator(_require_duration)]

LogLevel = Literal["fatal", "error", "warn", "info", "debug", "trace"]

Environment = Literal["development", "staging", "production"]


# =============================================================================
# Derived Values
# =============================================================================

def build_mongodb_uri(username: str, password: str, host: str, port: int) -> str:
    """
    Assemble a MongoDB connection URI from its parts.

    Username and password are percent-encoded, so credentials containing
    reserved characters (``@``, ``:``, ``/``) still produce a valid URI.
    Plain alphanumeric credentials are left unchanged.

    Example:
        build_mongodb_uri("u", "p", "h", 27017) -> "mongodb://u:p@h:27017"
    """
    return f"mongodb://{quote_plus(username)}:{quote_plus(password)}@{host}:{port}"


def parse_duration(value: str) -> int:
    """Convert a duration string such as '15m' or '7d' into seconds."""
    match = DURATION_PATTERN.fullmatch(value)
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return int(amount) * DURATION_UNITS[unit]


# =============================================================================
# Application Schema
# =============================================================================

class EnvironmentSettings(BaseModel):
    """
    Validated application configuration.

    Field names match the environment variables they are read from.
    Instances are immutable; derived values are exposed as computed fields
    and properties and are only reachable once every base field validated.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # -------------------------------------------------------------------------
    # MongoDB
    # -------------------------------------------------------------------------

    MONGODB_USERNAME: RequiredString
    MONGODB_PASSWORD: RequiredString
    MONGODB_HOST: RequiredString
    MONGODB_PORT: NumericString
    MONGODB_DATABASE: RequiredString

    # -------------------------------------------------------------------------
    # JWT
    # -------------------------------------------------------------------------

    ACCESS_TOKEN_SECRET: RequiredString
    ACCESS_TOKEN_EXPIRY: Duration
    REFRESH_TOKEN_SECRET: RequiredString
    REFRESH_TOKEN_EXPIRY: Duration

    # -------------------------------------------------------------------------
    # Cloudinary
    # -------------------------------------------------------------------------

    CLOUDINARY_CLOUD_NAME: RequiredString
    CLOUDINARY_API_KEY: RequiredString
    CLOUDINARY_API_SECRET: RequiredString

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    LOG_LEVEL: LogLevel = "info"
    LOG_DIR: RequiredString = "logs"

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------

    ENVIRONMENT: Environment = "development"
    API_HOST: RequiredString = "0.0.0.0"
    API_PORT: NumericString = 8000

    # -------------------------------------------------------------------------
    # Computed Fields
    # -------------------------------------------------------------------------

    @computed_field  # type: ignore[prop-decorator]
    @property
    def MONGODB_URI(self) -> str:
        """Connection URI assembled from the MONGODB_* fields."""
        return build_mongodb_uri(
            self.MONGODB_USERNAME,
            self.MONGODB_PASSWORD,
            self.MONGODB_HOST,
            self.MONGODB_PORT,
        )

    @property
    def access_token_ttl_seconds(self) -> int:
        return parse_duration(self.ACCESS_TOKEN_EXPIRY)

    @property
    def refresh_token_ttl_seconds(self) -> int:
        return parse_duration(self.REFRESH_TOKEN_EXPIRY)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    def redacted(self) -> dict[str, Any]:
        """
        Dump every field, including computed ones, with secrets masked.

        Safe to write to logs: passwords, token secrets and API secrets are
        replaced, and the URI is rebuilt with a masked password.
        """
        data = self.model_dump()
        for name in SECRET_FIELDS:
            if name in data:
                data[name] = REDACTED
        data["MONGODB_URI"] = (
            f"mongodb://{quote_plus(self.MONGODB_USERNAME)}:{REDACTED}"
            f"@{self.MONGODB_HOST}:{self.MONGODB_PORT}"
        )
        return data


SECRET_FIELDS = frozenset({
    "MONGODB_PASSWORD",
    "ACCESS_TOKEN_SECRET",
    "REFRESH_TOKEN_SECRET",
    "CLOUDINARY_API_SECRET",
})


# =============================================================================
# Loading
# =============================================================================

def read_environment(env_file: str | Path | None = ".env") -> dict[str, str | None]:
    """
    Snapshot the process environment, layered over an optional .env file.

    Process variables win over values from the file. os.environ is never
    modified. A missing env_file contributes nothing.
    """
    raw: dict[str, str | None] = {}
    if env_file is not None and Path(env_file).is_file():
        raw.update(dotenv_values(env_file))
    raw.update(os.environ)
    return raw


def _collect_errors(exc: ValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "<root>"
        if error["type"] in ("missing", "string_too_short"):
            message = f"missing or empty: {field}"
        else:
            message = f"{field}: {error['msg']}"
        errors.append(FieldError(field=field, message=message))
    return errors


def load_settings(
    raw: RawEnvironment,
    schema: type[SchemaT] = EnvironmentSettings,  # type: ignore[assignment]
) -> SchemaT:
    """
    Validate a raw environment snapshot against a schema.

    Empty values are treated as absent, so an empty required variable is
    reported as missing and an empty enumerated variable takes its default.
    Variables the schema does not declare are ignored.

    Args:
        raw: Mapping of variable name to (optional) string value
        schema: Pydantic model class describing the fields

    Returns:
        A fully populated, immutable instance of schema

    Raises:
        ConfigValidationError: With every field error, if any field is invalid
    """
    values = {key: value for key, value in raw.items() if value not in (None, "")}
    try:
        return schema.model_validate(values)
    except ValidationError as exc:
        raise ConfigValidationError(_collect_errors(exc)) from None


def load_settings_or_exit(
    raw: RawEnvironment,
    schema: type[SchemaT] = EnvironmentSettings,  # type: ignore[assignment]
    stream: IO[str] | None = None,
) -> SchemaT:
    """
    Startup gate: load settings or print every error and exit with status 1.

    Only the program entry point should call this; everything else should
    use load_settings and handle ConfigValidationError.
    """
    try:
        return load_settings(raw, schema)
    except ConfigValidationError as exc:
        out = stream if stream is not None else sys.stderr
        print("Invalid environment configuration:", file=out)
        for error in exc.errors:
            print(f"  - {error.message}", file=out)
        raise SystemExit(1)
