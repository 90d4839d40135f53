"""
Base enumerations and constants used throughout the data models.

These enums provide type-safe values for common categorical fields
and ensure consistency across the system.
"""

from enum import Enum

# Host placeholder used in every request URL we write to the collection.
BASE_URL_PLACEHOLDER = "{{baseUrl}}"

# Prefix applied to the name and description of removed endpoints.
DEPRECATED_TAG = "[DEPRECATED]"

# Description used when a removed endpoint had no description of its own.
DEPRECATED_DEFAULT_DESCRIPTION = f"{DEPRECATED_TAG} This endpoint is deprecated."

POSTMAN_SCHEMA_URL = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


class ParameterLocation(str, Enum):
    """Where a route parameter is carried in the HTTP request."""

    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    BODY = "body"


class UpdateStatus(str, Enum):
    """Outcome of the collection update step.

    ERROR is used when the analysis succeeded but persisting the
    reconciled collection failed; the analysis itself is still returned.
    PARTIAL is part of the result wire format for consumers of the JSON
    output; reconciliation never produces it.
    """

    SUCCESS = "success"
    ERROR = "error"
    PARTIAL = "partial"
    SKIPPED = "skipped"


class ErrorType(str, Enum):
    """Classification of failures raised by the network-bound steps."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    EXTERNAL = "external"
    INTERNAL = "internal"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
