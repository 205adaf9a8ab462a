"""
Backend error classification

Supabase reports schema, policy and storage problems as plain errors, so the
category is recovered from the error code and message text. The marker tables
below are the only place that knows the wording; unknown errors are GENERIC.
"""
import json
from enum import Enum
from typing import Optional, Tuple, Type

from services.errors import (
    ProjectError,
    TableMissing,
    AccessDenied,
    BucketMissing,
    RowStoreFailure,
)


class ErrorCategory(str, Enum):
    TABLE_MISSING = "table_missing"
    ACCESS_DENIED = "access_denied"
    BUCKET_MISSING = "bucket_missing"
    GENERIC = "generic"


# Postgres undefined_table and PostgREST "table not in schema cache"
TABLE_MISSING_CODES = {"42P01", "PGRST205"}

TABLE_MISSING_MESSAGES = (
    'relation "{table}" does not exist',
    "could not find the table 'public.{table}' in the schema cache",
)

ACCESS_DENIED_MESSAGES = (
    "violates row-level security policy",
)

BUCKET_MISSING_MESSAGES = (
    "bucket not found",
)

CATEGORY_ERRORS: dict = {
    ErrorCategory.TABLE_MISSING: TableMissing,
    ErrorCategory.ACCESS_DENIED: AccessDenied,
    ErrorCategory.BUCKET_MISSING: BucketMissing,
    ErrorCategory.GENERIC: RowStoreFailure,
}


def error_message(error: object) -> str:
    """Extract a displayable message from any error shape"""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    if isinstance(error, BaseException):
        return str(error)
    if isinstance(error, str):
        return error
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    try:
        return f"An unexpected error occurred. Details: {json.dumps(error, indent=2)}"
    except (TypeError, ValueError):
        return "An un-serializable, unexpected error occurred."


def _error_code(error: object) -> Optional[str]:
    code = getattr(error, "code", None)
    if code is None and isinstance(error, dict):
        code = error.get("code")
    return str(code) if code is not None else None


def classify_error(error: object, table: str = "projects") -> ErrorCategory:
    """Map a backend error to its category (table > access > bucket > generic)"""
    code = _error_code(error)
    # str(error) can carry details the message attribute drops (storage errors)
    text = f"{error_message(error)} {error}".lower()

    if code in TABLE_MISSING_CODES:
        return ErrorCategory.TABLE_MISSING
    if any(marker.format(table=table) in text for marker in TABLE_MISSING_MESSAGES):
        return ErrorCategory.TABLE_MISSING
    if any(marker in text for marker in ACCESS_DENIED_MESSAGES):
        return ErrorCategory.ACCESS_DENIED
    if any(marker in text for marker in BUCKET_MISSING_MESSAGES):
        return ErrorCategory.BUCKET_MISSING
    return ErrorCategory.GENERIC


def to_project_error(error: Exception, table: str = "projects") -> Tuple[ErrorCategory, ProjectError]:
    """Classify and wrap a raw backend error; ProjectErrors pass through"""
    if isinstance(error, ProjectError):
        for category, error_type in CATEGORY_ERRORS.items():
            if isinstance(error, error_type):
                return category, error
        return ErrorCategory.GENERIC, error

    category = classify_error(error, table)
    error_type: Type[ProjectError] = CATEGORY_ERRORS[category]
    return category, error_type(error_message(error), code=_error_code(error))
