import pytest

from fakes import BackendError
from services.error_classifier import (
    ErrorCategory,
    classify_error,
    error_message,
    to_project_error,
)
from services.errors import (
    AccessDenied,
    BucketMissing,
    RowStoreFailure,
    StorageAccessDenied,
    TableMissing,
)


def test_undefined_table_code_is_table_missing():
    error = BackendError('relation "public.projects" does not exist', code="42P01")
    assert classify_error(error) == ErrorCategory.TABLE_MISSING


def test_table_code_wins_over_policy_wording():
    error = BackendError("new row violates row-level security policy", code="42P01")
    assert classify_error(error) == ErrorCategory.TABLE_MISSING


@pytest.mark.parametrize("message", [
    'relation "projects" does not exist',
    "Could not find the table 'public.projects' in the schema cache",
])
def test_table_missing_by_message(message):
    assert classify_error(BackendError(message)) == ErrorCategory.TABLE_MISSING


def test_table_message_only_matches_configured_table():
    error = BackendError('relation "other_table" does not exist')
    assert classify_error(error, table="projects") == ErrorCategory.GENERIC
    assert classify_error(error, table="other_table") == ErrorCategory.TABLE_MISSING


def test_row_level_security_is_access_denied():
    error = BackendError('new row violates row-level security policy for table "projects"', code="42501")
    assert classify_error(error) == ErrorCategory.ACCESS_DENIED


def test_bucket_not_found():
    assert classify_error(BackendError("Bucket not found")) == ErrorCategory.BUCKET_MISSING
    # Storage errors sometimes only carry the wording in str()
    assert classify_error(Exception("{'statusCode': 404, 'error': 'Bucket not found'}")) == ErrorCategory.BUCKET_MISSING


def test_unknown_errors_fall_back_to_generic():
    assert classify_error(BackendError("connection reset by peer", code="08006")) == ErrorCategory.GENERIC
    assert classify_error(RuntimeError("")) == ErrorCategory.GENERIC
    assert classify_error({"unexpected": ["shape"]}) == ErrorCategory.GENERIC


def test_error_message_shapes():
    assert error_message(BackendError("from attribute")) == "from attribute"
    assert error_message(ValueError("plain")) == "plain"
    assert error_message("text") == "text"
    assert error_message({"message": "dict message"}) == "dict message"
    assert error_message({"a": 1}).startswith("An unexpected error occurred.")
    assert error_message(object()) == "An un-serializable, unexpected error occurred."


@pytest.mark.parametrize("error,expected_type", [
    (BackendError("x", code="42P01"), TableMissing),
    (BackendError("violates row-level security policy"), AccessDenied),
    (BackendError("Bucket not found"), BucketMissing),
    (BackendError("timeout", code="57014"), RowStoreFailure),
])
def test_to_project_error_wraps(error, expected_type):
    _, wrapped = to_project_error(error)
    assert type(wrapped) is expected_type
    assert wrapped.message == error.message
    assert wrapped.code == error.code


def test_to_project_error_passes_project_errors_through():
    original = BucketMissing("Storage bucket 'project-assets' not found.")
    category, wrapped = to_project_error(original)

    assert category == ErrorCategory.BUCKET_MISSING
    assert wrapped is original


def test_storage_access_denied_keeps_access_category():
    category, wrapped = to_project_error(StorageAccessDenied("violates row-level security policy"))

    assert category == ErrorCategory.ACCESS_DENIED
    assert isinstance(wrapped, AccessDenied)
