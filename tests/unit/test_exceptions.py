"""
Tests for provider exceptions and response helpers.
"""

from types import SimpleNamespace

from zureform.exceptions import (
    ConfigValidationError,
    ImportAsExistsError,
    OperationTimeoutError,
    ProviderError,
    RemoteAPIError,
    ResourceOperationError,
    ThroughputNotConfigurableError,
)
from zureform.response import status_code_of, was_not_found


class TestExceptions:
    """Test suite for the exception hierarchy."""

    def test_all_are_provider_errors(self):
        errors = [
            ConfigValidationError(["x: bad"]),
            ImportAsExistsError("cosmosdb_mongo_database", "/id"),
            RemoteAPIError("boom", 500),
            ResourceOperationError("failed"),
            OperationTimeoutError("read", 5),
        ]

        for error in errors:
            assert isinstance(error, ProviderError)
            assert error.partial_state is None

    def test_resource_operation_error_wraps_cause(self):
        cause = RemoteAPIError("denied", 403)

        error = ResourceOperationError("Error deleting Cosmos Mongo Database appdb", cause)

        assert str(error) == "Error deleting Cosmos Mongo Database appdb: denied"
        assert error.cause is cause

    def test_throughput_hint(self):
        error = ThroughputNotConfigurableError("Error setting Throughput", RemoteAPIError("nf", 404))

        assert str(error) == (
            "Error setting Throughput: nf - If the database has not been created with an "
            "initial throughput, you cannot configure it later."
        )
        assert error.message == str(error)

    def test_import_as_exists_message(self):
        error = ImportAsExistsError("cosmosdb_mongo_database", "/subscriptions/s/x")

        assert "'/subscriptions/s/x' already exists" in str(error)
        assert "'cosmosdb_mongo_database'" in str(error)

    def test_timeout_messages(self):
        assert str(OperationTimeoutError("read/read", 300)) == "Operation 'read/read' timed out after 300s"
        assert "cancelled by the host" in str(OperationTimeoutError("read/read", 300, stopped=True))

    def test_config_validation_error(self):
        error = ConfigValidationError(["a: bad", "b: worse"])

        assert error.errors == ["a: bad", "b: worse"]
        assert str(error) == "Invalid configuration: a: bad; b: worse"


class TestResponseHelpers:
    """Test suite for status code inspection."""

    def test_status_code_attribute(self):
        assert status_code_of(RemoteAPIError("nf", 404)) == 404
        assert was_not_found(RemoteAPIError("nf", 404))

    def test_status_code_on_response(self):
        error = Exception("sdk")
        error.response = SimpleNamespace(status_code=404)

        assert was_not_found(error)

    def test_no_status(self):
        assert status_code_of(None) is None
        assert status_code_of(RemoteAPIError("transport")) is None
        assert not was_not_found(ValueError("x"))
        assert not was_not_found(RemoteAPIError("conflict", 409))
