"""
Tests for error_handler.py - classification and error policies.
"""
import logging

import pytest
from botocore.exceptions import EndpointConnectionError, NoCredentialsError

from cloud_calls.error_handler import (
    CloudCallError,
    ErrorPolicy,
    ErrorType,
    RemoteServiceError,
    ValidationError,
    apply_policy,
    classify_error,
    handle_error,
)
from conftest import make_client_error


class TestErrorPolicy:

    @pytest.mark.parametrize("value,expected", [
        ("suppress", ErrorPolicy.SUPPRESS),
        ("PROPAGATE", ErrorPolicy.PROPAGATE),
        (" Suppress ", ErrorPolicy.SUPPRESS),
        (ErrorPolicy.PROPAGATE, ErrorPolicy.PROPAGATE),
    ])
    def test_parse(self, value, expected):
        assert ErrorPolicy.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown error policy"):
            ErrorPolicy.parse("retry")


class TestClassifyError:

    @pytest.mark.parametrize("code,expected", [
        ("ResourceNotFound", ErrorType.NOT_FOUND),
        ("NoSuchKey", ErrorType.NOT_FOUND),
        ("AccessDeniedException", ErrorType.ACCESS_DENIED),
        ("Throttling", ErrorType.THROTTLING),
        ("InvalidCiphertextException", ErrorType.INVALID_CIPHERTEXT),
        ("IncorrectKeyException", ErrorType.INVALID_CIPHERTEXT),
        ("InternalFailure", ErrorType.EXTERNAL_SERVICE_ERROR),
    ])
    def test_client_error_codes(self, code, expected):
        assert classify_error(make_client_error(code, "Op")) == expected

    def test_unknown_code_falls_back_to_status(self):
        assert classify_error(make_client_error("Weird", "Op", status=404)) == ErrorType.NOT_FOUND
        assert classify_error(make_client_error("Weird", "Op", status=403)) == ErrorType.ACCESS_DENIED

    def test_botocore_errors(self):
        assert classify_error(NoCredentialsError()) == ErrorType.CONFIGURATION_ERROR
        assert classify_error(
            EndpointConnectionError(endpoint_url="https://monitoring.invalid")
        ) == ErrorType.NETWORK_ERROR

    def test_other_errors(self):
        assert classify_error(ValidationError("bad")) == ErrorType.VALIDATION_ERROR
        assert classify_error(RuntimeError("boom")) == ErrorType.INTERNAL_ERROR


class TestHandleError:

    def test_wraps_client_error(self, caplog):
        error = make_client_error("AccessDenied", "GetObject", status=403, request_id="r-42")

        with caplog.at_level(logging.ERROR):
            wrapped = handle_error(error, {"operation": "GetObject"})

        assert isinstance(wrapped, RemoteServiceError)
        assert wrapped.error_code == "AccessDenied"
        assert wrapped.request_id == "r-42"
        assert wrapped.context["operation"] == "GetObject"
        assert "[ACCESS_DENIED]" in caplog.text

    def test_existing_error_returned_as_is(self):
        error = CloudCallError("already wrapped")

        assert handle_error(error) is error

    def test_does_not_mutate_caller_context(self):
        context = {"operation": "Decrypt"}

        handle_error(RuntimeError("x"), context)

        assert context == {"operation": "Decrypt"}


class TestApplyPolicy:

    def test_suppress_returns_none(self):
        assert apply_policy(RuntimeError("x"), ErrorPolicy.SUPPRESS) is None

    def test_propagate_raises_wrapped(self):
        original = make_client_error("Throttling", "DeleteAlarms")

        with pytest.raises(RemoteServiceError) as exc_info:
            apply_policy(original, ErrorPolicy.PROPAGATE)

        assert exc_info.value.__cause__ is original
        assert exc_info.value.error_type == ErrorType.THROTTLING
