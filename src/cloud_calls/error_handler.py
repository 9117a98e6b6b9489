"""
Centralized error handling for remote service calls.
"""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
)

logger = logging.getLogger(__name__)


class ErrorPolicy(Enum):
    """What a flow does with a failed remote call."""
    SUPPRESS = "suppress"
    PROPAGATE = "propagate"

    @classmethod
    def parse(cls, value) -> "ErrorPolicy":
        """Accept an ErrorPolicy or its case-insensitive string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown error policy '{value}' (expected one of: {choices})")


class ErrorType(Enum):
    """Standard error types for consistent categorization."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    THROTTLING = "THROTTLING"
    INVALID_CIPHERTEXT = "INVALID_CIPHERTEXT"
    NETWORK_ERROR = "NETWORK_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_ERROR_CODE_TYPES = {
    "ResourceNotFound": ErrorType.NOT_FOUND,
    "ResourceNotFoundException": ErrorType.NOT_FOUND,
    "NoSuchKey": ErrorType.NOT_FOUND,
    "NoSuchBucket": ErrorType.NOT_FOUND,
    "NotFoundException": ErrorType.NOT_FOUND,
    "AccessDenied": ErrorType.ACCESS_DENIED,
    "AccessDeniedException": ErrorType.ACCESS_DENIED,
    "UnrecognizedClientException": ErrorType.ACCESS_DENIED,
    "InvalidClientTokenId": ErrorType.ACCESS_DENIED,
    "ExpiredToken": ErrorType.ACCESS_DENIED,
    "Throttling": ErrorType.THROTTLING,
    "ThrottlingException": ErrorType.THROTTLING,
    "SlowDown": ErrorType.THROTTLING,
    "InvalidCiphertextException": ErrorType.INVALID_CIPHERTEXT,
    "IncorrectKeyException": ErrorType.INVALID_CIPHERTEXT,
    "InvalidParameterValue": ErrorType.VALIDATION_ERROR,
    "ValidationError": ErrorType.VALIDATION_ERROR,
    "ValidationException": ErrorType.VALIDATION_ERROR,
}


class CloudCallError(Exception):
    """Base exception class for all cloud call errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INTERNAL_ERROR,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_type = error_type
        self.original_error = original_error
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)


class ValidationError(CloudCallError):
    """Exception raised when a request is rejected before submission."""

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorType.VALIDATION_ERROR, original_error, context)


class ConfigurationError(CloudCallError):
    """Exception raised for unusable configuration."""

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorType.CONFIGURATION_ERROR, original_error, context)


class RemoteServiceError(CloudCallError):
    """Exception raised when an AWS service call fails."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.EXTERNAL_SERVICE_ERROR,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_type, original_error, context)

    @property
    def error_code(self) -> Optional[str]:
        """AWS error code, when the service returned one."""
        if isinstance(self.original_error, ClientError):
            return self.original_error.response.get("Error", {}).get("Code")
        return None

    @property
    def request_id(self) -> Optional[str]:
        """AWS request ID of the failed call, when available."""
        if isinstance(self.original_error, ClientError):
            return self.original_error.response.get("ResponseMetadata", {}).get("RequestId")
        return None


def classify_error(error: Exception) -> ErrorType:
    """Classify error based on exception type and AWS error code."""
    if isinstance(error, CloudCallError):
        return error.error_type

    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code", "")
        if code in _ERROR_CODE_TYPES:
            return _ERROR_CODE_TYPES[code]
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if status == 404:
            return ErrorType.NOT_FOUND
        if status == 403:
            return ErrorType.ACCESS_DENIED
        return ErrorType.EXTERNAL_SERVICE_ERROR

    if isinstance(error, NoCredentialsError):
        return ErrorType.CONFIGURATION_ERROR

    if isinstance(error, EndpointConnectionError):
        return ErrorType.NETWORK_ERROR

    if isinstance(error, BotoCoreError):
        return ErrorType.EXTERNAL_SERVICE_ERROR

    if isinstance(error, ValueError):
        return ErrorType.VALIDATION_ERROR

    return ErrorType.INTERNAL_ERROR


def handle_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    log_level: int = logging.ERROR
) -> CloudCallError:
    """
    Centralized error handling function.

    Args:
        error: The original exception
        context: Additional context information
        log_level: Logging level for the error

    Returns:
        Standardized CloudCallError
    """
    if isinstance(error, CloudCallError):
        logger.log(log_level, f"[{error.error_type.value}] {error.message}", extra={
            'extra_fields': {
                "error_type": error.error_type.value,
                "context": error.context,
                "original_error": str(error.original_error) if error.original_error else None
            }
        })
        return error

    error_type = classify_error(error)
    error_context = dict(context or {})
    error_context["exception_type"] = type(error).__name__

    if isinstance(error, (ClientError, BotoCoreError)):
        wrapped = RemoteServiceError(str(error), error_type, error, error_context)
        if wrapped.error_code:
            error_context["error_code"] = wrapped.error_code
        if wrapped.request_id:
            error_context["request_id"] = wrapped.request_id
    else:
        wrapped = CloudCallError(str(error), error_type, error, error_context)

    logger.log(log_level, f"[{error_type.value}] {error}", extra={
        'extra_fields': {
            "error_type": error_type.value,
            "context": error_context
        }
    })

    return wrapped


def apply_policy(
    error: Exception,
    policy: ErrorPolicy,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log a failed call, then raise or swallow it according to policy.

    Args:
        error: The exception raised by the remote call
        policy: SUPPRESS returns None, PROPAGATE re-raises
        context: Additional context information

    Raises:
        CloudCallError: when policy is PROPAGATE
    """
    wrapped = handle_error(error, context)
    if ErrorPolicy.parse(policy) is ErrorPolicy.PROPAGATE:
        if wrapped is error:
            raise wrapped
        raise wrapped from error
    return None
