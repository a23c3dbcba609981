"""
Error classification for failed messages.

Implements:
- Error classification (category, retryable flag)
- User-facing suggestions per category
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from tulip_edge.errors import (
    ConfigurationError,
    ParameterError,
    ResponseParseError,
    TransportError,
)


class ErrorCategory(str, Enum):
    """Classification of errors for reporting."""
    CREDENTIAL_INVALID = "credential_invalid"
    PERMISSION_DENIED = "permission_denied"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    VALIDATION_ERROR = "validation_error"
    CONFIGURATION_ERROR = "configuration_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Structured error information for logging."""
    category: ErrorCategory
    message: str
    original_error: str
    is_retryable: bool
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "message": self.message,
            "original_error": self.original_error,
            "is_retryable": self.is_retryable,
            "suggestion": self.suggestion
        }


class ErrorClassifier:
    """Classifies errors raised while handling a message."""

    # Checked before message patterns
    TYPES = (
        (ConfigurationError, ErrorCategory.CONFIGURATION_ERROR),
        (ParameterError, ErrorCategory.VALIDATION_ERROR),
        (ResponseParseError, ErrorCategory.EXTERNAL_SERVICE_ERROR),
    )

    PATTERNS = {
        ErrorCategory.TIMEOUT: [
            "timeout", "timed out"
        ],
        ErrorCategory.CREDENTIAL_INVALID: [
            "unauthorized", "401", "authentication failed", "invalid api key"
        ],
        ErrorCategory.PERMISSION_DENIED: [
            "forbidden", "403", "permission denied"
        ],
        ErrorCategory.RATE_LIMITED: [
            "rate limit", "too many requests", "429"
        ],
        ErrorCategory.NETWORK_ERROR: [
            "connection refused", "connection reset", "connecterror", "network unreachable",
            "name or service not known", "dns", "ssl", "certificate"
        ],
        ErrorCategory.RESOURCE_NOT_FOUND: [
            "not found", "404", "does not exist"
        ],
        ErrorCategory.EXTERNAL_SERVICE_ERROR: [
            "500", "502", "503", "504", "internal server error", "service unavailable"
        ],
    }

    RETRYABLE_CATEGORIES = {
        ErrorCategory.RATE_LIMITED,
        ErrorCategory.NETWORK_ERROR,
        ErrorCategory.TIMEOUT,
        ErrorCategory.EXTERNAL_SERVICE_ERROR
    }

    MESSAGES = {
        ErrorCategory.CREDENTIAL_INVALID: "API key or secret rejected",
        ErrorCategory.PERMISSION_DENIED: "API key lacks the required scope",
        ErrorCategory.RESOURCE_NOT_FOUND: "Resource not found",
        ErrorCategory.RATE_LIMITED: "Rate limit exceeded",
        ErrorCategory.NETWORK_ERROR: "Network connection failed",
        ErrorCategory.TIMEOUT: "Request timed out",
        ErrorCategory.VALIDATION_ERROR: "Invalid request parameter",
        ErrorCategory.CONFIGURATION_ERROR: "Invalid node configuration",
        ErrorCategory.EXTERNAL_SERVICE_ERROR: "Factory returned an unexpected response",
        ErrorCategory.UNKNOWN: "Unexpected error"
    }

    SUGGESTIONS = {
        ErrorCategory.CREDENTIAL_INVALID: "Check the API key and secret of the api-auth node.",
        ErrorCategory.PERMISSION_DENIED: "Grant the API key the scopes this operation needs.",
        ErrorCategory.RESOURCE_NOT_FOUND: "Verify the table, record, query or link ID.",
        ErrorCategory.RATE_LIMITED: "Reduce the rate of incoming messages.",
        ErrorCategory.NETWORK_ERROR: "Check the factory hostname, port and proxy settings.",
        ErrorCategory.TIMEOUT: "The factory did not answer in time. Try again later.",
        ErrorCategory.VALIDATION_ERROR: "Check the message fields and configured parameter values.",
        ErrorCategory.CONFIGURATION_ERROR: "Review and fix the node configuration.",
        ErrorCategory.EXTERNAL_SERVICE_ERROR: "The factory is having issues. Try again later.",
        ErrorCategory.UNKNOWN: "An unexpected error occurred. Check the logs for details."
    }

    @classmethod
    def classify(cls, error: Exception) -> ErrorContext:
        """Classify an error and return structured context."""
        original_error = str(error)
        matched_category = cls._match_type(error) or cls._match_patterns(original_error)

        if matched_category is ErrorCategory.UNKNOWN and isinstance(error, TransportError):
            matched_category = ErrorCategory.NETWORK_ERROR

        return ErrorContext(
            category=matched_category,
            message=cls.MESSAGES[matched_category],
            original_error=original_error,
            is_retryable=matched_category in cls.RETRYABLE_CATEGORIES,
            suggestion=cls.SUGGESTIONS.get(matched_category)
        )

    @classmethod
    def _match_type(cls, error: Exception) -> Optional[ErrorCategory]:
        for error_type, category in cls.TYPES:
            if isinstance(error, error_type):
                return category
        return None

    @classmethod
    def _match_patterns(cls, original: str) -> ErrorCategory:
        error_str = original.lower()
        for category, patterns in cls.PATTERNS.items():
            if any(pattern in error_str for pattern in patterns):
                return category
        return ErrorCategory.UNKNOWN
