"""Custom exceptions for the webhook relay."""
from typing import Any, Dict, Optional


class RelayException(Exception):
    """Base exception for the relay."""

    def __init__(
        self,
        message: str,
        error_code: str = "RELAY_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(RelayException):
    """Configuration-related errors. Fatal at startup."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            status_code=500,
            details=details,
        )


class AdmissionDenied(RelayException):
    """A request failed one of the admission checks."""

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=reason,
            error_code="ADMISSION_DENIED",
            status_code=403,
            details=details,
        )

    @property
    def reason(self) -> str:
        return self.message


class InvalidEventError(RelayException):
    """Event body cannot be handled (e.g. challenge without a token)."""

    def __init__(
        self,
        message: str = "invalid challenge payload",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="INVALID_EVENT",
            status_code=400,
            details=details,
        )


class UpstreamFailure(RelayException):
    """Downstream endpoint failed or answered with a non-2xx status."""

    def __init__(
        self,
        message: str = "bad gateway",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="UPSTREAM_FAILURE",
            status_code=502,
            details=details,
        )
