"""
API Errors

A single tagged error type for the token lifecycle. Every fault carries a
kind, and the kind decides the HTTP status and the rendered message.
"""

import enum
import json
from typing import Optional, Sequence, Tuple

from fastapi import status
from fastapi.responses import JSONResponse


class Fault(str, enum.Enum):
    """Top-level fault kinds."""
    CONFIG = "CONFIG"
    AUTH = "AUTH"
    SIGNING = "SIGNING"


class AuthReason(str, enum.Enum):
    """Why an auth fault was raised."""
    MISSING_OR_MALFORMED_TOKEN = "MISSING_OR_MALFORMED_TOKEN"
    INVALID_AUTHORIZATION_TOKEN = "INVALID_AUTHORIZATION_TOKEN"
    MULTIPLE_AUTHORIZATION_ERRORS = "MULTIPLE_AUTHORIZATION_ERRORS"


_STATUS_BY_FAULT = {
    Fault.CONFIG: status.HTTP_503_SERVICE_UNAVAILABLE,
    Fault.AUTH: status.HTTP_401_UNAUTHORIZED,
    Fault.SIGNING: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApiError(Exception):
    """
    Tagged error raised by the token issuer, extractor, verifier and validator.

    Use the named constructors instead of building instances directly:
    `config`, `missing_or_malformed_token`, `invalid_token`,
    `multiple_authorization_errors` and `signing`.

    Attributes:
        kind: Fault category (decides the HTTP status).
        reason: Auth sub-kind, only set for AUTH faults.
        detail: Free-form detail for CONFIG and SIGNING faults.
        violations: Ordered claim violations for MULTIPLE_AUTHORIZATION_ERRORS.
    """

    def __init__(
        self,
        kind: Fault,
        reason: Optional[AuthReason] = None,
        detail: str = "",
        violations: Sequence[str] = (),
    ):
        self.kind = kind
        self.reason = reason
        self.detail = detail
        self.violations: Tuple[str, ...] = tuple(violations)
        super().__init__(self.render())

    @classmethod
    def config(cls, detail: str) -> "ApiError":
        return cls(Fault.CONFIG, detail=detail)

    @classmethod
    def missing_or_malformed_token(cls) -> "ApiError":
        return cls(Fault.AUTH, reason=AuthReason.MISSING_OR_MALFORMED_TOKEN)

    @classmethod
    def invalid_token(cls) -> "ApiError":
        return cls(Fault.AUTH, reason=AuthReason.INVALID_AUTHORIZATION_TOKEN)

    @classmethod
    def multiple_authorization_errors(cls, violations: Sequence[str]) -> "ApiError":
        return cls(
            Fault.AUTH,
            reason=AuthReason.MULTIPLE_AUTHORIZATION_ERRORS,
            violations=violations,
        )

    @classmethod
    def signing(cls, detail: str) -> "ApiError":
        return cls(Fault.SIGNING, detail=detail)

    @property
    def status_code(self) -> int:
        return _STATUS_BY_FAULT[self.kind]

    def render(self) -> str:
        """Canonical human-readable message for this error."""
        if self.kind is Fault.CONFIG:
            return f"Missing server configuration: {self.detail}"
        if self.kind is Fault.SIGNING:
            return f"Failed to create token: {self.detail}"
        if self.reason is AuthReason.MISSING_OR_MALFORMED_TOKEN:
            return "Missing or malformed authorization header"
        if self.reason is AuthReason.MULTIPLE_AUTHORIZATION_ERRORS:
            return (
                "Multiple errors while validating the authorization token: "
                f"{json.dumps(list(self.violations))}"
            )
        return "Invalid authorization token"

    def to_response(self) -> JSONResponse:
        """Build the JSON string response for this error."""
        headers = None
        if self.kind is Fault.AUTH:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=self.status_code,
            content=self.render(),
            headers=headers,
        )

    def __repr__(self) -> str:
        return f"<ApiError(kind={self.kind.value}, reason={self.reason}, message={self.render()!r})>"
