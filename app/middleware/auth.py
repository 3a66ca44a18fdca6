"""
Auth Gate Middleware

Runs header extraction, signature verification and claims validation for
protected paths. The gate itself is a plain function that returns either
Allow or Deny; the middleware only turns a Deny into a response.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence, Union

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import get_jwt_secret, settings
from app.core.errors import ApiError
from app.core.security import decode_access_token, extract_bearer_token, validate_claims
from app.schemas.token import Claims


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allow:
    """Request may continue; carries the verified claims."""
    claims: Claims


@dataclass(frozen=True)
class Deny:
    """Request stops here with an error response."""
    error: ApiError

    def to_response(self) -> Response:
        return self.error.to_response()


AuthDecision = Union[Allow, Deny]


def authorize(headers: Mapping[str, str], now: Optional[int] = None) -> AuthDecision:
    """
    Decide whether a request carries a valid bearer token.

    Stages run in order and the first failure wins:
    header -> secret -> signature -> claims.

    Args:
        headers: Request headers.
        now: Validation time as a Unix timestamp, defaults to the current time.

    Returns:
        Allow with the verified claims, or Deny with the error that stopped it.
    """
    try:
        token = extract_bearer_token(headers)
        secret = get_jwt_secret()
        claims = decode_access_token(token, secret)
        validate_claims(claims, now)
    except ApiError as e:
        return Deny(e)
    return Allow(claims)


def is_protected_path(path: str, protected_paths: Sequence[str]) -> bool:
    """Prefix match on whole path segments."""
    return any(
        path == prefix or path.startswith(prefix.rstrip("/") + "/")
        for prefix in protected_paths
    )


class AuthGateMiddleware(BaseHTTPMiddleware):
    """
    Middleware that requires a valid bearer token on protected paths.

    Verified claims are stored on `request.state.claims` for handlers.
    """

    def __init__(self, app, protected_paths: Optional[Sequence[str]] = None):
        super().__init__(app)
        if protected_paths is None:
            protected_paths = settings.protected_paths_list
        self.protected_paths = list(protected_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not is_protected_path(request.url.path, self.protected_paths):
            return await call_next(request)

        decision = authorize(request.headers)
        if isinstance(decision, Deny):
            logger.info(
                "Denied %s %s: %s",
                request.method,
                request.url.path,
                decision.error.reason.value if decision.error.reason else decision.error.kind.value,
            )
            return decision.to_response()

        request.state.claims = decision.claims
        return await call_next(request)
