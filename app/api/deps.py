"""
API Dependencies

Reusable dependencies for API routes including authentication.
"""

from fastapi import Request

from app.middleware.auth import Deny, authorize
from app.schemas.token import Claims


async def get_current_claims(request: Request) -> Claims:
    """
    Dependency to get the verified token claims of the current request.

    Protected paths are checked by AuthGateMiddleware, which leaves the
    verified claims on `request.state.claims`. When a route is reached
    without going through the gate the claims are derived here instead.

    Args:
        request: Incoming request.

    Returns:
        Claims: Verified claims of the caller.

    Raises:
        ApiError: If the request has no valid bearer token.
    """
    claims = getattr(request.state, "claims", None)
    if claims is not None:
        return claims

    decision = authorize(request.headers)
    if isinstance(decision, Deny):
        raise decision.error
    request.state.claims = decision.claims
    return decision.claims
