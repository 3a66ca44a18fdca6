"""
Common Routes

A public route and a route behind the auth gate.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_current_claims
from app.schemas.token import Claims


router = APIRouter(tags=["Common"])


@router.get("/common", summary="Public route")
async def common_route() -> str:
    return "Common route!"


@router.get("/protected", summary="Route that requires a bearer token")
async def protected_route(
    claims: Annotated[Claims, Depends(get_current_claims)],
) -> str:
    """Reached with claims from AuthGateMiddleware, or checked here when mounted without it."""
    return "Protected route!"
