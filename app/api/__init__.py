"""
API Router

Aggregates all endpoint routers.
"""

from fastapi import APIRouter

from app.api.endpoints import common, users

router = APIRouter()

# Public and gated demo routes
router.include_router(common.router)

# User routes
router.include_router(users.router)
