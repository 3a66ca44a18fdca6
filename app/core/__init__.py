"""
Core Module

This module contains configuration, database setup, errors and security utilities.
"""

from app.core.config import get_jwt_secret, get_settings, settings
from app.core.database import Base, get_db, get_engine
from app.core.errors import ApiError, AuthReason, Fault

__all__ = [
    "settings",
    "get_settings",
    "get_jwt_secret",
    "Base",
    "get_db",
    "get_engine",
    "ApiError",
    "AuthReason",
    "Fault",
]
