"""
Models Module

This module exports all SQLAlchemy models for the application.
"""

from app.core.database import Base

from app.models.user import User

__all__ = [
    "Base",
    "User",
]
