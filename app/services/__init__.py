"""
Services Module

Business logic layer.
"""

from app.services import user_service

__all__ = [
    "user_service",
]
