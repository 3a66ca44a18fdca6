"""
Schemas Module

Pydantic models for request/response validation.
"""

from app.schemas.user import LoginUser, RegisterUser, UpdateUser, UserResponse
from app.schemas.token import Claims, Token, UserAuthInfo

__all__ = [
    # User
    "RegisterUser",
    "LoginUser",
    "UpdateUser",
    "UserResponse",
    # Token
    "Token",
    "Claims",
    "UserAuthInfo",
]
