"""
User Schemas

Pydantic models for user request/response validation.
"""

import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterUser(BaseModel):
    """Schema for creating a new user."""

    name: str = Field(..., min_length=1, max_length=255, description="User's full name")
    email: EmailStr = Field(..., description="User's email address")
    document: str = Field(..., min_length=1, description="CPF or CNPJ, punctuation optional")
    password: str = Field(..., min_length=1, description="Plain text password")
    birthdate: str = Field(..., min_length=1, description="Birth date as YYYY-MM-DD")
    login_type: str = Field(..., min_length=1, max_length=50)
    user_type: str = Field(..., min_length=1, max_length=50)

    model_config = ConfigDict(str_strip_whitespace=True)


class LoginUser(BaseModel):
    """Schema for user login request."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")

    model_config = ConfigDict(str_strip_whitespace=True)


class UpdateUser(BaseModel):
    """Schema for updating user profile."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    document: str = Field(..., min_length=1)
    birthdate: date

    model_config = ConfigDict(str_strip_whitespace=True)


class UserResponse(BaseModel):
    """Schema for user response (excludes password)."""

    id: uuid.UUID
    public_id: int
    name: str
    email: str
    document: str
    birthdate: date
    login_type: str
    user_type: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
