"""
Token Schemas

Pydantic models for JWT token handling.
"""

from pydantic import BaseModel, ConfigDict


class Token(BaseModel):
    """Schema for token response."""

    access_token: str
    token_type: str = "bearer"


class UserAuthInfo(BaseModel):
    """Identity a token is issued for (never includes the password)."""

    id: str
    public_id: int
    email: str
    user_type: str

    model_config = ConfigDict(frozen=True)


class Claims(BaseModel):
    """
    Signed token payload.

    Missing fields decode to empty values so that the claims validator can
    report every problem at once.
    """

    id: str = ""
    public_id: int = 0
    user_type: str = ""
    email: str = ""
    exp: int = 0  # Expiration timestamp (Unix seconds)

    model_config = ConfigDict(frozen=True, extra="ignore")
