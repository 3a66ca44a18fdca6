"""
User Routes

Registration, login and profile update endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_claims
from app.core.database import get_db
from app.core.security import create_access_token
from app.models.user import User
from app.schemas.token import Claims, Token
from app.schemas.user import LoginUser, RegisterUser, UpdateUser, UserResponse
from app.services import user_service


router = APIRouter(prefix="/user", tags=["Users"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user account",
)
async def register(
    user_data: RegisterUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Create a new user account.

    **Flow:**
    1. Validate and format the CPF/CNPJ document
    2. Reject emails that are already registered
    3. Hash the password using bcrypt
    4. Store the user with a fresh UUID and a random public id

    Raises:
        HTTPException: 400 if the document is invalid or the email exists.
    """
    return await user_service.register_user(user_data, db)


@router.post(
    "/login",
    response_model=Token,
    summary="Login and get access token",
)
async def login(
    credentials: LoginUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Token:
    """
    Authenticate a user and return a JWT access token valid for one hour.

    Raises:
        HTTPException: 404 unknown email, 403 inactive account, 401 wrong password.
        ApiError: 503 if the signing secret is missing, 500 if signing fails.
    """
    user = await user_service.authenticate_user(credentials.email, credentials.password, db)

    access_token = create_access_token(user_service.to_auth_info(user))

    return Token(access_token=access_token, token_type="bearer")


@router.patch(
    "/update",
    response_model=UserResponse,
    summary="Update current user profile",
)
async def update(
    user_update: UpdateUser,
    claims: Annotated[Claims, Depends(get_current_claims)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Update the profile of the user identified by the bearer token.

    Raises:
        HTTPException: 404 if the user no longer exists, 400 on invalid data.
    """
    return await user_service.update_user_data(claims.id, user_update, db)
