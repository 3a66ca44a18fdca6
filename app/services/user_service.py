"""
User Service

Business logic for registration, login and profile updates.
"""

import logging
import secrets
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.documents import format_document
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.schemas.token import UserAuthInfo
from app.schemas.user import RegisterUser, UpdateUser


logger = logging.getLogger(__name__)

DEFAULT_BIRTHDATE = date(2001, 1, 1)
PUBLIC_ID_MIN = 1_000_000
PUBLIC_ID_MAX = 9_999_999  # exclusive


def random_public_id() -> int:
    """Generate a random 7-digit public id."""
    return PUBLIC_ID_MIN + secrets.randbelow(PUBLIC_ID_MAX - PUBLIC_ID_MIN)


def parse_birthdate(value: str) -> date:
    """Parse an ISO date, falling back to DEFAULT_BIRTHDATE."""
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return DEFAULT_BIRTHDATE


def to_auth_info(user: User) -> UserAuthInfo:
    """Identity fields of a user, as carried in access tokens."""
    return UserAuthInfo(
        id=str(user.id),
        public_id=user.public_id,
        email=user.email,
        user_type=user.user_type,
    )


def _format_document_or_400(document: str) -> str:
    try:
        return format_document(document)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


async def find_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.email == email.lower())
    )
    return result.scalar_one_or_none()


async def find_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def register_user(data: RegisterUser, db: AsyncSession) -> User:
    """
    Create a new user account.

    Args:
        data: Registration data.
        db: Database session.

    Returns:
        The created user.

    Raises:
        HTTPException: 400 if the document is invalid or the email is taken.
    """
    document = _format_document_or_400(data.document)

    if await find_user_by_email(data.email, db):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = User(
        id=uuid.uuid4(),
        public_id=random_public_id(),
        name=data.name,
        email=data.email.lower(),
        document=document,
        password=hash_password(data.password),
        birthdate=parse_birthdate(data.birthdate),
        login_type=data.login_type,
        user_type=data.user_type,
        is_active=True,
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("Registered user %s", user.id)
    return user


async def authenticate_user(email: str, password: str, db: AsyncSession) -> User:
    """
    Check login credentials.

    Args:
        email: Login email.
        password: Plain text password.
        db: Database session.

    Returns:
        The authenticated user.

    Raises:
        HTTPException: 404 unknown email, 403 inactive or deleted account,
            401 wrong password.
    """
    user = await find_user_by_email(email, db)

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found by email",
        )

    if not user.is_active or user.deletion_date is not None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not active",
        )

    if not verify_password(password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    return user


async def update_user_data(user_id: str, data: UpdateUser, db: AsyncSession) -> User:
    """
    Update a user's profile.

    Args:
        user_id: Subject id from the verified token.
        data: New profile values.
        db: Database session.

    Returns:
        The updated user.

    Raises:
        HTTPException: 404 if the user does not exist, 400 if the document
            is invalid or the new email is taken.
    """
    try:
        user = await find_user_by_id(uuid.UUID(user_id), db)
    except ValueError:
        user = None

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    document = _format_document_or_400(data.document)

    new_email = data.email.lower()
    if new_email != user.email and await find_user_by_email(new_email, db):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user.name = data.name
    user.email = new_email
    user.document = document
    user.birthdate = data.birthdate
    user.update_date = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(user)

    logger.info("Updated user %s", user.id)
    return user
