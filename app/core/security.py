"""
Security Utilities

Password hashing and JWT token management: issuing tokens at login,
extracting bearer tokens from requests, verifying signatures and
validating the decoded claims.
"""

import logging
from datetime import datetime, timezone
from typing import List, Mapping, Optional

import bcrypt
from jose import jwt
from jose.exceptions import JOSEError
from pydantic import ValidationError

from app.core.config import get_jwt_secret, settings
from app.core.errors import ApiError
from app.schemas.token import Claims, UserAuthInfo


logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Args:
        password: Plain text password to hash.

    Returns:
        str: Hashed password.
    """
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain_password: Plain text password to verify.
        hashed_password: Hashed password to compare against.

    Returns:
        bool: True if passwords match, False otherwise.
    """
    try:
        password_bytes = plain_password.encode('utf-8')
        hashed_bytes = hashed_password.encode('utf-8')
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def _utc_timestamp() -> int:
    return int(datetime.now(timezone.utc).timestamp())


def create_access_token(identity: UserAuthInfo, now: Optional[int] = None) -> str:
    """
    Issue a signed JWT access token for an authenticated identity.

    Args:
        identity: The identity to encode (id, public_id, email, user_type).
        now: Issuance time as a Unix timestamp, defaults to the current time.

    Returns:
        str: Encoded JWT token, valid for ACCESS_TOKEN_EXPIRE_SECONDS.

    Raises:
        ApiError: config fault if the secret is missing, signing fault if
            the token cannot be encoded.
    """
    issued_at = _utc_timestamp() if now is None else now

    claims = Claims(
        id=identity.id,
        public_id=identity.public_id,
        user_type=identity.user_type,
        email=identity.email,
        exp=issued_at + settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    )

    secret = get_jwt_secret()

    try:
        encoded_jwt = jwt.encode(
            claims.model_dump(),
            secret,
            algorithm=settings.ALGORITHM,
        )
    except (JOSEError, TypeError, ValueError) as e:
        logger.exception("Failed to sign token for user %s", identity.id)
        raise ApiError.signing(str(e)) from e

    logger.info("Issued access token for user %s", identity.id)
    return encoded_jwt


def extract_bearer_token(headers: Mapping[str, str]) -> str:
    """
    Pull the raw token out of an `Authorization: Bearer <token>` header.

    Args:
        headers: Request headers (case-insensitive Starlette headers).

    Returns:
        str: The raw token with surrounding whitespace removed.

    Raises:
        ApiError: MISSING_OR_MALFORMED_TOKEN if the header is absent, does
            not start with "Bearer " or carries no token.
    """
    auth_header = headers.get("Authorization")
    if auth_header is None or not auth_header.startswith(BEARER_PREFIX):
        raise ApiError.missing_or_malformed_token()

    token = auth_header[len(BEARER_PREFIX):].strip()
    if not token:
        raise ApiError.missing_or_malformed_token()
    return token


def decode_access_token(token: str, secret: str) -> Claims:
    """
    Verify a token's HS256 signature and decode its claims.

    Every failure is reported the same way so callers cannot tell which
    part of the token was wrong.

    Args:
        token: Raw JWT string.
        secret: Shared signing secret.

    Returns:
        Claims: The decoded payload.

    Raises:
        ApiError: INVALID_AUTHORIZATION_TOKEN on any verification failure.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.ALGORITHM],
            # Expiry is checked by validate_claims against its own clock
            options={"verify_exp": False},
        )
        return Claims(**payload)
    except (JOSEError, ValidationError, TypeError) as e:
        logger.debug("Token verification failed: %s", e)
        raise ApiError.invalid_token() from e


def collect_claim_violations(claims: Claims, now: Optional[int] = None) -> List[str]:
    """
    Check every claim independently and return all violations in order.

    Args:
        claims: Decoded claims.
        now: Validation time as a Unix timestamp, defaults to the current time.

    Returns:
        List[str]: Human-readable violations, empty when the claims are valid.
    """
    current_time = _utc_timestamp() if now is None else now
    errors: List[str] = []

    if not claims.id.strip():
        errors.append("Invalid ID")
    if claims.public_id <= 0:
        errors.append("Invalid Public ID")
    if not claims.email:
        errors.append("Invalid E-mail")
    if claims.exp == 0:
        errors.append("Invalid expiration date")
    if claims.exp <= current_time:
        errors.append("Expired token")

    return errors


def validate_claims(claims: Claims, now: Optional[int] = None) -> None:
    """
    Validate decoded claims, reporting all failures together.

    Raises:
        ApiError: MULTIPLE_AUTHORIZATION_ERRORS with every violation found.
    """
    errors = collect_claim_violations(claims, now)
    if errors:
        raise ApiError.multiple_authorization_errors(errors)
