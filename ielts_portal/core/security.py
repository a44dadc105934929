from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from ielts_portal.config import settings
from ielts_portal.core.exceptions import UnauthorizedException

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: int, session_id: str, expires_minutes: int | None = None) -> str:
    """
    Issue a JWT bound to a portal session.

    Args:
        user_id: Account ID, stored in the 'sub' claim
        session_id: Portal session ID, stored in the 'sid' claim
        expires_minutes: Lifetime override (defaults to settings)

    Returns:
        Encoded JWT token
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": str(user_id),
        "sid": session_id,
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (user_id), 'sid' (session_id), 'exp'

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # Validate expiration (jose checks this automatically)
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    if payload.get("sub") is None:
        raise UnauthorizedException("Token missing user identifier")

    if payload.get("sid") is None:
        raise UnauthorizedException("Token missing session identifier")

    return payload


def extract_token_identity(token: str) -> tuple[int, str]:
    """Extract (user_id, session_id) from JWT token"""
    payload = decode_jwt(token)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedException("Token missing user identifier")
    return user_id, str(payload["sid"])
