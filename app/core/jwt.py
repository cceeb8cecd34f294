from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


def create_access_token(
    data: dict,
    secret: str,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: The claims to encode in the token ("sub" holds the user id)
        secret: HS256 signing secret
        expires_delta: Optional expiration time delta. Defaults to 1 hour.
        now: Issue time, defaults to the current UTC time

    Returns:
        The encoded JWT token
    """
    to_encode = data.copy()
    issued = now or datetime.now(tz=timezone.utc)
    expire = issued + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": issued})
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_access_token(token: str, secret: str) -> Optional[dict]:
    """
    Verify and decode a JWT access token.

    Args:
        token: The JWT token to verify
        secret: HS256 signing secret

    Returns:
        The decoded token data if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
