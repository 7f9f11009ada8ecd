from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from pydantic import BaseModel
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("JWT_HANDLER")


class InvalidToken(Exception):
    """Raised for any token that cannot be trusted, whatever the reason."""


class TokenData(BaseModel):
    user_id: str
    role: str


def create_access_token(user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a signed JWT carrying the user id and role.
    Expires after ACCESS_TOKEN_EXPIRE_MINUTES unless expires_delta is given.
    """
    logger.info("Access token creation requested")
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = now + expires_delta
    to_encode = {"sub": str(user_id), "role": role, "iat": now, "exp": expire}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    logger.info(f"Access token created successfully with expiry {expire}")
    return encoded_jwt


def decode_access_token(token: Optional[str]) -> TokenData:
    """
    Decode JWT token and return its identity.
    Raises InvalidToken if missing, malformed, expired or signed with another key.
    """
    if not token:
        raise InvalidToken("Token missing")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        raise InvalidToken("Invalid token")

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not role:
        raise InvalidToken("Invalid token")
    return TokenData(user_id=user_id, role=role)
