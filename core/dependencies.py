from fastapi import Depends
from fastapi.security import APIKeyHeader
from pydantic import BaseModel
from typing import Optional
from core.exceptions import Unauthenticated
from utils.jwt_handler import InvalidToken, decode_access_token
from utils.logger import get_logger

logger = get_logger("Dependencies")

AUTH_HEADER = "x-auth-token"

# tells fastapi to read the token from the x-auth-token header
token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)

class CurrentIdentity(BaseModel):
    id: str
    role: str

async def get_current_identity(token: Optional[str] = Depends(token_header)) -> CurrentIdentity:
    """
    Verify the request token and return the identity it carries.
    Stateless: nothing is looked up in the database here.
    """
    if not token:
        logger.warning("Request rejected: no token")
        raise Unauthenticated("No token, authorization denied")
    try:
        data = decode_access_token(token)
    except InvalidToken:
        logger.warning("Request rejected: invalid token")
        raise Unauthenticated("Token is not valid")
    logger.debug(f"Token accepted for user {data.user_id}")
    return CurrentIdentity(id=data.user_id, role=data.role)
