from passlib.context import CryptContext
from utils.logger import get_logger
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

logger = get_logger("HASH_UTILS")

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72

def _truncate(password: str) -> bytes:
    return str(password).encode("utf-8")[:BCRYPT_MAX_BYTES]

def hash_password(password: str) -> str:
    logger.debug("Password received for hashing")
    return pwd_context.hash(_truncate(password))

def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(_truncate(plain_password), hashed_password)
