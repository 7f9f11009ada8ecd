from fastapi import APIRouter, Depends
from models.user import UserCreate, UserOut, UserLogin, TokenOut
from pymongo.errors import PyMongoError
from core.dependencies import CurrentIdentity, get_current_identity
from core.exceptions import AppException, ServerError
from services.user_service import create_user, authenticate_user, get_user_by_id
from utils.logger import get_logger

logger = get_logger("AUTH_ROUTE")

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

@router.post("/register", response_model=TokenOut)
async def register(user: UserCreate):
    logger.info(f"Attempting to register user with email: {user.email}")
    try:
        token = await create_user(user)
        logger.info(f"User created with email: {user.email}")
        return {"token": token}
    except AppException:
        raise
    except PyMongoError as e:
        logger.error(f"Database error during user registration: {e}")
        raise ServerError()
    except Exception as e:
        logger.exception(f"Unexpected error during user registration: {e}")
        raise ServerError()

@router.post("/login", response_model=TokenOut)
async def login(user: UserLogin):
    logger.info(f"Login attempt for: {user.email}")
    try:
        return {"token": await authenticate_user(user)}
    except AppException:
        raise
    except Exception:
        logger.exception("Unexpected error during login")
        raise ServerError()

@router.get("/user", response_model=UserOut)
async def read_current_user(current_user: CurrentIdentity = Depends(get_current_identity)):
    try:
        return await get_user_by_id(current_user.id)
    except AppException:
        raise
    except Exception:
        logger.exception("Error fetching current user")
        raise ServerError()
