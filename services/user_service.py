from db.db_operation import mongo_conn
from utils.hash import hash_password, verify_password
from utils.jwt_handler import create_access_token
from models.user import UserCreate, UserLogin
from bson.objectid import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError
from core.exceptions import NotFound, ValidationError
from utils.dates import as_utc
from utils.logger import get_logger
from datetime import datetime, timezone


logger = get_logger("USER_SERVICE")

DEFAULT_ROLE = "guest"

def _public(user: dict) -> dict:
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "email": user["email"],
        "role": user.get("role", DEFAULT_ROLE),
        "created_at": as_utc(user.get("created_at"))
    }

async def create_user(user: UserCreate) -> str:
    """Insert a guest user and return a token for it."""
    logger.info(f"User create request received for email: {user.email}")
    users_collection = mongo_conn.users_collection
    if await users_collection.find_one({"email": user.email}):
        raise ValidationError("User already exists", errors=[{"field": "email", "message": "User already exists"}])

    user_dict = {
        "name": user.name,
        "email": user.email,
        "password": hash_password(user.password),
        "role": DEFAULT_ROLE,
        "created_at": datetime.now(timezone.utc)
    }
    try:
        result = await users_collection.insert_one(user_dict)
    except DuplicateKeyError:
        # lost a race against another registration for the same email
        raise ValidationError("User already exists", errors=[{"field": "email", "message": "User already exists"}])
    logger.info(f"User inserted into database with id: {result.inserted_id}")
    return create_access_token(str(result.inserted_id), DEFAULT_ROLE)

async def authenticate_user(credentials: UserLogin) -> str:
    """Check credentials and return a token. Unknown email and wrong password look the same."""
    db_user = await mongo_conn.users_collection.find_one({"email": credentials.email})
    if not db_user:
        logger.warning(f"Login failed: user not found {credentials.email}")
        raise ValidationError("Invalid credentials")
    if not verify_password(credentials.password, db_user.get("password")):
        logger.warning(f"Login failed: wrong password {credentials.email}")
        raise ValidationError("Invalid credentials")
    logger.info(f"Login successful: {credentials.email}")
    return create_access_token(str(db_user["_id"]), db_user.get("role", DEFAULT_ROLE))

async def get_user_by_id(user_id: str) -> dict:
    try:
        oid = ObjectId(user_id)
    except (InvalidId, TypeError):
        raise NotFound("User not found")
    user = await mongo_conn.users_collection.find_one({"_id": oid}, {"password": 0})
    if not user:
        raise NotFound("User not found")
    return _public(user)
