# core/authorization.py
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends
from core.dependencies import CurrentIdentity, get_current_identity
from core.exceptions import Forbidden
from db.db_operation import mongo_conn
from utils.logger import get_logger

logger = get_logger("Authorization")

def require_role(*allowed_roles):
    """
    Runs after the token check and loads the user on every call,
    so a role change in the database takes effect immediately.
    """
    async def _dependency(identity: CurrentIdentity = Depends(get_current_identity)):
        try:
            oid = ObjectId(identity.id)
        except (InvalidId, TypeError):
            logger.warning(f"Forbidden: malformed user id {identity.id}")
            raise Forbidden()
        user = await mongo_conn.users_collection.find_one({"_id": oid}, {"password": 0})
        if not user or user.get("role") not in allowed_roles:
            logger.warning(f"Forbidden: user {identity.id} not in allowed roles {allowed_roles}")
            raise Forbidden()
        return identity
    return _dependency

require_admin = require_role("admin")
