# scripts/seed_admin.py
# run from the project root: python -m scripts.seed_admin
import asyncio
from datetime import datetime, timezone
from db.db_operation import mongo_conn, create_indexes
from settings.config import settings
from utils.hash import hash_password
from utils.logger import get_logger

logger = get_logger("Seed_Admin")

async def seed(email: str = None, password: str = None, name: str = None):
    """
    Create the admin account, or promote an existing user with that email.
    Safe to run more than once.
    """
    email = (email or settings.ADMIN_EMAIL or "").lower()
    password = password or settings.ADMIN_PASSWORD
    name = name or settings.ADMIN_NAME
    if not email or not password:
        raise ValueError("ADMIN_EMAIL and ADMIN_PASSWORD must be set")

    await create_indexes()
    users = mongo_conn.users_collection
    existing = await users.find_one({"email": email})
    if existing:
        if existing.get("role") != "admin":
            await users.update_one({"_id": existing["_id"]}, {"$set": {"role": "admin"}})
            logger.info(f"Promoted existing user to admin: {email}")
        else:
            logger.info(f"Admin already exists: {email}")
        return existing["_id"]

    result = await users.insert_one({
        "name": name,
        "email": email,
        "password": hash_password(password),
        "role": "admin",
        "created_at": datetime.now(timezone.utc)
    })
    logger.info(f"Created admin: {email} {result.inserted_id}")
    return result.inserted_id

async def main():
    await mongo_conn.connect()
    await seed()

if __name__ == "__main__":
    asyncio.run(main())
