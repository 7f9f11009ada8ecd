from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("DB_OPERATION")

async def create_indexes():
    await mongo_conn.users_collection.create_index("email", unique=True)
    await mongo_conn.menu_collection.create_index([("created_at", DESCENDING)])
    await mongo_conn.menu_collection.create_index("type")
    await mongo_conn.bookings_collection.create_index([("datetime", ASCENDING)])
    await mongo_conn.bookings_collection.create_index("user")
    await mongo_conn.contacts_collection.create_index([("created_at", DESCENDING)])
    logger.info("Indexes created")

class MongoConnection:
    def __init__(self):
        logger.info("Initializing MongoDB Connection")
        self.bind(AsyncIOMotorClient(settings.MONGO_URI, tz_aware=True))

    def bind(self, client, db_name: str = None):
        """Point every collection handle at the given client's database."""
        self.client = client
        self.db = self.client[db_name or settings.DB_NAME]
        self.users_collection = self.db["users"]
        self.menu_collection = self.db["menus"]
        self.bookings_collection = self.db["bookings"]
        self.contacts_collection = self.db["contacts"]

    async def connect(self):
        try:
            # Force an actual connection & authentication check
            await self.db.command("ping")
            logger.info("Successfully connected to MongoDB and authenticated.")
            logger.info(f"Using Database: {self.db.name}")
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise e

# Create the instance
mongo_conn = MongoConnection()
