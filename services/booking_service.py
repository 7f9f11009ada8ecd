from db.db_operation import mongo_conn
from datetime import datetime, timezone
from bson.objectid import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING
from models.booking import BookingCreate
from core.exceptions import NotFound
from utils.search import build_search_filter
from utils.dates import as_utc
from utils.logger import get_logger

logger = get_logger("Booking_Service")

def _serialize(b: dict) -> dict:
    return {
        "id": str(b["_id"]),
        "name": b["name"],
        "email": b["email"],
        "datetime": as_utc(b["datetime"]),
        "people": b["people"],
        "message": b.get("message"),
        "user": str(b["user"]),
        "created_at": as_utc(b.get("created_at"))
    }

async def _find_sorted(query: dict):
    cursor = mongo_conn.bookings_collection.find(query).sort("datetime", ASCENDING)
    return [_serialize(b) for b in await cursor.to_list(None)]

async def create_booking(user_id: str, booking: BookingCreate):
    """Create a booking owned by the logged-in user"""
    doc = booking.model_dump()
    doc.update({
        "user": ObjectId(user_id) if ObjectId.is_valid(user_id) else user_id,
        "created_at": datetime.now(timezone.utc)
    })
    result = await mongo_conn.bookings_collection.insert_one(doc)
    logger.info(f"New booking created by {user_id} with id {result.inserted_id}")
    doc["_id"] = result.inserted_id
    return _serialize(doc)

async def list_bookings():
    bookings = await _find_sorted({})
    logger.info(f"Fetched {len(bookings)} bookings")
    return bookings

async def list_user_bookings(user_id: str):
    """Get all bookings of the logged-in user"""
    owner = ObjectId(user_id) if ObjectId.is_valid(user_id) else user_id
    bookings = await _find_sorted({"user": owner})
    logger.info(f"Fetched {len(bookings)} bookings for user {user_id}")
    return bookings

async def search_bookings(query: str):
    return await _find_sorted(build_search_filter(query, ("name", "email")))

async def delete_booking(booking_id: str):
    try:
        oid = ObjectId(booking_id)
    except (InvalidId, TypeError):
        raise NotFound("Booking not found")
    result = await mongo_conn.bookings_collection.delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise NotFound("Booking not found")
    logger.info(f"Booking {booking_id} deleted")
    return {"msg": "Booking deleted successfully"}
