from db.db_operation import mongo_conn
from datetime import datetime, timezone
from bson.objectid import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from models.contact import ContactCreate
from core.exceptions import NotFound
from utils.search import build_search_filter
from utils.dates import as_utc
from utils.logger import get_logger

logger = get_logger("Contact_Service")

def _serialize(c: dict) -> dict:
    return {
        "id": str(c["_id"]),
        "name": c["name"],
        "email": c["email"],
        "subject": c["subject"],
        "message": c["message"],
        "created_at": as_utc(c.get("created_at"))
    }

async def _find_newest_first(query: dict):
    cursor = mongo_conn.contacts_collection.find(query).sort("created_at", DESCENDING)
    return [_serialize(c) for c in await cursor.to_list(None)]

async def create_contact(contact: ContactCreate):
    doc = contact.model_dump()
    doc["created_at"] = datetime.now(timezone.utc)
    result = await mongo_conn.contacts_collection.insert_one(doc)
    logger.info(f"Contact message stored with id {result.inserted_id}")
    doc["_id"] = result.inserted_id
    return _serialize(doc)

async def list_contacts():
    return await _find_newest_first({})

async def search_contacts(query: str):
    return await _find_newest_first(build_search_filter(query, ("name", "email")))

async def delete_contact(contact_id: str):
    try:
        oid = ObjectId(contact_id)
    except (InvalidId, TypeError):
        raise NotFound("Contact not found")
    result = await mongo_conn.contacts_collection.delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise NotFound("Contact not found")
    logger.info(f"Contact {contact_id} deleted")
    return {"msg": "Contact deleted successfully"}
