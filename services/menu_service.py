from db.db_operation import mongo_conn
from datetime import datetime, timezone
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import UploadFile
from pymongo import DESCENDING, ReturnDocument
from typing import Optional
from core.exceptions import NotFound, ValidationError
from services.storage import save_image, delete_image
from utils.dates import as_utc
from utils.logger import get_logger

logger = get_logger("Menu_Service")

NOT_FOUND = "Menu item not found"

def _serialize(d: dict) -> dict:
    return {
        "id": str(d["_id"]),
        "title": d["title"],
        "short_description": d["short_description"],
        "price": d["price"],
        "type": d["type"],
        "image_path": d["image_path"],
        "created_by": str(d["created_by"]) if d.get("created_by") else None,
        "created_at": as_utc(d.get("created_at"))
    }

def _object_id(item_id: str) -> ObjectId:
    # a malformed id can never match a record
    try:
        return ObjectId(item_id)
    except (InvalidId, TypeError):
        raise NotFound(NOT_FOUND)

def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)

async def create_menu_item(fields: dict, image: Optional[UploadFile], actor_id: str):
    """
    Write the image, then insert the record pointing at it.
    If the insert fails the new file is removed again.
    """
    if not _has_file(image):
        raise ValidationError("Image is required", errors=[{"field": "image", "message": "Image is required"}])

    stored = await save_image(image)
    doc = {
        "title": fields["title"],
        "short_description": fields["short_description"],
        "price": float(fields["price"]),
        "type": fields["type"],
        "image_path": stored.url_path,
        "created_by": ObjectId(actor_id) if ObjectId.is_valid(actor_id) else actor_id,
        "created_at": datetime.now(timezone.utc)
    }
    try:
        result = await mongo_conn.menu_collection.insert_one(doc)
    except Exception:
        logger.exception("DB error creating menu item, removing uploaded image")
        delete_image(stored.url_path)
        raise

    doc["_id"] = result.inserted_id
    logger.info("Menu item created", extra={"actor": actor_id, "item_id": str(result.inserted_id)})
    return _serialize(doc)

async def list_menu_items(menu_type: Optional[str] = None):
    q = {}
    if menu_type:
        q["type"] = menu_type
    cursor = mongo_conn.menu_collection.find(q).sort("created_at", DESCENDING)
    docs = await cursor.to_list(length=None)
    return [_serialize(d) for d in docs]

async def get_menu_item(item_id: str):
    d = await mongo_conn.menu_collection.find_one({"_id": _object_id(item_id)})
    if not d:
        raise NotFound(NOT_FOUND)
    return _serialize(d)

async def update_menu_item(item_id: str, fields: dict, image: Optional[UploadFile] = None, actor_id: str = None):
    """
    Apply only the supplied fields. A new image is written before the record
    is touched and the old file is removed only once the record points at the
    new one.
    """
    oid = _object_id(item_id)
    existing = await mongo_conn.menu_collection.find_one({"_id": oid})
    if not existing:
        raise NotFound(NOT_FOUND)

    update_doc = {k: v for k, v in fields.items() if v is not None}
    if "price" in update_doc:
        update_doc["price"] = float(update_doc["price"])

    stored = None
    if _has_file(image):
        stored = await save_image(image)
        update_doc["image_path"] = stored.url_path

    if not update_doc:
        return _serialize(existing)

    try:
        updated = await mongo_conn.menu_collection.find_one_and_update(
            {"_id": oid},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER
        )
    except Exception:
        logger.exception("DB error updating menu item")
        if stored:
            delete_image(stored.url_path)
        raise

    if not updated:
        # removed by a concurrent delete between the read and the write
        if stored:
            delete_image(stored.url_path)
        raise NotFound(NOT_FOUND)

    old_path = existing.get("image_path")
    if stored and old_path and old_path != stored.url_path:
        delete_image(old_path)

    logger.info("Menu item updated", extra={"actor": actor_id, "item_id": item_id, "fields": sorted(update_doc)})
    return _serialize(updated)

async def delete_menu_item(item_id: str, actor_id: str = None):
    oid = _object_id(item_id)
    existing = await mongo_conn.menu_collection.find_one({"_id": oid})
    if not existing:
        raise NotFound(NOT_FOUND)

    delete_image(existing.get("image_path"))

    result = await mongo_conn.menu_collection.delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise NotFound(NOT_FOUND)
    logger.info("Menu item deleted", extra={"actor": actor_id, "item_id": item_id})
    return {"msg": "Menu item deleted"}
