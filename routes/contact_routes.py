from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from core.authorization import require_admin
from core.exceptions import AppException, ServerError
from models.common import MessageOut
from models.contact import ContactCreate, ContactCreated, ContactOut
from services.contact_service import create_contact, list_contacts, search_contacts, delete_contact
from utils.logger import get_logger

logger = get_logger("Contact_Route")
router = APIRouter(prefix="/api/contact", tags=["Contact"])

# Public: anyone can send a message
@router.post("", response_model=ContactCreated, status_code=status.HTTP_201_CREATED)
async def api_create_contact(contact: ContactCreate):
    try:
        created = await create_contact(contact)
        return {"success": True, "msg": "Your message has been sent successfully!", "contact": created}
    except Exception:
        logger.exception("Contact submission error")
        raise ServerError()

@router.get("", response_model=List[ContactOut], dependencies=[Depends(require_admin)])
async def api_list_contacts():
    try:
        return await list_contacts()
    except Exception:
        logger.exception("Get contacts error")
        raise ServerError()

@router.get("/search", response_model=List[ContactOut], dependencies=[Depends(require_admin)])
async def api_search_contacts(query: Optional[str] = Query(None)):
    try:
        return await search_contacts(query)
    except AppException:
        raise
    except Exception:
        logger.exception("Search contacts error")
        raise ServerError()

@router.delete("/{contact_id}", response_model=MessageOut, dependencies=[Depends(require_admin)])
async def api_delete_contact(contact_id: str):
    try:
        return await delete_contact(contact_id)
    except AppException:
        raise
    except Exception:
        logger.exception("Delete contact error")
        raise ServerError()
