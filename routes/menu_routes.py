from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from typing import List, Optional
from core.authorization import require_admin
from core.dependencies import CurrentIdentity
from core.exceptions import AppException, ServerError, ValidationError
from models.common import MessageOut
from models.menu import MenuItemOut, MenuType
from services.menu_service import create_menu_item, list_menu_items, get_menu_item, update_menu_item, delete_menu_item
from utils.logger import get_logger

logger = get_logger("Menu_Route")
router = APIRouter(prefix="/api/menu", tags=["Menu"])

TITLE_MIN = 3
DESCRIPTION_MIN = 10

def _trimmed(value: str, field: str, min_length: int) -> str:
    # lengths are checked on the trimmed text, so padding cannot satisfy them
    value = value.strip()
    if len(value) < min_length:
        message = f"{field} must be at least {min_length} characters"
        raise ValidationError(message, errors=[{"field": field, "message": message}])
    return value

# Public: list menu items, newest first
@router.get("", response_model=List[MenuItemOut])
async def api_list_menu(type: Optional[MenuType] = Query(None)):
    try:
        return await list_menu_items(type.value if type else None)
    except AppException:
        raise
    except Exception:
        logger.exception("Error listing menu")
        raise ServerError()

@router.get("/{item_id}", response_model=MenuItemOut)
async def api_get_menu_item(item_id: str):
    try:
        return await get_menu_item(item_id)
    except AppException:
        raise
    except Exception:
        logger.exception("Error fetching menu item")
        raise ServerError()

# Admin: create item with its image
@router.post("", response_model=MenuItemOut, status_code=status.HTTP_201_CREATED)
async def api_create_menu_item(
    title: str = Form(...),
    short_description: str = Form(..., alias="shortDescription"),
    price: float = Form(..., ge=0),
    type: MenuType = Form(...),
    image: Optional[UploadFile] = File(None),
    current_user: CurrentIdentity = Depends(require_admin)
):
    fields = {
        "title": _trimmed(title, "title", TITLE_MIN),
        "short_description": _trimmed(short_description, "shortDescription", DESCRIPTION_MIN),
        "price": price,
        "type": type.value
    }
    try:
        return await create_menu_item(fields, image, actor_id=current_user.id)
    except AppException:
        raise
    except Exception:
        logger.exception("Error creating menu item")
        raise ServerError()

@router.put("/{item_id}", response_model=MenuItemOut)
async def api_update_menu_item(
    item_id: str,
    title: Optional[str] = Form(None),
    short_description: Optional[str] = Form(None, alias="shortDescription"),
    price: Optional[float] = Form(None, ge=0),
    type: Optional[MenuType] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: CurrentIdentity = Depends(require_admin)
):
    fields = {
        "title": _trimmed(title, "title", TITLE_MIN) if title is not None else None,
        "short_description": _trimmed(short_description, "shortDescription", DESCRIPTION_MIN) if short_description is not None else None,
        "price": price,
        "type": type.value if type else None
    }
    try:
        return await update_menu_item(item_id, fields, image, actor_id=current_user.id)
    except AppException:
        raise
    except Exception:
        logger.exception("Error updating menu item")
        raise ServerError()

@router.delete("/{item_id}", response_model=MessageOut)
async def api_delete_menu_item(item_id: str, current_user: CurrentIdentity = Depends(require_admin)):
    try:
        return await delete_menu_item(item_id, actor_id=current_user.id)
    except AppException:
        raise
    except Exception:
        logger.exception("Error deleting menu item")
        raise ServerError()
