from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from core.authorization import require_admin
from core.dependencies import CurrentIdentity, get_current_identity
from core.exceptions import AppException, ServerError
from models.booking import BookingCreate, BookingCreated, BookingOut
from models.common import MessageOut
from services.booking_service import create_booking, list_bookings, list_user_bookings, search_bookings, delete_booking
from utils.logger import get_logger

logger = get_logger("Booking_Route")
router = APIRouter(prefix="/api/booking", tags=["Booking"])

@router.post("", response_model=BookingCreated, status_code=status.HTTP_201_CREATED)
async def api_create_booking(booking: BookingCreate, current_user: CurrentIdentity = Depends(get_current_identity)):
    try:
        created = await create_booking(current_user.id, booking)
        return {"success": True, "msg": "Your booking has been confirmed!", "booking": created}
    except AppException:
        raise
    except Exception:
        logger.exception("Booking submission error")
        raise ServerError()

@router.get("", response_model=List[BookingOut], dependencies=[Depends(require_admin)])
async def api_list_bookings():
    try:
        return await list_bookings()
    except Exception:
        logger.exception("Get bookings error")
        raise ServerError()

@router.get("/user", response_model=List[BookingOut])
async def api_my_bookings(current_user: CurrentIdentity = Depends(get_current_identity)):
    try:
        return await list_user_bookings(current_user.id)
    except Exception:
        logger.exception("Get user bookings error")
        raise ServerError()

@router.get("/search", response_model=List[BookingOut], dependencies=[Depends(require_admin)])
async def api_search_bookings(query: Optional[str] = Query(None)):
    try:
        return await search_bookings(query)
    except AppException:
        raise
    except Exception:
        logger.exception("Search bookings error")
        raise ServerError()

@router.delete("/{booking_id}", response_model=MessageOut, dependencies=[Depends(require_admin)])
async def api_delete_booking(booking_id: str):
    try:
        return await delete_booking(booking_id)
    except AppException:
        raise
    except Exception:
        logger.exception("Delete booking error")
        raise ServerError()
