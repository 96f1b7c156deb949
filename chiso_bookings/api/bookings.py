from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from chiso_bookings.core.security import verify_api_key
from chiso_bookings.models.booking import BookingRequest
from chiso_bookings.services.booking_service import BookingResult, BookingService

router = APIRouter()
booking_service = BookingService()


def _created(result: BookingResult) -> JSONResponse:
    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "confirmationId": result.booking.id,
            "data": result.booking.to_record(),
            "emailSent": result.email.sent,
            "emailError": result.email.error,
        },
    )


@router.post("/api/book")
async def submit_booking(req: BookingRequest):
    """Terminal form submission."""
    result = await booking_service.create_booking(req)
    return _created(result)


@router.post("/bookings", dependencies=[Depends(verify_api_key)])
async def create_booking(req: BookingRequest):
    result = await booking_service.create_booking(req)
    return _created(result)


@router.get("/availability")
async def check_availability(date: Optional[str] = None):
    slots = booking_service.check_availability(date)
    return {"success": True, "data": {"availableSlots": slots}}


@router.get("/bookings")
async def get_bookings(date: Optional[str] = None):
    bookings = booking_service.list_bookings(date)
    return {"success": True, "data": [b.to_record() for b in bookings]}
