import asyncio
import uuid
from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel

from chiso_bookings.core.config_loader import RestaurantConfig, load_restaurant_config
from chiso_bookings.core.errors import BookingValidationError, DayFullError, SlotFullError
from chiso_bookings.core.logger import logger
from chiso_bookings.models.booking import BookingRequest, StoredBooking, parse_booking_date
from chiso_bookings.services import notification_service
from chiso_bookings.services.availability import calculate_available_slots, is_day_full
from chiso_bookings.services.db_service import BookingStore, db_service
from chiso_bookings.services.notification_service import EmailResult


class BookingResult(BaseModel):
    booking: StoredBooking
    email: EmailResult


def generate_confirmation_id() -> str:
    return f"CHISO-{int(datetime.now().timestamp() * 1000)}-{uuid.uuid4().hex[:6]}"


class BookingService:
    """
    Availability and booking creation for every entry point (form endpoint, store endpoint).

    Creation is read-then-write with no lock or conditional write: two concurrent
    requests for the last seat of a slot can both pass the check and both be stored.
    """

    def __init__(self, store: Optional[BookingStore] = None, config: Optional[RestaurantConfig] = None):
        self.store = store or db_service
        self.config = config or load_restaurant_config()

    def validate_date(self, day: Optional[str]) -> str:
        if not day:
            raise BookingValidationError("Date parameter is required")
        try:
            return parse_booking_date(day).isoformat()
        except ValueError as e:
            raise BookingValidationError(str(e))

    def list_bookings(self, day: Optional[str]) -> List[StoredBooking]:
        return self.store.get_bookings_for_date(self.validate_date(day))

    def check_availability(self, day: Optional[str]) -> List[str]:
        """
        Available slots for a date, in catalog order.
        Only the slot cap is applied here; the day cap is enforced at creation.
        """
        bookings = self.list_bookings(day)
        return calculate_available_slots(bookings, self.config.time_slots, self.config.slot_capacity)

    def _validate_request(self, request: BookingRequest) -> None:
        if parse_booking_date(request.date) < date_type.today():
            raise BookingValidationError("Bookings cannot be made for a past date")

        if request.time not in self.config.time_slots:
            slots = ", ".join(self.config.time_slots)
            raise BookingValidationError(f"{request.time} is not a bookable time. Choose one of: {slots}")

        if request.party_size > self.config.max_party_size:
            raise BookingValidationError(
                f"Please enter a valid party size (1-{self.config.max_party_size})"
            )

        prefs = request.preferences
        for field, value in (("pancakeType", prefs.pancake_type), ("eggStyle", prefs.egg_style), ("meat", prefs.meat)):
            options = self.config.options_for(field)
            if value and options and value not in options:
                raise BookingValidationError(f"Invalid {field} '{value}'. Choose one of: {', '.join(options)}")

    def _new_id(self) -> str:
        booking_id = generate_confirmation_id()
        while self.store.booking_exists(booking_id):
            booking_id = generate_confirmation_id()
        return booking_id

    async def send_confirmation(self, booking: StoredBooking) -> EmailResult:
        try:
            return await asyncio.to_thread(notification_service.send_confirmation_email, booking)
        except Exception as e:
            logger.error(f"❌ Confirmation email failed for {booking.id}: {e}")
            return EmailResult(sent=False, error=str(e) or "Failed to send email confirmation")

    async def create_booking(self, request: BookingRequest) -> BookingResult:
        """
        Validate, check capacity (day cap first, then slot cap), store, then e-mail.
        Raises BookingValidationError / DayFullError / SlotFullError before any write.
        An e-mail failure is reported in the result, never raised.
        """
        logger.info(f"📥 Booking Request - Date: {request.date}, Time: {request.time}, Party: {request.party_size}")
        self._validate_request(request)

        existing = self.store.get_bookings_for_date(request.date)
        if is_day_full(existing, self.config.day_capacity):
            logger.warning(f"🚫 Day full: {request.date} already has {len(existing)} bookings")
            raise DayFullError(request.date)

        available = calculate_available_slots(existing, self.config.time_slots, self.config.slot_capacity)
        if request.time not in available:
            logger.warning(f"🚫 Slot full: {request.date} {request.time}")
            raise SlotFullError(request.date, request.time)

        booking = StoredBooking(
            **request.model_dump(),
            id=self._new_id(),
        )
        self.store.save_booking(booking)

        email = await self.send_confirmation(booking)
        if not email.sent:
            logger.warning(f"⚠️ Booking {booking.id} stored but email not sent: {email.error}")

        return BookingResult(booking=booking, email=email)
