from typing import List, Optional

from chiso_bookings.core.config import settings
from chiso_bookings.core.logger import logger
from chiso_bookings.models.booking import StoredBooking
from chiso_bookings.services.kv_store import create_store

BOOKING_PREFIX = "booking:"
DATE_PREFIX = "date:"


def booking_key(booking_id: str) -> str:
    return f"{BOOKING_PREFIX}{booking_id}"


def date_index_key(date: str, booking_id: str) -> str:
    return f"{DATE_PREFIX}{date}:{booking_id}"


class BookingStore:
    """
    Owns the booking namespace:
      booking:<id>        -> full record
      date:<date>:<id>    -> id (secondary index, listed by prefix)
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(BookingStore, cls).__new__(cls)
            cls._instance.backend = create_store(settings.STORE_PATH)
        return cls._instance

    def use_backend(self, backend) -> None:
        self.backend = backend

    def booking_exists(self, booking_id: str) -> bool:
        return self.backend.exists(booking_key(booking_id))

    def save_booking(self, booking: StoredBooking) -> None:
        """
        Writes the record, then the date index entry.
        Not atomic: a crash in between leaves a record with no index entry.
        """
        self.backend.put(booking_key(booking.id), booking.to_record())
        self.backend.put(date_index_key(booking.date, booking.id), booking.id)
        logger.info(f"✅ Booking {booking.id} stored for {booking.date} {booking.time}")

    def get_booking(self, booking_id: str) -> Optional[StoredBooking]:
        record = self.backend.get(booking_key(booking_id))
        if record is None:
            return None
        return StoredBooking.model_validate(record)

    def get_bookings_for_date(self, date: str) -> List[StoredBooking]:
        """
        Resolves every date:<date>: index entry to its record.
        Index entries pointing at a missing record are skipped.
        """
        bookings = []
        for _key, booking_id in self.backend.list(f"{DATE_PREFIX}{date}:"):
            booking = self.get_booking(booking_id)
            if booking:
                bookings.append(booking)
            else:
                logger.warning(f"⚠️ Dangling date index entry for {booking_id} on {date}")
        return bookings


db_service = BookingStore()
