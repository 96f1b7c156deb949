from collections import Counter
from typing import Dict, Iterable, List, Sequence

from chiso_bookings.models.booking import StoredBooking


def count_bookings_per_slot(bookings: Iterable[StoredBooking]) -> Dict[str, int]:
    return dict(Counter(booking.time for booking in bookings))


def calculate_available_slots(
    bookings: Sequence[StoredBooking],
    time_slots: Sequence[str],
    slot_capacity: int = 2,
) -> List[str]:
    """
    Returns the catalog slots holding fewer than slot_capacity bookings, in catalog order.
    Bookings at times outside the catalog are ignored.
    """
    per_slot = count_bookings_per_slot(bookings)
    return [slot for slot in time_slots if per_slot.get(slot, 0) < slot_capacity]


def is_day_full(bookings: Sequence[StoredBooking], day_capacity: int = 8) -> bool:
    return len(bookings) >= day_capacity
