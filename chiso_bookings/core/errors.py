class BookingError(Exception):
    """Base for user-facing booking rejections. Carries the HTTP status to answer with."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookingValidationError(BookingError):
    pass


class CapacityError(BookingError):
    pass


class DayFullError(CapacityError):
    def __init__(self, date: str):
        super().__init__("No more bookings available for this date")
        self.date = date


class SlotFullError(CapacityError):
    def __init__(self, date: str, time: str):
        super().__init__(f"The {time} slot on {date} is fully booked. Please choose another time.")
        self.date = date
        self.time = time
