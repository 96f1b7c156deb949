import re
from datetime import date as date_type, datetime, timezone
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
LEGACY_TIME_RE = re.compile(r"^(1[0-2]|0?[1-9]):([0-5][0-9])\s*([AaPp][Mm])$")


def parse_booking_date(value: str) -> date_type:
    """
    Parses a YYYY-MM-DD calendar date.
    Raises ValueError for anything else (including impossible dates like 2025-02-30).
    """
    value = (value or "").strip()
    if not DATE_RE.match(value):
        raise ValueError("Please enter a valid date (YYYY-MM-DD)")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError("Please enter a valid date (YYYY-MM-DD)")


def normalize_time(value: str) -> str:
    """
    Normalizes '9:00', '09:00' and the legacy '9:00 AM' form to the 24h catalog form 'H:MM'.
    """
    value = (value or "").strip()
    match = TIME_RE.match(value)
    if match:
        return f"{int(match.group(1))}:{match.group(2)}"

    match = LEGACY_TIME_RE.match(value)
    if match:
        hour = int(match.group(1)) % 12
        if match.group(3).lower() == "pm":
            hour += 12
        return f"{hour}:{match.group(2)}"

    raise ValueError("Please enter a valid time (HH:MM)")


class Preferences(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    pancake_type: str = ""
    egg_style: str = ""
    sides: List[str] = Field(default_factory=list)
    meat: str = ""
    additions: List[str] = Field(default_factory=list)


class BookingRequest(BaseModel):
    """Booking payload as submitted by the terminal form or a forwarder."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    email: str
    date: str
    time: str
    party_size: int = Field(
        validation_alias=AliasChoices("partySize", "guests", "party_size"),
        serialization_alias="partySize",
        ge=1,
    )
    preferences: Preferences = Field(default_factory=Preferences)

    @field_validator("name")
    @classmethod
    def name_has_two_chars(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters long")
        return v

    @field_validator("email")
    @classmethod
    def email_is_valid(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_RE.match(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("date")
    @classmethod
    def date_is_calendar_date(cls, v: str) -> str:
        return parse_booking_date(v).isoformat()

    @field_validator("time")
    @classmethod
    def time_is_hh_mm(cls, v: str) -> str:
        return normalize_time(v)


class StoredBooking(BookingRequest):
    """Confirmation record: the booking plus its generated id and creation timestamp."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
