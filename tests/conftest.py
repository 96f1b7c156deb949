from datetime import date, timedelta

import pytest

from chiso_bookings.services.db_service import db_service
from chiso_bookings.services.kv_store import MemoryKeyValueStore


@pytest.fixture(autouse=True)
def fresh_store():
    # Every test starts from an empty booking namespace
    db_service.use_backend(MemoryKeyValueStore())
    yield db_service


@pytest.fixture
def future_day():
    return (date.today() + timedelta(days=30)).isoformat()


def booking_payload(day: str, time: str = "09:00", **overrides) -> dict:
    payload = {
        "name": "Ada Obi",
        "email": "ada@example.com",
        "date": day,
        "time": time,
        "partySize": 2,
        "preferences": {
            "pancakeType": "buttermilk",
            "eggStyle": "scrambled",
            "sides": ["fruit"],
            "meat": "bacon",
            "additions": [],
        },
    }
    payload.update(overrides)
    return payload
