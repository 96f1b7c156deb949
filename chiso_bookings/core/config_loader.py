import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from chiso_bookings.core.config import settings

logger = logging.getLogger("chiso_bookings")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data" / "restaurant_config.json"

MEAL_PERIODS = ("breakfast", "lunch", "dinner")


class MenuItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    price: str
    description: str


class RestaurantConfig(BaseModel):
    """
    Immutable restaurant catalog: slot list, capacity caps, menus and the
    valid choices for each meal preference.
    """
    model_config = ConfigDict(frozen=True)

    restaurant_name: str
    time_slots: Tuple[str, ...]
    day_capacity: int = 8
    slot_capacity: int = 2
    max_party_size: int = 10
    preference_options: Dict[str, Tuple[str, ...]] = {}
    menus: Dict[str, Dict[str, Tuple[MenuItem, ...]]] = {}

    def menu_for(self, meal_type: str) -> Optional[Dict[str, List[dict]]]:
        """
        Returns a plain copy of the menu for a meal period (breakfast/lunch/dinner)
        or None if the key is unknown.
        """
        menu = self.menus.get(meal_type)
        if menu is None:
            return None
        return {
            category: [item.model_dump() for item in items]
            for category, items in menu.items()
        }

    def options_for(self, preference: str) -> Tuple[str, ...]:
        return self.preference_options.get(preference, ())


def _config_path() -> Path:
    if settings.RESTAURANT_CONFIG_PATH:
        return Path(settings.RESTAURANT_CONFIG_PATH)
    return DEFAULT_CONFIG_PATH


@lru_cache(maxsize=1)
def load_restaurant_config() -> RestaurantConfig:
    """
    Loads the restaurant catalog from JSON once per process.
    Raises FileNotFoundError if the file is missing, ValueError if it is not valid.
    """
    path = _config_path()
    if not path.exists():
        logger.critical(f"❌ Restaurant config '{path}' not found! The API cannot start.")
        raise FileNotFoundError(f"Configuration file not found at {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        logger.critical(f"❌ Failed to parse restaurant config JSON: {e}")
        raise ValueError(f"Invalid JSON in config file: {e}")

    try:
        config = RestaurantConfig.model_validate(raw)
    except ValidationError as e:
        logger.critical(f"❌ Restaurant config has an invalid shape: {e}")
        raise ValueError(f"Invalid restaurant config: {e}")

    logger.info(f"✅ Config loaded for: {config.restaurant_name} ({len(config.time_slots)} slots)")
    return config
