import pytest
from pydantic import ValidationError
from unittest.mock import patch

from chiso_bookings.core.config import settings
from chiso_bookings.core.config_loader import MEAL_PERIODS, load_restaurant_config


def test_catalog_seed_values():
    config = load_restaurant_config()
    assert config.time_slots == ("9:00", "10:00", "11:00", "12:00", "13:00")
    assert config.day_capacity == 8
    assert config.slot_capacity == 2
    assert set(config.menus) == set(MEAL_PERIODS)
    assert config.options_for("eggStyle") == ("scrambled", "sunny-side-up", "over-easy", "none")


def test_catalog_is_immutable():
    config = load_restaurant_config()
    with pytest.raises(ValidationError):
        config.day_capacity = 100

    menu = config.menu_for("lunch")
    menu["Salads"].clear()
    assert len(config.menu_for("lunch")["Salads"]) == 2


def test_unknown_menu():
    assert load_restaurant_config().menu_for("brunch") is None


def test_missing_config_file(tmp_path):
    load_restaurant_config.cache_clear()
    try:
        with patch.object(settings, "RESTAURANT_CONFIG_PATH", str(tmp_path / "missing.json")):
            with pytest.raises(FileNotFoundError):
                load_restaurant_config()
    finally:
        load_restaurant_config.cache_clear()


def test_invalid_config_file(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    load_restaurant_config.cache_clear()
    try:
        with patch.object(settings, "RESTAURANT_CONFIG_PATH", str(bad)):
            with pytest.raises(ValueError):
                load_restaurant_config()
    finally:
        load_restaurant_config.cache_clear()
