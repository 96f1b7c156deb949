from fastapi import APIRouter
from fastapi.responses import JSONResponse

from chiso_bookings.core.config_loader import load_restaurant_config

router = APIRouter()


@router.get("/api/menu")
async def get_menu(type: str = "breakfast"):
    menu = load_restaurant_config().menu_for(type)
    if menu is None:
        return JSONResponse(status_code=400, content={"success": False, "error": "Invalid menu type"})
    return menu
