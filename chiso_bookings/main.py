from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from chiso_bookings.core.config import settings
from chiso_bookings.core.config_loader import load_restaurant_config
from chiso_bookings.core.errors import BookingError
from chiso_bookings.api import bookings, menu
from chiso_bookings.core.logger import setup_logging, logger
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-API-Key",
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    config = load_restaurant_config()
    logger.info(f"🚀 Starting {config.restaurant_name} booking API")
    yield
    logger.info("🛑 Shutting down booking API")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan
)

@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})

@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    return _error(exc.status_code, exc.message)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    if first.get("type") == "missing":
        message = f"Missing required field: {field}"
    else:
        message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
        if field:
            message = f"{field}: {message}"
    logger.info(f"🙅 Rejected request to {request.url.path}: {message}")
    return _error(400, message)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))

# Global Exception Handler (runs outside the CORS middleware, so headers are set here)
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc) or "Internal server error"},
        headers=CORS_HEADERS,
    )

app.include_router(bookings.router, tags=["Bookings"])
app.include_router(menu.router, tags=["Menu"])

@app.get("/")
async def root():
    return {
        "success": True,
        "message": f"Welcome to {load_restaurant_config().restaurant_name} Terminal Booking System v1.0.0",
        "endpoints": [
            "/availability?date=YYYY-MM-DD",
            "/bookings?date=YYYY-MM-DD",
            "/api/book",
            "/api/menu?type=breakfast|lunch|dinner",
        ],
    }

@app.get("/health")
async def health_check():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chiso_bookings.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
