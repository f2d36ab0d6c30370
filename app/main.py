import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.config import get_settings
from app.routers import auth, rooms, bookings
from app.db import init_database
from app.utils.errors import BookingServiceError, InternalError

logging.basicConfig(level=get_settings().LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for initing database"
    init_database()
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Meeting room booker",
    description="Meeting room booking with room memberships, conflict-free bookings and participants.",
    version="1.0.0",
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
)


@app.exception_handler(BookingServiceError)
async def booking_service_error_handler(_: Request, exc: BookingServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError):
    errors = exc.errors()
    # Only log at debug, payloads may contain passwords
    logger.debug(f"Validation error: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            {
                "detail": errors[0]["msg"] if errors else "Invalid request",
                "kind": "ValidationError",
                "errors": errors,
            }
        ),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(_: Request, exc: SQLAlchemyError):
    logger.error("Database error", exc_info=exc)
    error = InternalError("Internal server error")
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.message, "kind": error.kind},
    )


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(rooms.router)
app.include_router(bookings.router)
