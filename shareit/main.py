import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from . import models
from .config import settings
from .database import engine
from .exceptions import AccessDeniedError, BadRequestError, NotFoundError, ShareItError
from .routers import booking_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# Setup logger
logger = logging.getLogger("booking_service")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Booking Service starting up...")
    # Creates 'users', 'items' and 'bookings' if they don't exist
    models.Base.metadata.create_all(bind=engine)

    yield  # The application is now running

    logger.info("Booking Service shutting down...")


app = FastAPI(
    title="ShareIt Booking API",
    description="Reserves shared items and manages booking approval.",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(booking_router.router)


# Core errors carry no transport details; the status codes are chosen here.
ERROR_STATUS_CODES = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    AccessDeniedError: status.HTTP_403_FORBIDDEN,
}


@app.exception_handler(ShareItError)
async def handle_shareit_error(request: Request, exc: ShareItError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    logger.warning(
        f"Encountered {type(exc).__name__} while processing request: returning {status_code}"
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.get("/")
def read_root():
    return {"message": "Welcome to the ShareIt Booking Service"}
