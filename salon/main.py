# salon/main.py

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from .db import engine, init_db
from .deps import get_notifiers
from .errors import BookingError, StoreUnavailable
from .reminders import reminder_loop
from .routers.admin_routes import router as admin_router
from .routers.auth_routes import router as auth_router
from .routers.public_routes import router as public_router
from .routers.telegram_routes import router as telegram_router
from .settings import REMINDER_INTERVAL_SECONDS, configure_logging

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()

    reminder_task = None
    if REMINDER_INTERVAL_SECONDS > 0:
        reminder_task = asyncio.create_task(
            reminder_loop(engine, get_notifiers(), REMINDER_INTERVAL_SECONDS)
        )
        logger.info(f"Reminder loop every {REMINDER_INTERVAL_SECONDS}s")

    yield

    if reminder_task is not None:
        reminder_task.cancel()
        with suppress(asyncio.CancelledError):
            await reminder_task
    logger.info("Application shutting down...")


app = FastAPI(title="Salon Booking API", lifespan=lifespan)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


@app.exception_handler(OperationalError)
async def store_error_handler(request: Request, exc: OperationalError):
    logger.error(f"Datastore failure on {request.url.path}: {exc}")
    err = StoreUnavailable()
    return JSONResponse(
        status_code=err.status_code,
        content={"detail": err.message, "kind": err.kind},
    )


app.include_router(public_router)
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(telegram_router)
