# barberbook/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from barberbook import notifications
from barberbook.config import LOG_LEVEL
from barberbook.db import init_db
from barberbook.errors import BookingError, TransientInfrastructureError
from barberbook.logging_config import setup_logging
from barberbook.routers import appointments_routes, auth_routes, barbers_routes, public_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL)
    init_db()
    yield
    notifications.shutdown()


app = FastAPI(title="BarberBook", lifespan=lifespan)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    # same body shape as HTTPException
    if isinstance(exc, TransientInfrastructureError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(auth_routes.router)
app.include_router(public_routes.router)
app.include_router(appointments_routes.router)
app.include_router(barbers_routes.router)
