# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from barbershop.config import get_settings
from barbershop.db import init_db
from barbershop.errors import SchedulingError
from barbershop.logging_setup import setup_logging
from barbershop.routers import (
    appointments_routes,
    barbers_routes,
    notifications_routes,
    services_routes,
    users_routes,
)

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path,
                    type(exc).__name__, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(users_routes.router)
app.include_router(barbers_routes.router)
app.include_router(services_routes.router)
app.include_router(appointments_routes.router)
app.include_router(notifications_routes.router)
