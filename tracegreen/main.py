import logging

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from tracegreen.db.base import get_db
from tracegreen.core.config import settings
from tracegreen.core.logging import configure_logging
from tracegreen.routers import factors as factors_router
from tracegreen.routers import profiles as profiles_router
from tracegreen.routers import activities as activities_router
from tracegreen.routers import goals as goals_router
from tracegreen.routers import rewards as rewards_router
from tracegreen.routers import leaderboard as leaderboard_router
from tracegreen.routers import community as community_router
from tracegreen.routers import content as content_router
from tracegreen.routers import admin as admin_router
from tracegreen.core.errors import (
    TraceGreenException,
    tracegreen_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Trace Green API",
    description=(
        "**Personal carbon-footprint tracker**\n\n"
        "Converts everyday activities into kg CO2e with a fixed emission-factor table, "
        "aggregates them per day / week / month and rewards consistent logging "
        "with points, streaks and badges.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(TraceGreenException, tracegreen_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(factors_router.router)
app.include_router(profiles_router.router)
app.include_router(activities_router.router)
app.include_router(goals_router.router)
app.include_router(rewards_router.router)
app.include_router(leaderboard_router.router)
app.include_router(community_router.router)
app.include_router(content_router.router)
app.include_router(admin_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database", exc_info=True)
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
