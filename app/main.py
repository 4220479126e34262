from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.routers import auth as auth_router
from app.routers import profile as profile_router
from app.routers import tasks as tasks_router
from app.routers import events as events_router
from app.routers import integrations as integrations_router
from app.routers import habits as habits_router
from app.routers import reminders as reminders_router
from app.routers import nudges as nudges_router
from app.routers import dashboard as dashboard_router
from app.routers import diagnostics as diagnostics_router
from app.services.diagnostics import ping
from app.core.errors import (
    ClearDayException,
    clearday_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging()

app = FastAPI(
    title="ClearDay API",
    description=(
        "**ClearDay**: tasks, calendar events, habits, reminders and eco nudges "
        "for one calm view of your day.\n\n"
        "Authenticate with `Authorization: Bearer <token>` from `/auth/login`.\n\n"
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
app.add_exception_handler(ClearDayException, clearday_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(auth_router.router)
app.include_router(profile_router.router)
app.include_router(tasks_router.router)
app.include_router(events_router.router)
app.include_router(integrations_router.router)
app.include_router(habits_router.router)
app.include_router(reminders_router.router)
app.include_router(nudges_router.router)
app.include_router(dashboard_router.router)
app.include_router(diagnostics_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    Used by Railway / Render for liveness probes.
    """
    if not ping(db):
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": "unreachable"},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
