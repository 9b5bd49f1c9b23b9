import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skillshare.core.config import settings
from skillshare.core.errors import StoreError, StoreErrorKind, client_message_for, status_code_for
from skillshare.api.auth import router as auth_router
from skillshare.api.users import router as users_router
from skillshare.api.admin import router as admin_router
from skillshare.api.moderator import router as moderator_router
from skillshare.api.sessions import router as sessions_router
from skillshare.api.feedback import router as feedback_router
from skillshare.api.notifications import router as notifications_router
from skillshare.services.reminders.scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

scheduler = ReminderScheduler()
_scheduler_task = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _scheduler_task
    # Startup
    _scheduler_task = asyncio.create_task(scheduler.start())
    yield
    # Shutdown - stop and wait
    scheduler.stop()
    if _scheduler_task:
        try:
            await asyncio.wait_for(_scheduler_task, timeout=10)
        except asyncio.TimeoutError:
            logger.warning("Reminder scheduler did not complete in time")


app = FastAPI(
    title=settings.app_name,
    description="Skill-sharing platform API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    if exc.kind is StoreErrorKind.DATABASE:
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code_for(exc), content={"detail": client_message_for(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": errors},
    )


# Include routers
app.include_router(auth_router)
app.include_router(users_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(moderator_router, prefix="/api")
app.include_router(sessions_router, prefix="/api")
app.include_router(feedback_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, Any]:
    return {
        "status": "healthy",
        "version": "0.1.0",
        "environment": settings.environment,
    }
