import asyncio
import logging
from contextlib import asynccontextmanager

import sentry_sdk
from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.config.logging import setup_logging
from src.config.settings import settings
from src.guestlist.errors import GuestListError
from src.guestlist.http_errors import http_error
from src.guestlist.routers import router as guestlist_router
from src.routers.healthz.router import router as healthz_router

logger = logging.getLogger(__name__)


async def run_migrations():
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.attributes["configure_logger"] = False
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        logger.info("Running migrations on startup")
        await run_migrations()
    logger.info("Guest List API started (%s)", settings.ENVIRONMENT)
    yield


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Guest List API",
    description="API for managing event guest lists, promoters and guest confirmations",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GuestListError)
async def guest_list_error_handler(request: Request, exc: GuestListError) -> JSONResponse:
    error = http_error(exc)
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(guestlist_router)


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the Guest List API"}
