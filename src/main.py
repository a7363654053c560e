import asyncio
import logging
from contextlib import asynccontextmanager

import sentry_sdk
from alembic import command
from alembic.config import Config
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.config.database import engine
from src.config.logging import setup_logging
from src.config.settings import settings
from src.routers.healthz.router import router as healthz_router
from src.rsvps.exception_handlers import register_exception_handlers
from src.rsvps.routers import router as rsvps_router

setup_logging()

logger = logging.getLogger(__name__)


async def run_migrations():
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.attributes["configure_logger"] = False
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        logger.info("Running database migrations")
        await run_migrations()
    logger.info("RSVP API started for %s (%s)", settings.couple_names, settings.ENVIRONMENT)
    yield
    await engine.dispose()


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
    title="Wedding RSVP API",
    description="API for capacity-aware wedding RSVPs and guest category management",
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

register_exception_handlers(app)

# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(rsvps_router)


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the Wedding RSVP API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.app_host, port=settings.app_port)
