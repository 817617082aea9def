import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from rsvp_engine.config.database import upgrade_database
from rsvp_engine.config.logging import setup_logging
from rsvp_engine.config.settings import settings
from rsvp_engine.core.ids import ensure_entropy
from rsvp_engine.dashboard.routers import router as dashboard_router
from rsvp_engine.events.routers import router as events_router
from rsvp_engine.invites.routers import router as invites_router
from rsvp_engine.responses.routers import router as responses_router
from rsvp_engine.routers.healthz.router import router as healthz_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Fails startup when the CSPRNG cannot produce ids
    ensure_entropy()
    if settings.RUN_MIGRATIONS_ON_STARTUP and settings.storage_backend == "sql":
        logger.info("Running database migrations")
        await upgrade_database()
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
    title="RSVP Engine API",
    description="Invites, RSVP collection and dashboard analytics for hosted events",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(events_router, tags=["Events"])
app.include_router(invites_router, tags=["Invites"])
app.include_router(responses_router, tags=["RSVPs"])
app.include_router(dashboard_router, tags=["Dashboard"])


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the RSVP Engine API"}
