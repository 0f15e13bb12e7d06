"""FastAPI application entrypoint. No business logic; only wiring, startup and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from accessgate.api.v1 import router as v1_router
from accessgate.core.config import settings
from accessgate.core.database import SessionLocal
from accessgate.services.bootstrap import run_bootstrap
from accessgate.services.store import CredentialStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Run the role bootstrap to completion before serving any request."""
    db = SessionLocal()
    try:
        roles_created, users_created = run_bootstrap(CredentialStore(db), settings)
        logger.info(
            "Startup bootstrap: roles_created=%s, users_created=%s",
            roles_created,
            users_created,
        )
    finally:
        db.close()
    yield


app = FastAPI(
    title="Accessgate API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Accessgate API"}
