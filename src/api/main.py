"""FastAPI application entry point."""

import os
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Must run before importing modules that read env vars at import time
load_dotenv()

from api.errors import register_exception_handlers
from api.routes import auth, health
from api.security import get_token_service
from adapter.google.identity_provider import DEFAULT_TIMEOUT_SECONDS, GoogleIdentityProvider
from adapter.mongodb.connection import get_mongodb_client, reset_client, DATABASE_NAME
from adapter.mongodb.indexes import ensure_all_indexes
from utils.logging import setup_structured_logging

setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = Path(__file__).resolve().parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Sign-in API"

GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_CERTS_TIMEOUT_SECONDS = float(os.getenv("GOOGLE_CERTS_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))


def build_identity_provider() -> GoogleIdentityProvider | None:
    if not GOOGLE_CLIENT_ID:
        logger.warning("GOOGLE_CLIENT_ID not configured, Google sign-in disabled")
        return None
    return GoogleIdentityProvider(GOOGLE_CLIENT_ID, timeout=GOOGLE_CERTS_TIMEOUT_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    # Fail fast on missing or malformed token configuration
    get_token_service()

    app.state.identity_provider = build_identity_provider()

    client = get_mongodb_client()
    if client:
        if ensure_all_indexes(client[DATABASE_NAME]):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield

    reset_client()


app = FastAPI(
    title=SERVICE_NAME,
    description="Google and email/password sign-in with JWT access and refresh tokens",
    version=VERSION,
    lifespan=lifespan,
)

# With a wildcard origin, browsers refuse credentialed requests
cors_origins_env = os.getenv("CORS_ORIGINS", "*")
if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(health.router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False  # structured logging already covers requests
    )
