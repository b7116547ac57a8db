"""FastAPI application entry point."""

import os
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from starlette.exceptions import HTTPException as StarletteHTTPException

# Must run before get_settings() reads the environment
load_dotenv()

from api.routes import auth, health
from api.security import MissingTokenError
from adapter.mongodb.connection import get_mongodb_client, reset_client
from adapter.mongodb.user_repository import MongoUserRepository
from config.settings import get_settings
from domain.model.errors import (
    ConfigurationError,
    DirectoryError,
    InvalidCredentialsError,
    InvalidTokenError,
    RegistrationError,
    ValidationError,
)
from utils.logging import setup_structured_logging

setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = Path(__file__).parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Users Auth API"

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: load settings, connect MongoDB, ensure indexes.

    Any failure aborts startup: the service never runs without its
    signing secret, its directory, or the unique email index.
    """
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.critical("Invalid configuration", extra={"error": str(e)})
        raise

    logging.getLogger().setLevel(settings.log_level)

    client = get_mongodb_client(settings.mongodb_uri)
    if client is None:
        logger.critical("MongoDB unreachable at startup")
        raise DirectoryError("MongoDB unreachable at startup")

    try:
        MongoUserRepository(client[settings.mongodb_database]).ensure_indexes()
    except DirectoryError as e:
        logger.critical("Users indexes not in place", extra={"error": str(e)})
        raise
    logger.info("MongoDB indexes verified/created successfully")

    yield

    reset_client()


app = FastAPI(
    title=SERVICE_NAME,
    description="User registration, login and bearer token verification",
    version=VERSION,
    lifespan=lifespan,
)

cors_origins_env = os.getenv("CORS_ORIGINS", "*")

# Browsers reject credentials with a wildcard origin
if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
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


# ── error handlers ───────────────────────────────────────


def _error(status_code: int, error: str, detail: str | None = None, headers: dict | None = None) -> JSONResponse:
    content = {"error": error}
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, exc.code, exc.detail)


@app.exception_handler(RegistrationError)
async def registration_error_handler(request: Request, exc: RegistrationError):
    return _error(status.HTTP_400_BAD_REQUEST, "cannot register", exc.detail)


@app.exception_handler(InvalidCredentialsError)
async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
    return _error(status.HTTP_401_UNAUTHORIZED, "invalid credentials")


@app.exception_handler(MissingTokenError)
async def missing_token_handler(request: Request, exc: MissingTokenError):
    return _error(status.HTTP_401_UNAUTHORIZED, "missing token", headers=_BEARER_CHALLENGE)


@app.exception_handler(InvalidTokenError)
async def invalid_token_handler(request: Request, exc: InvalidTokenError):
    return _error(status.HTTP_401_UNAUTHORIZED, "invalid token", headers=_BEARER_CHALLENGE)


@app.exception_handler(DirectoryError)
async def directory_error_handler(request: Request, exc: DirectoryError):
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "directory unavailable")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Login failures all share one shape, whatever was wrong with the body
    if request.url.path == "/auth/login":
        return _error(status.HTTP_401_UNAUTHORIZED, "invalid credentials")
    return _error(status.HTTP_400_BAD_REQUEST, "invalid request")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=exc.headers)


app.include_router(auth.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    try:
        port = get_settings().port
    except ConfigurationError as e:
        logger.critical("Invalid configuration", extra={"error": str(e)})
        raise SystemExit(1)
    # Application logs go through the structured logger; uvicorn's access log is redundant
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
