"""Application entry point for the FastAPI backend."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .database import init_db
from .errors import (
    DuplicateHandleError,
    DuplicateRequestError,
    InvalidContentError,
    NoSuchRequestError,
    NotOwnerError,
    PostNotFoundError,
    ProfileAccessDenied,
    SelfRelationshipError,
    SocialGraphError,
    StoreUnavailableError,
    UnknownTargetError,
)
from .routers import auth_router, posts_router, profiles_router, relationships_router

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version

_ERROR_STATUS: dict[type[SocialGraphError], int] = {
    SelfRelationshipError: status.HTTP_400_BAD_REQUEST,
    UnknownTargetError: status.HTTP_404_NOT_FOUND,
    PostNotFoundError: status.HTTP_404_NOT_FOUND,
    NoSuchRequestError: status.HTTP_404_NOT_FOUND,
    DuplicateRequestError: status.HTTP_409_CONFLICT,
    DuplicateHandleError: status.HTTP_409_CONFLICT,
    InvalidContentError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotOwnerError: status.HTTP_403_FORBIDDEN,
    ProfileAccessDenied: status.HTTP_403_FORBIDDEN,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

app = FastAPI(title=APP_NAME, version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(relationships_router)
app.include_router(profiles_router)
app.include_router(posts_router)


def status_for(exc: SocialGraphError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in _ERROR_STATUS:
            return _ERROR_STATUS[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(SocialGraphError)
async def _social_graph_error_handler(request: Request, exc: SocialGraphError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=code, content={"detail": exc.detail})


@app.on_event("startup")
async def _startup() -> None:
    """Ensure the database schema exists before serving."""

    try:
        init_db()
    except Exception:
        logger.exception("Database initialisation failed")
        raise
    logger.info("%s %s ready", APP_NAME, API_VERSION)


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"service": APP_NAME, "version": API_VERSION}
