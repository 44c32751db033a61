"""FastAPI application entry point."""

import logging
import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import auth_router, calendar_router, health_router, view_router
from core.config import (
    API_DEBUG,
    API_VERSION,
    AUTH_COOKIE_NAME,
    CLIENT_ID,
    COOKIE_SECURE,
    LOG_LEVEL,
    SESSION_MAX_AGE,
    SESSION_SECRET,
)
from core.database import init_db
from core.session import read_auth_cookie

logger = logging.getLogger(__name__)

STATUS_CODES = {401: ErrorCodes.UNAUTHORIZED, 404: ErrorCodes.NOT_FOUND}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    # Startup: linking cannot work without an app registration
    if not CLIENT_ID:
        warnings.warn("CLIENT_ID is not set; Microsoft sign-in will fail")

    logger.info("Teams Calendar Link API %s started", API_VERSION)
    yield


app = FastAPI(
    title="Teams Calendar Link API",
    description="Link a Microsoft account and browse, sync and edit its Outlook calendar and Teams meetings",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)


# Restore a lost session from the signed auth cookie. Registered before
# SessionMiddleware so it runs inside it and sees request.session.
@app.middleware("http")
async def restore_session_from_cookie(request: Request, call_next):
    clear_cookie = False
    if not request.session.get("accessToken"):
        cookie = request.cookies.get(AUTH_COOKIE_NAME)
        if cookie:
            data = read_auth_cookie(cookie)
            if data:
                request.session["accessToken"] = data["accessToken"]
                request.session["user"] = data.get("user")
                logger.info("Session restored from auth cookie")
            else:
                clear_cookie = True

    response = await call_next(request)
    if clear_cookie:
        response.delete_cookie(AUTH_COOKIE_NAME)
    return response


app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    max_age=SESSION_MAX_AGE,
    https_only=COOKIE_SECURE,
    same_site="lax",
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Return structured error details as the response body itself."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        fallback = ErrorCodes.INVALID_REQUEST if exc.status_code < 500 else ErrorCodes.INTERNAL_ERROR
        content = ErrorResponse(
            error=str(exc.detail),
            code=STATUS_CODES.get(exc.status_code, fallback),
        ).model_dump()
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests in the standard error format."""
    details = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error="Invalid request",
            code=ErrorCodes.INVALID_REQUEST,
            details=details,
        ).model_dump(),
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(calendar_router)
app.include_router(view_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
