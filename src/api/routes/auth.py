"""Microsoft account linking: sign-in, callback, sign-out."""

import logging
import secrets
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from api.dependencies import drop_calendar_shell
from api.models.responses import ErrorCodes, UserResponse
from core.auth import AuthError, acquire_token_by_code, build_auth_url
from core.config import (
    AUTH_COOKIE_MAX_AGE,
    AUTH_COOKIE_NAME,
    COOKIE_SECURE,
    LOGOUT_URL,
    POST_LOGOUT_REDIRECT_URI,
)
from core.session import sign_auth_cookie

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


def _error_redirect(message: str) -> RedirectResponse:
    return RedirectResponse(f"/?{urlencode({'error': message})}", status_code=status.HTTP_302_FOUND)


@router.get("/login")
async def login(request: Request):
    """Redirect to the Microsoft sign-in page."""
    state = secrets.token_urlsafe(16)
    request.session["authState"] = state
    try:
        auth_url = build_auth_url(state)
    except Exception as e:
        logger.error("Failed to build authorization URL: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Failed to initiate login",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )
    return RedirectResponse(auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/callback")
async def callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
):
    """Handle the redirect back from Microsoft and link the account."""
    if error:
        logger.warning("Sign-in returned an error: %s %s", error, error_description)
        return _error_redirect(error_description or error)

    if not code:
        return _error_redirect("No authorization code received")

    expected_state = request.session.pop("authState", None)
    if not expected_state or state != expected_state:
        logger.warning("Sign-in state mismatch")
        return _error_redirect("Invalid sign-in state. Please try again.")

    try:
        result = acquire_token_by_code(code)
    except AuthError as e:
        logger.error("Error acquiring token: %s", e)
        return _error_redirect(str(e))

    request.session["accessToken"] = result["access_token"]
    request.session["user"] = result["user"]

    response = RedirectResponse("/?success=true", status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        AUTH_COOKIE_NAME,
        sign_auth_cookie(result["access_token"], result["user"]),
        max_age=AUTH_COOKIE_MAX_AGE,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.get("/logout")
async def logout(request: Request):
    """Unlink the account and sign out of Microsoft."""
    drop_calendar_shell(request)
    request.session.clear()

    logout_url = f"{LOGOUT_URL}?{urlencode({'post_logout_redirect_uri': POST_LOGOUT_REDIRECT_URI})}"
    response = RedirectResponse(logout_url, status_code=status.HTTP_302_FOUND)
    response.delete_cookie(AUTH_COOKIE_NAME)
    return response


@router.get("/user", response_model=UserResponse)
async def get_user(request: Request):
    user = request.session.get("user")
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Not authenticated",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )
    return UserResponse(user=user)
