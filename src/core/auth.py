"""
Microsoft identity platform sign-in using MSAL's authorization code flow.
"""

import logging

import msal

from core.config import AUTHORITY, CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, SCOPES

logger = logging.getLogger(__name__)

# Keep MSAL's own logging quiet and free of PII
logging.getLogger("msal").setLevel(logging.WARNING)


class AuthError(Exception):
    """The identity provider refused to issue a token."""


def build_msal_app() -> msal.ConfidentialClientApplication:
    return msal.ConfidentialClientApplication(
        CLIENT_ID,
        authority=AUTHORITY,
        client_credential=CLIENT_SECRET,
    )


def build_auth_url(state: str) -> str:
    """URL of the Microsoft sign-in page for our delegated scopes."""
    return build_msal_app().get_authorization_request_url(
        SCOPES,
        redirect_uri=REDIRECT_URI,
        state=state,
        prompt="select_account",
    )


def acquire_token_by_code(code: str) -> dict:
    """
    Exchange an authorization code for tokens.

    Returns:
        Dict with access_token and user {name, email, id}

    Raises:
        AuthError: if the token endpoint returns an error
    """
    result = build_msal_app().acquire_token_by_authorization_code(
        code,
        scopes=SCOPES,
        redirect_uri=REDIRECT_URI,
    )
    if "access_token" not in result:
        raise AuthError(result.get("error_description") or result.get("error") or "No access token returned")

    claims = result.get("id_token_claims") or {}
    email = claims.get("preferred_username") or claims.get("email") or ""
    user = {
        "name": claims.get("name") or (email.split("@")[0] if email else ""),
        "email": email,
        "id": claims.get("oid") or claims.get("sub") or "",
    }
    logger.info("User authenticated: %s", user["email"])
    return {"access_token": result["access_token"], "user": user}
