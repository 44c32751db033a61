"""
Signed auth cookie used to restore the session on stateless deployments.
"""

from itsdangerous import BadSignature, URLSafeTimedSerializer

from core.config import AUTH_COOKIE_MAX_AGE, SESSION_SECRET

_serializer = URLSafeTimedSerializer(SESSION_SECRET, salt="auth-cookie")


def sign_auth_cookie(access_token: str, user: dict) -> str:
    return _serializer.dumps({"accessToken": access_token, "user": user})


def read_auth_cookie(value: str) -> dict | None:
    """
    Verify and decode an auth cookie.

    Returns None when the signature is invalid or the cookie has expired.
    """
    try:
        data = _serializer.loads(value, max_age=AUTH_COOKIE_MAX_AGE)
    except BadSignature:
        return None
    if not isinstance(data, dict) or not data.get("accessToken"):
        return None
    return data
