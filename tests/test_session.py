"""Tests for the signed auth cookie."""

from core.session import read_auth_cookie, sign_auth_cookie

USER = {"name": "Ana", "email": "ana@contoso.com", "id": "oid-1"}


def test_round_trip():
    data = read_auth_cookie(sign_auth_cookie("token-123", USER))

    assert data == {"accessToken": "token-123", "user": USER}


def test_tampered_cookie_rejected():
    cookie = sign_auth_cookie("token-123", USER)

    tampered = ("a" if cookie[0] != "a" else "b") + cookie[1:]

    assert read_auth_cookie(tampered) is None
    assert read_auth_cookie("garbage") is None


def test_cookie_without_token_rejected():
    assert read_auth_cookie(sign_auth_cookie("", USER)) is None
