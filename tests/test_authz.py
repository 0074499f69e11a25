import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient
from jose import jwt

from users_service.interfaces.http.authz import extract_bearer_token, require_identity
from users_service.interfaces.http.dependencies import get_token_service
from users_service.interfaces.http.errors import setup_exception_handlers
from users_service.infrastructure.security import TokenService

SECRET = "test-secret"


def token_minted_ago(minutes: int, subject: str = "1") -> str:
    """Токен, выпущенный `minutes` минут назад"""
    minted_at = datetime.now(timezone.utc) - timedelta(minutes=minutes)
    return TokenService(secret=SECRET, clock=lambda: minted_at).issue(subject)


@pytest.fixture
def guarded_client():
    """Отдельное приложение с защищённым маршрутом"""
    guarded = FastAPI()
    setup_exception_handlers(guarded)

    @guarded.get("/protected", dependencies=[Depends(require_identity)])
    def protected(request: Request):
        return {"identity": request.state.identity}

    guarded.dependency_overrides[get_token_service] = lambda: TokenService(secret=SECRET)
    return TestClient(guarded, raise_server_exceptions=False)


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_valid_token_attaches_identity(guarded_client):
    response = guarded_client.get("/protected", headers=auth(token_minted_ago(0, subject="42")))
    assert response.status_code == 200
    assert response.json()["identity"]["sub"] == "42"


def test_missing_header_denied(guarded_client):
    response = guarded_client.get("/protected")
    assert response.status_code == 401
    assert response.json()["error"] == "Access denied."


@pytest.mark.parametrize("header", ["Bearer", "Bearer   ", "Token abc.def.ghi", "abc.def.ghi"])
def test_malformed_header_denied(guarded_client, header):
    response = guarded_client.get("/protected", headers={"Authorization": header})
    assert response.status_code == 401
    assert response.json()["error"] == "Access denied."


def test_garbage_token_invalid(guarded_client):
    response = guarded_client.get("/protected", headers=auth("not-a-jwt"))
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid token."


def test_token_accepted_after_thirty_minutes(guarded_client):
    response = guarded_client.get("/protected", headers=auth(token_minted_ago(30)))
    assert response.status_code == 200


def test_token_rejected_after_sixty_one_minutes(guarded_client):
    response = guarded_client.get("/protected", headers=auth(token_minted_ago(61)))
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid token."


def test_token_signed_with_other_secret_rejected(guarded_client):
    token = TokenService(secret="someone-else").issue("1")
    response = guarded_client.get("/protected", headers=auth(token))
    assert response.status_code == 400


def test_token_with_other_algorithm_rejected(guarded_client):
    exp = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode({"sub": "1", "exp": exp}, SECRET, algorithm="HS512")
    response = guarded_client.get("/protected", headers=auth(token))
    assert response.status_code == 400


def test_unsigned_token_rejected(guarded_client):
    def b64(data: dict) -> str:
        raw = json.dumps(data).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

    exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
    token = f"{b64({'alg': 'none', 'typ': 'JWT'})}.{b64({'sub': '1', 'exp': exp})}."
    response = guarded_client.get("/protected", headers=auth(token))
    assert response.status_code == 400


def test_token_without_expiry_rejected(guarded_client):
    token = jwt.encode({"sub": "1"}, SECRET, algorithm="HS256")
    response = guarded_client.get("/protected", headers=auth(token))
    assert response.status_code == 400


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Bearer  abc ", "abc"),
        ("Basic abc", None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected
