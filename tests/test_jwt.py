import pytest
from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.test import APIClient

from productivity.realtime.auth import JWTTokenVerifier

pytestmark = pytest.mark.django_db


def obtain_tokens(client, username: str, password: str) -> tuple[str, str]:
    r = client.post(
        "/api/v1/auth/jwt/create/",
        {"username": username, "password": password},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK, r.content
    return r.data["access"], r.data["refresh"]


def test_jwt_verify_endpoint(user):
    client = APIClient()
    access, _ = obtain_tokens(client, "alice", "AlicePass!123")

    r = client.post("/api/v1/auth/jwt/verify/", {"token": access}, format="json")
    assert r.status_code == status.HTTP_200_OK

    bad = access[:-2] + "ab"
    r = client.post("/api/v1/auth/jwt/verify/", {"token": bad}, format="json")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_issued_access_token_opens_a_socket(user):
    access, _ = obtain_tokens(APIClient(), "alice", "AlicePass!123")

    verifier = JWTTokenVerifier()
    assert async_to_sync(verifier.verify)(access) == str(user.pk)


def test_refresh_yields_a_new_access_token(user):
    client = APIClient()
    _, refresh = obtain_tokens(client, "alice", "AlicePass!123")

    r = client.post("/api/v1/auth/jwt/refresh/", {"refresh": refresh}, format="json")
    assert r.status_code == status.HTTP_200_OK
    assert "access" in r.data
