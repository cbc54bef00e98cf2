"""Shared helpers for API tests."""

import base64

from fastapi.testclient import TestClient


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


def basic_auth(email: str, password: str) -> dict[str, str]:
    """Build a Basic Authorization header for the token endpoint."""
    encoded = base64.b64encode(f"{email}:{password}".encode()).decode()
    return {"Authorization": f"Basic {encoded}"}


def register_and_login(client: TestClient, email: str, password: str) -> AuthHeaders:
    """Register a user through the API and exchange credentials for a token."""
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201
    user_id = response.json()["userId"]

    response = client.post("/api/auth/token", headers=basic_auth(email, password))
    assert response.status_code == 200
    token = response.json()["token"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=email)
