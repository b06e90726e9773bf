import os
import uuid as uuid_lib
from pathlib import Path

import pytest

# Must be set before any hillcipher module reads its configuration
os.environ.setdefault("HILLCIPHER_CONFIG", str(Path(__file__).parent / "config.toml"))

from fastapi.testclient import TestClient  # noqa: E402

from hillcipher.main import app  # noqa: E402

TEST_PASSWORD = "testpassword"


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


def register_and_login(client, username=None, password=TEST_PASSWORD):
    username = username or f"testuser_{uuid_lib.uuid4()}"
    credentials = {"Username": username, "Password": password}

    response = client.post("/api/users/register", json=credentials)
    assert response.status_code == 200, response.text

    response = client.post("/api/users/login", json=credentials)
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def auth_headers(client):
    """A freshly registered and logged in user."""
    token = register_and_login(client)
    return {"Authorization": f"Bearer {token}"}
