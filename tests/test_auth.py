from datetime import timedelta
from fastapi import status

from app.models.user import User
from app.utils.auth import create_access_token, verify_password
from tests.conf_tests import client, clear_db, test_db, admin_user, admin_headers

REGISTER_DATA = {
    "name": "Ada Lovelace",
    "email": "Ada@Example.com ",
    "password": "testpassword",
}


def test_register(test_db):  # pylint: disable=redefined-outer-name
    response = client.post("/auth/register", json=REGISTER_DATA)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["email"] == "ada@example.com"

    user = test_db.query(User).filter(User.email == "ada@example.com").first()
    assert user is not None
    assert verify_password("testpassword", user.hashed_password)


def test_register_duplicate_email():
    client.post("/auth/register", json=REGISTER_DATA)
    response = client.post(
        "/auth/register", json={**REGISTER_DATA, "email": "ada@example.com"}
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "User with this email already exists"


def test_register_invalid_payload():
    response = client.post(
        "/auth/register", json={"name": "A", "email": "ada@example.com", "password": "123"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["kind"] == "ValidationError"


def test_register_name_too_short_after_trimming():
    response = client.post("/auth/register", json={**REGISTER_DATA, "name": " A   "})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["kind"] == "ValidationError"


def test_login():
    client.post("/auth/register", json=REGISTER_DATA)
    response = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "testpassword"}
    )
    assert response.status_code == status.HTTP_200_OK
    token = response.json()["access_token"]

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Ada Lovelace"


def test_login_wrong_password():
    client.post("/auth/register", json=REGISTER_DATA)
    response = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "wrongpassword"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "Unauthenticated"


def test_login_unknown_email():
    response = client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "testpassword"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me(admin_headers, admin_user):  # pylint: disable=redefined-outer-name
    response = client.get("/auth/me", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == admin_user.id


def test_me_expired_token(admin_user):  # pylint: disable=redefined-outer-name
    token = create_access_token(admin_user.id, expires_delta=timedelta(minutes=-1))
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "Unauthenticated"
    assert response.headers["www-authenticate"] == "Bearer"


def test_me_unknown_user():
    token = create_access_token(424242)
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "Unauthenticated"


def test_me_without_token():
    response = client.get("/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"detail": "Not authenticated", "kind": "Unauthenticated"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_me_with_basic_credentials():
    response = client.get("/auth/me", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "Unauthenticated"


def test_my_bookings_without_token():
    response = client.get("/bookings/my")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "Unauthenticated"


def test_health():
    assert client.get("/health").json() == {"status": "ok"}
