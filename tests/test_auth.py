import pytest
from rest_framework.test import APIClient

from users.models import User
from tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db

REGISTER_URL = "/users/auth/register/"
LOGIN_URL = "/users/auth/login/"
LOGOUT_URL = "/users/auth/logout/"
REFRESH_URL = "/users/token/refresh/"
PROFILE_URL = "/users/profile/"


def bearer_client(access):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    return client


def login(user):
    response = APIClient().post(LOGIN_URL, {"email": user.email, "password": PASSWORD}, format="json")
    assert response.status_code == 200
    return response.data


def test_register_brand_account(api_client):
    response = api_client.post(REGISTER_URL, {
        "username": "acme",
        "email": "Owner@Acme.test",
        "password": PASSWORD,
        "user_type": "brand",
    }, format="json")

    assert response.status_code == 201
    assert response.data["user"]["email"] == "owner@acme.test"
    assert response.data["user"]["user_type"] == "brand"
    assert response.data["access"] and response.data["refresh"]
    assert "access_token" in response.cookies
    assert response.cookies["access_token"]["httponly"]
    assert User.objects.get(email="owner@acme.test").is_brand


def test_register_rejects_duplicate_email(api_client, user):
    response = api_client.post(REGISTER_URL, {
        "username": "alice2",
        "email": "ALICE@example.com",
        "password": PASSWORD,
    }, format="json")

    assert response.status_code == 400
    assert "email" in response.data


def test_register_rejects_weak_password(api_client):
    response = api_client.post(REGISTER_URL, {
        "username": "weak",
        "email": "weak@example.com",
        "password": "12345678",
    }, format="json")

    assert response.status_code == 400
    assert "password" in response.data


def test_login_returns_tokens_usable_as_bearer(user):
    tokens = login(user)

    assert tokens["user_type"] == "user"
    response = bearer_client(tokens["access"]).get(PROFILE_URL)
    assert response.status_code == 200
    assert response.data["email"] == "alice@example.com"


def test_login_with_wrong_password(api_client, user):
    response = api_client.post(LOGIN_URL, {"email": user.email, "password": "nope-nope"}, format="json")

    assert response.status_code == 400


def test_profile_requires_authentication(api_client, db):
    assert api_client.get(PROFILE_URL).status_code == 401


def test_invalid_bearer_token_is_rejected(db):
    response = bearer_client("not-a-jwt").get(PROFILE_URL)

    assert response.status_code == 401


def test_profile_update(auth_client, user):
    response = auth_client.patch(PROFILE_URL, {"bio": "Audio nerd", "website": "https://alice.test"}, format="json")

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.bio == "Audio nerd"
    assert user.website == "https://alice.test"


def test_refresh_rotates_and_blacklists(user):
    tokens = login(user)

    response = APIClient().post(REFRESH_URL, {"refresh": tokens["refresh"]}, format="json")
    assert response.status_code == 200
    assert response.data["refresh"] != tokens["refresh"]

    reused = APIClient().post(REFRESH_URL, {"refresh": tokens["refresh"]}, format="json")
    assert reused.status_code == 401


def test_logout_blacklists_refresh_token(user):
    tokens = login(user)

    response = APIClient().post(LOGOUT_URL, {"refresh": tokens["refresh"]}, format="json")
    assert response.status_code == 200

    response = APIClient().post(REFRESH_URL, {"refresh": tokens["refresh"]}, format="json")
    assert response.status_code == 401


def test_refresh_without_token(api_client, db):
    assert api_client.post(REFRESH_URL, {}, format="json").status_code == 401
