"""
Tests for the /auth endpoints.

These tests verify:
- Signup / signin / signout request handling and error codes
- Webhook endpoint end to end against mock MongoDB
- /auth/me merging Clerk identity with the stored record
- Rate limiting on signin
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from helpers import TEST_USER_ID, make_event, run, signed_delivery
from nurture.container import ServiceContainer
from nurture.main import create_app
from nurture.services.clerk_client import IdentityProviderError


class TestSignUp:
    """Tests for POST /auth/signup."""

    def test_signup_returns_201_with_user_and_token(self, client):
        response = client.post(
            "/auth/signup",
            json={"email": "ada@example.com", "password": "password123", "firstName": "Ada"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["id"] == TEST_USER_ID
        assert data["user"]["firstName"] == "Ada"
        assert data["token"] == "jwt.session.token"

    def test_signup_short_password_is_weak(self, client, mock_clerk, assert_error_response):
        response = client.post(
            "/auth/signup", json={"email": "ada@example.com", "password": "1234567"}
        )

        assert_error_response(response, 400, "WEAK_PASSWORD")
        mock_clerk.create_user.assert_not_called()

    def test_signup_missing_fields(self, client, mock_clerk, assert_error_response):
        response = client.post("/auth/signup", json={"email": "ada@example.com"})

        assert_error_response(response, 400, "MISSING_FIELDS")
        mock_clerk.create_user.assert_not_called()

    def test_signup_duplicate_email(self, client, mock_clerk, assert_error_response):
        mock_clerk.create_user.side_effect = IdentityProviderError(
            "taken", status_code=422, code="form_identifier_exists"
        )

        response = client.post(
            "/auth/signup", json={"email": "ada@example.com", "password": "password123"}
        )

        assert_error_response(response, 400, "EMAIL_EXISTS")

    def test_signup_non_json_body(self, client, assert_error_response):
        response = client.post(
            "/auth/signup", content=b"email=ada", headers={"content-type": "text/plain"}
        )
        assert_error_response(response, 400, "VALIDATION_ERROR")

    def test_signup_is_served_under_api_prefix(self, client):
        response = client.post(
            "/api/auth/signup", json={"email": "ada@example.com", "password": "password123"}
        )
        assert response.status_code == 201


class TestSignIn:
    """Tests for POST /auth/signin."""

    def test_signin_returns_session(self, client):
        response = client.post(
            "/auth/signin", json={"email": "ada@example.com", "password": "password123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "ada@example.com"
        assert data["session"]["id"] == "sess_new"
        assert data["session"]["token"] == "jwt.session.token"
        assert data["session"]["expiresIn"] == 3600

    def test_signin_wrong_password(self, client, mock_clerk, assert_error_response):
        mock_clerk.verify_password.side_effect = IdentityProviderError(
            "Password is incorrect.", status_code=422, code="form_password_incorrect"
        )

        response = client.post(
            "/auth/signin", json={"email": "ada@example.com", "password": "wrong-pass"}
        )

        assert_error_response(response, 401, "INVALID_CREDENTIALS")

    def test_signin_rate_limited_after_limit(self, client, test_settings, assert_error_response):
        body = {"email": "ada@example.com", "password": "password123"}
        for _ in range(test_settings.signin_rate_limit_attempts):
            assert client.post("/auth/signin", json=body).status_code == 200

        response = client.post("/auth/signin", json=body)

        assert_error_response(response, 429, "RATE_LIMITED")


class TestSignOut:
    """Tests for POST /auth/signout."""

    def test_signout_revokes_session(self, client, mock_clerk):
        response = client.post("/auth/signout", json={"sessionId": "sess_1"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        mock_clerk.revoke_session.assert_awaited_once_with("sess_1")

    def test_signout_missing_session_id(self, client, mock_clerk, assert_error_response):
        response = client.post("/auth/signout", json={})

        assert_error_response(response, 400, "MISSING_FIELDS")
        mock_clerk.revoke_session.assert_not_called()


class TestWebhookEndpoint:
    """Tests for POST /auth/webhook."""

    def post_event(self, client, event, path="/auth/webhook", **kwargs):
        body, headers = signed_delivery(event, **kwargs)
        return client.post(path, content=body, headers=headers)

    def test_created_event_syncs_user(self, client, mock_users_db):
        response = self.post_event(client, make_event("user.created"))

        assert response.status_code == 200
        assert response.json()["success"] is True
        doc = run(mock_users_db.users.find_one({"_id": TEST_USER_ID}))
        assert doc["email"] == "ada@example.com"
        assert doc["profile_data"] == {}

    def test_provider_webhook_path_under_api_prefix(self, client, mock_users_db):
        response = self.post_event(client, make_event("user.created"), path="/api/auth/webhook")

        assert response.status_code == 200
        assert run(mock_users_db.users.count_documents({})) == 1

    def test_invalid_signature_rejected_without_write(self, client, mock_users_db, assert_error_response):
        response = self.post_event(client, make_event("user.created"), key=b"forged")

        assert_error_response(response, 400, "INVALID_SIGNATURE")
        assert run(mock_users_db.users.count_documents({})) == 0

    def test_unsigned_delivery_rejected(self, client, mock_users_db, assert_error_response):
        response = client.post("/auth/webhook", json=make_event("user.created"))

        assert_error_response(response, 400, "INVALID_SIGNATURE")
        assert run(mock_users_db.users.count_documents({})) == 0

    def test_mistyped_attributes_rejected_without_write(self, client, mock_users_db, assert_error_response):
        event = make_event("user.created")
        event["data"]["first_name"] = {"nested": 1}

        response = self.post_event(client, event)

        assert_error_response(response, 400, "VALIDATION_ERROR")
        assert run(mock_users_db.users.count_documents({})) == 0

    def test_missing_subject_rejected(self, client, mock_users_db, assert_error_response):
        response = self.post_event(client, make_event("user.created", user_id=None))

        assert_error_response(response, 400, "MISSING_FIELDS")
        assert run(mock_users_db.users.count_documents({})) == 0

    def test_full_lifecycle(self, client, mock_users_db):
        assert self.post_event(client, make_event("user.created"), msg_id="m1").status_code == 200
        update = make_event("user.updated", email="new@example.com", updated_at=1735469999999)
        assert self.post_event(client, update, msg_id="m2").status_code == 200

        doc = run(mock_users_db.users.find_one({"_id": TEST_USER_ID}))
        assert doc["email"] == "new@example.com"

        assert self.post_event(client, make_event("user.deleted"), msg_id="m3").status_code == 200
        assert self.post_event(client, make_event("user.deleted"), msg_id="m4").status_code == 200
        assert run(mock_users_db.users.count_documents({})) == 0

    def test_storage_failure_returns_500(self, client, container, assert_error_response):
        from pymongo.errors import PyMongoError

        users = MagicMock()
        users.update_one = AsyncMock(side_effect=PyMongoError("down"))
        container.sync_service.users = users

        response = self.post_event(client, make_event("user.created"))

        assert_error_response(response, 500, "INTERNAL_ERROR")

    def test_missing_secret_refuses_deliveries(self, client, container, assert_error_response):
        container.webhook_dispatcher = None

        response = self.post_event(client, make_event("user.created"))

        assert_error_response(response, 500, "INTERNAL_ERROR")


class TestCurrentUser:
    """Tests for GET /auth/me."""

    def test_requires_bearer_token(self, client, assert_error_response):
        response = client.get("/auth/me")
        assert_error_response(response, 401, "UNAUTHENTICATED")

    def test_rejects_invalid_token(self, client, assert_error_response):
        response = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
        assert_error_response(response, 401, "UNAUTHENTICATED")

    def test_merges_identity_with_record(self, client, mock_users_db, user_document, auth_headers):
        user_document.update({"relationship_id": "rel_1", "partner_id": "user_partner"})
        run(mock_users_db.users.insert_one(user_document))

        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == TEST_USER_ID
        assert user["email"] == "ada@example.com"
        assert user["hasRelationship"] is True
        assert user["relationshipId"] == "rel_1"
        assert user["partnerId"] == "user_partner"
        assert user["profileData"] == {"a": 1, "b": 2}

    def test_without_record_falls_back_to_identity(self, client, auth_headers):
        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["firstName"] == "Ada"
        assert user["hasRelationship"] is False
        assert user["relationshipId"] is None
        assert user["profileData"] == {}


class TestMalformedWebhookSecret:
    """A secret that is not base64 disables webhooks but not the app."""

    @pytest.fixture
    def broken_container(self, test_settings, mock_users_db, mock_redis, mock_clerk):
        settings = test_settings.model_copy(update={"clerk_webhook_secret": "whsec_not*base64!"})
        return ServiceContainer.build(settings, db=mock_users_db, redis=mock_redis, clerk=mock_clerk)

    def test_container_builds_without_dispatcher(self, broken_container):
        assert broken_container.webhook_dispatcher is None

    def test_app_serves_but_refuses_deliveries(self, broken_container, mock_users_db, assert_error_response):
        with TestClient(create_app(container=broken_container)) as client:
            assert client.get("/health").status_code == 200

            body, headers = signed_delivery(make_event("user.created"))
            response = client.post("/auth/webhook", content=body, headers=headers)

        assert_error_response(response, 500, "INTERNAL_ERROR")
        assert run(mock_users_db.users.count_documents({})) == 0
