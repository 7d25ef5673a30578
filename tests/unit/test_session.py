"""Tests for sfrest.session."""

import pytest
from sf_fakes import INSTANCE_URL, token_payload

from sfrest.exceptions import AuthError, TransportError
from sfrest.session import Session, SessionManager

TOKEN_URL = "https://login.salesforce.com/services/oauth2/token"


@pytest.fixture
def manager(fake_transport, config):
    return SessionManager(config.credentials(), fake_transport, TOKEN_URL)


class TestAuthenticate:
    def test_posts_form_encoded_credentials(self, manager, fake_transport):
        fake_transport.queue(200, token_payload("tok1"))

        session = manager.authenticate()

        call = fake_transport.calls[0]
        assert call.method == "POST"
        assert call.url == TOKEN_URL
        assert call.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert call.form == {
            "grant_type": ["password"],
            "username": ["user@example.com"],
            "password": ["pw-and-token"],
            "client_id": ["cid"],
            "client_secret": ["csecret"],
        }
        assert "Authorization" not in call.headers
        assert session.access_token == "tok1"
        assert session.instance_url == INSTANCE_URL

    def test_authorization_header(self, manager, fake_transport):
        fake_transport.queue(200, token_payload("tok1"))
        manager.authenticate()

        assert manager.authorization_header() == "Bearer tok1"

    def test_reauthenticate_replaces_session(self, manager, fake_transport):
        fake_transport.queue(200, token_payload("tok1"))
        fake_transport.queue(200, token_payload("tok2"))

        first = manager.authenticate()
        second = manager.authenticate()

        assert first is not second
        assert manager.session is second
        assert manager.authorization_header() == "Bearer tok2"
        assert manager.auth_count == 2

    def test_non_200_raises_auth_error(self, manager, fake_transport):
        fake_transport.queue(
            400, {"error": "invalid_grant", "error_description": "authentication failure"}
        )

        with pytest.raises(AuthError) as exc_info:
            manager.authenticate()

        assert exc_info.value.status_code == 400
        assert "invalid_grant" in exc_info.value.body
        assert not manager.is_authenticated

    def test_transport_failure_raises_auth_error(self, manager, fake_transport):
        fake_transport.queue_error(TransportError("Name or service not known"))

        with pytest.raises(AuthError, match="Name or service not known") as exc_info:
            manager.authenticate()

        assert exc_info.value.status_code == -1

    def test_failed_reauth_keeps_previous_session(self, manager, fake_transport):
        fake_transport.queue(200, token_payload("tok1"))
        fake_transport.queue(500, body=b"down")
        manager.authenticate()

        with pytest.raises(AuthError):
            manager.authenticate()

        assert manager.authorization_header() == "Bearer tok1"

    def test_non_json_body(self, manager, fake_transport):
        fake_transport.queue(200, body=b"<html>maintenance</html>")

        with pytest.raises(AuthError, match="not JSON"):
            manager.authenticate()

    def test_header_before_login(self, manager):
        with pytest.raises(AuthError, match="Not authenticated"):
            manager.authorization_header()


class TestSession:
    def test_from_response_strips_trailing_slash(self):
        session = Session.from_response(token_payload(instance_url=INSTANCE_URL + "/"))

        assert session.instance_url == INSTANCE_URL
        assert session.raw["signature"] == "sig"

    def test_missing_fields(self):
        with pytest.raises(AuthError, match="access_token"):
            Session.from_response({"token_type": "Bearer", "instance_url": INSTANCE_URL})

    def test_repr_hides_token(self):
        session = Session.from_response(token_payload("very-secret"))

        assert "very-secret" not in repr(session)
