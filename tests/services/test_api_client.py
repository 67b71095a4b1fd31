# -*- coding: utf-8 -*-
"""
Tests for the HTTP client, the HTTP remote store and authentication.

requests.request is replaced by a recorder; no network is used.
"""

import pytest
import requests

from services.api_client import ApiConfig, RemoteApiClient
from services.auth_service import (
    AuthService, email_to_username, user_from_payload, username_to_email
)
from services.exceptions import ApiException, NetworkException, ValidationError
from services.remote_store import HttpRemoteStore, encode_filters, encode_order
from services.translation_manager import tr


class _Response:
    def __init__(self, status=200, payload=None, headers=None):
        self.status_code = status
        self._payload = payload
        self.headers = headers or {}
        self.text = "" if payload is None else "body"

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code}", response=self)

    def json(self):
        return self._payload


class _Recorder:
    """Stands in for requests.request; answers from a queue."""

    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, response):
        self.responses.append(response)

    def __call__(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        response = self.responses.pop(0) if self.responses else _Response(payload=[])
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def http(monkeypatch):
    recorder = _Recorder()
    monkeypatch.setattr(requests, "request", recorder)
    return recorder


@pytest.fixture
def client():
    return RemoteApiClient(ApiConfig(base_url="http://backend/", api_key="anon", timeout=3))


class TestFilterEncoding:

    def test_filters(self):
        assert encode_filters({"camp_id": "c1", "family_id": None, "nid": ["1", "2"],
                               "is_departed": False}) == {
            "camp_id": "eq.c1",
            "family_id": "is.null",
            "nid": 'in.("1","2")',
            "is_departed": "eq.false",
        }

    def test_order(self):
        assert encode_order("-created_at") == "created_at.desc"
        assert encode_order("name") == "name.asc"
        assert encode_order(None) is None


class TestRemoteApiClient:

    def test_headers_and_url(self, http, client):
        http.queue(_Response(payload=[{"camp_id": "c1"}]))
        rows = client.get_rows("camps", {"select": "*"})

        call = http.calls[0]
        assert rows == [{"camp_id": "c1"}]
        assert call["method"] == "GET"
        assert call["url"] == "http://backend/rest/v1/camps"
        assert call["headers"]["apikey"] == "anon"
        assert call["headers"]["Authorization"] == "Bearer anon"
        assert call["timeout"] == 3

    def test_user_token_used_after_sign_in(self, http, client):
        http.queue(_Response(payload={"access_token": "tok", "user": {"id": "u1"}}))
        client.sign_in("ahmad@system.local", "pw")
        client.get_rows("camps", {})

        assert http.calls[0]["params"] == {"grant_type": "password"}
        assert http.calls[1]["headers"]["Authorization"] == "Bearer tok"

    def test_http_error_mapped(self, http, client):
        http.queue(_Response(status=409, payload={"message": "duplicate key"}))
        with pytest.raises(ApiException) as exc:
            client.post_rows("families", [{"family_number": "1"}])
        assert exc.value.status_code == 409
        assert exc.value.message == "duplicate key"

    def test_connection_error_mapped(self, http, client):
        http.queue(requests.exceptions.ConnectionError("refused"))
        with pytest.raises(NetworkException):
            client.get_rows("camps", {})

    def test_health_check(self, http, client):
        http.queue(_Response(status=401, payload={}))
        assert client.health_check() is True
        http.queue(requests.exceptions.Timeout("slow"))
        assert client.health_check() is False

    def test_count_reads_content_range(self, http, client):
        http.queue(_Response(headers={"Content-Range": "0-24/25"}))
        assert client.count_rows("families", {}) == 25


class TestHttpRemoteStore:

    def test_select_pages_until_short_page(self, http, client):
        store = HttpRemoteStore(client, page_size=2)
        http.queue(_Response(payload=[{"n": 1}, {"n": 2}]))
        http.queue(_Response(payload=[{"n": 3}]))

        rows = store.select("families", {"camp_id": "c1"}, order="-created_at")

        assert [r["n"] for r in rows] == [1, 2, 3]
        assert http.calls[0]["headers"]["Range"] == "0-1"
        assert http.calls[1]["headers"]["Range"] == "2-3"
        assert http.calls[0]["params"]["order"] == "created_at.desc"

    def test_select_with_limit(self, http, client):
        store = HttpRemoteStore(client)
        http.queue(_Response(payload=[{"n": 1}]))
        assert store.select_one("parcels", order="-display_id") == {"n": 1}
        assert http.calls[0]["params"]["limit"] == "1"

    def test_delete_all_uses_truncate_rpc(self, http, client):
        store = HttpRemoteStore(client)
        http.queue(_Response(payload=None))
        store.delete_all("families")
        assert http.calls[0]["url"].endswith("/rest/v1/rpc/truncate_table")
        assert http.calls[0]["json"] == {"table_name": "families"}

    def test_delete_requires_filters(self, client):
        with pytest.raises(ValueError):
            HttpRemoteStore(client).delete("families", {})


class TestAuth:

    def test_username_mapping(self):
        assert username_to_email(" Ahmad ") == "ahmad@system.local"
        assert username_to_email("Real@Example.com") == "Real@Example.com"
        assert email_to_username("ahmad@system.local") == "ahmad"
        assert email_to_username("x@example.com") == "x@example.com"

    def test_user_from_payload(self):
        user = user_from_payload({
            "id": "u1", "email": "ahmad@system.local",
            "user_metadata": {"fullName": "أحمد علي", "role": "admin"},
        }, "tok")
        assert user.username == "ahmad"
        assert user.display_name == "أحمد علي"
        assert user.role == "admin"
        assert "access_token" not in user.to_dict()

    def test_sign_in_emits_session(self, http, client):
        http.queue(_Response(payload={
            "access_token": "tok",
            "user": {"id": "u1", "email": "ahmad@system.local", "user_metadata": {"username": "ahmad"}},
        }))
        auth = AuthService(client)
        sessions = []
        auth.session_changed.connect(sessions.append)

        user = auth.sign_in("Ahmad", "pw")

        assert user.access_token == "tok"
        assert http.calls[0]["json"] == {"email": "ahmad@system.local", "password": "pw"}
        assert sessions == [user]

    def test_sign_in_rejected(self, http, client):
        http.queue(_Response(status=400, payload={"error_description": "Invalid login credentials"}))
        with pytest.raises(ValidationError) as exc:
            AuthService(client).sign_in("ahmad", "wrong")
        assert exc.value.message == tr("auth.invalid_credentials")

    def test_empty_credentials(self, client):
        with pytest.raises(ValidationError):
            AuthService(client).sign_in("  ", "pw")

    def test_sign_out_offline_still_clears(self, http, client):
        client.set_access_token("tok")
        http.queue(requests.exceptions.ConnectionError("refused"))
        auth = AuthService(client)
        sessions = []
        auth.session_changed.connect(sessions.append)

        auth.sign_out()

        assert sessions == [None]
        assert client.access_token is None

    def test_current_user(self, http, client):
        auth = AuthService(client)
        assert auth.current_user() is None

        http.queue(_Response(payload={"id": "u1", "email": "ahmad@system.local"}))
        assert auth.current_user("tok").username == "ahmad"

        http.queue(_Response(status=401, payload={"msg": "expired"}))
        assert auth.current_user("tok") is None
        assert client.access_token is None

        http.queue(requests.exceptions.ConnectionError("refused"))
        with pytest.raises(NetworkException):
            auth.current_user("tok")
