"""
End-to-end tests for the FastAPI app via TestClient.

The app is built around a FakeServiceFactory so no model is contacted;
the lifespan initializes the temporary database on client start-up.
"""
import dataclasses
import json

import pytest
from fastapi.testclient import TestClient

from adapters.rest.app import create_app
from application.services.chat import FALLBACK_REPLY
from domain.models import SuggestionBundle
from factory import ServiceFactory

from conftest import CONTEXT_BUNDLE, FakeServiceFactory


@pytest.fixture
def client(settings, fakes):
    with TestClient(create_app(FakeServiceFactory(settings, fakes))) as c:
        yield c


def _register(client, email="alice@example.com", name="Alice") -> dict:
    resp = client.post("/auth/register", json={
        "email": email, "password": "secret123", "name": name,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def _headers(token: dict) -> dict:
    return {"Authorization": f"Bearer {token['access_token']}"}


def _post_entry(client, headers, caption="Sunny walk", tags=None, content_type="image/jpeg"):
    data = {"caption": caption}
    if tags is not None:
        data["tags"] = json.dumps(tags)
    return client.post(
        "/entries",
        headers=headers,
        data=data,
        files={"image": ("walk.jpg", b"\xff\xd8\xff fake jpeg", content_type)},
    )


class TestHealthAndAuth:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_register_login_me(self, client):
        token = _register(client)
        assert token["token_type"] == "bearer"

        login = client.post("/auth/login", json={
            "email": "alice@example.com", "password": "secret123",
        })
        assert login.status_code == 200

        me = client.get("/auth/me", headers=_headers(login.json()))
        assert me.status_code == 200
        assert me.json()["email"] == "alice@example.com"
        assert me.json()["name"] == "Alice"

    def test_duplicate_register_is_conflict(self, client):
        _register(client)
        resp = client.post("/auth/register", json={
            "email": "Alice@Example.com", "password": "secret123", "name": "Again",
        })
        assert resp.status_code == 409

    @pytest.mark.parametrize("body", [
        {"email": "not-an-email", "password": "secret123", "name": "A"},
        {"email": "a@example.com", "password": "123", "name": "A"},
        {"email": "a@example.com", "password": "secret123", "name": ""},
        {"email": "a@example.com"},
    ])
    def test_invalid_register_body_is_bad_request(self, client, body):
        resp = client.post("/auth/register", json=body)
        assert resp.status_code == 400
        assert isinstance(resp.json()["detail"], list)

    def test_wrong_password_is_unauthorized(self, client):
        _register(client)
        resp = client.post("/auth/login", json={
            "email": "alice@example.com", "password": "nope-nope",
        })
        assert resp.status_code == 401

    @pytest.mark.parametrize("path", ["/entries", "/analytics", "/chat", "/auth/me"])
    def test_missing_token_is_unauthorized(self, client, path):
        resp = client.get(path)
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_bad_token_is_unauthorized(self, client):
        resp = client.get("/entries", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401

    def test_refresh_and_logout(self, client):
        token = _register(client)
        refreshed = client.post("/auth/refresh", json={"token": token["access_token"]})
        assert refreshed.status_code == 200
        assert refreshed.json()["user_id"] == token["user_id"]

        resp = client.post("/auth/logout", headers=_headers(refreshed.json()))
        assert resp.json() == {"ok": True}


class TestEntriesApi:

    def test_create_and_list(self, client):
        headers = _headers(_register(client))
        resp = _post_entry(client, headers, tags=["Happy", "Calm"])
        assert resp.status_code == 201, resp.text

        body = resp.json()
        assert body["caption"] == "Sunny walk"
        assert body["tags"] == ["Happy", "Calm"]
        assert body["overall_mood"] == "happy"
        assert body["mental_health_traits"]["happiness"] == 8
        assert body["image_url"].startswith("http://testserver/uploads/")
        assert body["suggestions"]["activities"] == ["Stretch"]

        listed = client.get("/entries", headers=headers).json()
        assert [e["id"] for e in listed] == [body["id"]]

    def test_create_without_image_is_bad_request(self, client):
        headers = _headers(_register(client))
        resp = client.post("/entries", headers=headers, data={"caption": "no photo"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Image and caption are required"

    def test_create_without_caption_is_bad_request(self, client):
        headers = _headers(_register(client))
        assert _post_entry(client, headers, caption="").status_code == 400

    @pytest.mark.parametrize("raw", ["not json", '{"a": 1}', "[1, 2]"])
    def test_malformed_tags_are_bad_request(self, client, raw):
        headers = _headers(_register(client))
        resp = client.post(
            "/entries",
            headers=headers,
            data={"caption": "x", "tags": raw},
            files={"image": ("a.jpg", b"img", "image/jpeg")},
        )
        assert resp.status_code == 400

    def test_unknown_tag_is_bad_request(self, client):
        headers = _headers(_register(client))
        assert _post_entry(client, headers, tags=["Hangry"]).status_code == 400

    def test_other_users_entry_is_not_found(self, client):
        alice = _headers(_register(client))
        bob = _headers(_register(client, "bob@example.com", "Bob"))
        entry_id = _post_entry(client, alice).json()["id"]

        assert client.get(f"/entries/{entry_id}", headers=bob).status_code == 404
        resp = client.delete(f"/entries/{entry_id}", headers=bob)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Post not found"
        assert client.get(f"/entries/{entry_id}", headers=alice).status_code == 200

    def test_delete_by_path_and_query(self, client):
        headers = _headers(_register(client))
        first = _post_entry(client, headers, caption="first").json()["id"]
        second = _post_entry(client, headers, caption="second").json()["id"]

        resp = client.delete(f"/entries/{first}", headers=headers)
        assert resp.json() == {"message": "Post deleted successfully"}

        resp = client.delete("/entries", params={"id": second}, headers=headers)
        assert resp.status_code == 200
        assert client.get("/entries", headers=headers).json() == []

    def test_delete_without_id_is_bad_request(self, client):
        headers = _headers(_register(client))
        resp = client.delete("/entries", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Post ID is required"


class TestAnalyticsAndChatApi:

    def test_analytics_without_entries(self, client, fakes):
        headers = _headers(_register(client))
        body = client.get("/analytics", headers=headers).json()

        assert body["total_entries"] == 0
        assert body["average_scores"]["stress"] == 0.0
        assert body["suggestions"] == {"activities": [], "movies": [], "songs": [], "food": []}
        assert fakes.generator.context_calls == []

    def test_analytics_with_entries_and_cache_clear(self, client, fakes):
        headers = _headers(_register(client))
        _post_entry(client, headers)
        _post_entry(client, headers, caption="Second walk")

        body = client.get("/analytics", headers=headers).json()
        assert body["total_entries"] == 2
        assert body["mood_distribution"]["happy"] == 2
        assert body["suggestions"] == CONTEXT_BUNDLE.to_dict()
        client.get("/analytics", headers=headers)
        assert len(fakes.generator.context_calls) == 1

        resp = client.post("/suggestions/cache/clear", headers=headers)
        assert resp.json()["ok"] is True
        client.get("/analytics", headers=headers)
        assert len(fakes.generator.context_calls) == 2

    def test_chat_round_trip(self, client):
        headers = _headers(_register(client))
        resp = client.post("/chat", headers=headers, json={"message": "Long day."})
        assert resp.status_code == 200
        assert resp.json()["role"] == "assistant"

        history = client.get("/chat", headers=headers).json()
        assert [m["role"] for m in history] == ["user", "assistant"]
        assert history[0]["content"] == "Long day."

    def test_blank_chat_message_is_bad_request(self, client):
        headers = _headers(_register(client))
        assert client.post("/chat", headers=headers, json={"message": "  "}).status_code == 400
        assert client.post("/chat", headers=headers, json={}).status_code == 400


class TestUploadsAndErrors:

    def test_uploaded_image_is_served(self, settings, fakes):
        factory = FakeServiceFactory(settings, fakes, use_real_image_store=True)
        with TestClient(create_app(factory)) as client:
            headers = _headers(_register(client))
            image_url = _post_entry(client, headers).json()["image_url"]

            resp = client.get(image_url.replace("http://testserver", ""))
            assert resp.status_code == 200
            assert resp.content == b"\xff\xd8\xff fake jpeg"

    def test_unexpected_error_is_internal_server_error(self, settings, fakes):
        class BrokenFactory(FakeServiceFactory):
            def create_analytics_service(self):
                raise RuntimeError("database exploded")

        app = create_app(BrokenFactory(settings, fakes))
        with TestClient(app, raise_server_exceptions=False) as client:
            headers = _headers(_register(client))
            resp = client.get("/analytics", headers=headers)
            assert resp.status_code == 500
            assert resp.json() == {"detail": "Internal server error"}


class TestMisconfiguredProvider:
    """A provider without credentials degrades AI results, never the routes."""

    @pytest.fixture
    def client(self, settings):
        broken = dataclasses.replace(settings, llm_provider="openai", openai_api_key="")
        with TestClient(create_app(ServiceFactory(broken))) as c:
            yield c

    def test_entries_still_work_with_fallback_mood(self, client):
        headers = _headers(_register(client))

        assert client.get("/entries", headers=headers).status_code == 200

        resp = _post_entry(client, headers, tags=["Tired"])
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["overall_mood"] == "neutral"
        assert body["mood_description"] == "Unable to analyze mood at this time."
        assert body["suggestions"] is None

        listed = client.get("/entries", headers=headers).json()
        assert [e["id"] for e in listed] == [body["id"]]

    def test_analytics_returns_fallback_suggestions(self, client):
        headers = _headers(_register(client))
        _post_entry(client, headers)

        resp = client.get("/analytics", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["suggestions"] == SuggestionBundle.fallback().to_dict()

    def test_chat_returns_fallback_reply(self, client):
        headers = _headers(_register(client))
        resp = client.post("/chat", headers=headers, json={"message": "Anyone there?"})
        assert resp.status_code == 200
        assert resp.json()["content"] == FALLBACK_REPLY
