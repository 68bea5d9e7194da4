"""Tests for the scripting client, with requests stubbed out.

Run with: pytest backend/tests/test_client.py -v
"""

import pytest

import lightwave_client
from lightwave_client import ApiError, LightwaveApiClient, make_client_from_env


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self):
        return self._payload


class FakeBackend:
    """Records every call; answers 200 with a draft key unless told otherwise."""

    def __init__(self):
        self.calls = []
        self.failures = {}

    def __call__(self, method, url, json=None, auth=None, headers=None, timeout=None):
        path = url.replace("http://api.test", "")
        self.calls.append((method, path, json))
        assert auth == ("admin", "123")
        if (method, path) in self.failures:
            return FakeResponse(self.failures[(method, path)], {"detail": "nope"})
        if method == "DELETE":
            return FakeResponse(204)
        return FakeResponse(200, {"key": "k1", "state": "SAVED"})


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(lightwave_client.requests, "request", fake)
    return fake


@pytest.fixture
def api():
    return LightwaveApiClient(base_url="http://api.test/", username="admin", password="123")


class TestBookEvent:
    def test_runs_the_wizard(self, api, backend):
        result = api.book_event(
            title="gala",
            items={"inv-1": 2},
            bundle_ids=["b-1"],
            event_start="2025-07-01T18:00:00",
        )

        assert result["state"] == "SAVED"
        assert [(m, p) for m, p, _ in backend.calls] == [
            ("POST", "/drafts/"),
            ("POST", "/drafts/k1/actions"),
            ("POST", "/drafts/k1/actions"),
            ("POST", "/drafts/k1/actions"),
            ("POST", "/drafts/k1/actions"),
            ("POST", "/drafts/k1/actions"),
            ("POST", "/drafts/k1/actions"),
            ("POST", "/drafts/k1/actions"),
            ("POST", "/drafts/k1/save"),
        ]
        actions = [body["type"] for _, p, body in backend.calls if p.endswith("/actions")]
        assert actions == [
            "set_field", "set_field", "set_field", "next_step",
            "merge_bundle", "increment", "increment",
        ]

    def test_failed_save_abandons_the_draft(self, api, backend):
        backend.failures[("POST", "/drafts/k1/save")] = 400

        with pytest.raises(ApiError) as exc:
            api.book_event(title="")

        assert exc.value.status_code == 400
        assert backend.calls[-1][:2] == ("DELETE", "/drafts/k1")


class TestRequests:
    def test_errors_carry_status(self, api, backend):
        backend.failures[("POST", "/auth/login")] = 401

        with pytest.raises(ApiError) as exc:
            api.login()
        assert exc.value.status_code == 401

    def test_no_content(self, api, backend):
        assert api.delete_event("e1") is None
        assert backend.calls == [("DELETE", "/events/e1", None)]

    def test_create_bundle_payload(self, api, backend):
        api.create_bundle(name="dj", items={"inv-1": 2})
        assert backend.calls[0][2] == {"name": "dj", "items": [{"inventory_item_id": "inv-1", "quantity": 2}]}


def test_make_client_from_env(monkeypatch):
    monkeypatch.delenv("LIGHTWAVE_API_URL", raising=False)
    with pytest.raises(RuntimeError):
        make_client_from_env()

    monkeypatch.setenv("LIGHTWAVE_API_URL", "http://api.test")
    monkeypatch.setenv("LIGHTWAVE_API_USER", "admin")
    monkeypatch.setenv("LIGHTWAVE_API_PASSWORD", "123")
    assert make_client_from_env().base_url == "http://api.test"
