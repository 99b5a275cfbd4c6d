"""Tests for the Flask JSON backend."""
import pytest
from unittest.mock import MagicMock

from models.alerts import NotificationRecord
from web.app import create_app


@pytest.fixture
def bell():
    bell = MagicMock()
    bell.items = [NotificationRecord(id=1, message="a"), NotificationRecord(id=2, message="b")]
    bell.preview_items = bell.items
    bell.unread_count = 1
    bell.read_state.is_read.side_effect = lambda nid: nid == 1
    return bell


@pytest.fixture
def client(bell):
    app = create_app({"api": {"use_mock": True}}, {"bell": bell})
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    data = client.get("/api/health").get_json()
    assert data == {"status": "ok", "mock": True}


# ── Presets ───────────────────────────────────────────

def test_presets_family(client):
    data = client.get("/api/presets/http_status").get_json()
    assert [p["name"] for p in data["presets"]] == ["2xx", "4xx", "5xx"]
    assert data["presets"][0]["update"] == {"threshold": 299, "operator": "lte"}


def test_presets_unknown_family(client):
    assert client.get("/api/presets/bogus").status_code == 404


def test_presets_detect(client):
    resp = client.get("/api/presets/http_status/detect?operator=gte&value=500")
    assert resp.get_json() == {"preset": "5xx"}
    resp = client.get("/api/presets/cooldown/detect?value=3600.0")
    assert resp.get_json() == {"preset": "1hr"}


def test_presets_detect_never_fails(client):
    assert client.get("/api/presets/bogus/detect?value=1").get_json() == {"preset": "custom"}
    assert client.get("/api/presets/cooldown/detect?value=abc").get_json() == {"preset": "custom"}


def test_presets_apply(client):
    assert client.get("/api/presets/cooldown/15min").get_json() == {"update": {"cooldown": 900}}
    assert client.get("/api/presets/cooldown/custom").get_json() == {"update": {}}


# ── Rule preview ──────────────────────────────────────

def test_rule_preview_category_switch(client):
    resp = client.post("/api/rules/preview", json={
        "rule": {"type": "service", "metric": "http_status", "operator": "lte", "threshold": 299,
                 "duration": 5, "cooldown": 900, "serviceId": "api"},
        "category": "resource",
    })
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["rule"]["category"] == "resource"
    assert (data["rule"]["metric"], data["rule"]["threshold"], data["rule"]["duration"]) == ("cpu", 80, 3)
    assert data["rule"]["cooldown"] == 900
    assert data["chips"] == {"threshold": "80%", "duration": "3min", "cooldown": "15min"}
    assert data["preview"] == "CPU > 80% · 3min"


def test_rule_preview_presets(client):
    resp = client.post("/api/rules/preview", json={
        "rule": {"type": "service", "serviceId": "api", "metric": "http_status",
                 "operator": "gte", "threshold": 400, "duration": 3},
        "presets": {"http_status": "5xx"},
        "serviceName": "API Gateway",
    })
    data = resp.get_json()
    assert data["chips"]["threshold"] == "5xx"
    assert data["preview"] == "HTTP Status ≥ 500 · 3× [API Gateway]"
    assert "name" in data["errors"]


def test_rule_preview_bad_preset(client):
    resp = client.post("/api/rules/preview", json={"rule": {"type": "resource"},
                                                  "presets": {"http_status": "5xx"}})
    assert resp.status_code == 400


def test_rule_preview_bad_metric(client):
    resp = client.post("/api/rules/preview", json={"rule": {"type": "resource"}, "metric": "response_time"})
    assert resp.status_code == 400
    assert "metric" in resp.get_json()["errors"]


# ── Schedules ─────────────────────────────────────────

def test_schedule_encode(client):
    resp = client.post("/api/schedule/encode", json={"type": "weekly", "hour": 14, "minute": 30, "weekday": 3})
    assert resp.get_json() == {"cron": "30 14 * * 3", "description": "Every Wednesday at 14:30"}


def test_schedule_encode_invalid(client):
    resp = client.post("/api/schedule/encode", json={"type": "daily", "hour": 25, "minute": 0})
    assert resp.status_code == 400


def test_schedule_decode(client):
    data = client.get("/api/schedule/decode", query_string={"cron": "45 23 * * *"}).get_json()
    assert data["schedule"] == {"type": "daily", "hour": 23, "minute": 45, "weekday": 1}
    assert data["recognized"] is True


def test_schedule_decode_zero_padded_is_recognized(client):
    data = client.get("/api/schedule/decode", query_string={"cron": "05 09 * * *"}).get_json()
    assert data["schedule"] == {"type": "daily", "hour": 9, "minute": 5, "weekday": 1}
    assert data["recognized"] is True


def test_schedule_decode_legacy(client):
    data = client.get("/api/schedule/decode", query_string={"cron": "*/15 * * * *"}).get_json()
    assert data["schedule"] == {"type": "daily", "hour": 9, "minute": 0, "weekday": 1}
    assert data["recognized"] is False


# ── Notifications ─────────────────────────────────────

def test_notifications_unread(client, bell):
    data = client.get("/api/notifications/unread").get_json()
    assert data["unread"] == 1
    assert [(p["id"], p["read"]) for p in data["preview"]] == [(1, True), (2, False)]
    bell.refresh.assert_not_called()


def test_notifications_unavailable():
    app = create_app({"api": {}}, {})
    assert app.test_client().get("/api/notifications/unread").status_code == 404
