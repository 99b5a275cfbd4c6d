"""Tests for the HTTP layer and the monitoring API client."""
import pytest
import requests
from unittest.mock import MagicMock, patch

from models.alerts import AlertRule
from monitor.api import create_api
from monitor.api.client import MonitoringAPI
from monitor.api.mock_source import MockMonitoringAPI
from utils.http_client import HTTPClient, APIError


def _response(status=200, body=None, content=b"x"):
    resp = MagicMock()
    resp.status_code = status
    resp.content = content
    resp.text = str(body)
    resp.json.return_value = body
    return resp


def _api_with(body):
    http = MagicMock()
    http.request.return_value = body
    return MonitoringAPI("http://unused", http=http), http


# ── HTTPClient ────────────────────────────────────────

def test_http_client_returns_json():
    client = HTTPClient("http://api.test/v1/")
    with patch.object(client.session, "request", return_value=_response(200, {"ok": 1})) as req:
        assert client.get("/alert-rules", params={"a": "1"}) == {"ok": 1}
    method, url = req.call_args[0]
    assert (method, url) == ("GET", "http://api.test/v1/alert-rules")


def test_http_client_error_status():
    client = HTTPClient("http://api.test")
    with patch.object(client.session, "request", return_value=_response(503, "down")):
        with pytest.raises(APIError) as exc:
            client.get("/x")
    assert str(exc.value) == "HTTP Error: 503"
    assert exc.value.status_code == 503


def test_http_client_makes_single_attempt():
    client = HTTPClient("http://api.test")
    with patch.object(client.session, "request", side_effect=requests.exceptions.ConnectionError("refused")) as req:
        with pytest.raises(APIError):
            client.get("/x")
    assert req.call_count == 1


def test_http_client_empty_body():
    client = HTTPClient("http://api.test")
    with patch.object(client.session, "request", return_value=_response(204, None, content=b"")):
        assert client.delete("/x") is None


# ── Envelope handling ─────────────────────────────────

def test_envelope_unwrapped():
    api, http = _api_with({"success": True, "data": [
        {"id": "r1", "type": "resource", "metric": "cpu", "operator": "gt", "threshold": 80},
    ]})
    rules = api.get_alert_rules()
    assert len(rules) == 1
    assert rules[0].category == "resource"
    http.request.assert_called_with("GET", "/alert-rules")


def test_envelope_failure_raises_with_message():
    api, _ = _api_with({"success": False, "data": None,
                        "error": {"code": "VALIDATION", "message": "threshold required"}})
    with pytest.raises(APIError) as exc:
        api.get_alert_rules()
    assert str(exc.value) == "threshold required"
    assert exc.value.code == "VALIDATION"


def test_envelope_failure_default_message():
    api, _ = _api_with({"success": False})
    with pytest.raises(APIError, match="API Error"):
        api.health()


def test_malformed_response():
    api, _ = _api_with("<html>")
    with pytest.raises(APIError):
        api.get_services()


def test_null_data_lists_are_empty():
    api, _ = _api_with({"success": True, "data": None})
    assert api.get_alert_rules() == []
    assert api.get_notification_channels() == []


def test_save_rule_create_vs_update():
    api, http = _api_with({"success": True, "data": {"id": "new", "type": "service", "metric": "http_status"}})
    rule = AlertRule(name="n", category="endpoint", service_id="svc")
    api.save_rule(rule)
    method, path = http.request.call_args[0]
    assert (method, path) == ("POST", "/alert-rules")
    assert http.request.call_args[1]["json"]["type"] == "service"

    rule.id = "r9"
    api.save_rule(rule)
    method, path = http.request.call_args[0]
    assert (method, path) == ("PUT", "/alert-rules/r9")


def test_history_filters():
    api, http = _api_with({"success": True, "data": {"items": [{"id": 1}], "total": 12}})
    items, total = api.get_notification_history(limit=50, status="failed", offset=0, channel_id=None)
    assert total == 12
    assert items[0].id == 1
    assert http.request.call_args[1]["params"] == {"limit": "50", "status": "failed"}


def test_toggle_returns_state():
    api, http = _api_with({"success": True, "data": {"id": "r1", "isEnabled": False}})
    assert api.toggle_alert_rule("r1") is False
    http.request.assert_called_with("POST", "/alert-rules/r1/toggle")


# ── Factory ───────────────────────────────────────────

def test_create_api_mock_flag():
    assert isinstance(create_api({"api": {"use_mock": True}}), MockMonitoringAPI)
    live = create_api({"api": {"use_mock": False, "base_url": "http://h:1/api/v1"}})
    assert type(live) is MonitoringAPI
    assert live.client.base_url == "http://h:1/api/v1"
