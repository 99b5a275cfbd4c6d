"""Tests for API JSON <-> model translation."""
import pytest

from models.alerts import AlertRule, ServiceCheck
from monitor.api.wire import (
    category_from_wire, category_to_wire, channel_from_wire, notification_from_wire,
    rule_from_wire, rule_to_payload, service_from_wire, service_to_payload,
)


def test_category_mapping():
    assert category_to_wire("endpoint") == "service"
    assert category_to_wire("resource") == "resource"
    assert category_from_wire("service") == "endpoint"
    assert category_from_wire("resource") == "resource"


def test_category_mapping_unknown():
    with pytest.raises(ValueError):
        category_to_wire("service")
    with pytest.raises(ValueError):
        category_from_wire("endpoint")


def test_rule_from_wire():
    rule = rule_from_wire({
        "id": "r1", "name": "API", "type": "service", "serviceId": "api", "metric": "http_status",
        "operator": "gte", "threshold": 400, "duration": 3, "severity": "warning",
        "cooldown": 300, "channelIds": None, "isEnabled": False,
    })
    assert rule.category == "endpoint"
    assert rule.service_id == "api"
    assert rule.channel_ids == []
    assert rule.notifies_all_channels
    assert rule.is_enabled is False


def test_rule_from_wire_keeps_legacy_metric():
    rule = rule_from_wire({"id": "r2", "type": "service", "metric": "status_change"})
    assert rule.metric == "status_change"


def test_rule_round_trip_through_wire(endpoint_rule):
    payload = rule_to_payload(endpoint_rule)
    back = rule_from_wire(dict(payload, id=endpoint_rule.id))
    assert back.category == endpoint_rule.category
    assert (back.metric, back.operator, back.threshold) == ("http_status", "gte", 500)
    assert back.channel_ids == ["ch-a"]


def test_resource_payload_has_host_not_service(resource_rule):
    payload = rule_to_payload(resource_rule)
    assert payload["type"] == "resource"
    assert payload["hostId"] == "db-01"
    assert "serviceId" not in payload


def test_payload_copies_channel_list():
    rule = AlertRule(name="x", category="resource", metric="cpu", channel_ids=["a"])
    payload = rule_to_payload(rule)
    payload["channelIds"].append("b")
    assert rule.channel_ids == ["a"]


def test_channel_config_json_string():
    ch = channel_from_wire({"id": "c1", "name": "TG", "type": "telegram",
                            "config": '{"botToken": "t", "chatId": "1"}'})
    assert ch.config == {"botToken": "t", "chatId": "1"}
    bad = channel_from_wire({"id": "c2", "config": "{not json"})
    assert bad.config == {}


def test_notification_from_wire():
    n = notification_from_wire({"id": "7", "channelName": "Ops", "status": "failed",
                                "errorMessage": "boom", "retryCount": 2})
    assert n.id == 7
    assert n.error_message == "boom"
    assert n.retry_count == 2


def test_service_payload_cron_only_when_scheduled():
    svc = ServiceCheck(id="s1", name="S", url="http://x", schedule_type="interval", cron_expression="0 9 * * *")
    assert "cronExpression" not in service_to_payload(svc)
    svc.schedule_type = "cron"
    assert service_to_payload(svc)["cronExpression"] == "0 9 * * *"


def test_service_from_wire_defaults():
    svc = service_from_wire({"id": "s1", "name": "S", "cronExpression": None, "scheduleType": None})
    assert svc.schedule_type == "interval"
    assert svc.cron_expression == ""
