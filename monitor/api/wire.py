"""Translation between local models and the monitoring API's JSON shapes.

The server calls an endpoint rule a "service" rule. That rename happens
here and nowhere else.
"""
import json
import logging

from models.alerts import AlertRule, NotificationChannel, NotificationRecord, ServiceCheck

logger = logging.getLogger("mtmonitor.api.wire")

_CATEGORY_TO_WIRE = {"endpoint": "service", "resource": "resource"}
_WIRE_TO_CATEGORY = {v: k for k, v in _CATEGORY_TO_WIRE.items()}


def category_to_wire(category):
    category = getattr(category, "value", category)
    try:
        return _CATEGORY_TO_WIRE[category]
    except KeyError:
        raise ValueError(f"Unknown rule category: {category!r}") from None


def category_from_wire(rule_type):
    try:
        return _WIRE_TO_CATEGORY[rule_type]
    except KeyError:
        raise ValueError(f"Unknown rule type from API: {rule_type!r}") from None


def _plain(value):
    return getattr(value, "value", value)


def rule_to_payload(rule):
    """AlertRule -> create/update request body."""
    payload = {
        "name": rule.name,
        "type": category_to_wire(rule.category),
        "metric": _plain(rule.metric),
        "operator": _plain(rule.operator),
        "threshold": rule.threshold,
        "duration": rule.duration,
        "severity": _plain(rule.severity),
        "cooldown": rule.cooldown,
        "channelIds": list(rule.channel_ids),
    }
    if rule.is_endpoint:
        payload["serviceId"] = rule.service_id
    elif rule.host_id:
        payload["hostId"] = rule.host_id
    return payload


def rule_from_wire(data):
    """Server JSON -> AlertRule."""
    category = category_from_wire(data.get("type", "resource"))
    return AlertRule(
        id=str(data.get("id", "")),
        name=data.get("name", ""),
        category=category,
        metric=data.get("metric", ""),
        operator=data.get("operator", "gt"),
        threshold=data.get("threshold", 0),
        duration=data.get("duration", 1),
        severity=data.get("severity", "warning"),
        cooldown=data.get("cooldown", 300),
        channel_ids=list(data.get("channelIds") or []),
        is_enabled=data.get("isEnabled", True),
        service_id=data.get("serviceId"),
        host_id=data.get("hostId"),
        created_at=data.get("createdAt", ""),
        updated_at=data.get("updatedAt", ""),
    )


def channel_from_wire(data):
    config = data.get("config") or {}
    if isinstance(config, str):
        try:
            config = json.loads(config)
        except ValueError:
            logger.warning(f"Channel {data.get('id')} has unparseable config")
            config = {}
    return NotificationChannel(
        id=str(data.get("id", "")),
        name=data.get("name", ""),
        type=data.get("type", "telegram"),
        config=config,
        is_enabled=data.get("isEnabled", True),
        created_at=data.get("createdAt", ""),
    )


def channel_to_payload(channel):
    return {"name": channel.name, "type": channel.type, "config": dict(channel.config)}


def notification_from_wire(data):
    return NotificationRecord(
        id=int(data.get("id", 0)),
        channel_id=data.get("channelId", ""),
        channel_name=data.get("channelName", ""),
        channel_type=data.get("channelType", ""),
        alert_type=data.get("alertType", "resource"),
        message=data.get("message", ""),
        status=data.get("status", "sent"),
        retry_count=data.get("retryCount", 0),
        created_at=data.get("createdAt", ""),
        rule_id=data.get("ruleId"),
        severity=data.get("severity"),
        host_id=data.get("hostId"),
        host_name=data.get("hostName"),
        service_id=data.get("serviceId"),
        service_name=data.get("serviceName"),
        error_message=data.get("errorMessage"),
        sent_at=data.get("sentAt"),
    )


def service_from_wire(data):
    return ServiceCheck(
        id=str(data.get("id", "")),
        name=data.get("name", ""),
        type=data.get("type", "http"),
        url=data.get("url") or "",
        host=data.get("host") or "",
        port=data.get("port"),
        interval=data.get("interval", 30),
        timeout=data.get("timeout", 5000),
        schedule_type=data.get("scheduleType") or "interval",
        cron_expression=data.get("cronExpression") or "",
        is_active=data.get("isActive", True),
        status=data.get("status", "unknown"),
    )


def service_to_payload(service):
    payload = {
        "name": service.name,
        "type": service.type,
        "interval": service.interval,
        "timeout": service.timeout,
        "scheduleType": service.schedule_type,
    }
    if service.id:
        payload["id"] = service.id
    if service.url:
        payload["url"] = service.url
    if service.host:
        payload["host"] = service.host
    if service.port is not None:
        payload["port"] = service.port
    if service.schedule_type == "cron":
        payload["cronExpression"] = service.cron_expression
    return payload
