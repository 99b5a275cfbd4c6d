"""REST client for the monitoring API (alert rules, channels, history, services)."""
import logging

from utils.http_client import HTTPClient, APIError
from monitor.api.wire import (
    rule_from_wire, rule_to_payload, channel_from_wire, channel_to_payload,
    notification_from_wire, service_from_wire, service_to_payload,
)

logger = logging.getLogger("mtmonitor.api.client")

HISTORY_FILTER_KEYS = ("channel_id", "alert_type", "status", "from", "to", "limit", "offset")


class MonitoringAPI:
    """Every endpoint answers with {success, data, error: {code, message}}."""

    def __init__(self, base_url, timeout=30, http=None):
        self.client = http or HTTPClient(base_url=base_url, timeout=timeout)

    def _call(self, method, path, **kwargs):
        body = self.client.request(method, path, **kwargs)
        if not isinstance(body, dict):
            raise APIError(f"Malformed response from {path}", response_body=body)
        if not body.get("success"):
            error = body.get("error") or {}
            raise APIError(error.get("message") or "API Error", code=error.get("code"), response_body=body)
        return body.get("data")

    # ── Alert rules ───────────────────────────────────

    def get_alert_rules(self):
        data = self._call("GET", "/alert-rules") or []
        return [rule_from_wire(r) for r in data]

    def get_alert_rule(self, rule_id):
        return rule_from_wire(self._call("GET", f"/alert-rules/{rule_id}"))

    def create_alert_rule(self, payload):
        return rule_from_wire(self._call("POST", "/alert-rules", json=payload))

    def update_alert_rule(self, rule_id, payload):
        return rule_from_wire(self._call("PUT", f"/alert-rules/{rule_id}", json=payload))

    def delete_alert_rule(self, rule_id):
        self._call("DELETE", f"/alert-rules/{rule_id}")

    def toggle_alert_rule(self, rule_id):
        data = self._call("POST", f"/alert-rules/{rule_id}/toggle") or {}
        return bool(data.get("isEnabled"))

    def save_rule(self, rule):
        """Create or update depending on whether the rule already has an id."""
        payload = rule_to_payload(rule)
        if rule.id:
            return self.update_alert_rule(rule.id, payload)
        return self.create_alert_rule(payload)

    # ── Notification channels ─────────────────────────

    def get_notification_channels(self):
        data = self._call("GET", "/notifications") or []
        return [channel_from_wire(c) for c in data]

    def create_notification_channel(self, channel):
        return channel_from_wire(self._call("POST", "/notifications", json=channel_to_payload(channel)))

    def update_notification_channel(self, channel_id, channel):
        return channel_from_wire(
            self._call("PUT", f"/notifications/{channel_id}", json=channel_to_payload(channel))
        )

    def toggle_notification_channel(self, channel_id):
        data = self._call("POST", f"/notifications/{channel_id}/toggle") or {}
        return bool(data.get("isEnabled"))

    def test_notification_channel(self, channel_id):
        data = self._call("POST", f"/notifications/{channel_id}/test") or {}
        return data.get("message", "")

    def delete_notification_channel(self, channel_id):
        self._call("DELETE", f"/notifications/{channel_id}")

    # ── Notification history ──────────────────────────

    def get_notification_history(self, **filters):
        """Returns (records, total). Falsy filter values are not sent."""
        params = {k: str(filters[k]) for k in HISTORY_FILTER_KEYS if filters.get(k)}
        data = self._call("GET", "/notification-history", params=params or None) or {}
        items = [notification_from_wire(n) for n in data.get("items") or []]
        return items, data.get("total", len(items))

    def get_notification_stats(self, days=7):
        return self._call("GET", "/notification-history/stats", params={"days": str(days)}) or {}

    def get_notification(self, notification_id):
        return notification_from_wire(self._call("GET", f"/notification-history/{notification_id}"))

    def cleanup_notification_history(self, days=30):
        data = self._call("DELETE", "/notification-history/cleanup", params={"days": str(days)}) or {}
        return data.get("deleted", 0)

    # ── Services ──────────────────────────────────────

    def get_services(self):
        data = self._call("GET", "/services") or []
        return [service_from_wire(s) for s in data]

    def get_service(self, service_id):
        return service_from_wire(self._call("GET", f"/services/{service_id}"))

    def create_service(self, service):
        return service_from_wire(self._call("POST", "/services", json=service_to_payload(service)))

    def update_service(self, service_id, service):
        return service_from_wire(self._call("PUT", f"/services/{service_id}", json=service_to_payload(service)))

    def health(self):
        return self._call("GET", "/health") or {}

    def close(self):
        self.client.close()
