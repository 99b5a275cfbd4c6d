"""Offline stand-in for the monitoring API, backed by YAML fixtures.

Selected with ``api.use_mock: true``. It answers the same paths as the real
server from an in-memory copy of ``config/mock_data.yaml``, so rule edits
and toggles work during a session without a backend.
"""
import copy
import logging
from datetime import datetime, timezone
from pathlib import Path

import yaml

from utils.http_client import APIError
from monitor.api.client import MonitoringAPI

logger = logging.getLogger("mtmonitor.api.mock")

_DEFAULT_DATA = Path(__file__).resolve().parent.parent.parent / "config" / "mock_data.yaml"

_COLLECTIONS = {
    "alert-rules": "alert_rules",
    "notifications": "channels",
    "services": "services",
}


def _now():
    return datetime.now(timezone.utc).isoformat()


class MockMonitoringAPI(MonitoringAPI):

    def __init__(self, data_path=None, data=None):
        if data is None:
            path = Path(data_path) if data_path else _DEFAULT_DATA
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            logger.info(f"Using mock data from {path}")
        self.data = {
            "alert_rules": copy.deepcopy(data.get("alert_rules", [])),
            "channels": copy.deepcopy(data.get("channels", [])),
            "services": copy.deepcopy(data.get("services", [])),
            "notification_history": copy.deepcopy(data.get("notification_history", [])),
        }
        self._next_id = 1

    def _call(self, method, path, params=None, json=None):
        parts = [p for p in path.split("/") if p]
        if not parts:
            raise APIError("Not found", status_code=404, code="NOT_FOUND")

        head = parts[0]
        if head == "health":
            return {"status": "ok", "database": "connected", "uptime": 0}
        if head == "notification-history":
            return self._history(method, parts[1:], params or {})
        if head not in _COLLECTIONS:
            raise APIError(f"Not found: {path}", status_code=404, code="NOT_FOUND")

        items = self.data[_COLLECTIONS[head]]
        if len(parts) == 1:
            if method == "GET":
                return copy.deepcopy(items)
            if method == "POST":
                return self._create(head, items, json or {})
        elif len(parts) == 2:
            item = self._find(items, parts[1])
            if method == "GET":
                return copy.deepcopy(item)
            if method == "PUT":
                item.update(json or {})
                item["updatedAt"] = _now()
                return copy.deepcopy(item)
            if method == "DELETE":
                items.remove(item)
                return None
        elif len(parts) == 3 and method == "POST":
            item = self._find(items, parts[1])
            if parts[2] == "toggle":
                key = "isActive" if head == "services" else "isEnabled"
                item[key] = not item.get(key, True)
                return {"id": item["id"], key: item[key]}
            if parts[2] == "test" and head == "notifications":
                return {"message": f"Test message sent to {item.get('name', item['id'])}"}

        raise APIError(f"Unsupported mock route: {method} {path}", status_code=405, code="METHOD_NOT_ALLOWED")

    def _find(self, items, item_id):
        for item in items:
            if str(item.get("id")) == item_id:
                return item
        raise APIError(f"Not found: {item_id}", status_code=404, code="NOT_FOUND")

    def _create(self, head, items, payload):
        item = dict(payload)
        if not item.get("id"):
            item["id"] = f"mock-{head}-{self._next_id}"
            self._next_id += 1
        if head == "services":
            item.setdefault("isActive", True)
            item.setdefault("status", "unknown")
        else:
            item.setdefault("isEnabled", True)
        item["createdAt"] = item["updatedAt"] = _now()
        items.append(item)
        return copy.deepcopy(item)

    def _history(self, method, rest, params):
        history = self.data["notification_history"]
        if not rest and method == "GET":
            items = list(history)
            for key, field in (("channel_id", "channelId"), ("alert_type", "alertType"), ("status", "status")):
                if params.get(key):
                    items = [n for n in items if n.get(field) == params[key]]
            items.sort(key=lambda n: n.get("createdAt", ""), reverse=True)
            total = len(items)
            offset = int(params.get("offset", 0))
            limit = int(params.get("limit", 50))
            return {"items": copy.deepcopy(items[offset:offset + limit]), "total": total,
                    "limit": limit, "offset": offset}
        if rest == ["stats"] and method == "GET":
            sent = sum(1 for n in history if n.get("status") == "sent")
            failed = sum(1 for n in history if n.get("status") == "failed")
            by_channel, by_type = {}, {}
            for n in history:
                by_channel[n.get("channelName", "")] = by_channel.get(n.get("channelName", ""), 0) + 1
                by_type[n.get("alertType", "")] = by_type.get(n.get("alertType", ""), 0) + 1
            total = sent + failed
            return {"totalSent": sent, "totalFailed": failed,
                    "successRate": (sent / total * 100) if total else 0,
                    "byChannel": by_channel, "byAlertType": by_type}
        if rest == ["cleanup"] and method == "DELETE":
            return {"deleted": 0}
        if len(rest) == 1 and method == "GET":
            return copy.deepcopy(self._find(history, rest[0]))
        raise APIError("Unsupported mock route", status_code=405, code="METHOD_NOT_ALLOWED")

    def close(self):
        pass
