"""Dataclasses for alert rules, channels, notification records, and services."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class AlertRule:
    id: str = ""
    name: str = ""
    category: str = "endpoint"
    metric: str = "http_status"
    operator: str = "gte"
    threshold: float = 400
    duration: int = 3
    severity: str = "warning"
    cooldown: int = 300
    channel_ids: list = field(default_factory=list)
    is_enabled: bool = True
    service_id: Optional[str] = None
    host_id: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def is_endpoint(self):
        return self.category == "endpoint"

    @property
    def notifies_all_channels(self):
        return not self.channel_ids


@dataclass
class NotificationChannel:
    id: str = ""
    name: str = ""
    type: str = "telegram"
    config: dict = field(default_factory=dict)
    is_enabled: bool = True
    created_at: str = ""


@dataclass
class NotificationRecord:
    id: int = 0
    channel_id: str = ""
    channel_name: str = ""
    channel_type: str = ""
    alert_type: str = "resource"
    message: str = ""
    status: str = "sent"
    retry_count: int = 0
    created_at: str = ""
    rule_id: Optional[str] = None
    severity: Optional[str] = None
    host_id: Optional[str] = None
    host_name: Optional[str] = None
    service_id: Optional[str] = None
    service_name: Optional[str] = None
    error_message: Optional[str] = None
    sent_at: Optional[str] = None


@dataclass
class ServiceCheck:
    id: str = ""
    name: str = ""
    type: str = "http"
    url: str = ""
    host: str = ""
    port: Optional[int] = None
    interval: int = 30
    timeout: int = 5000
    schedule_type: str = "interval"
    cron_expression: str = ""
    is_active: bool = True
    status: str = "unknown"
