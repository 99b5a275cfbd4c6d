"""Enums for rule categories, metrics, operators, severities, and schedules."""
from enum import Enum


class RuleCategory(str, Enum):
    RESOURCE = "resource"
    ENDPOINT = "endpoint"


class Metric(str, Enum):
    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"
    HTTP_STATUS = "http_status"
    RESPONSE_TIME = "response_time"


class Operator(str, Enum):
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    EQ = "eq"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class ScheduleType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class PresetFamily(str, Enum):
    HTTP_STATUS = "http_status"
    RESPONSE_TIME = "response_time"
    RESOURCE_THRESHOLD = "resource_threshold"
    ENDPOINT_DURATION = "endpoint_duration"
    RESOURCE_DURATION = "resource_duration"
    COOLDOWN = "cooldown"


class NotificationStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    PENDING = "pending"


CATEGORY_METRICS = {
    RuleCategory.RESOURCE: (Metric.CPU, Metric.MEMORY, Metric.DISK),
    RuleCategory.ENDPOINT: (Metric.HTTP_STATUS, Metric.RESPONSE_TIME),
}

OPERATOR_SYMBOLS = {
    "gt": ">",
    "gte": "≥",
    "lt": "<",
    "lte": "≤",
    "eq": "=",
}
