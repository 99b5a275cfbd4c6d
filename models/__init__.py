"""Data models."""
from models.enums import (
    RuleCategory, Metric, Operator, Severity, ScheduleType, PresetFamily, NotificationStatus,
)
from models.alerts import AlertRule, NotificationChannel, NotificationRecord, ServiceCheck
from models.schedule import Schedule, ScheduleError
