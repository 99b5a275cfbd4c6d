"""Formatting utilities for display."""
from datetime import datetime, timezone

from models.enums import OPERATOR_SYMBOLS

METRIC_LABELS = {
    "cpu": "CPU",
    "memory": "Memory",
    "disk": "Disk",
    "http_status": "HTTP Status",
    "response_time": "Response Time",
}


def format_number(value):
    """80.0 → '80', 2.5 → '2.5'. Non-numbers pass through str()."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def threshold_unit(metric):
    if metric == "response_time":
        return "ms"
    if metric == "http_status":
        return ""
    return "%"


def format_cooldown(seconds):
    """Format a cooldown in seconds: 300 → '5min', 3600 → '1hr', 90 → '90s'."""
    if seconds is None:
        return "N/A"
    seconds = int(seconds)
    if seconds % 3600 == 0:
        return f"{seconds // 3600}hr"
    if seconds % 60 == 0:
        return f"{seconds // 60}min"
    return f"{seconds}s"


def format_duration(rule):
    """Resource durations are minutes, endpoint durations are consecutive checks."""
    if rule.category == "endpoint":
        return f"{rule.duration}×"
    return f"{rule.duration}min"


def format_rule_condition(rule, service_name=None):
    """One-line rule summary, e.g. 'CPU > 80% · 3min' or 'HTTP Status ≥ 400 · 3× [api]'."""
    label = METRIC_LABELS.get(rule.metric, rule.metric)
    symbol = OPERATOR_SYMBOLS.get(rule.operator, ">")
    text = f"{label} {symbol} {format_number(rule.threshold)}{threshold_unit(rule.metric)} · {format_duration(rule)}"
    if rule.category == "endpoint":
        text += f" [{service_name or rule.service_id or '...'}]"
    return text


def format_timestamp(ts):
    """Format a datetime (or ISO string) to a human-readable string."""
    if ts is None or ts == "":
        return "N/A"
    if isinstance(ts, str):
        try:
            ts = datetime.fromisoformat(ts.replace("Z", "+00:00"))
        except ValueError:
            return ts
    return ts.strftime("%Y-%m-%d %H:%M UTC")


def time_ago(dt):
    """Return human-readable time since dt. E.g., '3h ago', '2d ago'."""
    if dt is None or dt == "":
        return "N/A"
    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt.replace("Z", "+00:00"))
        except ValueError:
            return dt
    now = datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    delta = now - dt
    seconds = int(delta.total_seconds())

    if seconds < 60:
        return f"{seconds}s ago"
    elif seconds < 3600:
        return f"{seconds // 60}m ago"
    elif seconds < 86400:
        return f"{seconds // 3600}h ago"
    else:
        return f"{seconds // 86400}d ago"
