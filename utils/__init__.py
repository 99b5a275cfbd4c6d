"""Utility modules for the monitoring client."""
from utils.logger import setup_logging
from utils.formatters import format_number, format_cooldown, format_rule_condition, format_timestamp, time_ago
from utils.storage import KeyValueStore
from utils.http_client import HTTPClient, APIError
