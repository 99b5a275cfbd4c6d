"""Shared test fixtures."""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.alerts import AlertRule
from monitor.api.mock_source import MockMonitoringAPI
from utils.storage import KeyValueStore


@pytest.fixture
def mock_api():
    """In-memory API seeded from config/mock_data.yaml."""
    return MockMonitoringAPI()


@pytest.fixture
def temp_store(tmp_path):
    """Key-value store in a temporary directory."""
    return KeyValueStore(tmp_path / "prefs.json")


@pytest.fixture
def endpoint_rule():
    return AlertRule(
        id="rule-1", name="API errors", category="endpoint", metric="http_status",
        operator="gte", threshold=500, duration=5, severity="critical", cooldown=1800,
        channel_ids=["ch-a"], service_id="api-gateway",
    )


@pytest.fixture
def resource_rule():
    return AlertRule(
        id="rule-2", name="Disk", category="resource", metric="disk",
        operator="gte", threshold=87, duration=10, severity="warning", cooldown=1200,
        channel_ids=[], host_id="db-01",
    )
