"""Monitoring API clients: live REST or offline mock."""
import logging

from monitor.api.client import MonitoringAPI
from monitor.api.mock_source import MockMonitoringAPI

logger = logging.getLogger("mtmonitor.api")


def create_api(config=None):
    """Pick the live client or the mock source from the ``api`` config section."""
    api_cfg = (config or {}).get("api", {})
    if api_cfg.get("use_mock"):
        return MockMonitoringAPI(data_path=api_cfg.get("mock_data"))
    base_url = api_cfg.get("base_url", "http://localhost:3001/api/v1")
    logger.debug(f"Using monitoring API at {base_url}")
    return MonitoringAPI(base_url, timeout=api_cfg.get("timeout", 30))
