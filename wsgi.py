"""WSGI entry point for production deployment."""
import sys
import os
import logging
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).parent))

from config import load_config
from utils.logger import setup_logging
from utils.storage import KeyValueStore
from monitor.api import create_api
from notifications.read_state import ReadStateTracker
from notifications.bell import NotificationBell
from web.app import create_app

logger = logging.getLogger("mtmonitor.wsgi")

config = load_config(os.environ.get("MT_CONFIG_PATH"))
setup_logging(config["logging"]["level"], config["logging"].get("file"))

api = create_api(config)
notif_cfg = config["notifications"]
read_state = ReadStateTracker(KeyValueStore(config["storage"]["path"]), capacity=notif_cfg["max_read_ids"])
bell = NotificationBell(api, read_state, fetch_limit=notif_cfg["fetch_limit"],
                        preview_limit=notif_cfg["preview_limit"], poll_interval=notif_cfg["poll_interval"])
bell.start_polling()

app = create_app(config, {"api": api, "bell": bell})
logger.info(f"Web backend ready ({'mock' if config['api']['use_mock'] else config['api']['base_url']})")
