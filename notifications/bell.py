"""Notification bell: latest history entries and the unread badge count."""
import logging
import threading

from utils.http_client import APIError
from monitor.scheduler import PollingScheduler

logger = logging.getLogger("mtmonitor.notifications.bell")

POLL_INTERVAL = 60
PREVIEW_LIMIT = 5
FETCH_LIMIT = 50


class NotificationBell:
    def __init__(self, api, read_state, fetch_limit=FETCH_LIMIT, preview_limit=PREVIEW_LIMIT,
                 poll_interval=POLL_INTERVAL):
        self.api = api
        self.read_state = read_state
        self.fetch_limit = fetch_limit
        self.preview_limit = preview_limit
        self.poll_interval = poll_interval
        self._items = []
        self._lock = threading.Lock()
        self._poller = None

    def refresh(self):
        """Fetch the latest history. API failures keep the previous items."""
        try:
            items, _ = self.api.get_notification_history(limit=self.fetch_limit)
        except APIError as e:
            logger.warning(f"Notification refresh failed: {e}")
            return False
        with self._lock:
            self._items = items
        return True

    @property
    def items(self):
        with self._lock:
            return list(self._items)

    @property
    def preview_items(self):
        return self.items[:self.preview_limit]

    @property
    def unread_count(self):
        return sum(1 for n in self.items if not self.read_state.is_read(n.id))

    def mark_as_read(self, notification_id):
        return self.read_state.mark_read(notification_id)

    def mark_all_as_read(self):
        return self.read_state.mark_read(*(n.id for n in self.items))

    def start_polling(self):
        if self._poller is None:
            self._poller = PollingScheduler(self.refresh, self.poll_interval, name="notification-bell")
        self._poller.start()

    def stop_polling(self):
        if self._poller is not None:
            self._poller.stop()
