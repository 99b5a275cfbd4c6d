"""Which notification-history entries the user has already seen."""
import logging
import threading

logger = logging.getLogger("mtmonitor.notifications.read_state")

STORAGE_KEY = "mt-notif-read-ids"
MAX_STORED_IDS = 500


def _is_id(value):
    return isinstance(value, int) and not isinstance(value, bool)


class ReadStateTracker:
    """Ordered, bounded set of read notification ids.

    Ids are kept in the order they were first marked read and persisted as a
    JSON list. Past ``capacity`` the oldest ids are dropped first, so the
    most recently read entries always survive a trim. Storage failures are
    logged and otherwise ignored: losing read state only makes the badge
    over-count.
    """

    def __init__(self, store, capacity=MAX_STORED_IDS, key=STORAGE_KEY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.store = store
        self.capacity = capacity
        self.key = key
        self._lock = threading.Lock()
        self._ids = self._load()

    def _load(self):
        try:
            raw = self.store.get(self.key, [])
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load read notification ids: {e}")
            return {}
        if not isinstance(raw, list):
            logger.warning(f"Ignoring malformed read-id list under {self.key}")
            return {}
        ids = {}
        for item in raw:
            if _is_id(item):
                ids[item] = None
        return self._trimmed(ids)

    def _trimmed(self, ids):
        excess = len(ids) - self.capacity
        if excess <= 0:
            return ids
        keys = list(ids)[excess:]
        return dict.fromkeys(keys)

    def _save(self):
        try:
            self.store.set(self.key, list(self._ids))
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not save read notification ids: {e}")

    def is_read(self, notification_id):
        with self._lock:
            return notification_id in self._ids

    def mark_read(self, *notification_ids):
        """Mark ids as read and return how many were new.

        Ids already read keep their original position. History ids are
        integers; anything else raises ValueError before state changes.
        """
        for nid in notification_ids:
            if not _is_id(nid):
                raise ValueError(f"Notification ids must be integers, got {nid!r}")
        with self._lock:
            added = 0
            for nid in notification_ids:
                if nid not in self._ids:
                    self._ids[nid] = None
                    added += 1
            if added:
                self._ids = self._trimmed(self._ids)
                self._save()
            return added

    def ids(self):
        """Read ids, oldest first."""
        with self._lock:
            return list(self._ids)

    def __contains__(self, notification_id):
        return self.is_read(notification_id)

    def __len__(self):
        with self._lock:
            return len(self._ids)
