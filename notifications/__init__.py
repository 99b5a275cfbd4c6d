"""Notification read state and bell."""
from notifications.read_state import ReadStateTracker
from notifications.bell import NotificationBell
