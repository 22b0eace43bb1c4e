# /carepoint/services/base.py
import logging

logger = logging.getLogger(__name__)


class BaseService:
    """Shared plumbing for domain services that emit notifications."""

    def __init__(self, notification_service=None):
        self.notifications = notification_service

    def _notify(self, method_name, *args):
        """Best-effort delivery: a failing sink is logged and never fails the caller."""
        if self.notifications is None:
            return
        try:
            getattr(self.notifications, method_name)(*args)
        except Exception as e:
            logger.error(f"Notification '{method_name}' failed: {e}")
