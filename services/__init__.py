"""Side-effect services used by the route handlers."""

from .notifier import Notifier, notifier

__all__ = ["Notifier", "notifier"]
