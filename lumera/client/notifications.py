"""Transient user notifications (toasts)"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List
import logging

logger = logging.getLogger(__name__)

class NotificationVariant(str, Enum):
    DEFAULT = "default"
    WARNING = "warning"
    DESTRUCTIVE = "destructive"

@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT

NotificationListener = Callable[[Notification], None]

class Notifier:
    """Fans notifications out to listeners and keeps the most recent ones"""

    def __init__(self, history_size: int = 50):
        self.history: Deque[Notification] = deque(maxlen=history_size)
        self._listeners: List[NotificationListener] = []

    def subscribe(self, listener: NotificationListener):
        self._listeners.append(listener)

    def notify(
        self,
        title: str,
        description: str,
        variant: NotificationVariant = NotificationVariant.DEFAULT
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.history.append(notification)

        level = logging.WARNING if variant != NotificationVariant.DEFAULT else logging.INFO
        logger.log(level, f"{title}: {description}")

        for listener in list(self._listeners):
            listener(notification)
        return notification
