import logging
from collections import deque
from typing import Deque, Tuple

logger = logging.getLogger(__name__)


class Notifier:
    """User-facing success/failure messages, logged and kept for display"""

    def __init__(self, history_size: int = 20):
        self.history: Deque[Tuple[str, str]] = deque(maxlen=history_size)

    def success(self, message: str) -> None:
        logger.info(message)
        self.history.append(("success", message))

    def error(self, message: str) -> None:
        logger.warning(message)
        self.history.append(("error", message))

    @property
    def last(self):
        return self.history[-1] if self.history else None
