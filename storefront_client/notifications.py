"""User-facing notifications."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Sink for short user-facing messages."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Sends notifications to the log."""

    def success(self, message: str) -> None:
        logger.info(f"✅ {message}")

    def error(self, message: str) -> None:
        logger.error(f"❌ {message}")


class BufferedNotifier(LoggingNotifier):
    """Logs notifications and keeps them until drained.

    The tool server drains the buffer after each call and appends the
    messages to the tool output.
    """

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        super().success(message)
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        super().error(message)
        self.messages.append(("error", message))

    def drain(self) -> list[tuple[str, str]]:
        """Return pending messages and clear the buffer."""
        messages, self.messages = self.messages, []
        return messages
