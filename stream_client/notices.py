"""User-facing notices raised by the client (e.g. transport failures)."""

from typing import Protocol

from stream_client.logging import get_logger

logger = get_logger("notices")


class Notifier(Protocol):
    def notify(self, message: str, level: str = "error") -> None:
        ...


class LogNotifier:
    """Default notifier: emits the notice as a structured log event."""

    def notify(self, message: str, level: str = "error") -> None:
        log_method = getattr(logger, level, logger.error)
        log_method("admin_notice", message=message)


class CollectingNotifier:
    """Keeps notices so a host UI can render them later."""

    def __init__(self) -> None:
        self.notices: list[tuple[str, str]] = []

    def notify(self, message: str, level: str = "error") -> None:
        self.notices.append((level, message))

    def clear(self) -> None:
        self.notices.clear()


def transport_error_notice(message: str) -> str:
    return f"Stream API Error. {message}."
