"""Event Publisher port - interface for publishing events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol, runtime_checkable


class Severity(str, Enum):
    """Event severity, mirrors the logging levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def log_level(self) -> int:
        return getattr(logging, self.name)


@dataclass(frozen=True, slots=True)
class ProcessingEvent:
    """Event during processing."""
    stage: str
    message: str
    severity: Severity = Severity.INFO
    progress: float | None = None  # 0.0 to 1.0
    image_name: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class EventPublisher(Protocol):
    """Port for publishing processing events."""

    def publish(self, event: ProcessingEvent) -> None:
        """Publish an event."""
        ...

    def subscribe(self, callback: Callable[[ProcessingEvent], None]) -> None:
        """Subscribe to events."""
        ...


class SimpleEventPublisher:
    """Simple synchronous event publisher."""

    def __init__(self):
        self._subscribers: list[Callable[[ProcessingEvent], None]] = []

    def publish(self, event: ProcessingEvent) -> None:
        for callback in self._subscribers:
            callback(event)

    def subscribe(self, callback: Callable[[ProcessingEvent], None]) -> None:
        self._subscribers.append(callback)


class LoggingEventSubscriber:
    """Forward events to a standard library logger."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("lama_eraser.events")

    def __call__(self, event: ProcessingEvent) -> None:
        prefix = f"[{event.image_name}] " if event.image_name else ""
        extras = " ".join(f"{k}={v}" for k, v in event.fields.items())
        message = f"{prefix}{event.stage}: {event.message}"
        if extras:
            message = f"{message} ({extras})"
        self._logger.log(event.severity.log_level, message)
