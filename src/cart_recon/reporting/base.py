"""Reporter interface the engine emits structured events to."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Level(Enum):
    """Event severity."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ReportEvent:
    """A single structured event from a run."""

    name: str  # dotted event name, e.g. "intent.skipped"
    message: str
    level: Level = Level.INFO
    fields: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


class Reporter(ABC):
    """Abstract sink for run events."""

    @abstractmethod
    def emit(self, event: ReportEvent) -> None:
        """Deliver one event."""
        pass

    def event(self, name: str, message: str, level: Level = Level.INFO, **fields: Any) -> None:
        """Build and emit an event in one call."""
        self.emit(ReportEvent(name=name, message=message, level=level, fields=fields))

    def close(self) -> None:
        """Release any resources held by the sink."""
        pass


class NullReporter(Reporter):
    """Discards every event."""

    def emit(self, event: ReportEvent) -> None:
        pass
