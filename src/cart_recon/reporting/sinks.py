"""Reporter sinks: console, log file, memory and fan-out."""

from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .base import Level, Reporter, ReportEvent

LEVEL_STYLES = {
    Level.DEBUG: "dim",
    Level.INFO: "",
    Level.WARNING: "yellow",
    Level.ERROR: "bold red",
}

RULE = "=" * 60


def format_timestamp(moment: datetime) -> str:
    """Format as ``HH:MM:SS.fff``."""
    return moment.strftime("%H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


class ConsoleReporter(Reporter):
    """Print events to the terminal with rich."""

    def __init__(self, console: Console | None = None, min_level: Level = Level.INFO):
        self.console = console or Console()
        self._min_rank = _rank(min_level)

    def emit(self, event: ReportEvent) -> None:
        if _rank(event.level) < self._min_rank:
            return
        stamp = f"[dim]\\[{format_timestamp(event.timestamp)}][/]"
        message = escape(event.message)
        style = LEVEL_STYLES[event.level]
        if style:
            message = f"[{style}]{message}[/]"
        self.console.print(f"{stamp} {message}")


class FileReporter(Reporter):
    """Append timestamped events to ``<log_dir>/<run_name>_<YYYYmmdd_HHMMSS>.log``."""

    def __init__(self, log_dir: Path, run_name: str = "Unknown"):
        log_dir.mkdir(parents=True, exist_ok=True)
        started = datetime.now()
        self.path = log_dir / f"{run_name}_{started:%Y%m%d_%H%M%S}.log"
        self._closed = False

        self._write(f"=== Test Log Started: {started:%Y-%m-%d %H:%M:%S} ===")
        self._write(f"Test Name: {run_name}")
        self._write(f"Log File: {self.path}")
        self._write(RULE)

    def emit(self, event: ReportEvent) -> None:
        line = f"[{format_timestamp(event.timestamp)}] {event.message}"
        if event.level in (Level.WARNING, Level.ERROR):
            line = f"[{format_timestamp(event.timestamp)}] {event.level.name}: {event.message}"
        self._write(line)

    def close(self) -> None:
        if self._closed:
            return
        self._write(RULE)
        self._write(f"=== Test Log Ended: {datetime.now():%Y-%m-%d %H:%M:%S} ===")
        self._closed = True

    def __enter__(self) -> "FileReporter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _write(self, line: str) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")


class RecordingReporter(Reporter):
    """Keep events in memory."""

    def __init__(self):
        self.events: list[ReportEvent] = []

    def emit(self, event: ReportEvent) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def of(self, name: str) -> list[ReportEvent]:
        return [e for e in self.events if e.name == name]


class FanOutReporter(Reporter):
    """Forward every event to each wrapped reporter."""

    def __init__(self, *reporters: Reporter):
        self.reporters = list(reporters)

    def emit(self, event: ReportEvent) -> None:
        for reporter in self.reporters:
            reporter.emit(event)

    def close(self) -> None:
        for reporter in self.reporters:
            reporter.close()


def _rank(level: Level) -> int:
    return list(Level).index(level)
