"""Reporting module - run events and their sinks."""

from ..config import ReportingConfig
from .base import Level, NullReporter, Reporter, ReportEvent
from .sinks import ConsoleReporter, FanOutReporter, FileReporter, RecordingReporter


def build_reporter(config: ReportingConfig, run_name: str) -> FanOutReporter:
    """Build the fan-out of sinks enabled in the reporting config."""
    sinks: list[Reporter] = []
    if config.console:
        sinks.append(ConsoleReporter())
    if config.file:
        sinks.append(FileReporter(config.log_dir, run_name))
    return FanOutReporter(*sinks)


__all__ = [
    "ConsoleReporter",
    "FanOutReporter",
    "FileReporter",
    "Level",
    "NullReporter",
    "RecordingReporter",
    "ReportEvent",
    "Reporter",
    "build_reporter",
]
