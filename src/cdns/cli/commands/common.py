"""Wiring shared by the CLI commands."""

import os
from dataclasses import dataclass
from enum import IntEnum

from rich.console import Console

from cdns.config import Settings
from cdns.core.detector import BackendDetector
from cdns.core.probe import DefaultSystemProbe
from cdns.core.reader import ConfigReader
from cdns.core.runner import SubprocessRunner
from cdns.core.writer import ConfigWriter

console = Console()
err_console = Console(stderr=True)


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    VALIDATION_ERROR = 2
    PERMISSION_ERROR = 3
    PARTIAL_FAILURE = 4


@dataclass
class Services:
    detector: BackendDetector
    reader: ConfigReader
    writer: ConfigWriter


def get_services(settings: Settings) -> Services:
    """Build detector, reader and writer sharing one probe and runner."""
    probe = DefaultSystemProbe()
    runner = SubprocessRunner(timeout=settings.command_timeout)
    return Services(
        detector=BackendDetector(probe),
        reader=ConfigReader(probe, runner),
        writer=ConfigWriter(probe, runner),
    )


def is_root() -> bool:
    return os.geteuid() == 0
