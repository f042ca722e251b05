"""Backend detection, reading and writing of host DNS configuration."""

from cdns.core.detector import BackendDetector
from cdns.core.errors import (
    BackendCommandError,
    CdnsError,
    DetectionError,
    InterfaceWriteError,
    PartialWriteError,
    ServiceQueryError,
    UnsupportedBackendError,
    ValidationError,
)
from cdns.core.models import (
    Backend,
    DetectionResult,
    DNSConfig,
    DNSServer,
    InterfaceStatus,
    NetworkInterface,
    StatusInfo,
)
from cdns.core.probe import DefaultSystemProbe
from cdns.core.reader import ConfigReader
from cdns.core.writer import ConfigWriter

__all__ = [
    "Backend",
    "BackendCommandError",
    "BackendDetector",
    "CdnsError",
    "ConfigReader",
    "ConfigWriter",
    "DefaultSystemProbe",
    "DetectionError",
    "DetectionResult",
    "DNSConfig",
    "DNSServer",
    "InterfaceStatus",
    "InterfaceWriteError",
    "NetworkInterface",
    "PartialWriteError",
    "ServiceQueryError",
    "StatusInfo",
    "UnsupportedBackendError",
    "ValidationError",
]
