"""Detection of the DNS backend in control of the host."""

import logging

from cdns.core.base import SystemProbe
from cdns.core.errors import DetectionError, ServiceQueryError
from cdns.core.models import Backend, DetectionResult

logger = logging.getLogger(__name__)

RESOLV_CONF_PATH = "/etc/resolv.conf"

NMCLI_INSTALL_HINT = (
    "To continue, please install the NetworkManager CLI tool:\n"
    "  - Debian/Ubuntu: sudo apt install network-manager\n"
    "  - Fedora/RHEL: sudo dnf install NetworkManager\n"
    "  - Arch Linux: sudo pacman -S networkmanager"
)


class BackendDetector:
    """
    Selects exactly one authoritative DNS backend.

    Priority:
    1. NetworkManager (service running, nmcli required)
    2. systemd-resolved (resolvectl or systemd-resolve present, service running)
    3. /etc/resolv.conf as a plain, unmanaged file
    """

    def __init__(self, probe: SystemProbe, resolv_conf_path: str = RESOLV_CONF_PATH):
        self.probe = probe
        self.resolv_conf_path = resolv_conf_path

    def detect(self) -> Backend:
        """Return the active backend or raise DetectionError."""
        return self.detect_with_reason().backend

    def detect_with_reason(self) -> DetectionResult:
        """Return the active backend with a one-line justification."""
        result = (
            self._detect_network_manager()
            or self._detect_systemd_resolved()
            or self._detect_resolv_conf()
        )
        if result is None:
            raise DetectionError("no supported DNS backend found")

        logger.debug(f"Detected backend {result.backend.value}: {result.reason}")
        return result

    def _detect_network_manager(self) -> DetectionResult | None:
        has_nmcli = self.probe.command_exists("nmcli")
        try:
            running = self.probe.service_running("NetworkManager")
        except ServiceQueryError as e:
            if has_nmcli:
                raise DetectionError(f"failed to check NetworkManager status: {e.cause}") from e
            logger.debug(f"Ignoring NetworkManager status query failure without nmcli: {e}")
            return None

        if not running:
            return None

        if not has_nmcli:
            raise DetectionError(
                "NetworkManager is running but 'nmcli' command is missing.",
                remediation=NMCLI_INSTALL_HINT,
            )

        return DetectionResult(
            backend=Backend.NETWORK_MANAGER,
            reason="nmcli command available and NetworkManager service is running",
        )

    def _detect_systemd_resolved(self) -> DetectionResult | None:
        has_resolvectl = self.probe.command_exists("resolvectl")
        has_systemd_resolve = self.probe.command_exists("systemd-resolve")
        if not (has_resolvectl or has_systemd_resolve):
            return None

        try:
            running = self.probe.service_running("systemd-resolved")
        except ServiceQueryError as e:
            raise DetectionError(f"failed to check systemd-resolved status: {e.cause}") from e

        if not running:
            return None

        tool = "resolvectl" if has_resolvectl else "systemd-resolve"
        return DetectionResult(
            backend=Backend.SYSTEMD_RESOLVED,
            reason=f"{tool} command available and systemd-resolved service is running",
        )

    def _detect_resolv_conf(self) -> DetectionResult | None:
        path = self.resolv_conf_path
        if not self.probe.file_exists(path):
            return None

        try:
            is_symlink = self.probe.is_symlink(path)
        except OSError as e:
            raise DetectionError(f"failed to check if resolv.conf is a symlink: {e}") from e

        if is_symlink:
            raise DetectionError(
                "resolv.conf is managed by a service",
                reason="resolv.conf is a symlink (managed by a service)",
            )

        try:
            is_regular = self.probe.is_regular_file(path)
        except OSError as e:
            raise DetectionError(f"failed to check if resolv.conf is a regular file: {e}") from e

        if not is_regular:
            return None

        return DetectionResult(
            backend=Backend.RESOLV_CONF,
            reason=f"{path} exists and is a regular file (not managed by a service)",
        )
