"""Reading the currently applied DNS configuration from a backend."""

import logging

import aiofiles

from cdns.core.base import BaseStatusParser, CommandRunner, SystemProbe
from cdns.core.detector import RESOLV_CONF_PATH
from cdns.core.errors import BackendCommandError, UnsupportedBackendError
from cdns.core.models import Backend, CommandResult, InterfaceStatus, StatusInfo
from cdns.core.parsers import (
    ResolvedStatusParser,
    parse_active_connections,
    parse_connection_dns,
    parse_device_status,
    parse_resolv_conf,
)
from cdns.core.runner import SubprocessRunner

logger = logging.getLogger(__name__)


class ConfigReader:
    """
    Reads DNS servers per interface using each backend's own tooling.

    Reading never changes system state. Failures on a single NetworkManager
    connection are downgraded to warnings on the returned StatusInfo.
    """

    def __init__(
        self,
        probe: SystemProbe,
        runner: CommandRunner | None = None,
        resolved_parser: BaseStatusParser | None = None,
        resolv_conf_path: str = RESOLV_CONF_PATH,
    ):
        self.probe = probe
        self.runner = runner or SubprocessRunner()
        self.resolved_parser = resolved_parser or ResolvedStatusParser()
        self.resolv_conf_path = resolv_conf_path

    async def read_dns_config(self, backend: Backend) -> StatusInfo:
        """Read the DNS configuration applied through `backend`."""
        match backend:
            case Backend.NETWORK_MANAGER:
                return await self._read_network_manager()
            case Backend.SYSTEMD_RESOLVED:
                return await self._read_systemd_resolved()
            case Backend.RESOLV_CONF:
                return await self._read_resolv_conf()
            case Backend.NETPLAN:
                raise UnsupportedBackendError(backend, "reading")
            case _:
                raise UnsupportedBackendError(backend, "reading")

    async def active_interfaces(self, backend: Backend) -> list[str]:
        """Names of the interfaces currently up under `backend`."""
        match backend:
            case Backend.NETWORK_MANAGER:
                result = await self._run(
                    backend,
                    "listing devices",
                    "nmcli", "-t", "-f", "DEVICE,STATE", "device", "status",
                )
                return parse_device_status(result.stdout)
            case Backend.SYSTEMD_RESOLVED:
                links = self.resolved_parser.parse(await self._resolved_status())
                return [link.name for link in links if link.name != "lo"]
            case Backend.RESOLV_CONF | Backend.NETPLAN:
                raise UnsupportedBackendError(backend, "listing interfaces")
            case _:
                raise UnsupportedBackendError(backend, "listing interfaces")

    # ========================================================================
    # NetworkManager
    # ========================================================================

    async def _read_network_manager(self) -> StatusInfo:
        info = StatusInfo(backend=Backend.NETWORK_MANAGER, managed=True)

        result = await self._run(
            Backend.NETWORK_MANAGER,
            "listing active connections",
            "nmcli", "-t", "-f", "NAME,DEVICE", "connection", "show", "--active",
        )

        for name, device in parse_active_connections(result.stdout):
            if not device:
                continue

            try:
                ipv4, ipv6 = await self._connection_dns(name)
            except (BackendCommandError, OSError) as e:
                warning = f"failed to get DNS for {device}: {e}"
                logger.warning(warning)
                info.warnings.append(warning)
                continue

            if ipv4 or ipv6:
                info.interfaces.append(InterfaceStatus(name=device, ipv4=ipv4, ipv6=ipv6))
            else:
                logger.debug(f"No DNS servers on {device} (connection {name!r})")

        return info

    async def _connection_dns(self, connection: str) -> tuple[list[str], list[str]]:
        result = await self.runner.run(
            "nmcli", "-t", "-f", "IP4.DNS,IP6.DNS", "connection", "show", connection
        )
        if not result.ok:
            raise BackendCommandError(
                Backend.NETWORK_MANAGER,
                f"reading connection {connection!r}",
                f"nmcli exited with status {result.returncode}",
                command=result.args,
                output=result.output,
            )
        return parse_connection_dns(result.stdout)

    # ========================================================================
    # systemd-resolved
    # ========================================================================

    async def _read_systemd_resolved(self) -> StatusInfo:
        links = self.resolved_parser.parse(await self._resolved_status())
        return StatusInfo(
            backend=Backend.SYSTEMD_RESOLVED,
            interfaces=[link for link in links if link.has_dns],
            managed=True,
        )

    async def _resolved_status(self) -> str:
        if self.probe.command_exists("resolvectl"):
            args = ("resolvectl", "status")
        elif self.probe.command_exists("systemd-resolve"):
            args = ("systemd-resolve", "--status")
        else:
            raise BackendCommandError(
                Backend.SYSTEMD_RESOLVED,
                "reading status",
                "neither resolvectl nor systemd-resolve found",
            )

        result = await self._run(Backend.SYSTEMD_RESOLVED, "reading status", *args)
        return result.stdout

    # ========================================================================
    # resolv.conf
    # ========================================================================

    async def _read_resolv_conf(self) -> StatusInfo:
        info = StatusInfo(backend=Backend.RESOLV_CONF, managed=False)

        try:
            async with aiofiles.open(self.resolv_conf_path, "r") as f:
                text = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise BackendCommandError(
                Backend.RESOLV_CONF,
                f"reading {self.resolv_conf_path}",
                str(e),
            ) from e

        ipv4, ipv6 = parse_resolv_conf(text)
        if ipv4 or ipv6:
            info.interfaces.append(InterfaceStatus(name="system", ipv4=ipv4, ipv6=ipv6))

        return info

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _run(self, backend: Backend, operation: str, *args: str) -> CommandResult:
        """Run a tool and raise BackendCommandError unless it succeeds."""
        try:
            result = await self.runner.run(*args)
        except OSError as e:
            raise BackendCommandError(backend, operation, str(e), command=list(args)) from e

        if not result.ok:
            raise BackendCommandError(
                backend,
                operation,
                f"{args[0]} exited with status {result.returncode}",
                command=result.args,
                output=result.output,
            )
        return result
