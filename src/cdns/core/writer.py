"""Applying and reverting per-interface DNS configuration."""

import logging
from typing import Awaitable, Callable, TypeVar

from cdns.core.base import CommandRunner, SystemProbe
from cdns.core.errors import InterfaceWriteError, PartialWriteError, UnsupportedBackendError
from cdns.core.models import Backend, CommandResult, DNSConfig
from cdns.core.parsers import split_terse
from cdns.core.runner import SubprocessRunner

logger = logging.getLogger(__name__)

T = TypeVar("T")

WRITABLE_BACKENDS = (Backend.NETWORK_MANAGER, Backend.SYSTEMD_RESOLVED)


class ConfigWriter:
    """
    Changes DNS settings through NetworkManager or systemd-resolved.

    Writes are not transactional. With fail_fast (the default) the first
    failing interface aborts the call and later interfaces are not touched.
    Without it every interface is attempted and a PartialWriteError lists
    the failures.

    Changes made through systemd-resolved are runtime only and do not
    survive a reboot or a restart of the service.
    """

    def __init__(self, probe: SystemProbe, runner: CommandRunner | None = None):
        self.probe = probe
        self.runner = runner or SubprocessRunner()

    # ========================================================================
    # Public API
    # ========================================================================

    async def apply(
        self,
        backend: Backend,
        configs: list[DNSConfig],
        fail_fast: bool = True,
    ) -> list[str]:
        """Apply DNS servers per interface. Returns the interfaces changed."""
        match backend:
            case Backend.NETWORK_MANAGER:
                apply_one = self._apply_network_manager
            case Backend.SYSTEMD_RESOLVED:
                apply_one = self._apply_systemd_resolved
            case Backend.RESOLV_CONF | Backend.NETPLAN:
                raise UnsupportedBackendError(backend, "writing")
            case _:
                raise UnsupportedBackendError(backend, "writing")

        targets = [(cfg.interface.name, cfg) for cfg in configs if cfg.interface.name]
        return await self._for_each(targets, apply_one, fail_fast)

    async def reset_to_automatic(
        self,
        backend: Backend,
        interfaces: list[str],
        fail_fast: bool = True,
    ) -> list[str]:
        """Hand DNS for each interface back to DHCP / automatic configuration."""
        match backend:
            case Backend.NETWORK_MANAGER:
                reset_one = self._reset_network_manager
            case Backend.SYSTEMD_RESOLVED:
                reset_one = self._reset_systemd_resolved
            case Backend.RESOLV_CONF | Backend.NETPLAN:
                raise UnsupportedBackendError(backend, "reset")
            case _:
                raise UnsupportedBackendError(backend, "reset")

        return await self._for_each([(iface, iface) for iface in interfaces], reset_one, fail_fast)

    def check_supported(self, backend: Backend, operation: str) -> None:
        """Raise UnsupportedBackendError unless `backend` can be changed."""
        if backend not in WRITABLE_BACKENDS:
            raise UnsupportedBackendError(backend, operation)

    async def _for_each(
        self,
        targets: list[tuple[str, T]],
        func: Callable[[T], Awaitable[bool]],
        fail_fast: bool,
    ) -> list[str]:
        changed: list[str] = []
        failures: list[InterfaceWriteError] = []

        for iface, target in targets:
            try:
                if await func(target):
                    changed.append(iface)
            except InterfaceWriteError as e:
                if fail_fast:
                    raise
                logger.warning(str(e))
                failures.append(e)

        if failures:
            raise PartialWriteError(failures, changed)
        return changed

    # ========================================================================
    # NetworkManager
    # ========================================================================

    async def _apply_network_manager(self, cfg: DNSConfig) -> bool:
        iface = cfg.interface.name
        conn = await self._nm_connection(iface)

        # ignore-auto-dns keeps DHCP-supplied servers from overriding ours.
        if cfg.dns.ipv4:
            await self._nm_step(
                iface, conn, "set IPv4 DNS",
                "nmcli", "connection", "modify", conn,
                "ipv4.dns", " ".join(cfg.dns.ipv4), "ipv4.ignore-auto-dns", "yes",
            )

        if cfg.dns.ipv6:
            await self._nm_step(
                iface, conn, "set IPv6 DNS",
                "nmcli", "connection", "modify", conn,
                "ipv6.dns", " ".join(cfg.dns.ipv6), "ipv6.ignore-auto-dns", "yes",
            )

        await self._nm_step(iface, conn, "reapply configuration", "nmcli", "device", "reapply", iface)
        logger.info(f"Applied {', '.join(cfg.dns.all_servers()) or 'no servers'} to {iface} ({conn})")
        return True

    async def _reset_network_manager(self, iface: str) -> bool:
        conn = await self._nm_connection(iface)

        await self._nm_step(
            iface, conn, "reset IPv4 DNS",
            "nmcli", "connection", "modify", conn, "ipv4.dns", "", "ipv4.ignore-auto-dns", "no",
        )
        await self._nm_step(
            iface, conn, "reset IPv6 DNS",
            "nmcli", "connection", "modify", conn, "ipv6.dns", "", "ipv6.ignore-auto-dns", "no",
        )
        await self._nm_step(iface, conn, "reapply configuration", "nmcli", "device", "reapply", iface)
        logger.info(f"Reset DNS on {iface} ({conn}) to automatic")
        return True

    async def _nm_connection(self, iface: str) -> str:
        """Name of the connection profile currently active on `iface`."""
        result = await self._exec(
            Backend.NETWORK_MANAGER, iface, None, "resolve active connection",
            "nmcli", "-g", "GENERAL.CONNECTION", "device", "show", iface,
        )
        # -g output escapes colons and backslashes like -t output.
        conn = split_terse(result.stdout.strip())[0]
        if not conn:
            raise InterfaceWriteError(
                Backend.NETWORK_MANAGER,
                iface,
                "resolve active connection",
                f"no active connection found for interface {iface}",
                command=result.args,
            )
        return conn

    async def _nm_step(self, iface: str, conn: str, step: str, *args: str) -> None:
        await self._exec(Backend.NETWORK_MANAGER, iface, conn, step, *args)

    # ========================================================================
    # systemd-resolved
    # ========================================================================

    async def _apply_systemd_resolved(self, cfg: DNSConfig) -> bool:
        iface = cfg.interface.name
        servers = cfg.dns.all_servers()
        if not servers:
            logger.debug(f"No DNS servers given for {iface}, skipping")
            return False

        if self._use_legacy_resolved_tool():
            args = ["systemd-resolve", f"--interface={iface}"]
            args.extend(f"--set-dns={server}" for server in servers)
        else:
            args = ["resolvectl", "dns", iface, *servers]

        await self._exec(Backend.SYSTEMD_RESOLVED, iface, None, "set DNS", *args)
        logger.info(f"Applied {', '.join(servers)} to {iface} (runtime only)")
        return True

    async def _reset_systemd_resolved(self, iface: str) -> bool:
        if self._use_legacy_resolved_tool():
            args = ["systemd-resolve", "--revert", f"--interface={iface}"]
        else:
            args = ["resolvectl", "revert", iface]

        await self._exec(Backend.SYSTEMD_RESOLVED, iface, None, "revert DNS", *args)
        logger.info(f"Reverted DNS on {iface}")
        return True

    def _use_legacy_resolved_tool(self) -> bool:
        return not self.probe.command_exists("resolvectl") and self.probe.command_exists(
            "systemd-resolve"
        )

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _exec(
        self,
        backend: Backend,
        iface: str,
        conn: str | None,
        step: str,
        *args: str,
    ) -> CommandResult:
        """Run one mutation step, raising InterfaceWriteError with captured output."""
        try:
            result = await self.runner.run(*args)
        except OSError as e:
            raise InterfaceWriteError(
                backend, iface, step, str(e), connection=conn, command=list(args)
            ) from e

        if not result.ok:
            where = f"{iface} (conn: {conn})" if conn else iface
            raise InterfaceWriteError(
                backend,
                iface,
                step,
                f"failed to {step} for {where}",
                connection=conn,
                command=result.args,
                output=result.output,
            )
        return result
