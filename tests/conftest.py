"""Pytest configuration and fixtures."""

import logging
import os

import pytest

from cdns.core.base import CommandRunner, SystemProbe
from cdns.core.errors import ServiceQueryError
from cdns.core.models import CommandResult


# ============================================================================
# Fakes
# ============================================================================


class FakeSystemProbe(SystemProbe):
    """
    In-memory host description.

    `files` maps a path to "file", "symlink" or "dir"; `stat_errors` maps a
    path to the OSError raised when it is stat'ed.
    """

    def __init__(
        self,
        commands=(),
        services=(),
        files=None,
        service_errors=(),
        stat_errors=None,
    ):
        self.commands = set(commands)
        self.services = set(services)
        self.files = dict(files or {})
        self.service_errors = set(service_errors)
        self.stat_errors = dict(stat_errors or {})

    def command_exists(self, name: str) -> bool:
        return name in self.commands

    def service_running(self, name: str) -> bool:
        if name in self.service_errors:
            raise ServiceQueryError(name, OSError("systemctl: not found"))
        return name in self.services

    def file_exists(self, path: str) -> bool:
        return path in self.files

    def is_regular_file(self, path: str) -> bool:
        if path in self.stat_errors:
            raise self.stat_errors[path]
        return self.files.get(path) == "file"

    def is_symlink(self, path: str) -> bool:
        if path in self.stat_errors:
            raise self.stat_errors[path]
        return self.files.get(path) == "symlink"


class FakeCommandRunner(CommandRunner):
    """
    Scripted runner keyed by the exact argument tuple.

    Unknown commands succeed with empty output. Every call is recorded.
    """

    def __init__(self):
        self.responses: dict[tuple[str, ...], CommandResult | BaseException] = {}
        self.calls: list[list[str]] = []

    def respond(self, *args: str, stdout: str = "", stderr: str = "", returncode: int = 0):
        self.responses[args] = CommandResult(
            args=list(args), returncode=returncode, stdout=stdout, stderr=stderr
        )

    def fail(self, *args: str, exc: BaseException):
        self.responses[args] = exc

    async def run(self, *args: str) -> CommandResult:
        self.calls.append(list(args))
        response = self.responses.get(args)
        if isinstance(response, BaseException):
            raise response
        if response is None:
            return CommandResult(args=list(args), returncode=0)
        return response


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace(":", "\\:")


class FakeNetworkManager(CommandRunner):
    """
    Stateful stand-in for nmcli.

    Connection profiles hold the manual DNS settings; a device only picks up
    profile changes on `nmcli device reapply`, like the real daemon.
    """

    def __init__(self, devices: dict[str, str], auto_dns: dict[str, list[str]] | None = None):
        # device -> connection name
        self.devices = dict(devices)
        self.auto_dns = {conn: list(servers) for conn, servers in (auto_dns or {}).items()}
        self.profiles = {
            conn: {
                "ipv4.dns": "",
                "ipv6.dns": "",
                "ipv4.ignore-auto-dns": "no",
                "ipv6.ignore-auto-dns": "no",
            }
            for conn in self.devices.values()
        }
        self.applied = {conn: dict(profile) for conn, profile in self.profiles.items()}
        self.calls: list[list[str]] = []

    def effective_dns(self, conn: str) -> list[str]:
        applied = self.applied[conn]
        servers = []
        for family in ("ipv4", "ipv6"):
            servers.extend(applied[f"{family}.dns"].split())
            if applied[f"{family}.ignore-auto-dns"] != "yes":
                auto = self.auto_dns.get(conn, [])
                servers.extend(s for s in auto if (":" in s) == (family == "ipv6"))
        return servers

    async def run(self, *args: str) -> CommandResult:
        self.calls.append(list(args))
        argv = list(args)
        stdout, returncode, stderr = "", 0, ""

        if argv[:6] == ["nmcli", "-t", "-f", "NAME,DEVICE", "connection", "show"]:
            stdout = "".join(f"{_escape(c)}:{d}\n" for d, c in self.devices.items())
        elif argv[:6] == ["nmcli", "-t", "-f", "DEVICE,STATE", "device", "status"]:
            stdout = "".join(f"{d}:connected\n" for d in self.devices) + "lo:unmanaged\n"
        elif argv[:5] == ["nmcli", "-t", "-f", "IP4.DNS,IP6.DNS", "connection"]:
            conn = argv[6]
            lines = []
            servers = self.effective_dns(conn)
            v4 = [s for s in servers if ":" not in s]
            v6 = [s for s in servers if ":" in s]
            lines += [f"IP4.DNS[{i}]:{s}" for i, s in enumerate(v4, 1)]
            lines += [f"IP6.DNS[{i}]:{_escape(s)}" for i, s in enumerate(v6, 1)]
            stdout = "\n".join(lines) + "\n"
        elif argv[:3] == ["nmcli", "-g", "GENERAL.CONNECTION"]:
            if argv[5] not in self.devices:
                returncode, stderr = 10, f"Error: Device '{argv[5]}' not found."
            else:
                stdout = _escape(self.devices[argv[5]]) + "\n"
        elif argv[:3] == ["nmcli", "connection", "modify"]:
            profile = self.profiles[argv[3]]
            pairs = argv[4:]
            for key, value in zip(pairs[::2], pairs[1::2]):
                profile[key] = value
        elif argv[:3] == ["nmcli", "device", "reapply"]:
            conn = self.devices[argv[3]]
            self.applied[conn] = dict(self.profiles[conn])
        else:
            returncode, stderr = 2, f"unexpected command: {' '.join(argv)}"

        return CommandResult(args=argv, returncode=returncode, stdout=stdout, stderr=stderr)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests away from the user's config file and CDNS_* environment."""
    for key in list(os.environ):
        if key.startswith("CDNS_"):
            monkeypatch.delenv(key)
    path = tmp_path / "cdns" / "config.yaml"
    monkeypatch.setenv("CDNS_CONFIG", str(path))
    return path


@pytest.fixture(autouse=True)
def reset_cdns_logger():
    yield
    logger = logging.getLogger("cdns")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def nm_probe() -> FakeSystemProbe:
    return FakeSystemProbe(commands={"nmcli"}, services={"NetworkManager"})


@pytest.fixture
def resolved_probe() -> FakeSystemProbe:
    return FakeSystemProbe(commands={"resolvectl"}, services={"systemd-resolved"})


@pytest.fixture
def static_probe() -> FakeSystemProbe:
    return FakeSystemProbe(files={"/etc/resolv.conf": "file"})


RESOLVECTL_STATUS = """\
Global
       Protocols: +LLMNR +mDNS -DNSOverTLS DNSSEC=no/unsupported
resolv.conf mode: stub

Link 1 (lo)
Current Scopes: none
     Protocols: -DefaultRoute +LLMNR -mDNS -DNSOverTLS DNSSEC=no/unsupported

Link 2 (eth0)
    Current Scopes: DNS LLMNR/IPv4 LLMNR/IPv6
         Protocols: +DefaultRoute +LLMNR -mDNS -DNSOverTLS DNSSEC=no/unsupported
Current DNS Server: 192.168.1.1
       DNS Servers: 192.168.1.1 fd00::1
        DNS Domain: lan

Link 3 (wlan0)
Current Scopes: none
     Protocols: -DefaultRoute +LLMNR -mDNS -DNSOverTLS DNSSEC=no/unsupported
"""


SYSTEMD_RESOLVE_STATUS = """\
Global
          DNSSEC NTA: 10.in-addr.arpa
                      16.172.in-addr.arpa

Link 3 (wlp2s0)
      Current Scopes: DNS
       LLMNR setting: yes
  Current DNS Server: 8.8.8.8
         DNS Servers: 8.8.8.8
                      8.8.4.4
                      2001:4860:4860::8888
          DNS Domain: ~.

Link 2 (enp3s0)
      Current Scopes: none
       LLMNR setting: yes
"""


@pytest.fixture
def resolvectl_status() -> str:
    return RESOLVECTL_STATUS


@pytest.fixture
def systemd_resolve_status() -> str:
    return SYSTEMD_RESOLVE_STATUS
