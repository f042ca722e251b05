"""Parsers for the text output of backend tools."""

import re

from cdns.core.base import BaseStatusParser
from cdns.core.models import InterfaceStatus


# ============================================================================
# nmcli
# ============================================================================


def split_terse(line: str) -> list[str]:
    """
    Split one line of `nmcli -t` output into fields.

    Colons inside values are escaped as `\\:` and backslashes as `\\\\`.
    """
    fields: list[str] = []
    current: list[str] = []
    escaped = False
    for char in line:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def parse_active_connections(text: str) -> list[tuple[str, str]]:
    """Parse `nmcli -t -f NAME,DEVICE connection show --active` into (name, device)."""
    connections = []
    for line in text.splitlines():
        fields = split_terse(line)
        if len(fields) < 2:
            continue
        connections.append((fields[0], fields[1]))
    return connections


def parse_connection_dns(text: str) -> tuple[list[str], list[str]]:
    """
    Parse `nmcli -t -f IP4.DNS,IP6.DNS connection show <name>`.

    Lines look like `IP4.DNS[1]:1.1.1.1`; IPv6 values may carry escaped colons.
    """
    ipv4: list[str] = []
    ipv6: list[str] = []
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        value = value.replace("\\:", ":").replace("\\\\", "\\").strip()
        if not value:
            continue
        if key.startswith("IP4.DNS"):
            ipv4.append(value)
        elif key.startswith("IP6.DNS"):
            ipv6.append(value)
    return ipv4, ipv6


def parse_device_status(text: str) -> list[str]:
    """Parse `nmcli -t -f DEVICE,STATE device status` into connected device names."""
    devices = []
    for line in text.splitlines():
        fields = split_terse(line)
        if len(fields) >= 2 and fields[1] == "connected":
            devices.append(fields[0])
    return devices


# ============================================================================
# systemd-resolved
# ============================================================================


_LINK_HEADER = re.compile(r"^Link\s+\d+\s+\((?P<name>[^)]+)\)")
_DNS_LINE = re.compile(r"^(?:Current DNS Server|DNS Servers?):\s*(?P<rest>.*)$")


class ResolvedStatusParser(BaseStatusParser):
    """
    Parser for `resolvectl status` / `systemd-resolve --status`.

    Each link starts with a header such as `Link 2 (eth0)`. Inside a link,
    `Current DNS Server:` and `DNS Servers:` introduce addresses; the server
    list continues either as `- addr` bullets or as bare address lines
    indented under the `DNS Servers:` label. The global section is ignored.

    All link sections are returned, including those without DNS servers;
    callers decide whether empty links are interesting.
    """

    def parse(self, text: str) -> list[InterfaceStatus]:
        links: list[InterfaceStatus] = []
        current: InterfaceStatus | None = None
        in_server_list = False

        for raw in text.splitlines():
            line = raw.strip()

            header = _LINK_HEADER.match(line)
            if header:
                current = InterfaceStatus(name=header.group("name"))
                links.append(current)
                in_server_list = False
                continue

            if current is None:
                continue

            dns_line = _DNS_LINE.match(line)
            if dns_line:
                in_server_list = line.startswith("DNS Server")
                for address in dns_line.group("rest").split():
                    self._add(current, address)
                continue

            if line.startswith("- "):
                self._add(current, line[2:].strip())
                continue

            if in_server_list and _is_continuation(line):
                self._add(current, line)
                continue

            in_server_list = False

        return links

    @staticmethod
    def _add(iface: InterfaceStatus, address: str) -> None:
        # DNS-over-TLS servers carry a "#server-name" suffix.
        address = address.split("#", 1)[0].strip()
        if not address or address in iface:
            return
        iface.add(address)


def _is_continuation(line: str) -> bool:
    """A bare address line under `DNS Servers:`; labels always contain `: ` or end in `:`."""
    return bool(line) and " " not in line and not line.endswith(":")


# ============================================================================
# resolv.conf
# ============================================================================


def parse_resolv_conf(text: str) -> tuple[list[str], list[str]]:
    """Extract `nameserver` addresses in file order, split by family."""
    ipv4: list[str] = []
    ipv6: list[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith(("#", ";")):
            continue
        fields = line.split()
        if fields[0] != "nameserver" or len(fields) < 2:
            continue
        address = fields[1]
        if ":" in address:
            ipv6.append(address)
        else:
            ipv4.append(address)
    return ipv4, ipv6
