"""Core data models for cdns."""

from enum import Enum

from pydantic import BaseModel, Field


class Backend(str, Enum):
    """DNS management mechanism in control of name resolution."""

    NETWORK_MANAGER = "NetworkManager"
    SYSTEMD_RESOLVED = "systemd-resolved"
    RESOLV_CONF = "resolv.conf"
    # Declared only: never detected, rejected by reader and writer.
    NETPLAN = "netplan"


# ============================================================================
# DNS Configuration Models
# ============================================================================


class DNSServer(BaseModel):
    """Ordered resolver addresses; the first entry of each family is primary."""

    ipv4: list[str] = Field(default_factory=list)
    ipv6: list[str] = Field(default_factory=list)
    description: str = ""

    def all_servers(self) -> list[str]:
        return [*self.ipv4, *self.ipv6]

    @property
    def empty(self) -> bool:
        return not self.ipv4 and not self.ipv6


class NetworkInterface(BaseModel):
    """OS interface name plus the backend that manages it."""

    name: str
    backend: Backend


class DNSConfig(BaseModel):
    """DNS servers to apply to a single interface."""

    interface: NetworkInterface
    dns: DNSServer


# ============================================================================
# Status Models
# ============================================================================


class InterfaceStatus(BaseModel):
    """DNS servers observed on one interface."""

    name: str
    ipv4: list[str] = Field(default_factory=list)
    ipv6: list[str] = Field(default_factory=list)

    @property
    def has_dns(self) -> bool:
        return bool(self.ipv4 or self.ipv6)

    def add(self, address: str) -> None:
        """Record an address, classifying it by family."""
        if ":" in address:
            self.ipv6.append(address)
        else:
            self.ipv4.append(address)

    def __contains__(self, address: str) -> bool:
        return address in self.ipv4 or address in self.ipv6


class StatusInfo(BaseModel):
    """Result of reading the DNS configuration of a backend."""

    backend: Backend
    interfaces: list[InterfaceStatus] = Field(default_factory=list)
    managed: bool = True
    warnings: list[str] = Field(default_factory=list)

    def interface(self, name: str) -> InterfaceStatus | None:
        for iface in self.interfaces:
            if iface.name == name:
                return iface
        return None


class DetectionResult(BaseModel):
    """Selected backend and the human-readable justification for it."""

    backend: Backend
    reason: str


# ============================================================================
# Process Models
# ============================================================================


class CommandResult(BaseModel):
    """Outcome of an external tool invocation."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped."""
        return "\n".join(p for p in (self.stdout.strip(), self.stderr.strip()) if p)
