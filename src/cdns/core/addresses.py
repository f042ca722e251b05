"""IP address family helpers."""

import socket

import dns.inet


def address_family(address: str) -> int | None:
    """socket.AF_INET / AF_INET6 for an IP literal, None otherwise."""
    try:
        return dns.inet.af_for_address(address)
    except ValueError:
        return None


def separate_ipv4_ipv6(addresses: list[str]) -> tuple[list[str], list[str]]:
    """Split addresses by family, dropping blanks and anything that is not an IP literal."""
    ipv4: list[str] = []
    ipv6: list[str] = []
    for raw in addresses:
        address = raw.strip()
        family = address_family(address) if address else None
        if family == socket.AF_INET:
            ipv4.append(address)
        elif family == socket.AF_INET6:
            ipv6.append(address)
    return ipv4, ipv6
