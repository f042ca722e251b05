"""Well-known public DNS resolvers."""

from cdns.core.addresses import separate_ipv4_ipv6
from cdns.core.models import DNSServer

BUILTIN_PRESETS: dict[str, DNSServer] = {
    "cloudflare": DNSServer(
        ipv4=["1.1.1.1", "1.0.0.1"],
        ipv6=["2606:4700:4700::1111", "2606:4700:4700::1001"],
        description="Fast & privacy-focused",
    ),
    "google": DNSServer(
        ipv4=["8.8.8.8", "8.8.4.4"],
        ipv6=["2001:4860:4860::8888", "2001:4860:4860::8844"],
        description="Reliable & widely used",
    ),
    "quad9": DNSServer(
        ipv4=["9.9.9.9", "149.112.112.112"],
        ipv6=["2620:fe::fe", "2620:fe::9"],
        description="Security-focused with threat intelligence",
    ),
    "opendns": DNSServer(
        ipv4=["208.67.222.222", "208.67.220.220"],
        ipv6=["2620:119:35::35", "2620:119:53::53"],
        description="Fast with content filtering options",
    ),
    "adguard": DNSServer(
        ipv4=["94.140.14.14", "94.140.15.15"],
        ipv6=["2a10:50c0::ad1:ff", "2a10:50c0::ad2:ff"],
        description="Focuses on ad and tracker blocking",
    ),
}

DISPLAY_NAMES = {
    "cloudflare": "Cloudflare",
    "google": "Google",
    "quad9": "Quad9",
    "opendns": "OpenDNS",
    "adguard": "AdGuard",
}


def display_name(name: str) -> str:
    return DISPLAY_NAMES.get(name.lower(), name[:1].upper() + name[1:])


def custom_preset(addresses: list[str]) -> DNSServer:
    """Build a preset from a flat, user supplied address list."""
    ipv4, ipv6 = separate_ipv4_ipv6(addresses)
    return DNSServer(ipv4=ipv4, ipv6=ipv6, description="Custom preset")


def all_presets(custom: dict[str, list[str]] | None = None) -> dict[str, DNSServer]:
    """Built-in presets overlaid with custom ones, keyed by lower-case name."""
    presets = {name: server.model_copy(deep=True) for name, server in BUILTIN_PRESETS.items()}
    for name, addresses in (custom or {}).items():
        presets[name.lower()] = custom_preset(addresses)
    return presets


def get_preset(name: str, custom: dict[str, list[str]] | None = None) -> DNSServer | None:
    """Look up a preset case-insensitively."""
    return all_presets(custom).get(name.strip().lower())
