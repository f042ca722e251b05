"""Validation of user supplied addresses, interface and preset names."""

import re

from cdns.core.addresses import address_family
from cdns.core.errors import ValidationError
from cdns.core.presets import get_preset

MAX_INTERFACE_NAME = 15

_INTERFACE_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


def validate_dns_address(address: str) -> None:
    if not address:
        raise ValidationError("DNS address cannot be empty")
    if address_family(address) is None:
        raise ValidationError(f"invalid DNS address: {address}")


def validate_dns_addresses(addresses: list[str]) -> None:
    if not addresses:
        raise ValidationError("at least one DNS address required")
    for address in addresses:
        validate_dns_address(address)


def validate_interface_name(name: str) -> None:
    if not name:
        raise ValidationError("interface name cannot be empty")
    if len(name) > MAX_INTERFACE_NAME:
        raise ValidationError(
            f"invalid interface name: {name} (max {MAX_INTERFACE_NAME} characters)"
        )
    if not _INTERFACE_NAME.match(name):
        raise ValidationError(
            f"invalid interface name: {name} "
            "(must contain only letters, numbers, hyphens, and underscores)"
        )


def validate_preset_name(name: str, custom: dict[str, list[str]] | None = None) -> None:
    if not name:
        raise ValidationError("preset name cannot be empty")
    if get_preset(name, custom) is None:
        raise ValidationError(
            f"invalid preset name: {name.lower()} (use 'cdns list' to see all available presets)"
        )

