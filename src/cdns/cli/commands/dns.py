"""Commands that change DNS settings."""

import logging

from rich.markup import escape

from cdns.cli.commands.common import console, get_services, is_root
from cdns.config import Scope
from cdns.core.addresses import separate_ipv4_ipv6
from cdns.core.errors import ValidationError
from cdns.core.models import Backend, DNSConfig, DNSServer, NetworkInterface
from cdns.core.presets import display_name, get_preset
from cdns.core.validation import validate_dns_addresses, validate_interface_name

logger = logging.getLogger(__name__)


class InsufficientPrivileges(Exception):
    pass


class UserCancelled(Exception):
    pass


def resolve_servers(args: list[str], custom: dict[str, list[str]]) -> tuple[str, DNSServer]:
    """Interpret arguments as a preset name or a list of IP literals."""
    if not args:
        raise ValidationError("at least one DNS address or a preset name is required")

    if len(args) == 1:
        preset = get_preset(args[0], custom)
        if preset is not None:
            return display_name(args[0].lower()), preset

    try:
        validate_dns_addresses(args)
    except ValidationError as e:
        raise ValidationError(
            f"invalid argument '{args[0]}': not a known preset or valid IP address ({e})"
        ) from e

    ipv4, ipv6 = separate_ipv4_ipv6(args)
    server = DNSServer(ipv4=ipv4, ipv6=ipv6)
    return ", ".join(server.all_servers()), server


async def target_interfaces(services, backend: Backend, explicit: list[str], scope: Scope, options):
    """Interfaces a change applies to when the user did not name any."""
    if explicit:
        interfaces = explicit
    elif scope == Scope.EXPLICIT:
        interfaces = list(options.settings.dns.default_interfaces)
        if not interfaces:
            raise ValidationError(
                "scope 'explicit' needs --interface or dns.default_interfaces in the config file"
            )
        for name in interfaces:
            validate_interface_name(name)
    else:
        interfaces = await services.reader.active_interfaces(backend)
        if scope == Scope.ALL:
            info = await services.reader.read_dns_config(backend)
            interfaces += [i.name for i in info.interfaces if i.name not in interfaces]

    return interfaces


def _confirm(message: str, yes: bool) -> None:
    if yes:
        return
    try:
        answer = console.input(f"[yellow]{escape(message)} \\[y/N]: [/]")
    except EOFError:
        answer = ""
    if answer.strip().lower() != "y":
        raise UserCancelled()


async def set_dns(
    options,
    args: list[str],
    interfaces: list[str],
    scope: Scope,
    dry_run: bool,
    yes: bool,
):
    """Apply a preset or custom servers to the target interfaces."""
    label, server = resolve_servers(args, options.settings.dns.custom_presets)
    for name in interfaces:
        validate_interface_name(name)

    services = get_services(options.settings)
    backend = services.detector.detect()
    logger.debug(f"Detected backend {backend.value}")
    services.writer.check_supported(backend, "writing")

    targets = await target_interfaces(services, backend, interfaces, scope, options)
    if not targets:
        console.print("[yellow]⚠ No active interfaces found to configure.[/]")
        return

    configs = [
        DNSConfig(interface=NetworkInterface(name=name, backend=backend), dns=server)
        for name in targets
    ]

    if dry_run:
        console.print("[bold]Dry-run mode: No changes will be applied[/]\n")
        console.print(f"Backend: [cyan]{backend.value}[/]")
        console.print("DNS servers to set:")
        for address in server.all_servers():
            console.print(f"  - [cyan]{address}[/]")
        console.print("Target interfaces:")
        for name in targets:
            console.print(f"  - [bold]{name}[/]")
        return

    if not is_root():
        raise InsufficientPrivileges()

    console.print("\n[yellow]This will change DNS settings:[/]")
    console.print(f"  DNS: [cyan]{', '.join(server.all_servers())}[/]")
    console.print(f"  Interfaces: [bold]{', '.join(targets)}[/]")
    _confirm("Continue?", yes)

    changed = await services.writer.apply(backend, configs, fail_fast=False)

    console.print(f"[green]✓ DNS set to {label} on {', '.join(changed) or 'no interfaces'}[/]")
    if backend == Backend.SYSTEMD_RESOLVED:
        console.print("[dim]systemd-resolved changes last until reboot or service restart.[/]")


async def reset(options, interfaces: list[str], yes: bool):
    """Hand DNS back to automatic (DHCP) configuration."""
    for name in interfaces:
        validate_interface_name(name)

    services = get_services(options.settings)
    backend = services.detector.detect()
    services.writer.check_supported(backend, "reset")

    targets = interfaces
    if not targets:
        info = await services.reader.read_dns_config(backend)
        targets = [iface.name for iface in info.interfaces]

    if not targets:
        console.print("[yellow]⚠ No active interfaces found to reset.[/]")
        return

    if not is_root():
        raise InsufficientPrivileges()

    _confirm(f"Reset DNS on {', '.join(targets)} to automatic?", yes)

    await services.writer.reset_to_automatic(backend, targets, fail_fast=False)
    console.print("[green]✓ DNS configuration reset to system default (Automatic/DHCP)[/]")
