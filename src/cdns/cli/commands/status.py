"""Status and detection commands."""

from rich.markup import escape
from rich.table import Table

from cdns.cli.commands.common import console, get_services


async def status(options, json_output: bool):
    """Show the DNS servers in use per interface."""
    services = get_services(options.settings)

    backend = services.detector.detect()
    info = await services.reader.read_dns_config(backend)

    if json_output:
        console.print_json(info.model_dump_json())
        return

    managed = "managed" if info.managed else "unmanaged"
    console.print(f"Backend: [cyan]{info.backend.value}[/] ({managed})")

    if not info.interfaces:
        console.print("[dim]No active network interfaces found.[/]")
    else:
        table = Table(title="DNS Status")
        table.add_column("Interface", style="bold")
        table.add_column("IPv4", style="green")
        table.add_column("IPv6", style="green")

        for iface in info.interfaces:
            table.add_row(
                iface.name,
                ", ".join(iface.ipv4) or "-",
                ", ".join(iface.ipv6) or "-",
            )

        console.print(table)

    for warning in info.warnings:
        console.print(f"[yellow]⚠ {escape(warning)}[/]")


async def detect(options):
    """Show the detected backend and why it was chosen."""
    services = get_services(options.settings)
    result = services.detector.detect_with_reason()

    console.print(f"[green]✓[/] Backend: [cyan]{result.backend.value}[/]")
    console.print(f"  Reason: {result.reason}")
