"""Preset listing command."""

from rich.table import Table

from cdns.cli.commands.common import console
from cdns.core.presets import BUILTIN_PRESETS, all_presets, display_name


def list_presets(options):
    """Show built-in and custom DNS presets."""
    custom = options.settings.dns.custom_presets
    presets = all_presets(custom)
    custom_names = {name.lower() for name in custom}

    table = Table(title="DNS Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Servers", style="green")
    table.add_column("Type")
    table.add_column("Description", style="dim")

    for name in sorted(presets):
        preset = presets[name]
        servers = ", ".join(preset.ipv4 or preset.ipv6)
        kind = "Custom" if name in custom_names else "Built-in"
        if name in custom_names and name in BUILTIN_PRESETS:
            kind = "Custom (overrides built-in)"
        table.add_row(display_name(name), servers, kind, preset.description)

    console.print(table)
