"""Rich output: addon list as enabled/disabled tree or JSON, addon status."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from k2saddons.addons.models import AddonPrintInfo
from k2saddons.addons.status import AddonStatus, AddonStatusProp


def split_addons(
    enabled_names: Iterable[str], addons: Sequence[AddonPrintInfo]
) -> tuple[list[AddonPrintInfo], list[AddonPrintInfo]]:
    """Partition *addons* into (enabled, disabled), keeping catalog order."""
    enabled_set = set(enabled_names)
    enabled = [a for a in addons if a.name in enabled_set]
    disabled = [a for a in addons if a.name not in enabled_set]
    return enabled, disabled


def _addon_table(addons: Sequence[AddonPrintInfo]) -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column()
    for a in addons:
        table.add_row(Text(a.name), Text(a.description))
    return table


class AddonsPrinter:
    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def print_addons(self, enabled_names: Iterable[str], addons: Sequence[AddonPrintInfo]) -> None:
        enabled, disabled = split_addons(enabled_names, addons)
        tree = Tree("[bold]Addons[/bold]")
        for label, group in (("Enabled", enabled), ("Disabled", disabled)):
            branch = tree.add(label)
            if group:
                branch.add(_addon_table(group))
        self.console.print()
        self.console.print(tree)

    def print_addons_json(
        self, enabled_names: Iterable[str], addons: Sequence[AddonPrintInfo]
    ) -> None:
        enabled, disabled = split_addons(enabled_names, addons)
        payload = {
            "enabledAddons": [a.name for a in enabled],
            "disabledAddons": [a.name for a in disabled],
        }
        self.console.print_json(json.dumps(payload))


# ── Addon status ────────────────────────────────────────────────────

_OKAY_STYLES = {None: "", True: "green", False: "yellow"}


def prop_text(prop: AddonStatusProp) -> Text:
    """Render a status prop; the message wins over ``name: value`` when present."""
    if prop.message is None:
        value = "" if prop.value is None else str(prop.value)
        if prop.okay is None:
            return Text.assemble(f"{prop.name}: ", (value, "cyan"))
        return Text(f"{prop.name}: {value}")
    if prop.okay is None:
        return Text(prop.message, style="cyan")
    return Text(prop.message)


class StatusPrinter:
    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def print_status(self, status: AddonStatus) -> None:
        self.console.print()
        self.console.print("[bold]ADDON STATUS[/bold]")
        state = "enabled" if status.enabled else "disabled"
        self.console.print(
            Text.assemble("Addon ", (status.name, "cyan"), " is ", (state, "cyan"))
        )
        if not status.enabled:
            return
        for prop in status.props:
            text = prop_text(prop)
            text.stylize(_OKAY_STYLES[prop.okay])
            self.console.print(text)

    def print_status_json(self, status: AddonStatus, error_code: str | None = None) -> None:
        """JSON form; with *error_code* set, enabled and props are null."""
        if error_code is None and status.error is not None:
            error_code = status.error.code
        failed = error_code is not None
        payload = {
            "name": status.name,
            "enabled": None if failed else status.enabled,
            "props": None if failed else [p.to_dict() for p in status.props],
            "error": error_code,
        }
        self.console.print_json(json.dumps(payload))
