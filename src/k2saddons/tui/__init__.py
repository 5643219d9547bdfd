"""TUI: rich rendering of addon lists and addon status."""

from .printer import AddonsPrinter, StatusPrinter, prop_text, split_addons

__all__ = ["AddonsPrinter", "StatusPrinter", "prop_text", "split_addons"]
