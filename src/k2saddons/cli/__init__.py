"""CLI: generic addon command construction."""

from .generic import (
    OUTPUT_FLAG_HELP,
    OUTPUT_FLAG_NAME,
    build_addon_command,
    build_generic_commands,
    examples_epilog,
    flag_to_option,
)

__all__ = [
    "OUTPUT_FLAG_HELP",
    "OUTPUT_FLAG_NAME",
    "build_addon_command",
    "build_generic_commands",
    "examples_epilog",
    "flag_to_option",
]
