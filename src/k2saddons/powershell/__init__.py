"""PowerShell: structured script execution for addon commands."""

from .executor import (
    MESSAGE_MARKER,
    PowerShellExecutor,
    ScriptExecutor,
    StructuredMessage,
    build_command_line,
    decode_message,
)

__all__ = [
    "MESSAGE_MARKER",
    "PowerShellExecutor",
    "ScriptExecutor",
    "StructuredMessage",
    "build_command_line",
    "decode_message",
]
