"""Script path formatting, durations, short paths."""

from __future__ import annotations

from pathlib import Path


def format_script_file_path(path: str | Path) -> str:
    """Wrap a script path for PowerShell invocation: ``&'<path>'``."""
    return f"&'{path}'"


def format_duration(seconds: float) -> str:
    """Format elapsed seconds, e.g. ``1m5s`` or ``3.2s``."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(round(seconds)), 60)
    if minutes < 60:
        return f"{minutes}m{secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes}m{secs}s"


def short_path(p: Path) -> str:
    """Shorten *p* to a ~-prefixed path when it lies under the home directory."""
    try:
        rel = p.relative_to(Path.home())
        return f"~/{rel}" if str(rel) != "." else "~"
    except ValueError:
        return str(p)


def escape_with_single_quotes(value: str) -> str:
    """Quote a PowerShell string literal: ``it's`` -> ``'it''s'``."""
    return "'" + value.replace("'", "''") + "'"
