"""PowerShell script execution with structured (#pm#) result messages."""

from __future__ import annotations

import base64
import binascii
import gzip
import json
import logging
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from k2saddons.core.errors import ScriptExecutionError, SystemNotInstalledError
from k2saddons.core.setupinfo import SETUP_NAME_MULTI_VM, read_setup_config
from k2saddons.core.utils import format_script_file_path

if TYPE_CHECKING:
    from k2saddons.core.config import Config

logger = logging.getLogger(__name__)

MESSAGE_MARKER = "#pm#"
PS5 = "5"
PS7 = "7"
PS5_CMD = "powershell"
PS7_CMD = "pwsh"


class ScriptExecutor(Protocol):
    def execute_structured(
        self,
        script: Path,
        result_type: str,
        params: Sequence[str] = (),
        ignore_not_installed: bool = False,
    ) -> dict[str, Any]: ...


@dataclass(frozen=True)
class StructuredMessage:
    type: str
    data: bytes


def decode_message(line: str) -> StructuredMessage:
    """Decode ``#pm#<type>#<base64(gzip(payload))>``."""
    parts = line.split("#")
    if len(parts) != 4:
        raise ScriptExecutionError(f"message malformed, found {len(parts)} parts")
    try:
        compressed = base64.b64decode(parts[3], validate=True)
        payload = gzip.decompress(compressed)
    except (binascii.Error, OSError, EOFError) as e:
        raise ScriptExecutionError(f"could not decode '{parts[2]}' message: {e}") from e
    return StructuredMessage(type=parts[2], data=payload)


def build_command_line(script: Path, result_type: str, params: Sequence[str] = ()) -> str:
    cmd = f"{format_script_file_path(script)} -EncodeStructuredOutput -MessageType {result_type}"
    for param in params:
        cmd += f" {param}"
    return cmd


class PowerShellExecutor:
    """Runs addon scripts and returns the single structured object they emit."""

    def __init__(self, config: Config, run=subprocess.run):
        self.config = config
        self._run = run

    def determine_version(self, ignore_not_installed: bool = False) -> str:
        try:
            setup = read_setup_config(self.config.config_dir)
        except SystemNotInstalledError:
            if ignore_not_installed:
                logger.info("Setup not installed, falling back to PowerShell %s", PS5)
                return PS5
            raise
        if setup.setup_name == SETUP_NAME_MULTI_VM and not setup.linux_only:
            return PS7
        return PS5

    def _argv(self, version: str, cmd: str) -> list[str]:
        if version == PS7:
            if shutil.which(PS7_CMD) is None:
                raise ScriptExecutionError(f"'{PS7_CMD}' not found; PowerShell 7 is required")
            return [PS7_CMD, "-Command", cmd]
        return [PS5_CMD, cmd]

    def execute_structured(
        self,
        script: Path,
        result_type: str,
        params: Sequence[str] = (),
        ignore_not_installed: bool = False,
    ) -> dict[str, Any]:
        cmd = build_command_line(script, result_type, params)
        logger.debug("PS command created: %s", cmd)
        argv = self._argv(self.determine_version(ignore_not_installed), cmd)

        try:
            result = self._run(argv, capture_output=True, text=True)
        except OSError as e:
            raise ScriptExecutionError(f"command execution could not be started: {e}") from e

        messages: list[StructuredMessage] = []
        for line in (result.stdout or "").splitlines():
            if line.startswith(MESSAGE_MARKER):
                messages.append(decode_message(line))
            elif line.strip():
                logger.info("%s", line)
        for line in (result.stderr or "").splitlines():
            if line.strip():
                logger.warning("%s", line)

        if result.returncode != 0:
            raise ScriptExecutionError(
                f"command execution failed, see log output above. Error: exit code {result.returncode}"
            )
        if len(messages) != 1:
            raise ScriptExecutionError(
                f"unexpected number of data objects. Expected 1, but got {len(messages)}"
            )
        message = messages[0]
        if message.type != result_type:
            raise ScriptExecutionError(
                f"unexpected result type. Expected '{result_type}', but got '{message.type}'"
            )
        try:
            data = json.loads(message.data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ScriptExecutionError(f"could not unmarshal structure: {e}") from e
        if not isinstance(data, dict):
            raise ScriptExecutionError(f"'{result_type}' must be a JSON object")
        return data
