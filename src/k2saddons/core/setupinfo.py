"""Cluster setup info: read setup.json written by the installer."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .config import SETUP_CONFIG_FILE_NAME
from .errors import ConfigurationError, SystemCorruptedError, SystemNotInstalledError

logger = logging.getLogger(__name__)

SETUP_NAME_K2S = "k2s"
SETUP_NAME_MULTI_VM = "MultiVMK8s"
SETUP_NAME_BUILD_ONLY = "BuildOnlyEnv"


@dataclass
class SetupConfig:
    setup_name: str = ""
    linux_only: bool = False
    version: str = ""
    control_plane_hostname: str = ""
    corrupted: bool = False


def read_setup_config(config_dir: Path) -> SetupConfig:
    path = config_dir / SETUP_CONFIG_FILE_NAME
    if not path.exists():
        logger.info("Setup config file not found, assuming setup is not installed: %s", path)
        raise SystemNotInstalledError()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigurationError(
            f"error occurred while loading setup config file '{path}': {e}"
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"setup config file '{path}' must contain a JSON object")

    setup = SetupConfig(
        setup_name=data.get("SetupType", ""),
        linux_only=bool(data.get("LinuxOnly", False)),
        version=data.get("Version", ""),
        control_plane_hostname=data.get("ControlPlaneNodeHostname", ""),
        corrupted=bool(data.get("Corrupted", False)),
    )
    if setup.corrupted:
        raise SystemCorruptedError()
    return setup
