"""Configuration: install/config directories, settings file, env overrides."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

ADDONS_DIR_NAME = "addons"
SETUP_CONFIG_FILE_NAME = "setup.json"
SETTINGS_FILE_NAME = "settings.json"


def _default_install_dir() -> Path:
    if env_dir := os.getenv("K2S_INSTALL_DIR"):
        return Path(env_dir)
    return Path.cwd()


@dataclass
class Config:
    install_dir: Path = field(default_factory=_default_install_dir)
    config_dir: Path = field(default_factory=lambda: Path.home() / ".k2s")
    verbose: bool = False
    log_level: str = "WARNING"
    log_file: Path | None = None

    @property
    def addons_dir(self) -> Path:
        return self.install_dir / ADDONS_DIR_NAME

    @property
    def setup_config_path(self) -> Path:
        return self.config_dir / SETUP_CONFIG_FILE_NAME

    @property
    def settings_path(self) -> Path:
        return self.config_dir / SETTINGS_FILE_NAME


def _apply_settings(config: Config, path: Path) -> None:
    """Overlay installDir, logLevel and logFile from a settings file."""
    if not path.exists():
        return
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigurationError(f"could not read settings file '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"settings file '{path}' must contain a JSON object")

    if install_dir := data.get("installDir"):
        config.install_dir = Path(install_dir)
    if log_level := data.get("logLevel"):
        config.log_level = str(log_level).upper()
    if log_file := data.get("logFile"):
        config.log_file = Path(log_file)


def load_config(
    install_dir: str | Path | None = None,
    verbose: bool = False,
) -> Config:
    """Resolve config; CLI args win over env (and .env), which win over settings.json."""
    load_dotenv()

    config = Config()
    if env_config_dir := os.getenv("K2S_CONFIG_DIR"):
        config.config_dir = Path(env_config_dir)

    _apply_settings(config, config.settings_path)

    if env_install_dir := os.getenv("K2S_INSTALL_DIR"):
        config.install_dir = Path(env_install_dir)
    if env_level := os.getenv("K2S_LOG_LEVEL"):
        config.log_level = env_level.upper()
    if env_log_file := os.getenv("K2S_LOG_FILE"):
        config.log_file = Path(env_log_file)

    if install_dir:
        config.install_dir = Path(install_dir)
    config.verbose = verbose

    return config
