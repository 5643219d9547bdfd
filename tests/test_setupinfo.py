"""Tests for reading the cluster setup config."""

import json

import pytest

from k2saddons.core.errors import (
    SYSTEM_NOT_INSTALLED_CODE,
    ConfigurationError,
    SystemCorruptedError,
    SystemNotInstalledError,
)
from k2saddons.core.setupinfo import SETUP_NAME_MULTI_VM, read_setup_config


class TestReadSetupConfig:
    def test_fields(self, tmp_path):
        (tmp_path / "setup.json").write_text(
            json.dumps(
                {
                    "SetupType": "MultiVMK8s",
                    "LinuxOnly": True,
                    "Version": "1.2.0",
                    "ControlPlaneNodeHostname": "kubemaster",
                }
            )
        )
        setup = read_setup_config(tmp_path)
        assert setup.setup_name == SETUP_NAME_MULTI_VM
        assert setup.linux_only is True
        assert setup.version == "1.2.0"
        assert setup.control_plane_hostname == "kubemaster"
        assert setup.corrupted is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemNotInstalledError) as exc:
            read_setup_config(tmp_path)
        assert exc.value.details["code"] == SYSTEM_NOT_INSTALLED_CODE
        assert "k2s.exe install" in str(exc.value)

    def test_corrupted(self, tmp_path):
        (tmp_path / "setup.json").write_text(json.dumps({"SetupType": "k2s", "Corrupted": True}))
        with pytest.raises(SystemCorruptedError, match="corrupted"):
            read_setup_config(tmp_path)

    def test_invalid_json(self, tmp_path):
        (tmp_path / "setup.json").write_text("{")
        with pytest.raises(ConfigurationError):
            read_setup_config(tmp_path)
