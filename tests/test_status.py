"""Tests for loading and decoding addon status script results."""

from pathlib import Path

import pytest
from conftest import FakeExecutor

from k2saddons.addons.models import Addon, AddonCmd, AddonMetadata, AddonSpec, ScriptConfig
from k2saddons.addons.status import (
    STATUS_RESULT_TYPE,
    STATUS_SCRIPT,
    AddonStatusProp,
    load_addon_status,
    parse_addon_status,
)
from k2saddons.core.errors import AddonStatusError, CommandFailedError

DASHBOARD = Addon(
    "v1",
    "AddonManifest",
    Path("/k2s/addons/dashboard"),
    AddonMetadata("dashboard"),
    AddonSpec({"enable": AddonCmd(ScriptConfig("Enable.ps1"))}),
)


class TestLoadAddonStatus:
    def test_script_call(self):
        executor = FakeExecutor({"enabled": False})
        load_addon_status(DASHBOARD, executor)
        [call] = executor.calls
        assert call["script"] == Path("/k2s/addons/dashboard") / STATUS_SCRIPT
        assert call["result_type"] == STATUS_RESULT_TYPE
        assert call["params"] == ()

    def test_enabled_with_props(self):
        executor = FakeExecutor(
            {
                "enabled": True,
                "props": [
                    {"name": "IsDashboardProxyRunning", "value": True, "okay": True,
                     "message": "The dashboard proxy is running"},
                    {"name": "Url", "value": "http://k2s.cluster.local"},
                ],
            }
        )
        status = load_addon_status(DASHBOARD, executor)
        assert status.name == "dashboard"
        assert status.enabled is True
        assert status.error is None
        assert status.props == (
            AddonStatusProp("IsDashboardProxyRunning", True, True, "The dashboard proxy is running"),
            AddonStatusProp("Url", "http://k2s.cluster.local"),
        )


class TestParseAddonStatus:
    def test_keys_case_insensitive(self):
        status = parse_addon_status(
            "metrics", {"Enabled": True, "Props": [{"Name": "Ready", "Value": 1, "Okay": False}]}
        )
        assert status.enabled is True
        assert status.props == (AddonStatusProp("Ready", 1, False),)

    def test_disabled_without_props(self):
        status = parse_addon_status("metrics", {"enabled": False, "props": None})
        assert status.enabled is False
        assert status.props == ()

    def test_missing_enabled_is_none(self):
        assert parse_addon_status("metrics", {}).enabled is None

    def test_error_object(self):
        status = parse_addon_status(
            "metrics",
            {"enabled": None, "error": {"code": "addon-not-found", "message": "gone", "severity": 3}},
        )
        assert isinstance(status.error, CommandFailedError)
        assert status.error.code == "addon-not-found"
        assert status.error.severity == 3
        assert str(status.error) == "gone"
        assert status.enabled is None

    def test_error_string(self):
        status = parse_addon_status("metrics", {"error": "system-not-running"})
        assert status.error.code == "system-not-running"

    def test_invalid_enabled(self):
        with pytest.raises(AddonStatusError):
            parse_addon_status("metrics", {"enabled": "yes"})

    def test_prop_without_name(self):
        with pytest.raises(AddonStatusError, match="without name"):
            parse_addon_status("metrics", {"enabled": True, "props": [{"value": 1}]})

    def test_prop_to_dict(self):
        prop = AddonStatusProp("Url", "http://x", None, None)
        assert prop.to_dict() == {"name": "Url", "value": "http://x", "okay": None, "message": None}
