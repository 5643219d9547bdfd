"""Shared fixtures: a temporary addons dir with the real schema, fake script executor."""

import shutil
import textwrap
from pathlib import Path

import pytest

REPO_ADDONS_DIR = Path(__file__).parents[1] / "addons"
SCHEMA_FILE = REPO_ADDONS_DIR / "addon.manifest.schema.json"


def manifest_yaml(
    name="alpha",
    description="Alpha addon",
    api_version="v1",
    kind="AddonManifest",
    commands=None,
):
    """Render a minimal manifest; *commands* is raw YAML for spec.commands."""
    if commands is None:
        commands = """\
enable:
  script:
    subPath: Enable.ps1
"""
    return (
        f"apiVersion: {api_version}\n"
        f"kind: {kind}\n"
        "metadata:\n"
        f"  name: {name}\n"
        f"  description: {description}\n"
        "spec:\n"
        "  commands:\n" + textwrap.indent(textwrap.dedent(commands), "    ")
    )


@pytest.fixture
def addons_dir(tmp_path):
    root = tmp_path / "addons"
    root.mkdir()
    shutil.copy(SCHEMA_FILE, root / SCHEMA_FILE.name)
    return root


@pytest.fixture
def write_manifest(addons_dir):
    def _write(rel_dir, text):
        target = addons_dir / rel_dir
        target.mkdir(parents=True, exist_ok=True)
        path = target / "addon.manifest.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


class FakeExecutor:
    """Records execute_structured calls and replays a canned result or error."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else {}
        self.error = error
        self.calls = []

    def execute_structured(self, script, result_type, params=(), ignore_not_installed=False):
        self.calls.append(
            {
                "script": Path(script),
                "result_type": result_type,
                "params": tuple(params),
                "ignore_not_installed": ignore_not_installed,
            }
        )
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_executor():
    return FakeExecutor()
