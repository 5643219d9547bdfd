"""Addon loader: discover addon.manifest.yaml files, validate, deserialize."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from k2saddons.core.errors import (
    DuplicateAddonError,
    ManifestError,
    ManifestParseError,
    ManifestReadError,
    ManifestValidationError,
    SchemaCompileError,
    UnsupportedApiVersionError,
)

from .models import Addon
from .parser import parse_addon

if TYPE_CHECKING:
    from jsonschema.protocols import Validator

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "addon.manifest.yaml"
MANIFEST_SCHEMA_FILE_NAME = "addon.manifest.schema.json"
SUPPORTED_API_VERSIONS: tuple[str, ...] = ("v1",)

_BOOL_TAG = "tag:yaml.org,2002:bool"


class ManifestYamlLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 core booleans.

    Plain ``yes``/``no``/``on``/``off``/``y``/``n`` stay strings, so a
    ``validationSet: [on, off]`` or ``default: no`` keeps its text.
    """


ManifestYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ManifestYamlLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def compile_schema(path: Path) -> Validator:
    """Read and check the manifest JSON schema; any failure is fatal to the load."""
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SchemaCompileError(f"could not read manifest schema '{path}': {e}", path) from e

    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as e:
        raise SchemaCompileError(f"invalid manifest schema '{path}': {e.message}", path) from e
    return validator_cls(schema)


def _json_path(parts) -> str:
    path = "$"
    for p in parts:
        path += f"[{p}]" if isinstance(p, int) else f".{p}"
    return path


def schema_diagnostics(validator: Validator, document: Any) -> list[str]:
    """Return one '<json-path>: <message>' line per schema violation."""
    errors = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path])
    return [f"{_json_path(e.absolute_path)}: {e.message}" for e in errors]


def validate_manifest(addon: Addon, path: Path | None = None) -> None:
    if addon.api_version not in SUPPORTED_API_VERSIONS:
        raise UnsupportedApiVersionError(addon.api_version, path, SUPPORTED_API_VERSIONS)


def find_manifests(root_dir: Path, file_name: str = MANIFEST_FILE_NAME) -> Iterator[Path]:
    """Walk *root_dir* in lexical order, yielding every file named *file_name*."""
    try:
        entries = sorted(root_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ManifestReadError(f"could not read directory '{root_dir}': {e}", root_dir) from e
    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            yield from find_manifests(entry, file_name)
        elif entry.name == file_name and entry.is_file():
            yield entry


def load_manifest(path: Path, validator: Validator) -> Addon:
    """Schema-validate, deserialize and semantically validate one manifest."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ManifestReadError(f"could not read manifest '{path}': {e}", path) from e

    try:
        document = yaml.load(data, Loader=ManifestYamlLoader)
    except yaml.YAMLError as e:
        raise ManifestParseError(f"could not parse manifest '{path}': {e}", path) from e

    diagnostics = schema_diagnostics(validator, document)
    if diagnostics:
        raise ManifestValidationError(path, diagnostics)

    try:
        addon = parse_addon(document, path.parent.resolve())
    except ManifestError as e:
        raise ManifestError(f"invalid manifest '{path}': {e}", path) from e
    validate_manifest(addon, path)
    return addon


def load_addons(root_dir: Path) -> list[Addon]:
    """Load every addon below *root_dir*; the first bad manifest aborts the load."""
    root_dir = Path(root_dir)
    validator = compile_schema(root_dir / MANIFEST_SCHEMA_FILE_NAME)

    addons: list[Addon] = []
    seen: dict[str, Path] = {}
    for path in find_manifests(root_dir):
        logger.debug("Loading addon manifest %s", path)
        addon = load_manifest(path, validator)
        if addon.name in seen:
            raise DuplicateAddonError(addon.name, seen[addon.name], path)
        seen[addon.name] = path
        addons.append(addon)

    logger.info("Loaded %d addon(s) from %s", len(addons), root_dir)
    return addons
