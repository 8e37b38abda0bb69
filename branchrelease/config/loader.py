"""Loading of the release manifest, tool settings and fallback version.

The manifest and the project metadata file may be JSON, YAML or TOML; the
format follows the file extension. Every problem surfaces as a
ConfigurationError naming the offending file.
"""

import json
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from branchrelease.config.models import ReleaseManifest, ReleaseSettings
from branchrelease.exceptions import ConfigurationError, PathNotFoundError, VersionError
from branchrelease.paths import get_at_path
from branchrelease.utils.version import normalize_version

PARSERS: dict[str, tuple[str, Callable[[str], Any], type[Exception]]] = {
    ".json": ("JSON", json.loads, json.JSONDecodeError),
    ".yml": ("YAML", yaml.safe_load, yaml.YAMLError),
    ".yaml": ("YAML", yaml.safe_load, yaml.YAMLError),
    ".toml": ("TOML", tomllib.loads, tomllib.TOMLDecodeError),
}


def load_file(path: Path) -> dict[str, Any]:
    """Parse a JSON, YAML or TOML file into a mapping.

    An empty YAML document loads as an empty mapping.

    Raises:
        ConfigurationError: If the file is missing, unsupported, malformed
            or does not hold a mapping at the top level
    """
    if path.suffix not in PARSERS:
        raise ConfigurationError(
            f"Unsupported config format: {path.suffix or path.name}",
            fix_hint="Use a .json, .yml, .yaml or .toml file",
        )
    fmt, parse, parse_error = PARSERS[path.suffix]

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            fix_hint="Check the --config and --root paths",
        ) from None
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}", details=str(e)) from e

    try:
        data = parse(text)
    except parse_error as e:
        raise ConfigurationError(
            f"Invalid {fmt} in {path}",
            details=str(e),
            fix_hint=f"Fix the {fmt} syntax at the reported position",
        ) from e

    if data is None and fmt == "YAML":
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top of {path}",
            details=f"Found {type(data).__name__}",
        )
    return data


def load_manifest(path: Path, project_root: Path | None = None) -> ReleaseManifest:
    """Load the release-target manifest.

    Args:
        path: Manifest path; relative paths resolve against project_root
        project_root: Project root directory (defaults to cwd)

    Returns:
        Validated ReleaseManifest, targets in declaration order

    Raises:
        ConfigurationError: If manifest not found or invalid
    """
    if project_root is None:
        project_root = Path.cwd()

    manifest_path = Path(path)
    if not manifest_path.is_absolute():
        manifest_path = project_root / manifest_path

    try:
        manifest = ReleaseManifest.from_mapping(load_file(manifest_path))
    except (PydanticValidationError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid release manifest {manifest_path}",
            details=str(e),
            fix_hint="Each entry needs 'dir', 'prefix' and a non-empty 'versionKeys' list",
        ) from e

    if not manifest.targets:
        raise ConfigurationError(
            f"Release manifest {manifest_path} declares no targets",
            fix_hint="Add at least one entry with 'dir' and 'versionKeys'",
        )
    return manifest


def load_settings(**overrides: Any) -> ReleaseSettings:
    """Build tool settings from the environment plus explicit overrides.

    Raises:
        ConfigurationError: If a setting fails validation
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ReleaseSettings(**values)
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Invalid release settings",
            details=str(e),
            fix_hint="Check the BRANCH_RELEASE_* environment variables",
        ) from e


def load_project_version(project_root: Path, settings: ReleaseSettings) -> str:
    """Read the version declared in the project metadata file.

    This is the fallback used when no release tag exists yet.

    Raises:
        ConfigurationError: If the file is unreadable or has no valid version
    """
    metadata_path = project_root / settings.metadata_file
    data = load_file(metadata_path)

    try:
        value = get_at_path(data, settings.metadata_version_path)
    except PathNotFoundError as e:
        raise ConfigurationError(
            f"No version found in {metadata_path}",
            details=f"Looked for {settings.metadata_version_path}",
            fix_hint="Declare a version in the project metadata file",
        ) from e

    try:
        return normalize_version(str(value))
    except VersionError as e:
        raise ConfigurationError(
            f"Invalid version '{value}' in {metadata_path}",
            details=e.details,
            fix_hint="Use a semantic version like 1.0.0",
        ) from e
