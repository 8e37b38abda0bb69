"""Reading and pretty-printing release target documents.

Targets are generic key/value trees stored as JSON, YAML or TOML. Key order
is preserved on rewrite.
"""

import json
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
import yaml

from branchrelease.exceptions import TargetWriteError

SUPPORTED_SUFFIXES = (".json", ".yml", ".yaml", ".toml")


def document_format(path: Path) -> str:
    """Return 'json', 'yaml' or 'toml' for a target path.

    Raises:
        TargetWriteError: If the extension is not supported
    """
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yml", ".yaml"):
        return "yaml"
    if suffix == ".toml":
        return "toml"
    raise TargetWriteError(
        f"Unsupported target format: {path.name}",
        fix_hint=f"Release targets must use one of: {', '.join(SUPPORTED_SUFFIXES)}",
    )


def read_document(path: Path) -> Any:
    """Load a target document as a tree of dicts and lists.

    Raises:
        TargetWriteError: If the file cannot be read or parsed
    """
    fmt = document_format(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TargetWriteError(
            f"Cannot read {path}",
            details=str(e),
            fix_hint="Check the 'dir' entry of the release manifest",
        ) from e

    try:
        if fmt == "json":
            return json.loads(text)
        if fmt == "yaml":
            return yaml.safe_load(text)
        return tomllib.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise TargetWriteError(
            f"Cannot parse {path}",
            details=str(e),
        ) from e


def dump_document(data: Any, fmt: str, indent: int = 2) -> str:
    """Serialize a tree pretty-printed, ending with a newline."""
    if fmt == "json":
        return json.dumps(data, indent=indent, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)
    return tomli_w.dumps(data)


def write_document(path: Path, data: Any, indent: int = 2) -> None:
    """Persist a tree back to ``path`` in its own format.

    Raises:
        TargetWriteError: If the file cannot be serialized or written
    """
    fmt = document_format(path)
    try:
        text = dump_document(data, fmt, indent=indent)
    except (TypeError, ValueError, yaml.YAMLError) as e:
        raise TargetWriteError(f"Cannot serialize {path}", details=str(e)) from e

    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise TargetWriteError(
            f"Cannot write {path}",
            details=str(e),
            fix_hint="Check file permissions",
        ) from e
