"""Path expressions over generic document trees.

A small interpreter for the JSONPath subset used in release manifests:

    $                 the document root (optional)
    .name  ['name']   object member
    [3]    [-1]       list element
    .*     [*]        every child of an object or list

Templates may reference ``{branch}`` which is substituted before parsing,
so ``$.versions.{branch}`` becomes ``$.versions.stage`` on the stage branch.
"""

import re
import string
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from branchrelease.exceptions import ConfigurationError, PathNotFoundError

TEMPLATE_VARIABLES = frozenset({"branch"})

_TOKEN = re.compile(
    r"""
    \.(?P<name>[^.\[\]\s]+)
    | \[\s*(?P<index>-?\d+)\s*\]
    | \[\s*'(?P<single>[^']*)'\s*\]
    | \[\s*"(?P<double>[^"]*)"\s*\]
    | \[\s*\*\s*\]
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Segment:
    """One step of a parsed path."""

    kind: str  # "key", "index" or "wildcard"
    value: str | int | None = None


WILDCARD = Segment("wildcard")


@lru_cache(maxsize=256)
def parse_path(expression: str) -> tuple[Segment, ...]:
    """Tokenize a path expression into segments.

    Raises:
        ConfigurationError: If the expression is malformed
    """
    text = expression.strip()
    if text.startswith("$"):
        text = text[1:]
    elif text and text[0] not in ".[":
        text = "." + text

    segments: list[Segment] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            raise ConfigurationError(
                f"Invalid path expression: {expression}",
                details=f"Unexpected input at offset {pos}: {text[pos:]!r}",
                fix_hint="Use forms like $.version, $.versions.stage or $.items[0].version",
            )
        if match.group("name") is not None:
            name = match.group("name")
            segments.append(WILDCARD if name == "*" else Segment("key", name))
        elif match.group("index") is not None:
            segments.append(Segment("index", int(match.group("index"))))
        elif match.group("single") is not None:
            segments.append(Segment("key", match.group("single")))
        elif match.group("double") is not None:
            segments.append(Segment("key", match.group("double")))
        else:
            segments.append(WILDCARD)
        pos = match.end()

    return tuple(segments)


def render_path_template(template: str, variables: Mapping[str, str]) -> str:
    """Substitute ``{name}`` placeholders in a path template.

    Only names in TEMPLATE_VARIABLES are recognized.

    Raises:
        ConfigurationError: On unknown or positional placeholders
    """
    try:
        fields = [name for _, name, _, _ in string.Formatter().parse(template) if name is not None]
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid path template: {template}",
            details=str(e),
            fix_hint="Escape literal braces as {{ and }}",
        ) from e

    unknown = sorted({name for name in fields if name not in TEMPLATE_VARIABLES})
    if unknown:
        raise ConfigurationError(
            f"Unknown placeholder in path template: {template}",
            details=f"Unrecognized: {', '.join(unknown) or '{}'}",
            fix_hint=f"Supported placeholders: {', '.join(sorted(TEMPLATE_VARIABLES))}",
        )

    missing = sorted({name for name in fields if name not in variables})
    if missing:
        raise ConfigurationError(
            f"No value for placeholder(s) {', '.join(missing)} in {template}",
        )

    return template.format_map(variables)


def _children(node: Any) -> list[tuple[Any, str | int]]:
    if isinstance(node, dict):
        return [(node, key) for key in node]
    if isinstance(node, list):
        return [(node, index) for index in range(len(node))]
    return []


def _step(node: Any, segment: Segment, create: bool) -> list[tuple[Any, str | int]]:
    """Resolve one segment against ``node`` into (container, key) slots."""
    if segment.kind == "wildcard":
        return _children(node)
    if segment.kind == "key":
        if isinstance(node, dict) and (segment.value in node or create):
            return [(node, segment.value)]
        return []
    if isinstance(node, list) and isinstance(segment.value, int):
        if -len(node) <= segment.value < len(node):
            return [(node, segment.value)]
    return []


def _locate(document: Any, segments: tuple[Segment, ...], create: bool) -> list[tuple[Any, str | int]]:
    nodes = [document]
    slots: list[tuple[Any, str | int]] = []
    for depth, segment in enumerate(segments):
        last = depth == len(segments) - 1
        slots = []
        for node in nodes:
            slots.extend(_step(node, segment, create))
        if last:
            break
        nodes = []
        for container, key in slots:
            if create and isinstance(container, dict) and key not in container:
                container[key] = {}
            nodes.append(container[key])
    return slots


def find_values(document: Any, expression: str) -> list[Any]:
    """Return every value matched by ``expression``."""
    segments = parse_path(expression)
    if not segments:
        return [document]
    return [container[key] for container, key in _locate(document, segments, create=False)]


def get_at_path(document: Any, expression: str) -> Any:
    """Return the single value at ``expression``.

    Raises:
        PathNotFoundError: If nothing matches
        ConfigurationError: If the expression matches more than one value
    """
    values = find_values(document, expression)
    if not values:
        raise PathNotFoundError(expression)
    if len(values) > 1:
        raise ConfigurationError(
            f"Path {expression} matches {len(values)} values",
            fix_hint="Use a path without wildcards",
        )
    return values[0]


def set_at_path(document: Any, expression: str, value: Any, create: bool = False) -> int:
    """Overwrite the value(s) at ``expression`` in place.

    Args:
        document: Tree of dicts and lists to mutate
        expression: Path expression
        value: New value
        create: Create missing objects along the path instead of failing

    Returns:
        Number of locations written

    Raises:
        PathNotFoundError: If nothing matches
        ConfigurationError: If the expression targets the root itself
    """
    segments = parse_path(expression)
    if not segments:
        raise ConfigurationError(
            f"Cannot replace the document root: {expression}",
            fix_hint="Point the path at a field, e.g. $.version",
        )

    slots = _locate(document, segments, create=create)
    if not slots:
        raise PathNotFoundError(expression)

    for container, key in slots:
        container[key] = value
    return len(slots)
