"""Writes the planned version into the release targets.

Targets are processed in manifest order. Each file is loaded, every version
path is rewritten, and the document is saved pretty-printed. There is no
transaction across files: a failure leaves earlier targets rewritten.
"""

from collections.abc import Callable
from pathlib import Path

from branchrelease.config.models import ReleaseTarget
from branchrelease.documents import read_document, write_document
from branchrelease.exceptions import PathNotFoundError
from branchrelease.paths import render_path_template, set_at_path
from branchrelease.planner import ReleasePlan

# Called after each written path and after each saved file
WriteListener = Callable[[str], None]


def _notify(listener: WriteListener | None, message: str) -> None:
    if listener is not None:
        listener(message)


def apply_target(
    plan: ReleasePlan,
    target: ReleaseTarget,
    root: Path,
    indent: int = 2,
    listener: WriteListener | None = None,
) -> Path:
    """Rewrite the version fields of one target file.

    Returns:
        Path of the saved file

    Raises:
        PathNotFoundError: If a version path is absent from the document
        TargetWriteError: If the file cannot be read, parsed or written
        ConfigurationError: If a path template is invalid
    """
    path = target.resolve(root)
    document = read_document(path)
    value = plan.formatted_version(target.prefix)

    for template in target.version_keys:
        expression = render_path_template(template, {"branch": plan.branch})
        try:
            set_at_path(document, expression, value, create=target.create_missing)
        except PathNotFoundError:
            raise PathNotFoundError(expression, source=str(path)) from None
        _notify(listener, f"Updated {path} version on {expression}")

    write_document(path, document, indent=indent)
    _notify(listener, f"Saved {path}")
    return path


def apply_version(
    plan: ReleasePlan,
    root: Path,
    indent: int = 2,
    listener: WriteListener | None = None,
) -> list[Path]:
    """Write ``plan.new_version`` into every target, in declared order.

    Returns:
        Paths of the rewritten files
    """
    return [
        apply_target(plan, target, root, indent=indent, listener=listener)
        for target in plan.targets
    ]
