"""Command-line interface for the release tool.

Provides commands for:
- release: Bump, commit, tag and push a release of the current branch
- plan: Show what the next release would be, without changing anything
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from branchrelease import __version__
from branchrelease.config.loader import load_manifest, load_project_version, load_settings
from branchrelease.config.models import ReleaseManifest, ReleaseSettings
from branchrelease.console import RichPrompter, RichReporter
from branchrelease.exceptions import ConfigurationError, ReleaseError
from branchrelease.git.client import GitClient
from branchrelease.utils.version import BUMP_TYPES
from branchrelease.workflow import ReleaseOutcome, ReleaseWorkflow

# Create Typer app
app = typer.Typer(
    name="branch-release",
    help="Branch-driven semantic release tool",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"branch-release version {__version__}")
        raise typer.Exit()


def root_path(root: str) -> Path:
    """Project root with any trailing slash stripped."""
    stripped = root.rstrip("/")
    return Path(stripped or "/")


def check_bump(bump: str | None) -> str | None:
    if bump is not None and bump not in BUMP_TYPES:
        raise ConfigurationError(
            f"Invalid --bump value: {bump}",
            fix_hint="Use one of: " + ", ".join(BUMP_TYPES),
        )
    return bump


def fail(error: ReleaseError) -> typer.Exit:
    """Print a release error and build the matching exit."""
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    return typer.Exit(code=error.exit_code)


def build_workflow(
    project_root: Path,
    manifest: ReleaseManifest,
    settings: ReleaseSettings,
    yes: bool,
    bump: str | None,
    verbose: bool,
) -> ReleaseWorkflow:
    """Load the fallback version and wire the workflow collaborators."""
    fallback = load_project_version(project_root, settings)
    git = GitClient(
        cwd=project_root,
        timeout=settings.git_timeout,
        sign_commits=settings.sign_commits,
        sign_tags=settings.sign_tags,
    )
    return ReleaseWorkflow(
        project_root=project_root,
        git=git,
        manifest=manifest,
        settings=settings,
        fallback_version=fallback,
        reporter=RichReporter(console, verbose=verbose),
        prompter=RichPrompter(console, assume_yes=yes, bump=bump),
        manual_bump=bump,
        metadata_label=settings.metadata_file,
    )


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: B008
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Branch-driven semantic release tool.

    Computes the next version from git tags and the branch policy
    (develop: alpha, stage: beta, master: patch), writes it into the
    configured files, then commits, tags and pushes.
    """
    pass


@app.command()
def release(
    root: str = typer.Option(  # noqa: B008
        ...,
        "--root",
        "-r",
        help="The project root path",
    ),
    config: Path = typer.Option(  # noqa: B008
        ...,
        "--config",
        "-c",
        help="Release manifest path (JSON, YAML or TOML), relative to --root",
    ),
    bump: str | None = typer.Option(  # noqa: B008
        None,
        "--bump",
        "-b",
        help="Bump for a new alpha train on develop: patch, minor or major",
    ),
    remote: str | None = typer.Option(  # noqa: B008
        None,
        "--remote",
        help="Git remote (default: origin)",
    ),
    yes: bool = typer.Option(  # noqa: B008
        False,
        "--yes",
        "-y",
        help="Skip the prompts (confirm, and patch unless --bump is given)",
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False,
        "--verbose",
        "-v",
        help="Show every file and path that gets updated",
    ),
) -> None:
    """Release the current branch.

    Examples:
        branch-release release --root . --config release.json
        branch-release release -r . -c release.json --bump minor
    """
    try:
        project_root = root_path(root)
        settings = load_settings(remote=remote)
        manifest = load_manifest(config, project_root)
        workflow = build_workflow(
            project_root, manifest, settings, yes, check_bump(bump), verbose
        )
    except ReleaseError as e:
        raise fail(e) from None

    console.print(Panel("[bold]Welcome to deploy![/bold]", border_style="cyan"))
    result = workflow.run()

    if result.outcome is ReleaseOutcome.CANCELLED:
        raise typer.Exit()

    if result.error is not None:
        raise fail(result.error)

    if result.plan is not None:
        console.print(
            Panel(
                f"[bold green]Released {result.plan.tag_name}[/bold green]",
                border_style="green",
            )
        )


@app.command()
def plan(
    root: str = typer.Option(  # noqa: B008
        ...,
        "--root",
        "-r",
        help="The project root path",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Release manifest path, to list the files that would change",
    ),
    bump: str | None = typer.Option(  # noqa: B008
        None,
        "--bump",
        "-b",
        help="Bump for a new alpha train on develop: patch, minor or major",
    ),
) -> None:
    """Show the next release without fetching or changing anything."""
    try:
        project_root = root_path(root)
        settings = load_settings()
        manifest = load_manifest(config, project_root) if config is not None else ReleaseManifest()
        workflow = build_workflow(
            project_root, manifest, settings, False, check_bump(bump), False
        )
        resolution, release_plan = workflow.preview()
    except ReleaseError as e:
        raise fail(e) from None

    table = Table(title="Release Plan")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Branch", release_plan.branch)
    table.add_row("Environment", release_plan.environment.label)
    table.add_row(
        "Current Version",
        f"{release_plan.old_version}"
        + (f" ({settings.metadata_file})" if resolution.from_fallback else ""),
    )
    table.add_row("Next Version", release_plan.new_version)
    table.add_row("Tag", release_plan.tag_name)
    table.add_row("Latest Tags", escape(", ".join(resolution.candidates)) or "-")
    for target in release_plan.targets:
        table.add_row(
            escape(f"Target {target.key}"),
            escape(f"{target.dir}: {', '.join(target.version_keys)}"),
        )

    console.print(table)


if __name__ == "__main__":
    app()
