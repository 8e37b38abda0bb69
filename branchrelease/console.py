"""Rich-based progress output and interactive prompts."""

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from branchrelease.workflow import ReleaseStage, StageStatus

STATUS_STYLES: dict[StageStatus, str] = {
    StageStatus.SUCCESS: "[green]  ✓ {message}[/green]",
    StageStatus.SKIPPED: "[yellow]  ⊘ {message}[/yellow]",
    StageStatus.INFO: "[dim]  {message}[/dim]",
    StageStatus.WARNING: "[yellow]  ! {message}[/yellow]",
    StageStatus.FAILED: "[red]  ✗ {message}[/red]",
}


class RichReporter:
    """Prints one line per progress event."""

    def __init__(self, console: Console, verbose: bool = False) -> None:
        self.console = console
        self.verbose = verbose

    def report(self, stage: ReleaseStage, status: StageStatus, message: str = "") -> None:
        if status is StageStatus.INFO and not self.verbose:
            return
        if status is StageStatus.START:
            self.console.print(f"[bold cyan]>[/bold cyan] {escape(message)}")
        elif status is StageStatus.FAILED:
            self.console.print(STATUS_STYLES[status].format(message=escape(f"[{stage.value}] {message}")))
        else:
            self.console.print(STATUS_STYLES[status].format(message=escape(message)))


class RichPrompter:
    """Asks for confirmation and bump choices on the terminal.

    ``assume_yes`` answers every confirmation with yes and takes the default
    bump choice; ``bump`` preselects the develop bump choice.
    """

    def __init__(
        self,
        console: Console,
        assume_yes: bool = False,
        bump: str | None = None,
    ) -> None:
        self.console = console
        self.assume_yes = assume_yes
        self.bump = bump

    def confirm(self, question: str) -> bool:
        if self.assume_yes:
            self.console.print(f"{escape(question)} [dim](yes)[/dim]")
            return True
        return Confirm.ask(question, console=self.console, default=True)

    def choose_bump(self, question: str, choices: tuple[str, ...], default: str) -> str:
        if self.bump is not None:
            return self.bump
        if self.assume_yes:
            self.console.print(f"{escape(question)} [dim]({escape(default)})[/dim]")
            return default
        return Prompt.ask(question, console=self.console, choices=list(choices), default=default)
