"""Subprocess execution for the git commands of a release.

Commands run without a shell and always capture their output. Output is
cleaned of ANSI sequences so branch and tag names compare as plain text,
and both non-zero exits and timeouts surface as ShellError.
"""

import os
import re
import subprocess
from collections.abc import Sequence
from pathlib import Path

# CSI, OSC and DCS/PM/APC escape sequences
_ANSI = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)|\x1b[PX^_].*?\x1b\\")
_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


class ShellError(Exception):
    """A command exited non-zero or ran past its timeout.

    Attributes:
        cmd: Argument list that was executed
        returncode: Exit status, None when the command timed out
        stdout: Cleaned standard output
        stderr: Cleaned standard error
    """

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(self.summary)

    @property
    def command_line(self) -> str:
        return " ".join(self.cmd)

    @property
    def summary(self) -> str:
        if self.returncode is None:
            return f"'{self.command_line}' timed out"
        return f"'{self.command_line}' exited with status {self.returncode}"

    def __str__(self) -> str:
        output = self.stderr or self.stdout
        return f"{self.summary}: {output}" if output else self.summary


def strip_ansi(text: str | None) -> str:
    """Drop terminal escape sequences and stray control characters."""
    if not text:
        return ""
    return _CONTROL.sub("", _ANSI.sub("", text))


def run(
    cmd: Sequence[str],
    cwd: Path | None = None,
    check: bool = True,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``cmd`` and return the completed process with cleaned output.

    Args:
        cmd: Program and arguments
        cwd: Working directory
        check: Raise ShellError on a non-zero exit
        timeout: Seconds before the command is killed (None waits forever)
        env: Variables added to the current environment

    Raises:
        ShellError: On a non-zero exit with ``check``, or on timeout
    """
    args = list(cmd)
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env={**os.environ, **env} if env else None,
        )
    except subprocess.TimeoutExpired as e:
        raise ShellError(args, None, strip_ansi(_text(e.stdout)), strip_ansi(_text(e.stderr))) from e

    result.stdout = strip_ansi(result.stdout).strip()
    result.stderr = strip_ansi(result.stderr).strip()

    if check and result.returncode != 0:
        raise ShellError(args, result.returncode, result.stdout, result.stderr)
    return result


def _text(output: str | bytes | None) -> str:
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output or ""
