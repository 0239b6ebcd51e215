"""Subprocess helpers used by the installers.

``run_command`` captures output for listing commands; ``iter_command``
streams the merged stdout/stderr of long-running installs line by line.
"""

import shutil
import subprocess
from collections.abc import Generator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of a finished command."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def lines(self) -> list[str]:
        """Non-empty, stripped lines of standard output."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Run a command to completion and capture its output.

    A non-zero exit status is not an error here; callers inspect
    ``CommandResult.success``.

    Raises:
        subprocess.TimeoutExpired: If the command exceeds ``timeout``.
        FileNotFoundError: If the executable is not found.
    """
    proc = subprocess.run(args, capture_output=True, text=True, check=False, timeout=timeout)
    return CommandResult(stdout=proc.stdout, stderr=proc.stderr, returncode=proc.returncode)


def iter_command(args: list[str]) -> Generator[str, None, CommandResult]:
    """Run a command, yielding each output line as it arrives.

    Standard error is merged into standard output so the transcript keeps
    its order. The generator returns (via ``yield from``) a CommandResult
    whose stdout is the full transcript.

    Yields:
        Output lines without the trailing newline.

    Raises:
        FileNotFoundError: If the executable is not found.
    """
    transcript: list[str] = []
    with subprocess.Popen(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        bufsize=1,
    ) as proc:
        assert proc.stdout is not None
        for raw in proc.stdout:
            line = raw.rstrip("\n")
            transcript.append(line)
            yield line
        returncode = proc.wait()

    return CommandResult(stdout="\n".join(transcript), stderr="", returncode=returncode)


def command_exists(name: str) -> bool:
    """Check whether ``name`` is on PATH."""
    return shutil.which(name) is not None
