"""Run shell commands on behalf of the browser."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

CONTINUE_PROMPT = "\npress any key to continue"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command: success flag plus the message shown on failure."""

    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "CommandResult":
        return cls(True, None)

    @classmethod
    def failed(cls, error: str) -> "CommandResult":
        return cls(False, error)


class CommandExecutor(Protocol):
    def execute(self, command: str, cwd: Optional[str] = None) -> CommandResult: ...

    def run_interactive(
        self, command: str, cwd: Optional[str] = None, *, pause: bool = True
    ) -> CommandResult: ...


def quote(path: str) -> str:
    """Quote a path for inclusion in a shell command."""
    return shlex.quote(path)


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


class ShellExecutor:
    """Execute commands through ``/bin/sh``."""

    def execute(self, command: str, cwd: Optional[str] = None) -> CommandResult:
        """Run ``command`` with captured output.

        Returns:
            A successful result, or a failed one carrying the first line of
            stderr (or the exit status when stderr is empty).
        """
        logger.debug("execute: %s (cwd=%s)", command, cwd)
        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=cwd,
                capture_output=True,
                text=True,
                env=os.environ.copy(),
            )
        except OSError as err:
            logger.warning("Command could not start: %s", err)
            return CommandResult.failed(f"Command failed: {err}")
        if result.returncode != 0:
            message = _first_line(result.stderr) or f"{command} exited with status {result.returncode}"
            logger.warning("Command failed: %s", message)
            return CommandResult.failed(message)
        return CommandResult.ok()

    def run_interactive(
        self, command: str, cwd: Optional[str] = None, *, pause: bool = True
    ) -> CommandResult:
        """Hand the terminal to ``command`` until it exits.

        The caller must have suspended curses first.  When ``pause`` is set the
        user has to press a key before control returns, so the output stays
        readable.
        """
        logger.debug("run_interactive: %s (cwd=%s)", command, cwd)
        try:
            completed = subprocess.run(command, shell=True, cwd=cwd, check=False)
        except (OSError, subprocess.SubprocessError) as err:
            return CommandResult.failed(f"Command failed: {err}")
        finally:
            if pause:
                self._wait_for_key()
        if completed.returncode != 0:
            return CommandResult.failed(f"{command} exited with status {completed.returncode}")
        return CommandResult.ok()

    @staticmethod
    def _wait_for_key() -> None:
        print(CONTINUE_PROMPT, end="", flush=True)
        if not sys.stdin.isatty():
            return
        import termios
        import tty

        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            sys.stdin.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


__all__ = ["CommandExecutor", "CommandResult", "ShellExecutor", "quote"]
