"""Thin wrapper over GitPython for running git commands with captured output."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from git import Git

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of a git command."""

    status: int
    stdout: str
    stderr: str


class GitCommand:
    """
    Runs git commands inside a workspace.

    Commands never raise on a non-zero exit status: callers decide what
    counts as a failure by inspecting the returned CommandResult, since git
    reports several benign conditions (e.g. deleting a missing tag) as errors.
    """

    def __init__(self, workspace: Union[str, Path], remote: str = DEFAULT_REMOTE):
        self.workspace = Path(workspace)
        self.remote = remote
        self._git = Git(str(self.workspace))

    def execute(self, *args: str) -> CommandResult:
        """
        Run ``git <args>`` in the workspace.

        Args:
            *args: Arguments passed to git

        Returns:
            The exit status, stdout and stderr of the command
        """
        command = ["git", *args]
        logger.debug(f"Running `{' '.join(command)}` in {self.workspace}")

        status, stdout, stderr = self._git.execute(
            command,
            with_extended_output=True,
            with_exceptions=False,
        )

        result = CommandResult(status=status, stdout=stdout or "", stderr=stderr or "")
        if result.stderr:
            logger.debug(f"git stderr: {result.stderr}")
        return result
