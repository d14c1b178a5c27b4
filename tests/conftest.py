import io
import logging
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from semtag.git import CommandResult


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("semtag")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture(scope="session")
def manifests_dir() -> Path:
    """Directory containing manifest fixtures."""
    return Path(__file__).parent / "data" / "manifests"


class FakeGit:
    """
    Stand-in for GitCommand that records calls.

    Unless overridden with ``on()``, commands answer the way git does against
    a remote that has none of the tags: deleting reports "not found", creating
    is silent and the bulk push reports new tags.
    """

    def __init__(self, remote: str = "origin"):
        self.remote = remote
        self.calls: List[Tuple[str, ...]] = []
        self.responses: Dict[Tuple[str, ...], CommandResult] = {}

    def on(self, *args: str, status: int = 0, stdout: str = "", stderr: str = ""):
        self.responses[args] = CommandResult(status, stdout, stderr)
        return self

    def execute(self, *args: str) -> CommandResult:
        self.calls.append(args)
        if args in self.responses:
            return self.responses[args]
        return self._default(args)

    def _default(self, args: Tuple[str, ...]) -> CommandResult:
        if args[:2] == ("tag", "-d"):
            return CommandResult(1, "", f"error: tag '{args[2]}' not found.")
        if args[0] == "push" and args[-1].startswith(":refs/tags/"):
            ref = args[-1][1:]
            return CommandResult(
                1,
                "",
                f"To github.com:example/repo.git\n"
                f"error: unable to delete '{ref}': remote ref does not exist\n"
                f"error: failed to push some refs to 'github.com:example/repo.git'",
            )
        if args[0] == "push" and args[-1] == "--tags":
            return CommandResult(
                0, "", "To github.com:example/repo.git\n * [new tag]         v1 -> v1"
            )
        return CommandResult(0, "", "")


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()
