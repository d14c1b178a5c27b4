"""
Tag reconciliation against a git remote.

For each tag computed from a Version the reconciler deletes the local tag,
deletes the remote tag and recreates the local tag at the requested ref.
Once every tag exists locally they are pushed in one go. Any unexpected git
output aborts the sequence; tags already mutated are left as they are.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from semtag.git import CommandResult, GitCommand

from .exceptions import TagOperationError
from .version import Version

logger = logging.getLogger(__name__)


class TagState(Enum):
    IDLE = "idle"
    DELETING = "deleting"
    PUSHING_DELETE = "pushing-delete"
    CREATING = "creating"
    BATCH_PUSHING = "batch-pushing"
    DONE = "done"
    FAILED = "failed"


class TagReconciler:
    """
    Moves the tags of a version to a ref, one tag at a time.

    The reconciler is single use: it walks
    IDLE -> (DELETING -> PUSHING_DELETE -> CREATING)* -> BATCH_PUSHING -> DONE
    and ends in FAILED on the first unexpected git output. ``current_tag`` and
    ``completed`` describe how far it got.
    """

    def __init__(self, git: GitCommand):
        self.git = git
        self.state = TagState.IDLE
        self.current_tag: Optional[str] = None
        self.completed: List[str] = []

    def reconcile(self, version: Version, ref: str, push: bool = True) -> List[str]:
        """
        Point every tag of ``version`` at ``ref``.

        Args:
            version: The version whose tags are moved
            ref: The ref to tag
            push: True to push the tags to the remote afterwards

        Returns:
            The tags that were created

        Raises:
            TagOperationError: If a git command reports unexpected output
        """
        if self.state is not TagState.IDLE:
            raise RuntimeError(f"Tag reconciler already used (state: {self.state.value})")

        tags = version.tags()
        logger.info(f"Tagging {ref} with: {', '.join(tags)}")

        try:
            for tag in tags:
                self.current_tag = tag
                self._delete_local(tag)
                self._delete_remote(tag)
                self._create_local(tag, ref)
                self.completed.append(tag)
            self.current_tag = None

            if push:
                self._push()
        except TagOperationError:
            self.state = TagState.FAILED
            raise

        self.state = TagState.DONE
        return tags

    def _delete_local(self, tag: str) -> None:
        self.state = TagState.DELETING
        result = self.git.execute("tag", "-d", tag)
        if result.stderr and "not found" not in result.stderr:
            raise TagOperationError("delete-local", result.stderr, tag)
        logger.debug(f"Deleted local tag {tag}")

    def _delete_remote(self, tag: str) -> None:
        self.state = TagState.PUSHING_DELETE
        result = self.git.execute("push", self.git.remote, f":refs/tags/{tag}")
        if (
            result.stderr
            and "[deleted]" not in result.stderr
            and "remote ref does not exist" not in result.stderr
        ):
            raise TagOperationError("delete-remote", result.stderr, tag)
        logger.debug(f"Deleted remote tag {tag}")

    def _create_local(self, tag: str, ref: str) -> None:
        self.state = TagState.CREATING
        result = self.git.execute("tag", tag, ref)
        if result.stderr or result.status != 0:
            raise TagOperationError("create-local", result.stderr, tag)
        logger.info(f"Created tag {tag} at {ref}")

    def _push(self) -> None:
        self.state = TagState.BATCH_PUSHING
        result = self.git.execute("push", self.git.remote, "--tags")
        if "[new tag]" not in result.stderr:
            raise TagOperationError("push", result.stderr or result.stdout)
        logger.info(f"Pushed tags to {self.git.remote}")


def existence_tag(version: Version) -> str:
    """The tag whose presence means the version was already published."""
    return version.to_string(prefix=True, build=False)


def remote_tag_names(result: CommandResult) -> List[str]:
    """Parse ``git ls-remote --tags`` output into tag names."""
    names = []
    for line in result.stdout.splitlines():
        parts = line.split()
        if len(parts) != 2 or not parts[1].startswith("refs/tags/"):
            continue
        name = parts[1][len("refs/tags/") :]
        # Annotated tags are listed twice, once peeled
        if name.endswith("^{}"):
            name = name[:-3]
        if name not in names:
            names.append(name)
    return names


class TagExistenceChecker:
    """Checks whether a version has already been tagged on the remote."""

    def __init__(self, git: GitCommand):
        self.git = git

    def exists(self, version: Version, allow_prerelease: bool = False) -> bool:
        """
        Check if the version tag already exists on the remote.

        Only the fully qualified ``vX.Y.Z[-prerelease]`` tag is checked: the
        ``vX.Y`` and ``vX`` tags float, and build metadata does not make a
        version distinct. Prereleases never block when ``allow_prerelease``
        is set.

        Args:
            version: The version to look up
            allow_prerelease: True to allow prerelease version conflicts

        Returns:
            True if the version tag exists, otherwise False

        Raises:
            TagOperationError: If the remote cannot be queried
        """
        if version.prerelease and allow_prerelease:
            logger.info("Prerelease versions are allowed, skipping existence check")
            return False

        tag = existence_tag(version)
        result = self.git.execute(
            "ls-remote", "--tags", self.git.remote, f"refs/tags/{tag}"
        )
        if result.status != 0:
            raise TagOperationError("ls-remote", result.stderr or result.stdout, tag)

        found = tag in remote_tag_names(result)
        logger.info(f"Tag {tag} {'exists' if found else 'does not exist'}")
        return found


def tag_version(
    version: Version, ref: str, workspace: Union[str, Path], push: bool = True
) -> List[str]:
    """
    Tag the ref with the version tags.

    Args:
        version: The version to tag
        ref: The ref to tag
        workspace: The project workspace (a git checkout)
        push: True to push the tags to the remote

    Returns:
        The tags that were created
    """
    return TagReconciler(GitCommand(workspace)).reconcile(version, ref, push)


def version_exists(
    version: Version, workspace: Union[str, Path], allow_prerelease: bool = False
) -> bool:
    """
    Check if the version tag already exists in the repository.

    Args:
        version: The version to look up
        workspace: The project workspace (a git checkout)
        allow_prerelease: True to allow prerelease version conflicts

    Returns:
        True if the version tag exists, otherwise False
    """
    return TagExistenceChecker(GitCommand(workspace)).exists(version, allow_prerelease)
