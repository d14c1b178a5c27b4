"""Pull request comments reporting the outcome of a version check."""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


def comment_marker(workflow: str) -> str:
    """Hidden marker identifying the version check comment of a workflow."""
    return f"<!-- semver: workflow={workflow} -->"


@dataclass
class GitHubContext:
    """The repository, workflow and pull request a run belongs to."""

    repository: str
    workflow: str
    issue_number: Optional[int] = None

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[-1]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GitHubContext":
        """
        Build the context from the variables set by GitHub Actions.

        The pull request (or issue) number is read from the event payload at
        ``GITHUB_EVENT_PATH``; it is None for events without one (e.g. pushes).
        """
        environ = os.environ if environ is None else environ

        issue_number = None
        event_path = environ.get("GITHUB_EVENT_PATH")
        if event_path and os.path.exists(event_path):
            with open(event_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            for key in ("pull_request", "issue"):
                number = (payload.get(key) or {}).get("number")
                if number is not None:
                    issue_number = int(number)
                    break

        return cls(
            repository=environ.get("GITHUB_REPOSITORY", ""),
            workflow=environ.get("GITHUB_WORKFLOW", ""),
            issue_number=issue_number,
        )


class GitHubClient:
    """Minimal GitHub REST client for issue comments."""

    def __init__(
        self,
        token: str,
        api_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = (
            api_url or os.environ.get("GITHUB_API_URL") or DEFAULT_API_URL
        ).rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "Authorization": f"Bearer {token}",
            }
        )

    def list_comments(
        self, owner: str, repo: str, issue_number: int
    ) -> List[Dict[str, Any]]:
        url = f"{self.api_url}/repos/{owner}/{repo}/issues/{issue_number}/comments"
        params: Optional[Dict[str, Any]] = {"per_page": 100}
        comments: List[Dict[str, Any]] = []

        while url:
            response = self.session.get(url, params=params)
            response.raise_for_status()
            comments.extend(response.json())
            # The next page URL already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        return comments

    def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> Dict[str, Any]:
        url = f"{self.api_url}/repos/{owner}/{repo}/issues/{issue_number}/comments"
        response = self.session.post(url, json={"body": body})
        response.raise_for_status()
        return response.json()

    def update_comment(
        self, owner: str, repo: str, comment_id: int, body: str
    ) -> Dict[str, Any]:
        url = f"{self.api_url}/repos/{owner}/{repo}/issues/comments/{comment_id}"
        response = self.session.patch(url, json={"body": body})
        response.raise_for_status()
        return response.json()


def get_comment_id(client: GitHubClient, context: GitHubContext) -> Optional[int]:
    """
    Gets the ID of the previous version check comment, if it exists.

    Returns:
        The ID of the last comment carrying this workflow's marker, or None
    """
    identifier = comment_marker(context.workflow)
    comment_id = None

    for comment in client.list_comments(
        context.owner, context.repo, context.issue_number
    ):
        if identifier in (comment.get("body") or ""):
            comment_id = comment["id"]

    return comment_id


def comment_body(success: bool, manifest_path: str, workflow: str) -> str:
    if success:
        lines = [
            "### Semantic Version Check Passed :white_check_mark:",
            f"Version in manifest file `{manifest_path}` is valid.",
        ]
    else:
        lines = [
            "### Semantic Version Check Failed :x:",
            f"Version in manifest file `{manifest_path}` has already been published. "
            "Please increment the version in the manifest file before attempting "
            "to merge this pull request.",
        ]
    lines += [
        "This comment will be automatically updated as changes are pushed to this PR branch.",
        comment_marker(workflow),
    ]
    return "\n\n".join(lines)


def version_check_comment(
    client: GitHubClient, context: GitHubContext, success: bool, manifest_path: str
) -> None:
    """
    Comments on the pull request when a version check succeeds or fails.

    An earlier comment from the same workflow is updated in place, so a pull
    request carries at most one version check comment per workflow.

    Args:
        client: GitHub client
        context: The repository, workflow and pull request
        success: Whether the version check succeeded or failed
        manifest_path: The path to the manifest file being checked
    """
    body = comment_body(success, manifest_path, context.workflow)
    comment_id = get_comment_id(client, context)

    if comment_id is not None:
        logger.info(f"Updating version check comment {comment_id}")
        client.update_comment(context.owner, context.repo, comment_id, body)
    else:
        logger.info(f"Commenting on #{context.issue_number}")
        client.create_comment(context.owner, context.repo, context.issue_number, body)
