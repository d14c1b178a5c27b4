"""Tests for pull request comments, with the HTTP session mocked out."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from semtag.messages import (
    GitHubClient,
    GitHubContext,
    comment_body,
    comment_marker,
    get_comment_id,
    version_check_comment,
)


def response(payload, links=None, status=200):
    mock = MagicMock()
    mock.json.return_value = payload
    mock.links = links or {}
    if status >= 400:
        mock.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return mock


@pytest.fixture
def session():
    mock = MagicMock()
    mock.headers = {}
    return mock


@pytest.fixture
def client(session):
    return GitHubClient("t0k3n", api_url="https://api.example.com/", session=session)


@pytest.fixture
def context():
    return GitHubContext(repository="octo/hello", workflow="Check Version", issue_number=7)


@pytest.mark.short
class TestGitHubContext:
    def test_owner_and_repo(self, context):
        assert context.owner == "octo"
        assert context.repo == "hello"

    def test_from_env_pull_request(self, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"pull_request": {"number": 42}}))

        context = GitHubContext.from_env(
            {
                "GITHUB_REPOSITORY": "octo/hello",
                "GITHUB_WORKFLOW": "CI",
                "GITHUB_EVENT_PATH": str(event),
            }
        )

        assert context.issue_number == 42
        assert context.workflow == "CI"

    def test_from_env_issue(self, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"issue": {"number": 3}}))
        context = GitHubContext.from_env({"GITHUB_EVENT_PATH": str(event)})
        assert context.issue_number == 3

    def test_from_env_push_event(self, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"ref": "refs/heads/main"}))
        context = GitHubContext.from_env({"GITHUB_EVENT_PATH": str(event)})
        assert context.issue_number is None

    def test_from_env_without_event(self):
        context = GitHubContext.from_env({})
        assert context.issue_number is None
        assert context.repository == ""


@pytest.mark.short
class TestGitHubClient:
    def test_headers(self, client, session):
        assert session.headers["Authorization"] == "Bearer t0k3n"
        assert session.headers["Accept"] == "application/vnd.github+json"
        assert client.api_url == "https://api.example.com"

    def test_api_url_from_env(self, session, monkeypatch):
        monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3")
        assert GitHubClient("t", session=session).api_url == "https://ghe.example.com/api/v3"

    def test_list_comments_follows_pages(self, client, session):
        next_url = "https://api.example.com/repos/octo/hello/issues/7/comments?page=2"
        session.get.side_effect = [
            response([{"id": 1, "body": "a"}], links={"next": {"url": next_url}}),
            response([{"id": 2, "body": "b"}]),
        ]

        comments = client.list_comments("octo", "hello", 7)

        assert [c["id"] for c in comments] == [1, 2]
        first, second = session.get.call_args_list
        assert first.args[0] == "https://api.example.com/repos/octo/hello/issues/7/comments"
        assert first.kwargs["params"] == {"per_page": 100}
        assert second.args[0] == next_url
        assert second.kwargs["params"] is None

    def test_create_comment(self, client, session):
        session.post.return_value = response({"id": 9})
        assert client.create_comment("octo", "hello", 7, "hi") == {"id": 9}
        session.post.assert_called_once_with(
            "https://api.example.com/repos/octo/hello/issues/7/comments",
            json={"body": "hi"},
        )

    def test_update_comment(self, client, session):
        session.patch.return_value = response({"id": 9})
        client.update_comment("octo", "hello", 9, "hi")
        session.patch.assert_called_once_with(
            "https://api.example.com/repos/octo/hello/issues/comments/9",
            json={"body": "hi"},
        )

    def test_http_errors_raise(self, client, session):
        session.post.return_value = response({}, status=403)
        with pytest.raises(requests.HTTPError):
            client.create_comment("octo", "hello", 7, "hi")


@pytest.mark.short
class TestVersionCheckComment:
    def test_marker(self):
        assert comment_marker("CI") == "<!-- semver: workflow=CI -->"

    def test_bodies(self):
        success = comment_body(True, "package.json", "CI")
        failure = comment_body(False, "package.json", "CI")

        assert success.startswith("### Semantic Version Check Passed")
        assert failure.startswith("### Semantic Version Check Failed")
        assert "`package.json`" in failure
        assert success.endswith(comment_marker("CI"))
        assert failure.endswith(comment_marker("CI"))

    def test_get_comment_id_picks_last_marked_comment(self, client, session, context):
        marker = comment_marker("Check Version")
        session.get.return_value = response(
            [
                {"id": 1, "body": f"old\n{marker}"},
                {"id": 2, "body": "unrelated"},
                {"id": 3, "body": f"new\n{marker}"},
                {"id": 4, "body": None},
                {"id": 5, "body": comment_marker("Other Workflow")},
            ]
        )
        assert get_comment_id(client, context) == 3

    def test_creates_comment_when_none_exists(self, client, session, context):
        session.get.return_value = response([])
        session.post.return_value = response({"id": 10})

        version_check_comment(client, context, True, "package.json")

        session.patch.assert_not_called()
        body = session.post.call_args.kwargs["json"]["body"]
        assert "Passed" in body
        assert comment_marker("Check Version") in body

    def test_updates_existing_comment(self, client, session, context):
        session.get.return_value = response(
            [{"id": 5, "body": comment_marker("Check Version")}]
        )
        session.patch.return_value = response({"id": 5})

        version_check_comment(client, context, False, "pom.xml")

        session.post.assert_not_called()
        url = session.patch.call_args.args[0]
        assert url.endswith("/issues/comments/5")
        assert "Failed" in session.patch.call_args.kwargs["json"]["body"]
