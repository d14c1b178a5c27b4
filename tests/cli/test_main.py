"""Unit tests for the semtag CLI."""

import logging
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from semtag import __version__
from semtag.cli.main import cli
from semtag.config import ActionInputs


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to CliRunner's temporary streams."""
    yield
    logger = logging.getLogger("semtag")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def runner():
    return CliRunner()


def invoke_run(runner, args, env=None, exit_code=0):
    """Invoke `semtag run` and return the ActionInputs it built."""
    with runner.isolated_filesystem():
        with patch("semtag.cli.main.run_action", return_value=exit_code) as action:
            result = runner.invoke(cli, ["run", *args], env=env or {})
    assert result.exit_code == exit_code, result.output
    action.assert_called_once()
    inputs = action.call_args.args[0]
    assert isinstance(inputs, ActionInputs)
    return inputs


@pytest.mark.short
class TestRunCommand:
    def test_options(self, runner):
        inputs = invoke_run(
            runner,
            [
                "--manifest-path",
                "pyproject.toml",
                "--workspace",
                "/repo",
                "--ref",
                "abc123",
                "--overwrite",
                "--allow-prerelease",
                "--no-push-tags",
                "--token",
                "t0k3n",
            ],
        )

        assert inputs.manifest_path == "pyproject.toml"
        assert inputs.workspace == "/repo"
        assert inputs.ref == "abc123"
        assert inputs.overwrite is True
        assert inputs.allow_prerelease is True
        assert inputs.check_only is False
        assert inputs.push_tags is False
        assert inputs.token == "t0k3n"

    def test_defaults(self, runner):
        inputs = invoke_run(runner, ["--use-version", "1.2.3"])
        assert inputs.use_version == "1.2.3"
        assert inputs.ref == "HEAD"
        assert inputs.workspace == "."
        assert inputs.push_tags is True
        assert inputs.overwrite is False

    def test_environment_inputs(self, runner):
        env = {
            "INPUT_MANIFEST-PATH": "package.json",
            "INPUT_CHECK-ONLY": "true",
            "INPUT_PUSH-TAGS": "false",
        }
        inputs = invoke_run(runner, [], env=env)
        assert inputs.manifest_path == "package.json"
        assert inputs.check_only is True
        assert inputs.push_tags is False

    def test_options_override_environment(self, runner):
        env = {"INPUT_CHECK-ONLY": "true", "INPUT_REF": "main"}
        inputs = invoke_run(runner, ["--no-check-only", "--ref", "dev"], env=env)
        assert inputs.check_only is False
        assert inputs.ref == "dev"

    def test_config_file(self, runner, tmp_path):
        config = tmp_path / "custom.cfg"
        config.write_text("[inputs]\nuse-version = 4.5.6\noverwrite = true\n")

        inputs = invoke_run(runner, ["--config", str(config)])

        assert inputs.use_version == "4.5.6"
        assert inputs.overwrite is True

    def test_failure_exit_code(self, runner):
        invoke_run(runner, ["--use-version", "1.2.3"], exit_code=1)

    def test_end_to_end_failure_message(self, runner, tmp_path):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["run", "--workspace", str(tmp_path)], env={})
        assert result.exit_code == 1
        assert "Must provide manifest-path OR use-version" in result.output


@pytest.mark.short
class TestShowCommand:
    def test_show_release(self, runner):
        result = runner.invoke(cli, ["show", "v1.2.3+build.5"])
        assert result.exit_code == 0
        assert "version:    1.2.3+build.5" in result.output
        assert "tags:       v1 v1.2 v1.2.3 v1.2.3+build.5" in result.output

    def test_show_prerelease(self, runner):
        result = runner.invoke(cli, ["show", "1.2.3.alpha.4"])
        assert result.exit_code == 0
        assert "prerelease: alpha.4" in result.output
        assert "tags:       v1.2.3-alpha.4" in result.output

    def test_show_invalid(self, runner):
        result = runner.invoke(cli, ["show", "...."])
        assert result.exit_code == 1
        assert "Invalid version string" in result.output


@pytest.mark.short
class TestGroup:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_debug_logging(self, runner):
        with patch("semtag.cli.main.configure_logging") as configure:
            result = runner.invoke(cli, ["--debug", "show", "1.0.0"])
        assert result.exit_code == 0
        assert configure.call_args_list[-1].args == (True,)

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "run" in result.output
        assert "show" in result.output
