"""Orchestration: resolve the version, check it, tag it and report outputs."""

import logging
from typing import Optional

import requests

from semtag.config import ActionInputs, InputError
from semtag.messages import GitHubClient, GitHubContext, version_check_comment
from semtag.outputs import OutputSink
from semtag.versioning import (
    Version,
    VersioningError,
    infer_version,
    parse_version,
    tag_version,
    version_exists,
)

logger = logging.getLogger(__name__)


def resolve_version(inputs: ActionInputs) -> Optional[Version]:
    """Version from ``use-version`` or, failing that, from the manifest."""
    if inputs.use_version:
        return parse_version(inputs.use_version)
    return infer_version(inputs.manifest_path, inputs.workspace)


def write_outputs(version: Version, sink: OutputSink) -> None:
    """Output the version formats [X.Y.Z-PRE+BUILD, X.Y.Z, X.Y, X, Y, Z, PRE, BUILD]."""
    sink.set_output("version", version.to_string(prefix=False, build=True))
    sink.set_output("major-minor-patch", version.major_minor_patch)
    sink.set_output("major-minor", version.major_minor)
    sink.set_output("major", version.major)
    sink.set_output("minor", version.minor)
    sink.set_output("patch", version.patch)

    if version.prerelease:
        sink.set_output("prerelease", version.prerelease)
    if version.build:
        sink.set_output("build", version.build)


def _comment(inputs: ActionInputs, context: GitHubContext, exists: bool) -> None:
    if not inputs.token:
        logger.warning("No token provided, skipping pull request comment")
        return
    client = GitHubClient(inputs.token)
    version_check_comment(client, context, not exists, inputs.manifest_path)


def run(
    inputs: ActionInputs,
    sink: Optional[OutputSink] = None,
    context: Optional[GitHubContext] = None,
) -> int:
    """
    Run the version check and, unless in check-only mode, tag the ref.

    Args:
        inputs: The action inputs
        sink: Where outputs and the failure message go
        context: GitHub context, used to comment on pull requests

    Returns:
        The process exit status: 0 on success, 1 on failure
    """
    sink = sink or OutputSink()
    context = context or GitHubContext.from_env()

    try:
        inputs.check()

        sink.info("Running action with inputs:")
        sink.info(f"\tAllow Prerelease: {inputs.allow_prerelease}")
        sink.info(f"\tCheck: {inputs.check_only}")
        sink.info(f"\tManifest Path: {inputs.manifest_path}")
        sink.info(f"\tOverwrite: {inputs.overwrite}")
        sink.info(f"\tPush Tags: {inputs.push_tags}")
        sink.info(f"\tRef: {inputs.ref}")
        sink.info(f"\tUse Version: {inputs.use_version}")
        sink.info(f"\tWorkspace: {inputs.workspace}")

        version = resolve_version(inputs)
        if version is None:
            sink.set_failed("Could not infer version")
            return 1
        sink.info(f"Inferred Version: {version}")

        exists = version_exists(version, inputs.workspace, inputs.allow_prerelease)

        if context.issue_number is not None:
            _comment(inputs, context, exists)

        if inputs.check_only and exists:
            sink.set_failed("Version exists and 'check-only' is true")
            return 1

        if not inputs.check_only and not inputs.overwrite and exists:
            sink.set_failed("Version exists and 'overwrite' is false")
            return 1

        if not inputs.check_only:
            tag_version(version, inputs.ref, inputs.workspace, inputs.push_tags)
        else:
            sink.info("Version does not exist and 'check-only' is true")

        write_outputs(version, sink)

    except (InputError, VersioningError, requests.RequestException) as e:
        logger.debug("Run failed", exc_info=True)
        sink.set_failed(str(e))
        return 1

    return 0
