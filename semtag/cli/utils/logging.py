import logging
import os
import sys


logger = logging.getLogger("semtag")

# Workflow command prefixes understood by the GitHub Actions runner
_ANNOTATIONS = {
    logging.DEBUG: "::debug::",
    logging.WARNING: "::warning::",
    logging.ERROR: "::error::",
    logging.CRITICAL: "::error::",
}


class WorkflowCommandFormatter(logging.Formatter):
    """Prefixes debug, warning and error records with runner annotations."""

    def format(self, record):
        message = super().format(record)
        return f"{_ANNOTATIONS.get(record.levelno, '')}{message}"


def running_in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def configure_logging(debug: bool, annotate: bool = None):
    """
    Configures the logging system based on the debug flag.

    Inside GitHub Actions (or with ``annotate``) records are rendered as
    workflow commands so errors and warnings show up as annotations.
    """
    if annotate is None:
        annotate = running_in_actions()

    handler = logging.StreamHandler(sys.stdout)
    formatter_cls = WorkflowCommandFormatter if annotate else logging.Formatter
    handler.setFormatter(formatter_cls("%(message)s"))

    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        logger.addHandler(handler)
