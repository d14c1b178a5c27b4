"""Structured outputs of a run, written where GitHub Actions expects them."""

import logging
import os
import uuid
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class OutputSink:
    """
    Collects outputs and the failure message of a run.

    When ``output_file`` (default: ``$GITHUB_OUTPUT``) is set, every output is
    also appended to it in the ``key=value`` format the runner reads.
    """

    def __init__(self, output_file: Optional[Union[str, Path]] = None):
        if output_file is None:
            output_file = os.environ.get("GITHUB_OUTPUT") or None
        self.output_file = Path(output_file) if output_file else None
        self.outputs: Dict[str, str] = {}
        self.failure: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.failure is not None

    def set_output(self, key: str, value) -> None:
        value = str(value)
        self.outputs[key] = value
        logger.debug(f"Output {key}={value}")

        if self.output_file is None:
            return

        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            line = f"{key}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            line = f"{key}={value}\n"

        with open(self.output_file, "a", encoding="utf-8") as f:
            f.write(line)

    def info(self, message: str) -> None:
        logger.info(message)

    def set_failed(self, message: str) -> None:
        self.failure = message
        logger.error(message)
