"""Configuration: action inputs from CLI options, the environment and a config file"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

APP_NAME = "semtag"

CONFIG_SECTION = "inputs"

DEFAULT_CONFIG_FILE = Path(f"{APP_NAME}.cfg")

default_inputs: Dict[str, str] = {
    "ref": "HEAD",
    "workspace": ".",
    "manifest-path": "",
    "use-version": "",
    "overwrite": "false",
    "check-only": "false",
    "allow-prerelease": "false",
    "push-tags": "true",
    "token": "",
}


class InputError(ValueError):
    """Raised when the action inputs are inconsistent."""

    pass


def env_var_name(name: str) -> str:
    """Environment variable carrying an input, e.g. ``INPUT_MANIFEST-PATH``."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def parse_bool(value: Any) -> bool:
    """Inputs are true iff they read "true" (case-insensitive)."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


class ConfigAccessor:
    """
    A dict-like accessor for configuration files.

    Missing files, sections and keys are handled gracefully.

    Usage:
        config = ConfigAccessor(Path("semtag.cfg"))
        value = config.get('inputs', 'ref', default='HEAD')
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize a ConfigAccessor with an optional config file path.

        Args:
            config_path: Path to the configuration file. If None, uses
                ``semtag.cfg`` in the current directory.
        """
        self.config_path = Path(config_path or DEFAULT_CONFIG_FILE)

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            logger.debug(f"Reading configuration from {self.config_path}")
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default

    def sections(self) -> list:
        return self.config.sections()

    def options(self, section: str) -> list:
        try:
            return self.config.options(section)
        except configparser.NoSectionError:
            return []


class InputSource:
    """
    Flat name -> string lookup of action inputs.

    Precedence, highest first: explicit overrides (CLI options), ``INPUT_*``
    environment variables, the ``[inputs]`` section of the config file, and
    the built-in defaults. Empty strings count as unset.
    """

    def __init__(
        self,
        overrides: Optional[Mapping[str, Optional[str]]] = None,
        environ: Optional[Mapping[str, str]] = None,
        config: Optional[ConfigAccessor] = None,
    ):
        self.overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
        self.environ = os.environ if environ is None else environ
        self.config = config if config is not None else ConfigAccessor()

    def get(self, name: str) -> str:
        if self.overrides.get(name, "") != "":
            return str(self.overrides[name])

        value = self.environ.get(env_var_name(name), "")
        if value != "":
            return value

        value = self.config.get(CONFIG_SECTION, name, "")
        if value != "":
            return value

        return default_inputs.get(name, "")


class ActionInputs(BaseModel):
    """Validated action inputs."""

    ref: str = Field("HEAD", description="Ref to tag")
    workspace: str = Field(".", description="Project workspace (git checkout)")
    manifest_path: str = Field("", description="Manifest path, relative to workspace")
    use_version: str = Field("", description="Explicit version, instead of inferring")
    overwrite: bool = Field(False, description="Move tags of an existing version")
    check_only: bool = Field(False, description="Only check the version, never tag")
    allow_prerelease: bool = Field(False, description="Never block on prereleases")
    push_tags: bool = Field(True, description="Push tags to the remote")
    token: str = Field("", description="GitHub token for pull request comments")

    @field_validator(
        "overwrite", "check_only", "allow_prerelease", "push_tags", mode="before"
    )
    @classmethod
    def validate_flag(cls, v: Any) -> bool:
        return parse_bool(v)

    @classmethod
    def from_source(cls, source: InputSource) -> "ActionInputs":
        """Read every input from a source."""
        return cls(**{name.replace("-", "_"): source.get(name) for name in default_inputs})

    def check(self) -> None:
        """
        Check that exactly one version source is configured.

        Raises:
            InputError: If both or neither of manifest-path and use-version are set
        """
        if (self.manifest_path == "") == (self.use_version == ""):
            raise InputError("Must provide manifest-path OR use-version")
