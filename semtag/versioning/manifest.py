"""
Version inference from project manifest files.

Each supported manifest maps to an extractor: a plain function from the file
text to the raw version string (or None when the file carries no version).
New formats are added by registering another extractor, either by exact file
name in ``MANIFEST_FORMATS`` or by suffix in ``MANIFEST_SUFFIXES``.
"""

import json
import logging
import re
import tomllib
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import yaml

from .exceptions import (
    InvalidManifestPathError,
    ManifestParseError,
    ManifestReadError,
)
from .version import Version

logger = logging.getLogger(__name__)

Extractor = Callable[[str], Optional[Any]]

SETUP_CFG_REGEX = re.compile(r"version\s?=\s?['\"]?(?P<version>[^'\"\n]+)")
SETUP_PY_REGEX = re.compile(r"version\s?=\s?['\"](?P<version>[^'\"\r\n]+)['\"],?")

# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
SEMVER_LINE_REGEX = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.MULTILINE,
)


@dataclass(frozen=True)
class ManifestRead:
    """Outcome of reading a manifest: ``text`` is None when the file is missing."""

    path: str
    text: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.text is not None


def _lookup(data: Any, *keys: str) -> Optional[Any]:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _local_name(tag: str) -> str:
    # Drop the "{namespace}" part ElementTree prepends to qualified tags
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    for child in element:
        if _local_name(child.tag) == name:
            return (child.text or "").strip()
    return None


def from_package_json(text: str) -> Optional[Any]:
    return _lookup(json.loads(text), "version")


def from_pyproject_toml(text: str) -> Optional[Any]:
    data = tomllib.loads(text)
    return _lookup(data, "project", "version") or _lookup(
        data, "tool", "poetry", "version"
    )


def from_setup_cfg(text: str) -> Optional[str]:
    match = SETUP_CFG_REGEX.search(text)
    return match.group("version") if match else None


def from_setup_py(text: str) -> Optional[str]:
    match = SETUP_PY_REGEX.search(text)
    return match.group("version") if match else None


def from_pom_xml(text: str) -> Optional[str]:
    root = ET.fromstring(text)
    if _local_name(root.tag) != "project":
        return None
    return _child_text(root, "version")


def from_pubspec_yaml(text: str) -> Optional[Any]:
    return _lookup(yaml.safe_load(text), "version")


def from_version_file(text: str) -> Optional[str]:
    match = SEMVER_LINE_REGEX.search(text)
    return match.group(0) if match else None


def from_cargo_toml(text: str) -> Optional[Any]:
    data = tomllib.loads(text)
    version = _lookup(data, "package", "version")
    # `version.workspace = true` defers to the workspace manifest
    if isinstance(version, dict) or version is None:
        version = _lookup(data, "workspace", "package", "version")
    return version


def from_csproj(text: str) -> Optional[str]:
    root = ET.fromstring(text)
    for group in root:
        if _local_name(group.tag) == "PropertyGroup":
            version = _child_text(group, "Version")
            if version is not None:
                return version
    return None


MANIFEST_FORMATS: Dict[str, Extractor] = {
    "package.json": from_package_json,
    "pyproject.toml": from_pyproject_toml,
    "setup.cfg": from_setup_cfg,
    "setup.py": from_setup_py,
    "pom.xml": from_pom_xml,
    "pubspec.yaml": from_pubspec_yaml,
    ".version": from_version_file,
    "Cargo.toml": from_cargo_toml,
}

MANIFEST_SUFFIXES: Dict[str, Extractor] = {
    ".csproj": from_csproj,
}

# Errors raised by the decoders above on malformed documents
_DECODE_ERRORS = (
    json.JSONDecodeError,
    tomllib.TOMLDecodeError,
    yaml.YAMLError,
    ET.ParseError,
)


def resolve_manifest_path(manifest_path: str, workspace: str) -> str:
    """
    Join the workspace and manifest path.

    Args:
        manifest_path: Manifest path, relative to the workspace
        workspace: The project workspace

    Returns:
        The joined path
    """
    return f"{workspace.rstrip('/')}/{manifest_path.lstrip('/')}"


def get_extractor(file_name: str) -> Optional[Extractor]:
    """Return the extractor registered for a manifest file name, if any."""
    if file_name in MANIFEST_FORMATS:
        return MANIFEST_FORMATS[file_name]
    for suffix, extractor in MANIFEST_SUFFIXES.items():
        if file_name.endswith(suffix) and file_name != suffix:
            return extractor
    return None


def read_manifest(path: str) -> ManifestRead:
    """
    Read a manifest file.

    A missing file is not an error: the returned ManifestRead is simply not
    ``found``. Any other I/O failure is raised.

    Raises:
        ManifestReadError: If the file exists but cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return ManifestRead(path, f.read())
    except FileNotFoundError:
        return ManifestRead(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(path, str(e)) from e


def extract_raw_version(file_name: str, text: str, path: str = "") -> Optional[str]:
    """
    Extract the raw version string from manifest text.

    Args:
        file_name: The manifest file name, used to select the extractor
        text: The manifest contents
        path: The manifest path, for error messages

    Returns:
        The raw version string, or None if the manifest has no version or the
        file name is not a supported manifest

    Raises:
        ManifestParseError: If the manifest cannot be decoded or its version
            field is not a non-empty string
    """
    extractor = get_extractor(file_name)
    if extractor is None:
        logger.warning(f"Unsupported manifest file: {file_name}")
        return None

    path = path or file_name
    try:
        value = extractor(text)
    except _DECODE_ERRORS as e:
        raise ManifestParseError(path, str(e)) from e

    if value is None:
        return None

    # Numbers come through from JSON/YAML (`version: 1.2`)
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ManifestParseError(path, f"unexpected version value {value!r}")

    value = str(value).strip()
    if not value:
        raise ManifestParseError(path, "version field is empty")
    return value


def infer_version(manifest_path: str, workspace: str) -> Optional[Version]:
    """
    Infer the version from a manifest file in the project workspace.

    Supported manifest files:
    - Node.js: package.json
    - Python: pyproject.toml, setup.cfg, setup.py
    - Java: pom.xml
    - Dart: pubspec.yaml
    - Rust: Cargo.toml
    - .NET: *.csproj
    - Plain text: .version

    Args:
        manifest_path: The path to the manifest file, relative to the workspace
        workspace: The project workspace

    Returns:
        The inferred Version, or None if the manifest does not exist or does
        not carry a version

    Raises:
        InvalidManifestPathError: If the manifest path does not name a file
        ManifestReadError: If the manifest exists but cannot be read
        ManifestParseError: If the manifest cannot be decoded
        InvalidVersionError: If the extracted version cannot be parsed
    """
    path = resolve_manifest_path(manifest_path, workspace)
    file_name = path.rsplit("/", 1)[-1]

    if not file_name:
        raise InvalidManifestPathError(manifest_path)

    manifest = read_manifest(path)
    if not manifest.found:
        logger.info(f"Manifest file not found: {path}")
        return None

    raw = extract_raw_version(file_name, manifest.text, path)
    if raw is None:
        logger.info(f"No version found in manifest: {path}")
        return None

    return Version(raw)
