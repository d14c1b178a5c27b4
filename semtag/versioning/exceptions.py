"""
Exception classes for the versioning module.
"""

from typing import Optional


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class InvalidVersionError(VersioningError, ValueError):
    """Raised when a version string has no resolvable major component."""

    def __init__(self, version_string: str):
        self.version_string = version_string
        super().__init__(f"Invalid version string: '{version_string}'")


class InvalidManifestPathError(VersioningError):
    """Raised when a manifest path does not name a file."""

    def __init__(self, manifest_path: str):
        self.manifest_path = manifest_path
        super().__init__(f"Invalid manifest path: '{manifest_path}'")


class ManifestReadError(VersioningError):
    """Raised when a manifest exists but cannot be read."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        if reason:
            super().__init__(f"Could not read manifest {path}: {reason}")
        else:
            super().__init__(f"Could not read manifest {path}")


class ManifestParseError(VersioningError):
    """Raised when a recognised manifest cannot be decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse manifest {path}: {reason}")


class TagOperationError(VersioningError):
    """Raised when a git tag command reports unexpected output."""

    def __init__(self, step: str, output: str, tag: Optional[str] = None):
        self.step = step
        self.output = output
        self.tag = tag
        target = f" for tag {tag}" if tag else ""
        super().__init__(f"Tag operation '{step}' failed{target}: {output}")
