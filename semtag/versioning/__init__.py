"""
Versioning module for semtag.

All version handling lives here:

1. **Core Version Logic** (version.py):
   - Version: lenient SemVer representation and the tags it maps to
   - parse_version: parse a raw version string

2. **Manifest Inference** (manifest.py):
   - infer_version: locate and parse the version field of a project manifest
   - MANIFEST_FORMATS / MANIFEST_SUFFIXES: file name -> extractor table

3. **Tagging** (tags.py):
   - TagReconciler: delete/recreate/push the floating tags of a version
   - TagExistenceChecker: whether a version was already published

4. **Exception Hierarchy** (exceptions.py):
   - Unified exception types for all versioning error scenarios
"""

from .exceptions import (
    VersioningError,
    InvalidVersionError,
    InvalidManifestPathError,
    ManifestReadError,
    ManifestParseError,
    TagOperationError,
)
from .manifest import infer_version, MANIFEST_FORMATS, MANIFEST_SUFFIXES
from .tags import (
    TagExistenceChecker,
    TagReconciler,
    TagState,
    tag_version,
    version_exists,
)
from .version import Version, parse_version

__all__ = [
    # Core version utilities
    "Version",
    "parse_version",
    # Manifest inference
    "infer_version",
    "MANIFEST_FORMATS",
    "MANIFEST_SUFFIXES",
    # Tagging
    "TagReconciler",
    "TagExistenceChecker",
    "TagState",
    "tag_version",
    "version_exists",
    # Centralized exception hierarchy
    "VersioningError",
    "InvalidVersionError",
    "InvalidManifestPathError",
    "ManifestReadError",
    "ManifestParseError",
    "TagOperationError",
]
