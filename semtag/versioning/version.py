"""
Version utility module for version string operations.

The parser is deliberately lenient: it accepts a leading ``v``, missing
minor/patch components and a dot instead of a dash before the prerelease.
Anything beyond that is kept verbatim, the only hard requirement being a
non-empty major component.
"""

import logging
from typing import List, Optional

from .exceptions import InvalidVersionError

logger = logging.getLogger(__name__)

TAG_PREFIX = "v"


class Version:
    """
    A parsed, (mostly) SemVer-compliant version.

    Components are kept as the strings found in the source, so ``01`` stays
    ``01`` and non-numeric tokens survive untouched.

    Version format: [v]major[.minor[.patch]][-prerelease][+build]
    """

    def __init__(self, version_string: str):
        """
        Initialize a Version from a string.

        Args:
            version_string: A (hopefully) SemVer-compliant version string

        Raises:
            InvalidVersionError: If no major component can be determined
        """
        # Handle numeric inputs (float/int from YAML or XML)
        if isinstance(version_string, (int, float)):
            version_string = str(version_string)

        raw = str(version_string).strip()
        logger.info(f"Parsing version: {raw}")

        remainder = raw
        if remainder[:1] in ("v", "V"):
            remainder = remainder[1:]

        # (https://semver.org/#spec-item-10) Build metadata follows a `+`
        remainder, _, build = remainder.partition("+")

        # (https://semver.org/#spec-item-9) Prerelease follows a `-`
        core, _, prerelease = remainder.partition("-")

        tokens = core.split(".")

        # Some frameworks just don't add minor/patch versions
        self._major = tokens[0]
        self._minor = tokens[1] if len(tokens) > 1 else "0"
        self._patch = tokens[2] if len(tokens) > 2 else "0"
        self._prerelease: Optional[str] = prerelease or None
        self._build: Optional[str] = build or None

        # Prerelease separated with a '.' instead of a '-' (1.2.3.alpha.4)
        if self._prerelease is None and len(tokens) > 3:
            self._prerelease = ".".join(tokens[3:]) or None

        if not self._major:
            raise InvalidVersionError(raw)

        logger.info(f"Parsed version: {self.to_string()}")

    @property
    def major(self) -> str:
        """Major version component."""
        return self._major

    @property
    def minor(self) -> str:
        """Minor version component ("0" when absent from the source)."""
        return self._minor

    @property
    def patch(self) -> str:
        """Patch version component ("0" when absent from the source)."""
        return self._patch

    @property
    def prerelease(self) -> Optional[str]:
        """Prerelease component, if any."""
        return self._prerelease

    @property
    def build(self) -> Optional[str]:
        """Build metadata, if any."""
        return self._build

    @property
    def major_minor(self) -> str:
        return f"{self.major}.{self.minor}"

    @property
    def major_minor_patch(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def to_string(self, prefix: bool = True, build: bool = False) -> str:
        """
        Render the version as a string.

        Args:
            prefix: True to include the 'v' prefix (e.g. 'v1.2.3')
            build: True to append the build metadata, when present

        Returns:
            The version as a string
        """
        rendered = f"{TAG_PREFIX if prefix else ''}{self.major_minor_patch}"
        if self.prerelease:
            rendered += f"-{self.prerelease}"
        if build and self.build:
            rendered += f"+{self.build}"
        return rendered

    def tags(self) -> List[str]:
        """
        Compute the tags that should point at a release of this version.

        Prereleases only get their own tag; the ``vX`` and ``vX.Y`` tags float
        with release versions only. Build metadata adds one extra tag.
        """
        if self.prerelease:
            tags = [self.to_string()]
        else:
            tags = [
                f"{TAG_PREFIX}{self.major}",
                f"{TAG_PREFIX}{self.major_minor}",
                f"{TAG_PREFIX}{self.major_minor_patch}",
            ]

        if self.build:
            tags.append(self.to_string(build=True))

        return tags

    def __str__(self) -> str:
        """Return the string representation of the version."""
        return self.to_string()

    def __repr__(self) -> str:
        """Return the debug representation of the version."""
        return f"Version('{self.to_string(prefix=False, build=True)}')"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return False
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self):
        return (self.major, self.minor, self.patch, self.prerelease, self.build)


def parse_version(version_string: str) -> Version:
    """
    Parse a version string into a Version object.

    Args:
        version_string: Version string to parse

    Returns:
        Version object

    Raises:
        InvalidVersionError: If version string has no major component
    """
    return Version(version_string)
