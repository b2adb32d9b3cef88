"""Semantic versions and bump rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import StrEnum

from tpaws.release.exceptions import InvalidVersionError

VERSION_RE = re.compile(r"v?(\d+)\.(\d+)(?:\.(\d+))?")


class ReleaseKind(StrEnum):
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse ``major.minor.patch``; leading zeros are accepted (``1.00.01`` -> 1.0.1).

        A missing patch part reads as zero (``1.0`` -> 1.0.0).

        Raises:
            InvalidVersionError: If the string has another shape.
        """
        match = VERSION_RE.fullmatch(value.strip())
        if match is None:
            raise InvalidVersionError(f"Invalid version: {value!r}")
        return cls(*(int(part or 0) for part in match.groups()))

    def bump_patch(self) -> Version:
        return replace(self, patch=self.patch + 1)

    def bump_minor(self) -> Version:
        return Version(self.major, self.minor + 1, 0)

    def bump_major(self) -> Version:
        return Version(self.major + 1, 0, 0)

    def bump(self, kind: ReleaseKind) -> Version:
        if kind is ReleaseKind.MAJOR:
            return self.bump_major()
        if kind is ReleaseKind.MINOR:
            return self.bump_minor()
        return self.bump_patch()

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
