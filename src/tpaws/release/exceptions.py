"""Custom exceptions for release versioning."""


class ReleaseError(Exception):
    """Base exception for release errors."""


class InvalidVersionError(ReleaseError):
    """A version string is not ``major.minor.patch``."""


class ManifestError(ReleaseError):
    """package.json is missing or unusable."""
