"""Release - semantic versions and the package.json manifest."""

from tpaws.release.exceptions import InvalidVersionError, ManifestError, ReleaseError
from tpaws.release.manifest import MANIFEST_FILE, PackageManifest
from tpaws.release.version import ReleaseKind, Version

__all__ = [
    "MANIFEST_FILE",
    "InvalidVersionError",
    "ManifestError",
    "PackageManifest",
    "ReleaseError",
    "ReleaseKind",
    "Version",
]
