"""package.json access for release versioning."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from tpaws.release.exceptions import ManifestError
from tpaws.release.version import Version

logger = logging.getLogger("tpaws.release")

MANIFEST_FILE = "package.json"
DEFAULT_INDENT = "  "
_INDENT_RE = re.compile(r'^([ \t]+)"', re.MULTILINE)


def detect_indent(text: str) -> str:
    """Return the indentation of the first nested key, or two spaces."""
    match = _INDENT_RE.search(text)
    return match.group(1) if match else DEFAULT_INDENT


class PackageManifest:
    """Reads and rewrites the ``version`` field, keeping every other key.

    The file's indentation, non-ASCII text and trailing newline survive a
    rewrite.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or Path.cwd() / MANIFEST_FILE

    def _read(self) -> str:
        if not self.path.exists():
            raise ManifestError(f"{self.path.name} not found in {self.path.parent}")
        return self.path.read_text(encoding="utf-8")

    def _parse(self, text: str) -> dict[str, Any]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(f"{self.path} must contain a JSON object")
        return data

    def read_version(self) -> Version:
        data = self._parse(self._read())
        raw = data.get("version")
        if not isinstance(raw, str):
            raise ManifestError(f"No version field in {self.path}")
        return Version.parse(raw)

    def write_version(self, version: Version) -> None:
        text = self._read()
        data = self._parse(text)
        data["version"] = str(version)
        output = json.dumps(data, indent=detect_indent(text), ensure_ascii=False)
        if text.endswith("\n"):
            output += "\n"
        self.path.write_text(output, encoding="utf-8")
        logger.info("Wrote version %s to %s", version, self.path)
