"""JSON text storage keyed by name.

One file per key in a directory. Values are opaque text; writes replace
the whole file, so the last write wins.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class JsonFileStore:
    """Key/value text store backed by ``<directory>/<key>.json`` files."""

    def __init__(self, directory: str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """Return the stored text, or None when the key was never written."""
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        """Replace the stored text for a key."""
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Stored value", key=key, size=len(value))
