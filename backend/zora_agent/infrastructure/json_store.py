"""JSON File Store — whole-file read/overwrite persistence for flat collections.

Invariants:
    - read() re-reads the file on every call (no cache)
    - write() replaces the whole document: temp file in the same directory, then os.replace
    - Missing file reads as the caller-supplied default
    - Malformed JSON is logged and re-raised as StorageError, never silently replaced

Design Decisions:
    - No locking: concurrent writers are last-write-wins, readers tolerate stale data
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from zora_agent.core.errors import StorageError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """One JSON document on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self, default: Any) -> Any:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            return default
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt data file {self.path}: {e}")
            raise StorageError(f"cannot decode {self.path.name}", "read") from e

    def write(self, data: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
