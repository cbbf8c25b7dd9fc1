"""
Local File Storage Implementation

The Python counterpart of browser local storage: each key is one UTF-8
file under a data directory. Data survives restarts on the same machine
and profile, and nothing more is promised.

Writes go to a temporary file first and are moved into place, so a crash
mid-write leaves the previous document intact.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from pocketbalance.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class LocalFileStorage(KeyValueStorageInterface):
    """
    Key/value storage backed by ``<data_dir>/<key>.json`` files.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}") from e
