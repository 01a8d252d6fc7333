"""
JSON File Storage Implementation

DESIGN DECISION: A single local JSON file is used as the durable store:
1. No database setup required
2. The file is readable and easy to back up by hand
3. Every slot lives in one object, like browser local storage

TRADEOFFS:
- The whole file is rewritten on every set (fine for a personal ledger)
- No locking between processes (single user, single process)

Writes go to a temporary file first and are moved into place with
os.replace(), so a crash mid-write leaves the previous file intact.
"""

import json
import os
from pathlib import Path
from typing import Optional

import structlog

from finance_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class JsonFileKeyValueStorage(KeyValueStorageInterface):
    """
    Key-value storage backed by one JSON object file.

    A missing file reads as empty. A file that is not a JSON object of
    strings also reads as empty (and is overwritten on the next write).
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._logger = structlog.get_logger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            self._logger.warning(
                "storage_file_corrupt",
                path=str(self._path),
                error=str(e),
            )
            return {}
        except OSError as e:
            raise StorageReadError(f"Cannot read {self._path}: {e}")

        if not isinstance(data, dict):
            self._logger.warning(
                "storage_file_corrupt",
                path=str(self._path),
                error=f"expected an object, got {type(data).__name__}",
            )
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self._path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise StorageWriteError(f"Cannot write {self._path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def keys(self) -> list[str]:
        return list(self._read_all())
