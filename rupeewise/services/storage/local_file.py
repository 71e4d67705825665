"""
Local File Storage Implementation

DESIGN DECISION: Each key is one UTF-8 JSON file in a data directory:
1. Users can open and back up their data with any editor
2. No database setup required
3. Writes go to a temp file first and are swapped in with os.replace,
   so a crash mid-write never leaves a half-written collection

TRADEOFFS:
- Best-effort durability only (no fsync of the directory)
- One process at a time; concurrent writers are not coordinated
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from rupeewise.services.storage.interface import (
    InvalidKeyError,
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


FILE_SUFFIX = ".json"

# Keys become file names, so keep them boring
_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalFileStorage(KeyValueStorageInterface):
    """
    Key-value storage backed by a directory of JSON files.

    The directory is created on first use.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key in (".", ".."):
            raise InvalidKeyError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}{FILE_SUFFIX}"

    def ensure_directory(self) -> None:
        """
        Create the data directory if needed.

        Raises:
            StorageWriteError: If the directory cannot be created
        """
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageWriteError(
                f"Cannot create data directory {self._directory}: {e}"
            )

    def read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}")

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, value: str) -> None:
        """Write to a temp file beside the target, then swap it in."""
        fd, tmp_name = tempfile.mkstemp(
            dir=self._directory,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        self.ensure_directory()
        try:
            self._write_atomic(path, value)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageWriteError(f"Failed to delete {path}: {e}")

    def keys(self) -> list[str]:
        if not self._directory.is_dir():
            return []
        return sorted(
            p.name[: -len(FILE_SUFFIX)]
            for p in self._directory.iterdir()
            if p.is_file() and p.name.endswith(FILE_SUFFIX) and not p.name.startswith(".")
        )
