"""Key-value storage for persisted client state."""

import logging
import os
import re
from pathlib import Path
from typing import Optional, Protocol, Union

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """A set of named string slots."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Storage that lives only as long as the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value

    def delete(self, key: str) -> None:
        self.slots.pop(key, None)


class FileStorage:
    """Stores each slot as `<key>.json` inside a directory."""

    def __init__(self, directory: Union[str, Path]) -> None:
        """
        Initialize file storage.

        Args:
            directory: Directory for slot files, created on first write
        """
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        if not re.fullmatch(r"[A-Za-z0-9_.-]+", key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            # Undecodable bytes surface as an invalid snapshot, not an exception
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
            os.chmod(path, 0o600)
        except OSError as e:
            logger.error(f"Could not save {path}: {e}")

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            try:
                path.unlink()
            except OSError as e:
                logger.warning(f"Could not delete {path}: {e}")
