"""
Infrastructure layer: Durable key-value slots.

The core only ever calls get(key) and set(key, value) with JSON text.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Custom exception for failures writing to the backing store."""
    pass


class KeyValueStore(Protocol):
    """Persistence collaborator: string key to raw string value."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Volatile store, used for tests and previews."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def keys(self):
        return list(self._slots)


class JsonFileKeyValueStore:
    """
    Key-value slots kept in a single JSON object on disk.

    Every set rewrites the whole file through a temporary file and
    os.replace, so readers never observe a partially written file.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize the store.

        Args:
            path: Location of the JSON file. Created on first write.
        """
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        """
        Read every slot from disk.

        Returns:
            Mapping of slot name to raw value; empty if the file is
            missing or unreadable
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Could not read store file {self.path}: {e}")
            return {}

        try:
            data = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.warning(f"Store file {self.path} is not valid JSON, ignoring it: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not hold an object, ignoring it")
            return {}

        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        """
        Write one slot.

        Args:
            key: Slot name
            value: Raw (already serialized) value

        Raises:
            StorageError: If the file cannot be written
        """
        slots = self._read_all()
        slots[key] = value

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(slots, f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write slot '{key}' to {self.path}: {e}")
