import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol


logger = logging.getLogger("uvicorn.error")


class StateStore(Protocol):
    storage_name: str

    def get(self, key: str) -> Optional[Any]:
        pass

    def set(self, key: str, value: Any) -> None:
        pass


class InMemoryStateStore:
    storage_name = "memory"

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value


class JsonFileStateStore:
    """Key-value state kept in a single JSON document on disk.

    The whole document is rewritten on every ``set`` through a temp file and
    ``os.replace``, so a crash mid-write leaves the previous snapshot intact.
    """

    storage_name = "file"

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._values = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("state_file_unreadable path=%s", self._path, exc_info=True)
            return {}
        if not isinstance(payload, dict):
            logger.warning("state_file_ignored path=%s reason=root_not_object", self._path)
            return {}
        return payload

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".state_", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._values, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            self._flush()


def build_state_store() -> StateStore:
    state_file = os.getenv("STATE_FILE", "").strip()
    if state_file:
        return JsonFileStateStore(Path(state_file).expanduser())
    return InMemoryStateStore()
