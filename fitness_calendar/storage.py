import logging
import os
import tempfile
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

FILE_LOCK = threading.Lock()


class JsonFileStorage:
    """Key-value slots backed by one JSON file per key under ``data_dir``.

    Values are opaque strings; callers own serialization. A write replaces the
    whole file in one ``os.replace`` so readers never see a half-written blob.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        with FILE_LOCK:
            if not path.exists():
                return None
            try:
                return path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as err:
                logger.warning("Could not read %s: %s", path, err)
                return None

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        with FILE_LOCK:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.remove(tmp_name)
                raise
        logger.debug("Wrote %d bytes to %s", len(value), path)


class MemoryStorage:
    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value
