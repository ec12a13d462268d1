"""JSON document store: every collection in one file under a data directory.

The file holds a JSON object mapping collection name to a list of
documents keyed by ``"id"``.  A commit writes the whole object to a
temporary file that is renamed over the original, so the collections a
unit of work touched land together or not at all.

Access is serialised across processes by a lock file next to the data,
and across threads of one process by a re-entrant lock.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from filelock import FileLock

DATA_FILE = "backoffice.json"
LOCK_FILE = ".backoffice.lock"


class JsonDocumentStore:

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir)
        # Re-entrant so a best-effort follow-up on the same thread can open
        # its own session while the outer one is still held.
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(str(self._data_dir / LOCK_FILE))

    @property
    def path(self) -> Path:
        return self._data_dir / DATA_FILE

    def acquire(self) -> None:
        self._thread_lock.acquire()
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._file_lock.acquire()
        except BaseException:
            self._thread_lock.release()
            raise

    def release(self) -> None:
        try:
            self._file_lock.release()
        finally:
            self._thread_lock.release()

    def load(self) -> dict[str, list[dict]]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def write(self, collections: dict[str, list[dict]]) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._data_dir, prefix=".backoffice.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(collections, fh, indent=2, ensure_ascii=False, sort_keys=True)
                fh.write("\n")
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
