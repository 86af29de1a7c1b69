"""Single JSON file holding the ``users`` and ``employees`` collections.

Every directory operation is one load-mutate-store cycle against this file.
A process-wide lock serializes those cycles so concurrent requests in the
same process cannot lose each other's writes. Separate processes sharing the
file are not coordinated.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from anyio import to_thread

from hrdesk.core.config import Settings
from hrdesk.core.exceptions import CorruptDataError, StorageError

logger = logging.getLogger(__name__)

COLLECTIONS: tuple[str, ...] = ("users", "employees")


def empty_document() -> dict[str, list[dict[str, Any]]]:
    return {name: [] for name in COLLECTIONS}


class Transaction:
    """Loaded document handed to one load-mutate-store cycle."""

    def __init__(self, document: dict[str, Any]) -> None:
        self.document = document
        self.dirty = False

    def collection(self, name: str) -> list[dict[str, Any]]:
        return self.document[name]

    def mark_dirty(self) -> None:
        self.dirty = True


class DocumentStore:
    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path: Path | None = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        self.path = Path(settings.DATA_FILE)
        await to_thread.run_sync(self.ensure)
        self.initialized = True
        logger.info("DocumentStore initialized (path=%s)", self.path)

    async def close(self) -> None:
        self.initialized = False

    def _require_path(self) -> Path:
        if self.path is None:
            raise RuntimeError("DocumentStore not initialized")
        return self.path

    def ensure(self) -> None:
        path = self._require_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {path.parent}: {e}") from e

        if path.exists():
            return

        logger.info("Creating data file %s", path)
        self.store(empty_document())

    def load(self) -> dict[str, Any]:
        path = self._require_path()
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot read data file {path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Data file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise CorruptDataError(f"Data file {path} must hold a JSON object")

        for name in COLLECTIONS:
            value = data.get(name)
            if value is None:
                data[name] = []
            elif not isinstance(value, list):
                raise CorruptDataError(f"'{name}' in {path} must be an array")
            elif not all(isinstance(record, dict) for record in value):
                raise CorruptDataError(f"Every entry of '{name}' in {path} must be a JSON object")

        return data

    def store(self, document: dict[str, Any]) -> None:
        path = self._require_path()
        payload = json.dumps(document, indent=2, ensure_ascii=False)

        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"Cannot write data file {path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def read(self) -> dict[str, Any]:
        with self._lock:
            self.ensure()
            return self.load()

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Hold the store lock for one load-mutate-store cycle.

        The document is written back only if the block marks it dirty and
        exits without raising.
        """
        with self._lock:
            self.ensure()
            txn = Transaction(self.load())
            yield txn
            if txn.dirty:
                self.store(txn.document)


document_store = DocumentStore()
