from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from PySide6.QtCore import QLockFile

from roundcounter.core.settings_store import AppSettings, data_dir

logger = logging.getLogger(__name__)

COUNTER_COLLECTION_ID = "counters"
COUNTER_DOC_ID = "visitor-count"


class VisitorCounter(ABC):
    """Global visitor counter. Never raises: 0 means "count unavailable"."""

    @abstractmethod
    def increment_and_get(self) -> int:
        raise NotImplementedError


class DisabledVisitorCounter(VisitorCounter):
    def increment_and_get(self) -> int:
        return 0


class LocalVisitorCounter(VisitorCounter):
    """
    Counter document stored as JSON on disk: {"count": <int>}.
    Increments are serialized across processes with a QLockFile and
    written through a temp file + replace.
    """

    def __init__(self, path: Optional[Path] = None, lock_timeout_ms: int = 3000):
        self.path = path or (data_dir() / COUNTER_COLLECTION_ID / f"{COUNTER_DOC_ID}.json")
        self.lock_timeout_ms = int(lock_timeout_ms)

    def increment_and_get(self) -> int:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            lock = QLockFile(str(self.path) + ".lock")
            lock.setStaleLockTime(10_000)
            if not lock.tryLock(self.lock_timeout_ms):
                logger.warning("Visitor counter lock busy: %s", self.path)
                return 0
            try:
                count = self._read() + 1
                self._write(count)
                return count
            finally:
                lock.unlock()
        except Exception as e:
            logger.warning("Visitor counter update failed: %r", e)
            return 0

    def _read(self) -> int:
        if not self.path.exists():
            return 0
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            return 0
        return int(data.get("count") or 0)

    def _write(self, count: int) -> None:
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump({"count": int(count)}, f)
        tmp.replace(self.path)


def increment_in_transaction(transaction, ref) -> int:
    """Read-modify-write of the counter document inside a Firestore transaction."""
    snap = ref.get(transaction=transaction)
    if not snap.exists:
        transaction.set(ref, {"count": 1})
        return 1
    current = int((snap.to_dict() or {}).get("count") or 0)
    transaction.update(ref, {"count": current + 1})
    return current + 1


class FirestoreVisitorCounter(VisitorCounter):
    """Transactional increment of counters/visitor-count in Cloud Firestore."""

    def __init__(self, project: Optional[str] = None, client: Any = None):
        self.project = project or None
        self._client = client

    def _get_client(self):
        if self._client is None:
            from google.cloud import firestore
            self._client = firestore.Client(project=self.project)
        return self._client

    def increment_and_get(self) -> int:
        try:
            from google.cloud import firestore

            client = self._get_client()
            ref = client.collection(COUNTER_COLLECTION_ID).document(COUNTER_DOC_ID)

            @firestore.transactional
            def _bump(transaction) -> int:
                return increment_in_transaction(transaction, ref)

            return int(_bump(client.transaction()))
        except Exception as e:
            logger.warning("Firestore transaction failed: %r", e)
            return 0


def make_visitor_counter(settings: AppSettings) -> VisitorCounter:
    if settings.visitor_backend == "firestore":
        return FirestoreVisitorCounter(project=settings.firestore_project)
    if settings.visitor_backend == "off":
        return DisabledVisitorCounter()
    return LocalVisitorCounter()
