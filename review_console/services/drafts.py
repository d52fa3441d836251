"""
Process-local store for editing drafts.

A draft is the operator's working copy of an import between page loads. The
browser session only carries an opaque token; the record itself lives here
until it expires, is replaced by a backend round trip, or is evicted.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from review_console.models import ImportRecord

DEFAULT_TTL_SECONDS = 3600
DEFAULT_MAX_ENTRIES = 256


@dataclass
class Draft:
    record: ImportRecord
    revision: int = 1
    touched_at: float = field(default_factory=time.monotonic)


class DraftStore:
    """Thread-safe LRU of drafts keyed by (session token, import id)."""

    def __init__(
        self,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max(1, int(max_entries))
        self._clock = clock
        self._lock = threading.Lock()
        self._drafts: "OrderedDict[Tuple[str, str], Draft]" = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._drafts)

    def get(self, token: str, import_id: str) -> Optional[Draft]:
        key = (token, import_id)
        with self._lock:
            self._expire_locked()
            draft = self._drafts.get(key)
            if draft is None:
                return None
            draft.touched_at = self._clock()
            self._drafts.move_to_end(key)
            return draft

    def put(self, token: str, import_id: str, record: ImportRecord) -> Draft:
        """Store a fresh copy from the backend, bumping the revision if one existed."""
        key = (token, import_id)
        with self._lock:
            existing = self._drafts.get(key)
            revision = existing.revision + 1 if existing is not None else 1
            draft = Draft(record=record, revision=revision, touched_at=self._clock())
            self._drafts[key] = draft
            self._drafts.move_to_end(key)
            self._expire_locked()
            while len(self._drafts) > self.max_entries:
                self._drafts.popitem(last=False)
            return draft

    def claim(self, draft: Draft, revision: int) -> bool:
        """
        Take ownership of ``draft`` for one form submission.

        Succeeds only when ``revision`` is the draft's current revision; the
        revision is bumped under the lock, so a second submission rendered from
        the same page is rejected even while the first is still running.
        """
        with self._lock:
            if draft.revision != revision:
                return False
            draft.revision += 1
            draft.touched_at = self._clock()
            return True

    def clear(self) -> None:
        with self._lock:
            self._drafts.clear()

    def _expire_locked(self) -> None:
        cutoff = self._clock() - self.ttl_seconds
        expired = [key for key, draft in self._drafts.items() if draft.touched_at < cutoff]
        for key in expired:
            del self._drafts[key]
