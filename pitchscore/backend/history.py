from __future__ import annotations

import json
import logging
import re
import threading
import time
from datetime import datetime
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from .constants import HISTORY_KEY, HISTORY_LIMIT, SNIPPET_CHARS
from .models import EvaluationResult, HistoryEntry, utc_now
from .storage import StateStore


logger = logging.getLogger("uvicorn.error")

_WHITESPACE_RE = re.compile(r"\s+")
_id_lock = threading.Lock()
_last_id = 0


def _next_entry_id() -> int:
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        _last_id = max(candidate, _last_id + 1)
        return _last_id


def make_snippet(transcript: str, max_chars: int = SNIPPET_CHARS) -> str:
    text = transcript or ""
    if len(text) > max_chars:
        return _WHITESPACE_RE.sub(" ", text[:max_chars]) + "..."
    return _WHITESPACE_RE.sub(" ", text)


def build_history_entry(
    transcript: str,
    result: EvaluationResult,
    *,
    now: Optional[datetime] = None,
) -> HistoryEntry:
    created_at = (now or utc_now()).isoformat()
    return HistoryEntry(
        id=_next_entry_id(),
        score=result.score,
        created_at=created_at,
        snippet=make_snippet(transcript),
        transcript=transcript,
        result=result,
    )


def _load_entries(raw: Any) -> List[HistoryEntry]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("history_snapshot_ignored reason=not_a_list type=%s", type(raw).__name__)
        return []
    try:
        entries = [HistoryEntry.model_validate(item) for item in raw]
    except ValidationError as exc:
        logger.warning("history_snapshot_ignored reason=invalid_entry errors=%s", exc.error_count())
        return []
    return entries[:HISTORY_LIMIT]


class HistoryStore:
    """Most-recent-first log of evaluations, capped at ``HISTORY_LIMIT``.

    The store loads its snapshot from ``state_store`` once at construction and
    writes the full sequence back after every mutation.
    """

    def __init__(self, state_store: StateStore, limit: int = HISTORY_LIMIT) -> None:
        self._state_store = state_store
        self._limit = limit
        self._lock = threading.Lock()
        self._entries: List[HistoryEntry] = _load_entries(state_store.get(HISTORY_KEY))[:limit]

    @property
    def storage_name(self) -> str:
        return self._state_store.storage_name

    def _flush(self, entries: List[HistoryEntry]) -> None:
        self._state_store.set(HISTORY_KEY, [entry.to_payload() for entry in entries])

    def record(self, entry: HistoryEntry) -> None:
        with self._lock:
            evicted = self._entries[self._limit - 1 :]
            entries = [entry, *self._entries][: self._limit]
            # Persist first so a failed write leaves the in-memory list untouched.
            self._flush(entries)
            self._entries = entries
        logger.info(
            "history_recorded entry_id=%s size=%s evicted=%s",
            entry.id,
            len(self._entries),
            [item.id for item in evicted],
        )

    def clear(self) -> None:
        with self._lock:
            self._flush([])
            self._entries = []
        logger.info("history_cleared")

    def all(self) -> Tuple[HistoryEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def export_json(self) -> str:
        return json.dumps([entry.to_payload() for entry in self.all()], ensure_ascii=False, indent=2)
