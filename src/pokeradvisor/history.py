"""Append-only audit log of every decision taken during a session."""

from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .action import Decision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """One decision, with the table state it was made from."""

    street: str
    hand: tuple[str, ...]
    community: tuple[str, ...]
    pot: int
    min_bet: int
    num_players: int
    bankroll: int
    decision: Decision

    def to_dict(self) -> dict[str, Any]:
        return {
            "street": self.street,
            "hand": list(self.hand),
            "community": list(self.community),
            "pot": self.pot,
            "minBet": self.min_bet,
            "numPlayers": self.num_players,
            "bankroll": self.bankroll,
            "decision": self.decision.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Step:
        return cls(
            street=data["street"],
            hand=tuple(data["hand"]),
            community=tuple(data["community"]),
            pot=data["pot"],
            min_bet=data["minBet"],
            num_players=data["numPlayers"],
            bankroll=data["bankroll"],
            decision=Decision.from_dict(data["decision"]),
        )


@dataclass
class SessionRecord:
    """A hand's audit trail. Steps are kept in the order they were decided."""

    id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    steps: list[Step] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "steps": [s.to_dict() for s in self.steps],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionRecord:
        return cls(
            id=data["id"],
            created_at=datetime.fromisoformat(data["createdAt"]),
            steps=[Step.from_dict(s) for s in data.get("steps", [])],
        )


class AuditLog(ABC):
    """Best-effort store of session records.

    ``record_step`` never raises for an unknown session id or a storage
    failure; a broken log must not get in the way of a decision.
    Appends to one session are serialized; different sessions don't block
    each other.
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(session_id, threading.Lock())

    def open_session(self, record: SessionRecord) -> None:
        """Start tracking a new session."""
        try:
            self._open(record)
        except Exception:
            logger.exception("audit: failed to open session %s", record.id)

    def record_step(self, session_id: str, step: Step) -> None:
        """Append a step to the session's record."""
        try:
            with self._lock_for(session_id):
                self._append(session_id, step)
        except Exception:
            logger.exception("audit: failed to record step for %s", session_id)

    def close_session(self, session_id: str) -> None:
        """Forget the session's append lock. Its record stays in the log."""
        with self._locks_guard:
            self._locks.pop(session_id, None)

    @abstractmethod
    def _open(self, record: SessionRecord) -> None: ...

    @abstractmethod
    def _append(self, session_id: str, step: Step) -> None: ...

    @abstractmethod
    def get(self, session_id: str) -> SessionRecord | None:
        """A snapshot of one session, or None if unknown."""

    @abstractmethod
    def sessions(self) -> list[SessionRecord]:
        """Snapshots of every session, oldest first."""


class MemoryAuditLog(AuditLog):
    """Audit log held in process memory."""

    def __init__(self) -> None:
        super().__init__()
        self._records: dict[str, SessionRecord] = {}

    def _open(self, record: SessionRecord) -> None:
        with self._locks_guard:
            self._records.setdefault(record.id, replace(record, steps=list(record.steps)))

    def _append(self, session_id: str, step: Step) -> None:
        record = self._records.get(session_id)
        if record is None:
            logger.debug("audit: unknown session %s, step dropped", session_id)
            return
        record.steps.append(step)

    def get(self, session_id: str) -> SessionRecord | None:
        record = self._records.get(session_id)
        return replace(record, steps=list(record.steps)) if record else None

    def sessions(self) -> list[SessionRecord]:
        return [replace(r, steps=list(r.steps)) for r in list(self._records.values())]


_Stamp = tuple[int, int, int]


class JsonFileAuditLog(AuditLog):
    """Audit log persisted as a JSON list of sessions.

    Several writers (for instance two ``play`` processes) may share one
    file. Each write first checks whether the file changed since this
    instance last saw it and, if so, merges what is on disk: sessions
    written through this instance come from memory, every other session
    as found in the file. An id -> position index locates sessions between
    writes. The file is replaced through a temporary file so readers never
    see a half-written log.

    An unreadable file is moved aside to ``<name>.corrupt`` before a fresh
    log is started in its place.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._records: list[SessionRecord] = []
        self._index: dict[str, int] = {}
        self._owned: set[str] = set()
        self._stamp: _Stamp | None = None
        self._synced = False
        self._write_lock = threading.Lock()

    # ── Disk ─────────────────────────────────────────────────

    def _file_stamp(self) -> _Stamp | None:
        try:
            st = os.stat(self.path)
        except OSError:
            return None
        return (st.st_ino, st.st_mtime_ns, st.st_size)

    def _read(self) -> list[SessionRecord]:
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            return [SessionRecord.from_dict(item) for item in raw]
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning("audit: cannot read %s: %s", self.path, e)
            return []
        except (ValueError, KeyError, TypeError) as e:
            self._set_aside(e)
            return []

    def _set_aside(self, error: Exception) -> None:
        aside = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, aside)
        except OSError as e:
            logger.warning("audit: cannot read %s (%s) nor move it aside: %s", self.path, error, e)
            return
        logger.warning("audit: cannot read %s, moved it to %s: %s", self.path, aside, error)

    def _refresh(self) -> None:
        """Merge in sessions other writers saved since the last look.

        Callers hold ``_write_lock``.
        """
        stamp = self._file_stamp()
        if self._synced and stamp == self._stamp:
            return
        on_disk = self._read()
        with self._locks_guard:
            mine = {r.id: r for r in self._records if r.id in self._owned}
            merged = [mine.pop(r.id, r) for r in on_disk]
            merged.extend(r for r in self._records if r.id in mine)
            self._records = merged
            self._index = {r.id: i for i, r in enumerate(merged)}
        self._stamp = stamp
        self._synced = True

    def _sync(self) -> None:
        with self._write_lock:
            self._refresh()

    def _save(self) -> None:
        with self._write_lock:
            self._refresh()
            with self._locks_guard:
                payload = [r.to_dict() for r in self._records]
            tmp = self.path.with_name(f"{self.path.name}.{os.getpid()}.{threading.get_ident()}.tmp")
            try:
                with open(tmp, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                st = os.stat(tmp)
                os.replace(tmp, self.path)
            except (OSError, TypeError, ValueError) as e:
                logger.warning("audit: failed to write %s: %s", self.path, e)
                return
            self._stamp = (st.st_ino, st.st_mtime_ns, st.st_size)

    # ── AuditLog ─────────────────────────────────────────────

    def _open(self, record: SessionRecord) -> None:
        self._sync()
        with self._locks_guard:
            self._owned.add(record.id)
            if record.id in self._index:
                return
            self._index[record.id] = len(self._records)
            self._records.append(replace(record, steps=list(record.steps)))
        self._save()

    def _append(self, session_id: str, step: Step) -> None:
        self._sync()
        with self._locks_guard:
            idx = self._index.get(session_id)
            if idx is None:
                logger.debug("audit: unknown session %s, step dropped", session_id)
                return
            self._owned.add(session_id)
            self._records[idx].steps.append(step)
        self._save()

    def get(self, session_id: str) -> SessionRecord | None:
        self._sync()
        with self._locks_guard:
            idx = self._index.get(session_id)
            if idx is None:
                return None
            record = self._records[idx]
            return replace(record, steps=list(record.steps))

    def sessions(self) -> list[SessionRecord]:
        self._sync()
        with self._locks_guard:
            return [replace(r, steps=list(r.steps)) for r in self._records]
