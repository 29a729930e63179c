"""Request-scoped sessions and the pluggable stores behind them.

A ``Session`` is loaded at the start of a request, mutated by the cart and by
login/logout, and written back explicitly with ``SessionStore.save``. Unknown
or expired session ids open a fresh, empty session: the shopper simply starts
over as an anonymous visitor with an empty cart.

Two requests carrying the same cookie must not overwrite each other's changes.
The in-memory store serialises them: ``open`` takes a per-session lock that is
held until the request releases the session. The SQL store, shared between
processes, uses the session row's version instead; a save based on an older
version is refused with ``SessionConflict``.
"""

import copy
import json
import secrets
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta

import structlog
from protean import Q, UnitOfWork
from protean.domain import Domain
from protean.exceptions import ExpectedVersionError
from protean.fields import DateTime, Identifier, Text

from identity.domain import identity
from shared.exceptions import SessionConflict

logger = structlog.get_logger(__name__)

DEFAULT_MAX_AGE = timedelta(days=14)


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def utcnow() -> datetime:
    return datetime.now(UTC)


class Session:
    """Mutable key/value state belonging to one visitor."""

    def __init__(self, session_id: str, data: dict | None = None, is_new: bool = False):
        self.session_id = session_id
        self.data = dict(data or {})
        self.is_new = is_new
        # Store-specific handle on the stored copy (a held lock, a loaded row)
        self.handle = None

    def get(self, key, default=None):
        return self.data.get(key, default)

    def setdefault(self, key, default=None):
        return self.data.setdefault(key, default)

    def pop(self, key, default=None):
        return self.data.pop(key, default)

    def clear(self) -> None:
        self.data.clear()

    def __getitem__(self, key):
        return self.data[key]

    def __setitem__(self, key, value):
        self.data[key] = value

    def __contains__(self, key) -> bool:
        return key in self.data

    def __repr__(self) -> str:
        return f"<Session {self.session_id[:8]} keys={sorted(self.data)}>"


class SessionStore(ABC):
    """Abstract interface for session persistence."""

    @abstractmethod
    def open(self, session_id: str | None) -> Session:
        """Load the session for ``session_id`` or start a new one."""

    @abstractmethod
    def save(self, session: Session) -> None: ...

    @abstractmethod
    def destroy(self, session: Session) -> None:
        """Delete the stored session and leave ``session`` empty under a fresh id."""

    @abstractmethod
    def regenerate(self, session: Session) -> Session:
        """Move the session's data under a fresh id, discarding the old one."""

    def release(self, session: Session) -> None:
        """Called once the request that opened ``session`` is finished with it."""

    def purge_expired(self) -> int:
        return 0


class InMemorySessionStore(SessionStore):
    """Session store backed by a process-local dict (development and tests)."""

    def __init__(
        self,
        max_age: timedelta | None = DEFAULT_MAX_AGE,
        lock_timeout: float = 10.0,
        sweep_interval: timedelta = timedelta(minutes=5),
    ):
        self.max_age = max_age
        self.lock_timeout = lock_timeout
        self.sweep_interval = sweep_interval
        self._sessions: dict[str, tuple[dict, datetime]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()
        self._last_sweep = utcnow()

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(session_id, threading.Lock())

    def _is_expired(self, touched_at: datetime, now: datetime) -> bool:
        return self.max_age is not None and now - touched_at > self.max_age

    def open(self, session_id):
        if not session_id:
            return Session(new_session_id(), is_new=True)

        # A plain Lock: the request may release it from another worker thread
        lock = self._lock_for(session_id)
        if not lock.acquire(timeout=self.lock_timeout):
            logger.warning("Timed out waiting for a busy session", session_id=session_id[:8])
            raise SessionConflict()

        with self._guard:
            entry = self._sessions.get(session_id)
            if entry is not None and self._is_expired(entry[1], utcnow()):
                del self._sessions[session_id]
                entry = None

        if entry is None:
            lock.release()
            return Session(new_session_id(), is_new=True)

        session = Session(session_id, copy.deepcopy(entry[0]))
        session.handle = lock
        return session

    def save(self, session):
        now = utcnow()
        with self._guard:
            self._sessions[session.session_id] = (copy.deepcopy(session.data), now)
        session.is_new = False

        if now - self._last_sweep > self.sweep_interval:
            self.sweep_expired()

    def regenerate(self, session):
        old_id = session.session_id
        with self._guard:
            self._sessions.pop(old_id, None)
        self.release(session)
        session.session_id = new_session_id()
        self.save(session)
        return session

    def destroy(self, session):
        with self._guard:
            self._sessions.pop(session.session_id, None)
        self.release(session)
        session.clear()
        session.session_id = new_session_id()
        session.is_new = True

    def release(self, session):
        lock, session.handle = session.handle, None
        if lock is not None:
            lock.release()

    def sweep_expired(self) -> int:
        """Drop sessions idle for longer than ``max_age``, returning how many went."""
        now = utcnow()
        with self._guard:
            self._last_sweep = now
            expired = [sid for sid, (_, touched_at) in self._sessions.items() if self._is_expired(touched_at, now)]
            for session_id in expired:
                del self._sessions[session_id]
            # Locks of sessions nobody holds and nothing stores can go too
            for session_id in [sid for sid, lock in self._locks.items() if sid not in self._sessions]:
                if not self._locks[session_id].locked():
                    del self._locks[session_id]

        if expired:
            logger.info("Expired sessions swept", count=len(expired))
        return len(expired)

    purge_expired = sweep_expired

    def count(self) -> int:
        return len(self._sessions)


@identity.aggregate(schema_name="sessions")
class StoredSession:
    """A visitor's session as persisted for the SQL session store."""

    id: Identifier(identifier=True)
    data: Text(sanitize=False, default="{}")
    updated_at: DateTime(default=utcnow)


class SqlSessionStore(SessionStore):
    """Session store persisted in the ``sessions`` table, shared by every worker."""

    def __init__(self, domain: Domain = identity, max_age: timedelta | None = DEFAULT_MAX_AGE):
        self.domain = domain
        self.max_age = max_age

    def _repository(self):
        return self.domain.repository_for(StoredSession)

    def open(self, session_id):
        if session_id:
            with self.domain.domain_context():
                record = self._repository().get_or_none(session_id)

            if record is not None and self._is_expired(record):
                logger.debug("Session expired", session_id=session_id[:8])
                record = None

            if record is not None:
                try:
                    data = json.loads(record.data or "{}")
                except json.JSONDecodeError:
                    logger.warning("Discarding unreadable session payload", session_id=session_id[:8])
                else:
                    session = Session(session_id, data)
                    session.handle = record
                    return session

        return Session(new_session_id(), is_new=True)

    def save(self, session):
        record = session.handle
        if record is None or record.id != session.session_id:
            record = StoredSession(id=session.session_id)
        record.data = json.dumps(session.data)
        record.updated_at = utcnow()

        try:
            with self.domain.domain_context():
                self._repository().add(record)
        except ExpectedVersionError as exc:
            logger.info("Rejected save of a stale session", session_id=session.session_id[:8])
            raise SessionConflict() from exc

        session.handle = record
        session.is_new = False

    def _remove(self, session: Session) -> None:
        with self.domain.domain_context(), UnitOfWork():
            self._repository()._dao._delete_all(Q(id=session.session_id))

    def regenerate(self, session):
        self._remove(session)
        session.session_id = new_session_id()
        session.handle = None
        self.save(session)
        return session

    def destroy(self, session):
        self._remove(session)
        session.clear()
        session.session_id = new_session_id()
        session.handle = None
        session.is_new = True

    def _is_expired(self, record: StoredSession) -> bool:
        if self.max_age is None or record.updated_at is None:
            return False
        updated_at = record.updated_at
        if updated_at.tzinfo is None:
            # SQLite hands back naive datetimes
            updated_at = updated_at.replace(tzinfo=UTC)
        return utcnow() - updated_at > self.max_age

    def purge_expired(self) -> int:
        """Delete every session idle for longer than ``max_age``."""
        if self.max_age is None:
            return 0

        cutoff = utcnow() - self.max_age
        with self.domain.domain_context(), UnitOfWork():
            purged = self._repository()._dao._delete_all(Q(updated_at__lt=cutoff))

        logger.info("Expired sessions purged", count=purged)
        return purged


_current_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Return the active session store. Defaults to an in-memory store."""
    global _current_store
    if _current_store is None:
        _current_store = InMemorySessionStore()
    return _current_store


def set_session_store(store: SessionStore) -> None:
    global _current_store
    _current_store = store


def reset_session_store() -> None:
    global _current_store
    _current_store = None
