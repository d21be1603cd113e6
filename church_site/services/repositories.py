"""
Repository layer abstracting storage (in-memory vs SQLAlchemy).
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session, sessionmaker

from church_site.core.config import settings
from church_site.models import Event, Member, Registration
from church_site.schemas import EventRecord, MemberRecord, RegistrationRecord

RecordT = TypeVar("RecordT", bound=BaseModel)


def use_sql_storage() -> bool:
    return settings.STORAGE_BACKEND.lower() == "sql"


def event_sort_key(event: EventRecord):
    return (event.date, event.start_time)


class Repository(Generic[RecordT]):
    """Storage contract shared by every entity collection.

    Records are pydantic models keyed by their ``id`` field.
    """

    schema: Type[RecordT]

    def list(self) -> List[RecordT]:
        raise NotImplementedError

    def get(self, record_id: str) -> Optional[RecordT]:
        raise NotImplementedError

    def add(self, record: RecordT) -> RecordT:
        raise NotImplementedError

    def put(self, record: RecordT) -> RecordT:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError

    def replace_all(self, records: Iterable[RecordT]) -> None:
        raise NotImplementedError

    def update(self, record_id: str, changes: Dict[str, Any]) -> Optional[RecordT]:
        """Shallow-merge ``changes`` onto the stored record.

        The merged record is re-validated against the schema, so type errors
        raise ``pydantic.ValidationError``. Domain invariants (capacity,
        uniqueness) are the caller's concern.
        """
        existing = self.get(record_id)
        if existing is None:
            return None
        merged = self.schema.model_validate({**existing.model_dump(), **changes, "id": existing.id})
        return self.put(merged)


# -------- In-memory backend --------

class MemoryRepository(Repository[RecordT]):
    def __init__(self, schema: Type[RecordT], sort_key: Optional[Callable[[RecordT], Any]] = None):
        self.schema = schema
        self.sort_key = sort_key
        self._records: Dict[str, RecordT] = {}
        # One collection is shared by every event lock holder
        self._lock = threading.RLock()

    def _resort(self) -> None:
        if self.sort_key is not None:
            ordered = sorted(self._records.values(), key=self.sort_key)
            self._records = {r.id: r for r in ordered}

    def list(self) -> List[RecordT]:
        with self._lock:
            return [r.model_copy() for r in self._records.values()]

    def get(self, record_id: str) -> Optional[RecordT]:
        with self._lock:
            record = self._records.get(record_id)
            return record.model_copy() if record else None

    def add(self, record: RecordT) -> RecordT:
        return self.put(record)

    def put(self, record: RecordT) -> RecordT:
        with self._lock:
            self._records[record.id] = record.model_copy()
            self._resort()
        return record

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def replace_all(self, records: Iterable[RecordT]) -> None:
        with self._lock:
            self._records = {r.id: r.model_copy() for r in records}
            self._resort()


# -------- SQLAlchemy backend --------

class SqlRepository(Repository[RecordT]):
    def __init__(
        self,
        session_factory: sessionmaker,
        model: type,
        schema: Type[RecordT],
        order_by: Sequence[Any] = (),
    ):
        self.session_factory = session_factory
        self.model = model
        self.schema = schema
        self.order_by = tuple(order_by)

    def _to_record(self, row) -> RecordT:
        return self.schema.model_validate(row)

    def list(self) -> List[RecordT]:
        db: Session = self.session_factory()
        try:
            rows = db.query(self.model).order_by(*self.order_by).all()
            return [self._to_record(row) for row in rows]
        finally:
            db.close()

    def get(self, record_id: str) -> Optional[RecordT]:
        db: Session = self.session_factory()
        try:
            row = db.get(self.model, record_id)
            return self._to_record(row) if row else None
        finally:
            db.close()

    def add(self, record: RecordT) -> RecordT:
        db: Session = self.session_factory()
        try:
            db.add(self.model(**record.model_dump()))
            db.commit()
            return record
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def put(self, record: RecordT) -> RecordT:
        db: Session = self.session_factory()
        try:
            db.merge(self.model(**record.model_dump()))
            db.commit()
            return record
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def delete(self, record_id: str) -> bool:
        db: Session = self.session_factory()
        try:
            row = db.get(self.model, record_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def replace_all(self, records: Iterable[RecordT]) -> None:
        db: Session = self.session_factory()
        try:
            db.query(self.model).delete()
            db.add_all([self.model(**r.model_dump()) for r in records])
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


# -------- Store --------

class Store:
    """The three collections plus the per-event locks guarding capacity."""

    def __init__(
        self,
        members: Repository[MemberRecord],
        events: Repository[EventRecord],
        registrations: Repository[RegistrationRecord],
    ):
        self.members = members
        self.events = events
        self.registrations = registrations
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def event_lock(self, event_id: str) -> Iterator[None]:
        """Serialize capacity check-and-write for one event"""
        with self._locks_guard:
            lock = self._locks.setdefault(event_id, threading.Lock())
        with lock:
            yield

    def discard_event_lock(self, event_id: str) -> None:
        """Drop the lock of a deleted event; call while holding it"""
        with self._locks_guard:
            self._locks.pop(event_id, None)

    @classmethod
    def in_memory(cls) -> "Store":
        return cls(
            members=MemoryRepository(MemberRecord),
            events=MemoryRepository(EventRecord, sort_key=event_sort_key),
            registrations=MemoryRepository(RegistrationRecord),
        )

    @classmethod
    def sql(cls, session_factory: sessionmaker) -> "Store":
        return cls(
            members=SqlRepository(session_factory, Member, MemberRecord, order_by=(Member.created_at,)),
            events=SqlRepository(session_factory, Event, EventRecord, order_by=(Event.date, Event.start_time)),
            registrations=SqlRepository(
                session_factory, Registration, RegistrationRecord, order_by=(Registration.created_at,)
            ),
        )


@lru_cache(maxsize=1)
def get_store() -> Store:
    """Build and cache the process-wide store selected by STORAGE_BACKEND."""
    if use_sql_storage():
        from church_site.core.db import SessionLocal, init_db

        init_db()
        return Store.sql(SessionLocal)
    return Store.in_memory()
