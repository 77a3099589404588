"""
Storage for questionnaire responses, keyed by (user id, fiscal year).

Two interchangeable backends implement ResponseStore:

- InMemoryResponseStore: process-lifetime dict, used when no DATABASE_URL
  is configured (local runs, previews, tests).
- SqlResponseStore: SQLAlchemy, relying on the database's own
  insert-or-update on the (user_id, fiscal_year) unique constraint.

Both give the same contract: upsert replaces every metric column and keeps
id/created_at, get returns None for a missing key, list is sorted by the
fiscal-year string.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.db.models import ESGResponseRow, utcnow
from app.errors import InvalidRecordError, PersistenceError
from app.schemas.esg import ESGRecord, ESGResponseInput

log = logging.getLogger(__name__)


class ResponseStore(ABC):
    backend = "abstract"

    @abstractmethod
    def upsert(self, user_id: str, record: ESGResponseInput) -> ESGRecord:
        ...

    @abstractmethod
    def get(self, user_id: str, fiscal_year: str) -> Optional[ESGRecord]:
        ...

    @abstractmethod
    def list(self, user_id: str, fiscal_year: Optional[str] = None) -> List[ESGRecord]:
        ...

    @staticmethod
    def _require_key(user_id: Optional[str], record: ESGResponseInput) -> Tuple[str, str]:
        if not user_id:
            raise InvalidRecordError("Missing user identity")
        if not record.fiscal_year:
            raise InvalidRecordError("Missing fiscalYear")
        return user_id, record.fiscal_year


class InMemoryResponseStore(ResponseStore):
    backend = "memory"

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], ESGRecord] = {}
        # FastAPI runs sync routes on a thread pool
        self._lock = threading.Lock()

    def upsert(self, user_id: str, record: ESGResponseInput) -> ESGRecord:
        key = self._require_key(user_id, record)
        now = utcnow()
        with self._lock:
            existing = self._records.get(key)
            saved = ESGRecord(
                id=existing.id if existing else str(uuid.uuid4()),
                user_id=key[0],
                fiscal_year=key[1],
                created_at=existing.created_at if existing else now,
                updated_at=now,
                **record.metric_values(),
            )
            self._records[key] = saved
        log.info("Saved ESG response user=%s year=%s id=%s (in-memory)", key[0], key[1], saved.id)
        return saved.model_copy()

    def get(self, user_id: str, fiscal_year: str) -> Optional[ESGRecord]:
        saved = self._records.get((user_id, fiscal_year))
        return saved.model_copy() if saved is not None else None

    def list(self, user_id: str, fiscal_year: Optional[str] = None) -> List[ESGRecord]:
        with self._lock:
            rows = [
                r for (owner, year), r in self._records.items()
                if owner == user_id and (fiscal_year is None or year == fiscal_year)
            ]
        return [r.model_copy() for r in sorted(rows, key=lambda r: r.fiscal_year)]


# Dialects whose INSERT supports a native "update on conflict" clause
_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
    "mysql": mysql.insert,
    "mariadb": mysql.insert,
}


class SqlResponseStore(ResponseStore):
    backend = "sql"

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def _upsert_statement(self, dialect: str, user_id: str, fiscal_year: str, values: dict):
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise PersistenceError(f"Upsert is not supported on the {dialect} dialect")

        now = utcnow()
        stmt = insert(ESGResponseRow).values(
            id=str(uuid.uuid4()),
            user_id=user_id,
            fiscal_year=fiscal_year,
            created_at=now,
            updated_at=now,
            **values,
        )
        changes = dict(values, updated_at=now)
        if dialect in ("mysql", "mariadb"):
            return stmt.on_duplicate_key_update(**changes)
        return stmt.on_conflict_do_update(index_elements=["user_id", "fiscal_year"], set_=changes)

    def upsert(self, user_id: str, record: ESGResponseInput) -> ESGRecord:
        user_id, fiscal_year = self._require_key(user_id, record)
        try:
            with self.session_factory() as session:
                stmt = self._upsert_statement(
                    session.get_bind().dialect.name, user_id, fiscal_year, record.metric_values()
                )
                session.execute(stmt)
                session.commit()
                row = session.scalars(
                    select(ESGResponseRow).where(
                        ESGResponseRow.user_id == user_id,
                        ESGResponseRow.fiscal_year == fiscal_year,
                    )
                ).one()
                saved = ESGRecord.model_validate(row)
        except SQLAlchemyError as exc:
            log.exception("Failed to save ESG response user=%s year=%s", user_id, fiscal_year)
            raise PersistenceError("Save failed") from exc

        log.info("Saved ESG response user=%s year=%s id=%s", user_id, fiscal_year, saved.id)
        return saved

    def get(self, user_id: str, fiscal_year: str) -> Optional[ESGRecord]:
        try:
            with self.session_factory() as session:
                row = session.scalars(
                    select(ESGResponseRow).where(
                        ESGResponseRow.user_id == user_id,
                        ESGResponseRow.fiscal_year == fiscal_year,
                    )
                ).one_or_none()
                return ESGRecord.model_validate(row) if row is not None else None
        except SQLAlchemyError as exc:
            log.exception("Failed to load ESG response user=%s year=%s", user_id, fiscal_year)
            raise PersistenceError("Load failed") from exc

    def list(self, user_id: str, fiscal_year: Optional[str] = None) -> List[ESGRecord]:
        stmt = select(ESGResponseRow).where(ESGResponseRow.user_id == user_id)
        if fiscal_year is not None:
            stmt = stmt.where(ESGResponseRow.fiscal_year == fiscal_year)
        stmt = stmt.order_by(ESGResponseRow.fiscal_year.asc())
        try:
            with self.session_factory() as session:
                return [ESGRecord.model_validate(row) for row in session.scalars(stmt)]
        except SQLAlchemyError as exc:
            log.exception("Failed to list ESG responses user=%s", user_id)
            raise PersistenceError("Load failed") from exc
