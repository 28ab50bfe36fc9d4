"""Record store backed by SQLAlchemy (SQLite by default)."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medinfo.core.config import Settings, get_settings
from medinfo.core.logging import get_logger
from medinfo.core.security import hash_password
from medinfo.db.create_tables import create_all
from medinfo.db.models import AdminAccount, Counter, DiseaseRecord
from medinfo.db.session import get_session
from medinfo.domain import Administrator, DiseaseEntry, parse_entry_id, sort_entries, utc_timestamp

from .base import default_admin_credentials
from .errors import (
    AdministratorExistsError,
    AdministratorNotFoundError,
    EntryNotFoundError,
    StorageError,
)

ENTRY_COUNTER = "diseases"

logger = get_logger("store.sql")


def _to_admin(entity: AdminAccount) -> Administrator:
    return Administrator(
        id=entity.id,
        username=entity.username,
        password=entity.password_hash,
        created_at=entity.created_at,
    )


def _to_entry(entity: DiseaseRecord) -> DiseaseEntry:
    return DiseaseEntry(
        id=entity.id,
        name=entity.name,
        description=entity.description or "",
        symptoms=entity.symptoms or "",
        treatment=entity.treatment,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


class SQLRecordStore:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self, url: str | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.url = url or self.settings.database_url

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with get_session(self.url) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Database error: %s", exc)
            raise StorageError("Catalog database unavailable") from exc

    # -------------------------- schema --------------------------
    def initialize(self) -> None:
        try:
            create_all(self.url)
        except SQLAlchemyError as exc:
            raise StorageError("Could not create catalog tables") from exc
        with self._session() as session:
            if session.get(Counter, ENTRY_COUNTER) is None:
                top = session.execute(select(DiseaseRecord.id).order_by(DiseaseRecord.id.desc())).scalars().first()
                session.add(Counter(name=ENTRY_COUNTER, value=(top or 0) + 1))
            has_admin = session.execute(select(AdminAccount.id).limit(1)).first() is not None
            if not has_admin:
                username, password = default_admin_credentials(self.settings)
                session.add(
                    AdminAccount(
                        id=1,
                        username=username,
                        password_hash=hash_password(password),
                        created_at=utc_timestamp(),
                    )
                )
            session.commit()
        logger.info("Database ready at %s", self.url)

    def export_document(self) -> dict:
        with self._session() as session:
            admins = session.execute(select(AdminAccount).order_by(AdminAccount.id)).scalars().all()
            entries = session.execute(select(DiseaseRecord).order_by(DiseaseRecord.id)).scalars().all()
            counter = session.get(Counter, ENTRY_COUNTER)
            return {
                "admins": [_to_admin(a).to_dict() for a in admins],
                "diseases": [_to_entry(e).to_dict() for e in entries],
                "nextId": counter.value if counter else 1,
            }

    def import_document(self, document: dict) -> None:
        """Replace every admin, entry and the counter with the given document."""
        admins = [Administrator.from_dict(item) for item in document.get("admins", [])]
        entries = [DiseaseEntry.from_dict(item) for item in document.get("diseases", [])]
        next_id = int(document.get("nextId") or 1)
        if entries:
            next_id = max(next_id, max(e.id for e in entries) + 1)
        with self._session() as session:
            session.execute(delete(DiseaseRecord))
            session.execute(delete(AdminAccount))
            session.execute(delete(Counter).where(Counter.name == ENTRY_COUNTER))
            for admin in admins:
                session.add(
                    AdminAccount(
                        id=admin.id,
                        username=admin.username,
                        password_hash=admin.password,
                        created_at=admin.created_at,
                    )
                )
            for entry in entries:
                session.add(
                    DiseaseRecord(
                        id=entry.id,
                        name=entry.name,
                        description=entry.description,
                        symptoms=entry.symptoms,
                        treatment=entry.treatment,
                        created_at=entry.created_at,
                        updated_at=entry.updated_at,
                    )
                )
            session.add(Counter(name=ENTRY_COUNTER, value=next_id))
            session.commit()

    # -------------------------- admins --------------------------
    def find_administrator(self, username: str) -> Administrator | None:
        with self._session() as session:
            stmt = select(AdminAccount).where(AdminAccount.username == username)
            entity = session.execute(stmt).scalar_one_or_none()
            return _to_admin(entity) if entity else None

    def add_administrator(self, username: str, password: str) -> Administrator:
        with self._session() as session:
            exists = session.execute(select(AdminAccount.id).where(AdminAccount.username == username)).first()
            if exists:
                raise AdministratorExistsError(username)
            top = session.execute(select(AdminAccount.id).order_by(AdminAccount.id.desc())).scalars().first()
            entity = AdminAccount(
                id=(top or 0) + 1,
                username=username,
                password_hash=hash_password(password),
                created_at=utc_timestamp(),
            )
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _to_admin(entity)

    def set_administrator_password(self, username: str, password: str) -> None:
        with self._session() as session:
            stmt = (
                update(AdminAccount)
                .where(AdminAccount.username == username)
                .values(password_hash=hash_password(password))
            )
            result = session.execute(stmt)
            if not result.rowcount:
                raise AdministratorNotFoundError(username)
            session.commit()

    # -------------------------- diseases --------------------------
    def list_entries(self) -> list[DiseaseEntry]:
        with self._session() as session:
            rows = session.execute(select(DiseaseRecord).order_by(DiseaseRecord.id)).scalars().all()
            return sort_entries(_to_entry(row) for row in rows)

    def get_entry(self, entry_id) -> DiseaseEntry | None:
        key = parse_entry_id(entry_id)
        if key is None:
            return None
        with self._session() as session:
            entity = session.get(DiseaseRecord, key)
            return _to_entry(entity) if entity else None

    def search_entries(self, query: str | None) -> list[DiseaseEntry]:
        # casefold matching is done in Python so it behaves like the JSON backend
        return [entry for entry in self.list_entries() if entry.matches(query or "")]

    def _take_next_id(self, session: Session) -> int:
        # increment first so the row is write-locked before it is read back
        session.execute(
            update(Counter).where(Counter.name == ENTRY_COUNTER).values(value=Counter.value + 1)
        )
        value = session.execute(select(Counter.value).where(Counter.name == ENTRY_COUNTER)).scalar_one()
        return value - 1

    def add_entry(self, name: str, description: str | None, symptoms: str | None, treatment: str) -> int:
        now = utc_timestamp()
        with self._session() as session:
            entry_id = self._take_next_id(session)
            session.add(
                DiseaseRecord(
                    id=entry_id,
                    name=name,
                    description=description or "",
                    symptoms=symptoms or "",
                    treatment=treatment,
                    created_at=now,
                    updated_at=now,
                )
            )
            session.commit()
            return entry_id

    def update_entry(
        self, entry_id, name: str, description: str | None, symptoms: str | None, treatment: str
    ) -> int:
        key = parse_entry_id(entry_id)
        with self._session() as session:
            entity = session.get(DiseaseRecord, key) if key is not None else None
            if entity is None:
                raise EntryNotFoundError(entry_id)
            entity.name = name
            entity.description = description or ""
            entity.symptoms = symptoms or ""
            entity.treatment = treatment
            entity.updated_at = max(utc_timestamp(), entity.created_at)
            session.commit()
            return 1

    def delete_entry(self, entry_id) -> int:
        key = parse_entry_id(entry_id)
        with self._session() as session:
            entity = session.get(DiseaseRecord, key) if key is not None else None
            if entity is None:
                raise EntryNotFoundError(entry_id)
            session.delete(entity)
            session.commit()
            return 1
