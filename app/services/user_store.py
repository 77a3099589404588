import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.db.models import UserRow, utcnow
from app.errors import DuplicateEmailError, PersistenceError
from app.schemas.auth import User

log = logging.getLogger(__name__)


class UserStore(ABC):
    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def create(self, name: str, email: str, password_hash: str) -> User:
        ...


class InMemoryUserStore(UserStore):
    def __init__(self) -> None:
        self._by_id: Dict[str, User] = {}
        self._id_by_email: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get_by_email(self, email: str) -> Optional[User]:
        user_id = self._id_by_email.get(email)
        return self._by_id.get(user_id) if user_id else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._by_id.get(user_id)

    def create(self, name: str, email: str, password_hash: str) -> User:
        with self._lock:
            if email in self._id_by_email:
                raise DuplicateEmailError(email)
            user = User(
                id=str(uuid.uuid4()),
                name=name,
                email=email,
                password_hash=password_hash,
                created_at=utcnow(),
            )
            self._by_id[user.id] = user
            self._id_by_email[email] = user.id
        return user


class SqlUserStore(UserStore):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def _fetch_one(self, stmt) -> Optional[User]:
        try:
            with self.session_factory() as session:
                row = session.scalars(stmt).one_or_none()
                return User.model_validate(row) if row is not None else None
        except SQLAlchemyError as exc:
            log.exception("Failed to load user")
            raise PersistenceError("Load failed") from exc

    def get_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one(select(UserRow).where(UserRow.email == email))

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._fetch_one(select(UserRow).where(UserRow.id == user_id))

    def create(self, name: str, email: str, password_hash: str) -> User:
        row = UserRow(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=utcnow(),
        )
        try:
            with self.session_factory() as session:
                session.add(row)
                session.commit()
                return User.model_validate(row)
        except IntegrityError as exc:
            # unique index on email
            raise DuplicateEmailError(email) from exc
        except SQLAlchemyError as exc:
            log.exception("Failed to create user %s", email)
            raise PersistenceError("Registration failed") from exc
