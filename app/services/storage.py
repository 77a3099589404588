import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from app.config import Settings
from app.db.session import create_db_engine, create_session_factory
from app.services.response_store import InMemoryResponseStore, ResponseStore, SqlResponseStore
from app.services.user_store import InMemoryUserStore, SqlUserStore, UserStore

log = logging.getLogger(__name__)


@dataclass
class Storage:
    users: UserStore
    responses: ResponseStore
    backend: str
    engine: Optional[Engine] = None

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def build_storage(settings: Settings) -> Storage:
    """
    Pick the storage backend once, at start-up. Callers only ever see the
    UserStore / ResponseStore interfaces.
    """
    if not settings.database_url:
        log.warning(
            "DATABASE_URL is not set. Falling back to in-memory storage; "
            "data will be lost when the process exits."
        )
        return Storage(
            users=InMemoryUserStore(),
            responses=InMemoryResponseStore(),
            backend="memory",
        )

    engine = create_db_engine(settings.database_url, echo=settings.sql_echo)
    session_factory = create_session_factory(engine)
    return Storage(
        users=SqlUserStore(session_factory),
        responses=SqlResponseStore(session_factory),
        backend="sql",
        engine=engine,
    )
