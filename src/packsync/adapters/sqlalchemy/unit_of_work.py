"""Engine lifecycle and session-scoped access to the pack catalog."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, insert, select
from sqlalchemy.orm import Session, sessionmaker

from packsync.config.storage import get_database_uri
from packsync.domain.ports.store import StoreError

from .mappings import DEFAULT_DOCUMENT_TYPE, create_all_tables, pack_table
from .store import PackInfo, SqlAlchemyPackStore

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine, Row

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the catalog is used before the adapter is initialised."""


class PackExistsError(StoreError):
    """Raised when registering a collection that is already registered."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call packsync.adapters.sqlalchemy."
                "unit_of_work.startup() before opening a pack catalog."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the engine and create missing tables."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(database_uri or get_database_uri(), future=True)
    create_all_tables(resolved_engine)
    _STATE.engine = resolved_engine
    log.debug("Pack database ready at %s", resolved_engine.url)


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def _pack_info(row: Row[Any]) -> PackInfo:
    return PackInfo(
        collection=row.collection,
        label=row.label,
        document_type=row.document_type,
        system=row.system,
        locked=bool(row.locked),
    )


class SqlAlchemyPackCatalog:
    """Resolves collection identifiers to stores sharing a single session."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyPackCatalog:
        factory = self._session_factory or _STATE.session_factory
        self._session = factory()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        if exc_type is not None:
            session.rollback()
        session.close()
        self._session = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Pack catalog used outside of its context manager")
        return self._session

    def resolve(self, collection: str) -> SqlAlchemyPackStore | None:
        try:
            row = self.session.execute(
                select(pack_table).where(pack_table.c.collection == collection)
            ).one_or_none()
        except Exception:
            self.session.rollback()
            raise
        if row is None:
            return None
        return SqlAlchemyPackStore(self.session, _pack_info(row))

    def add_pack(
        self,
        *,
        collection: str,
        label: str | None = None,
        document_type: str = DEFAULT_DOCUMENT_TYPE,
        system: str | None = None,
        locked: bool = False,
    ) -> PackInfo:
        if not collection.strip():
            raise ValueError("collection must not be blank")
        if self.resolve(collection) is not None:
            raise PackExistsError(f"Pack {collection} is already registered")
        info = PackInfo(
            collection=collection,
            label=label or collection,
            document_type=document_type,
            system=system,
            locked=locked,
        )
        try:
            self.session.execute(
                insert(pack_table).values(
                    collection=info.collection,
                    label=info.label,
                    document_type=info.document_type,
                    system=info.system,
                    locked=info.locked,
                )
            )
        except Exception:
            self.session.rollback()
            raise
        self.session.commit()
        log.info("Registered pack %s (%s)", info.collection, info.label)
        return info

    def list_packs(self) -> list[PackInfo]:
        rows = self.session.execute(select(pack_table).order_by(pack_table.c.collection))
        return [_pack_info(row) for row in rows]
