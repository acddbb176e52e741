"""Catalog database lifecycle and the session-scoped catalog unit of work.

:func:`startup` binds one engine per process and creates the ``shop`` and
``product`` tables. Each :class:`SqlAlchemyCatalogUnitOfWork` opens its own
session on ``__enter__``; leaving the block without :meth:`commit` discards
whatever the repositories changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from feedsync.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from feedsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyProductRepository,
    SqlAlchemyShopRepository,
)
from feedsync.config import get_database_config
from feedsync.domain.ports.unit_of_work import CatalogRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the catalog database is used before :func:`startup` or started twice."""


@dataclass(frozen=True, slots=True)
class _CatalogDatabase:
    engine: Engine
    sessions: sessionmaker[Session]


@dataclass(slots=True)
class _DatabaseSlot:
    current: _CatalogDatabase | None = None

    def require(self) -> _CatalogDatabase:
        if self.current is None:
            raise StartupError(
                "Catalog database not started. Call feedsync.adapters.sqlalchemy.startup() "
                "before opening a unit of work."
            )
        return self.current


_DATABASE = _DatabaseSlot()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the catalog to ``engine`` (or a new engine for ``database_uri``) and create tables.

    Without either argument the URI comes from ``DATABASE_URI`` or the data directory.
    """

    if _DATABASE.current is not None and not force:
        raise StartupError("Catalog database already started. Pass force=True to rebind.")

    bound = engine or create_engine(database_uri or get_database_config().uri, future=True)
    start_mappers()
    create_all_tables(bound)
    _DATABASE.current = _CatalogDatabase(
        engine=bound,
        sessions=sessionmaker(bind=bound, expire_on_commit=False),
    )
    log.debug("Catalog database bound to %s", bound.url)


def is_started() -> bool:
    return _DATABASE.current is not None


def shutdown() -> None:
    """Dispose the bound engine; a later unit of work needs a new :func:`startup`."""

    if _DATABASE.current is not None:
        _DATABASE.current.engine.dispose()
    _DATABASE.current = None


class SqlAlchemyCatalogUnitOfWork:
    """Shops and products sharing one session for the duration of a ``with`` block."""

    def __init__(self) -> None:
        self._sessions = _DATABASE.require().sessions
        self._session: Session | None = None
        self._repositories: CatalogRepositories | None = None

    def __enter__(self) -> SqlAlchemyCatalogUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._sessions()
        self._repositories = CatalogRepositories(
            shops=SqlAlchemyShopRepository(self._session),
            products=SqlAlchemyProductRepository(self._session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> CatalogRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from feedsync.domain.ports.unit_of_work import CatalogUnitOfWork

    _uow_check: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()
