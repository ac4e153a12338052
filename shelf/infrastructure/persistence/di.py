from typing import AsyncIterable

from dishka import provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from shelf.config import Config
from shelf.domain.catalog.port.record_store import RecordStore
from shelf.infrastructure.persistence.adapter.json_store import JsonFileRecordStore
from shelf.infrastructure.persistence.adapter.memory_store import InMemoryRecordStore
from shelf.infrastructure.persistence.database import create_db_engine, create_session_factory
from shelf.infrastructure.persistence.repository.record import SqlRecordStore
from shelf.util.di.base import Provider
from shelf.util.di.scope import Scope


class JsonStoreProvider(Provider):
    """Record store backed by a single JSON file."""

    @provide(scope=Scope.APP)
    def get_record_store(self, config: Config) -> RecordStore:
        return JsonFileRecordStore(
            config.store.path,
            serialize_writes=config.store.serialize_writes,
        )


class MemoryStoreProvider(Provider):
    """Record store held in process memory; built once per application."""

    @provide(scope=Scope.APP)
    def get_record_store(self, config: Config) -> RecordStore:
        return InMemoryRecordStore(serialize_writes=config.store.serialize_writes)


class DatabaseStoreProvider(Provider):
    """Record store backed by SQLAlchemy (SQLite or PostgreSQL)."""

    # APP-scoped factories
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config.database)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per unit of work)
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    record_store = provide(SqlRecordStore, scope=Scope.UOW, provides=RecordStore)


_STORE_PROVIDERS: dict[str, type[Provider]] = {
    "json": JsonStoreProvider,
    "memory": MemoryStoreProvider,
    "database": DatabaseStoreProvider,
}


def persistence_provider(config: Config) -> Provider:
    """Pick the record store provider for the configured backend."""
    return _STORE_PROVIDERS[config.store.backend]()
