from shelf.infrastructure.persistence.di import (
    DatabaseStoreProvider,
    JsonStoreProvider,
    MemoryStoreProvider,
    persistence_provider,
)

__all__ = [
    "DatabaseStoreProvider",
    "JsonStoreProvider",
    "MemoryStoreProvider",
    "persistence_provider",
]
