"""Initial catalog records loaded into an empty store."""

import json
import logging
from pathlib import Path

from dishka import AsyncContainer
from sqlalchemy.ext.asyncio import AsyncEngine

from shelf.config import Config
from shelf.domain.catalog.model.aggregate import CatalogRecord
from shelf.domain.catalog.port.record_store import RecordStore
from shelf.domain.shared.error import ConfigurationError
from shelf.infrastructure.persistence.database import ensure_schema
from shelf.infrastructure.persistence.mappers.record import doc_to_record
from shelf.util.di.scope import Scope

logger = logging.getLogger(__name__)


def load_seed_records(seed_file: str | Path) -> list[CatalogRecord]:
    """Read a JSON array of records in the stored document layout."""
    path = Path(seed_file)
    if not path.exists():
        raise ConfigurationError(f"Seed file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise TypeError("seed file must hold a JSON array")
        return [doc_to_record(doc) for doc in data]
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid seed file {path}: {e}") from e


async def seed_store(store: RecordStore, records: list[CatalogRecord]) -> int:
    """Append ``records`` when the store is empty. Returns the number inserted."""
    if await store.load_all():
        logger.debug("Store already populated, skipping seed")
        return 0
    for record in records:
        await store.append(record)
    logger.info("Seeded %d records", len(records))
    return len(records)


async def initialize_store(
    container: AsyncContainer,
    config: Config,
    seed_file: str | Path | None = None,
) -> int:
    """Prepare the configured record store: schema for SQL, then optional seed.

    ``seed_file`` overrides ``store.seed_file``. Returns the number of seeded records.
    """
    if config.store.backend == "database":
        await ensure_schema(await container.get(AsyncEngine))

    seed_file = seed_file or config.store.seed_file
    if not seed_file:
        return 0

    records = load_seed_records(seed_file)
    async with container(scope=Scope.UOW) as uow:
        return await seed_store(await uow.get(RecordStore), records)
