from datetime import UTC, datetime

from pydantic import BaseModel

from shelf.domain.catalog.model.value import RecordId
from shelf.domain.shared.model.aggregate import Aggregate


class CatalogRecord(Aggregate):
    """One catalog entry (a book, an artwork) with its image reference."""

    id: RecordId
    fields: dict[str, str]
    owner: str | None = None
    asset_ref: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_public(self) -> bool:
        return self.owner is None

    def revise(self, fields: dict[str, str], asset_ref: str | None = None) -> "CatalogRecord":
        """Return a copy with merged fields, an optional new asset, and a fresh updated_at."""
        return self.model_copy(
            update={
                "fields": {**self.fields, **fields},
                "asset_ref": asset_ref if asset_ref is not None else self.asset_ref,
                "updated_at": datetime.now(UTC),
            }
        )


class VisibleRecord(BaseModel):
    """A record as seen by one caller; ``mine`` is derived, never persisted."""

    record: CatalogRecord
    mine: bool
