"""OwnershipPolicy - who may see and who may mutate a catalog record."""

from shelf.domain.auth.model.identity import Identity, identity_value
from shelf.domain.catalog.model.aggregate import CatalogRecord, VisibleRecord
from shelf.domain.shared.error import ForbiddenError
from shelf.domain.shared.service import Service


class OwnershipPolicy(Service):
    """Partitions records by caller identity.

    Unowned records are public: everyone sees them, and they are only
    mutable when ``allow_mutation_of_unowned_records`` is set.
    """

    allow_mutation_of_unowned_records: bool = False

    def is_mine(self, identity: Identity, record: CatalogRecord) -> bool:
        caller = identity_value(identity)
        return caller is not None and record.owner == caller

    def annotate(self, identity: Identity, record: CatalogRecord) -> VisibleRecord:
        return VisibleRecord(record=record, mine=self.is_mine(identity, record))

    def visible_to(self, identity: Identity, records: list[CatalogRecord]) -> list[VisibleRecord]:
        """Public records plus the caller's own, in store order."""
        caller = identity_value(identity)
        return [
            self.annotate(identity, r)
            for r in records
            if r.is_public or (caller is not None and r.owner == caller)
        ]

    def authorize(self, identity: Identity, record: CatalogRecord) -> None:
        """Raise ForbiddenError unless the caller may update or delete ``record``."""
        if record.is_public:
            if self.allow_mutation_of_unowned_records:
                return
            raise ForbiddenError(
                f"Record {record.id} is public and cannot be modified",
                code="public_record",
            )
        if not self.is_mine(identity, record):
            raise ForbiddenError(
                f"Record {record.id} does not belong to the caller",
                code="not_owner",
            )
