"""GetRecord query handler - read access to a single record by id."""

from shelf.domain.auth.model.identity import Identity
from shelf.domain.catalog.model.aggregate import VisibleRecord
from shelf.domain.catalog.model.value import RecordId
from shelf.domain.catalog.service.catalog import CatalogService
from shelf.domain.shared.query import Query, QueryHandler, Result


class GetRecord(Query):
    id: RecordId


class RecordDetail(Result):
    item: VisibleRecord


class GetRecordHandler(QueryHandler[GetRecord, RecordDetail]):
    identity: Identity
    catalog_service: CatalogService

    async def run(self, cmd: GetRecord) -> RecordDetail:
        item = await self.catalog_service.get(self.identity, cmd.id)
        return RecordDetail(item=item)
