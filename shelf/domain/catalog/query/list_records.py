from shelf.domain.auth.model.identity import Identity
from shelf.domain.catalog.model.aggregate import VisibleRecord
from shelf.domain.catalog.service.catalog import CatalogService
from shelf.domain.shared.query import Query, QueryHandler, Result


class ListRecords(Query):
    pass


class RecordList(Result):
    items: list[VisibleRecord]


class ListRecordsHandler(QueryHandler[ListRecords, RecordList]):
    identity: Identity
    catalog_service: CatalogService

    async def run(self, cmd: ListRecords) -> RecordList:
        # Anonymous callers see public records only; callers also see their own
        items = await self.catalog_service.list_records(self.identity)
        return RecordList(items=items)
