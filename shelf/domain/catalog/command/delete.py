import logfire

from shelf.domain.auth.model.identity import Identity
from shelf.domain.catalog.model.aggregate import VisibleRecord
from shelf.domain.catalog.model.value import RecordId
from shelf.domain.catalog.service.catalog import CatalogService
from shelf.domain.shared.command import Command, CommandHandler, Result


class DeleteRecord(Command):
    id: RecordId


class RecordDeleted(Result):
    item: VisibleRecord


class DeleteRecordHandler(CommandHandler[DeleteRecord, RecordDeleted]):
    identity: Identity
    catalog_service: CatalogService

    async def run(self, cmd: DeleteRecord) -> RecordDeleted:
        with logfire.span("DeleteRecord", record_id=str(cmd.id)):
            item = await self.catalog_service.delete(self.identity, cmd.id)
            return RecordDeleted(item=item)
