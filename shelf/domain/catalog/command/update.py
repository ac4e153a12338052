import logfire

from shelf.domain.auth.model.identity import Identity
from shelf.domain.catalog.model.aggregate import VisibleRecord
from shelf.domain.catalog.model.value import RecordId, UploadedAsset
from shelf.domain.catalog.service.catalog import CatalogService
from shelf.domain.shared.command import Command, CommandHandler, Result


class UpdateRecord(Command):
    id: RecordId
    fields: dict[str, str | None] = {}
    asset: UploadedAsset | None = None


class RecordUpdated(Result):
    item: VisibleRecord


class UpdateRecordHandler(CommandHandler[UpdateRecord, RecordUpdated]):
    identity: Identity
    catalog_service: CatalogService

    async def run(self, cmd: UpdateRecord) -> RecordUpdated:
        with logfire.span("UpdateRecord", record_id=str(cmd.id)):
            item = await self.catalog_service.update(
                self.identity,
                cmd.id,
                cmd.fields,
                cmd.asset,
            )
            return RecordUpdated(item=item)
