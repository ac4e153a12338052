import logfire

from shelf.domain.auth.model.identity import Identity
from shelf.domain.catalog.model.aggregate import VisibleRecord
from shelf.domain.catalog.model.value import UploadedAsset
from shelf.domain.catalog.service.catalog import CatalogService
from shelf.domain.shared.command import Command, CommandHandler, Result


class CreateRecord(Command):
    fields: dict[str, str | None]
    asset: UploadedAsset | None = None


class RecordCreated(Result):
    item: VisibleRecord


class CreateRecordHandler(CommandHandler[CreateRecord, RecordCreated]):
    identity: Identity
    catalog_service: CatalogService

    async def run(self, cmd: CreateRecord) -> RecordCreated:
        with logfire.span("CreateRecord"):
            item = await self.catalog_service.create(self.identity, cmd.fields, cmd.asset)
            return RecordCreated(item=item)
