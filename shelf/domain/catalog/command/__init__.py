from shelf.domain.catalog.command.create import CreateRecord, CreateRecordHandler, RecordCreated
from shelf.domain.catalog.command.delete import DeleteRecord, DeleteRecordHandler, RecordDeleted
from shelf.domain.catalog.command.update import RecordUpdated, UpdateRecord, UpdateRecordHandler

__all__ = [
    "CreateRecord",
    "CreateRecordHandler",
    "DeleteRecord",
    "DeleteRecordHandler",
    "RecordCreated",
    "RecordDeleted",
    "RecordUpdated",
    "UpdateRecord",
    "UpdateRecordHandler",
]
