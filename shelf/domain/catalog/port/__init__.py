from shelf.domain.catalog.port.asset_storage import AssetStoragePort
from shelf.domain.catalog.port.record_store import RecordStore, RecordUpdater

__all__ = [
    "AssetStoragePort",
    "RecordStore",
    "RecordUpdater",
]
