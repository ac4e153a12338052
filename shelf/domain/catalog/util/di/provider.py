from dishka import provide

from shelf.config import Config
from shelf.domain.catalog.command.create import CreateRecordHandler
from shelf.domain.catalog.command.delete import DeleteRecordHandler
from shelf.domain.catalog.command.update import UpdateRecordHandler
from shelf.domain.catalog.port.asset_storage import AssetStoragePort
from shelf.domain.catalog.port.record_store import RecordStore
from shelf.domain.catalog.query.get_record import GetRecordHandler
from shelf.domain.catalog.query.list_records import ListRecordsHandler
from shelf.domain.catalog.service.asset import AssetManager
from shelf.domain.catalog.service.catalog import CatalogService
from shelf.domain.catalog.service.ownership import OwnershipPolicy
from shelf.util.di.base import Provider
from shelf.util.di.scope import Scope


class CatalogProvider(Provider):
    @provide(scope=Scope.APP)
    def get_ownership_policy(self, config: Config) -> OwnershipPolicy:
        return OwnershipPolicy(
            allow_mutation_of_unowned_records=config.catalog.allow_mutation_of_unowned_records,
        )

    @provide(scope=Scope.APP)
    def get_asset_manager(self, storage: AssetStoragePort, config: Config) -> AssetManager:
        return AssetManager(
            storage=storage,
            accepted_types=[t.lower() for t in config.assets.accepted_types],
            max_size=config.assets.max_size,
        )

    @provide(scope=Scope.UOW)
    def get_catalog_service(
        self,
        store: RecordStore,
        policy: OwnershipPolicy,
        assets: AssetManager,
        config: Config,
    ) -> CatalogService:
        return CatalogService(
            store=store,
            policy=policy,
            assets=assets,
            field_names=config.catalog.fields,
        )

    # Command Handlers
    create_handler = provide(CreateRecordHandler, scope=Scope.UOW)
    update_handler = provide(UpdateRecordHandler, scope=Scope.UOW)
    delete_handler = provide(DeleteRecordHandler, scope=Scope.UOW)

    # Query Handlers
    get_record_handler = provide(GetRecordHandler, scope=Scope.UOW)
    list_records_handler = provide(ListRecordsHandler, scope=Scope.UOW)
