from dishka import provide

from shelf.config import Config
from shelf.domain.catalog.port.asset_storage import AssetStoragePort
from shelf.infrastructure.storage.inline import InlineAssetStorage
from shelf.infrastructure.storage.local import LocalAssetStorage
from shelf.util.di.base import Provider
from shelf.util.di.scope import Scope


class StorageProvider(Provider):
    @provide(scope=Scope.APP)
    def get_asset_storage(self, config: Config) -> AssetStoragePort:
        if config.assets.backend == "inline":
            return InlineAssetStorage()
        return LocalAssetStorage(
            upload_dir=config.assets.upload_dir,
            url_prefix=config.assets.url_prefix,
            public_url=config.server.public_url,
        )
