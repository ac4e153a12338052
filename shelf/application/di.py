from dishka import AsyncContainer, from_context, make_async_container

from shelf.config import Config
from shelf.domain.auth.util.di import AuthProvider
from shelf.domain.catalog.util.di import CatalogProvider
from shelf.infrastructure.persistence import persistence_provider
from shelf.infrastructure.storage.di import StorageProvider
from shelf.util.di.base import Provider
from shelf.util.di.scope import Scope


class ConfigProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()

    return make_async_container(
        ConfigProvider(),
        persistence_provider(config),
        StorageProvider(),
        CatalogProvider(),
        AuthProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
