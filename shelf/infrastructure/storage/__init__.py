"""Asset storage adapters - where uploaded images live.

Import modules directly:
    from shelf.infrastructure.storage.di import StorageProvider
    from shelf.infrastructure.storage.local import LocalAssetStorage
"""

__all__: list[str] = []
