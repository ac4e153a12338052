from shelf.domain.catalog.service.asset import AssetManager
from shelf.domain.catalog.service.catalog import CatalogService
from shelf.domain.catalog.service.ownership import OwnershipPolicy

__all__ = ["AssetManager", "CatalogService", "OwnershipPolicy"]
