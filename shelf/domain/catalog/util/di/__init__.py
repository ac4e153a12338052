from shelf.domain.catalog.util.di.provider import CatalogProvider

__all__ = ["CatalogProvider"]
