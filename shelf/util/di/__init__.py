from shelf.util.di.base import Provider
from shelf.util.di.scope import Scope

__all__ = ["Provider", "Scope"]
