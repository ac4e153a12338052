from dishka import Provider as _DishkaProvider

from shelf.util.di.scope import Scope


class Provider(_DishkaProvider):
    """Base for all Shelf DI providers; defaults to the UOW scope."""

    scope = Scope.UOW
