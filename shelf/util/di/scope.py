"""Custom Dishka scopes for Shelf."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Shelf dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (stores, engines, asset storage)
    - UOW: Unit of Work (one HTTP request or one CLI operation)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
