"""DI provider for request identity."""

import logging

from dishka import from_context, provide
from starlette.requests import Request

from shelf.config import Config
from shelf.domain.auth.model.identity import Anonymous, Caller, Identity
from shelf.util.di.base import Provider
from shelf.util.di.scope import Scope

logger = logging.getLogger(__name__)


def resolve_identity(headers, header_name: str) -> Identity:
    """Turn request headers into an Identity.

    The header value is an opaque, unverified string (typically an email)
    used only to partition record ownership. Missing or blank means anonymous.
    """
    raw = headers.get(header_name)
    value = raw.strip() if raw else ""
    if not value:
        return Anonymous()
    return Caller(value=value)


class AuthProvider(Provider):
    """Single seam from request metadata to the caller Identity."""

    request = from_context(provides=Request, scope=Scope.UOW)

    @provide(scope=Scope.UOW)
    def get_identity(self, request: Request, config: Config) -> Identity:
        identity = resolve_identity(request.headers, config.identity.header)
        logger.debug("Identity resolved: %s", type(identity).__name__)
        return identity
