"""Error hierarchy for Shelf.

Error layers:
- ShelfError: Base class for all Shelf errors
- DomainError: Business rule violations, validation failures (4xx responses)
- InfrastructureError: System-level failures like storage issues (500 responses)

These errors are mapped to HTTP responses by the global exception handler in app.py.
"""

from dataclasses import dataclass


class ShelfError(Exception):
    """Base class for all Shelf errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(ShelfError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


@dataclass(frozen=True)
class FieldError:
    """One failing input field."""

    field: str
    message: str


class ValidationError(DomainError):
    """Input validation failed.

    ``errors`` itemises every failing field; ``field`` is kept for the
    single-field case.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[FieldError] | None = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(message, code=code)
        self.field = field
        if errors is None and field is not None:
            errors = [FieldError(field=field, message=message)]
        self.errors: list[FieldError] = errors or []


class UnsupportedMediaTypeError(ValidationError):
    """Uploaded asset has a media type outside the accepted set."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, field=field, code="UNSUPPORTED_MEDIA_TYPE")


class PayloadTooLargeError(ValidationError):
    """Uploaded asset exceeds the configured byte ceiling."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, field=field, code="PAYLOAD_TOO_LARGE")


class ForbiddenError(DomainError):
    """Caller is not allowed to mutate this resource."""


# =============================================================================
# Infrastructure Errors (system-level failures - 500)
# =============================================================================


class InfrastructureError(ShelfError):
    """Base class for infrastructure/system errors."""


class StoreCorruptError(InfrastructureError):
    """Backing store content cannot be parsed as a record collection."""


class StorageUnavailableError(InfrastructureError):
    """Storage backend (file system, database) is unavailable."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
