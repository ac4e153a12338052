from pydantic import Field

from shelf.domain.shared.model.value import RootValueObject, ValueObject


class RecordId(RootValueObject[str]):
    """Opaque record identifier (UUID4 string for new records)."""

    def __str__(self) -> str:
        return self.root


class UploadedAsset(ValueObject):
    """An image received from the multipart form, not yet stored."""

    filename: str
    content_type: str
    content: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


# Document keys carrying record metadata; current key first, then keys written by older data files
OWNER_KEYS = ("owner", "email")
ASSET_KEYS = ("image", "coverUrl", "photo")
RESERVED_FIELD_NAMES = frozenset(
    {"id", "created_at", "updated_at", "mine", *OWNER_KEYS, *ASSET_KEYS}
)
