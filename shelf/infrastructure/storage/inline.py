import base64

from shelf.domain.catalog.port.asset_storage import AssetStoragePort


class InlineAssetStorage(AssetStoragePort):
    """Keeps the image inside the record as a base64 ``data:`` URL.

    Nothing lives outside the record, so deleting is a no-op.
    """

    async def save(self, name: str, content: bytes, content_type: str) -> str:
        payload = base64.b64encode(content).decode("ascii")
        return f"data:{content_type};base64,{payload}"

    async def delete(self, ref: str) -> None:
        return None
