"""Catalog record REST routes.

Mounted once per configured collection (``/books``, ``/artworks``, ...).
"""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from shelf.config import Config
from shelf.domain.catalog.command.create import CreateRecord, CreateRecordHandler
from shelf.domain.catalog.command.delete import DeleteRecord, DeleteRecordHandler
from shelf.domain.catalog.command.update import UpdateRecord, UpdateRecordHandler
from shelf.domain.catalog.model.aggregate import VisibleRecord
from shelf.domain.catalog.model.value import RecordId, UploadedAsset
from shelf.domain.catalog.query.get_record import GetRecord, GetRecordHandler
from shelf.domain.catalog.query.list_records import ListRecords, ListRecordsHandler
from shelf.domain.shared.error import ValidationError
from shelf.infrastructure.persistence.mappers.record import record_to_doc

router = APIRouter(tags=["records"], route_class=DishkaRoute)

# "photo" is accepted for clients written against older form layouts
ASSET_FORM_FIELDS = ("image", "photo")


@router.get("")
async def list_records(
    handler: FromDishka[ListRecordsHandler],
) -> list[dict[str, Any]]:
    result = await handler.run(ListRecords())
    return [present(item) for item in result.items]


@router.get("/{record_id}")
async def get_record(
    record_id: str,
    handler: FromDishka[GetRecordHandler],
) -> dict[str, Any]:
    result = await handler.run(GetRecord(id=RecordId(record_id)))
    return present(result.item)


@router.post("", status_code=201)
async def create_record(
    request: Request,
    handler: FromDishka[CreateRecordHandler],
    config: FromDishka[Config],
) -> dict[str, Any]:
    fields, asset = await read_payload(request, config)
    result = await handler.run(CreateRecord(fields=fields, asset=asset))
    return {"status": "success", "message": "Record created", "data": present(result.item)}


@router.put("/{record_id}")
async def update_record(
    record_id: str,
    request: Request,
    handler: FromDishka[UpdateRecordHandler],
    config: FromDishka[Config],
) -> dict[str, Any]:
    fields, asset = await read_payload(request, config)
    result = await handler.run(UpdateRecord(id=RecordId(record_id), fields=fields, asset=asset))
    return {"status": "success", "message": "Record updated", "data": present(result.item)}


@router.delete("/{record_id}")
async def delete_record(
    record_id: str,
    handler: FromDishka[DeleteRecordHandler],
) -> dict[str, Any]:
    result = await handler.run(DeleteRecord(id=RecordId(record_id)))
    return {"status": "success", "message": "Record deleted", "data": present(result.item)}


def present(item: VisibleRecord) -> dict[str, Any]:
    """Flat JSON view of a record with the caller-relative ``mine`` flag."""
    return {**record_to_doc(item.record), "mine": item.mine}


async def read_payload(
    request: Request,
    config: Config,
) -> tuple[dict[str, str | None], UploadedAsset | None]:
    """Extract catalog fields and the optional image from a form or JSON body.

    Fields that are absent come back as None; JSON bodies never carry an image.
    """
    field_names = config.catalog.fields
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            raise ValidationError("Request body is not valid UTF-8 JSON") from e
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return {name: _text(body.get(name)) for name in field_names}, None

    async with request.form() as form:
        fields = {name: _text(form.get(name)) for name in field_names}
        asset = None
        for key in ASSET_FORM_FIELDS:
            upload = form.get(key)
            if isinstance(upload, UploadFile) and upload.filename:
                # One byte past the ceiling is enough to reject oversized uploads
                content = await upload.read(config.assets.max_size + 1)
                asset = UploadedAsset(
                    filename=upload.filename,
                    content_type=upload.content_type or "application/octet-stream",
                    content=content,
                )
                break
    return fields, asset


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, UploadFile):
        return None
    return str(value)
