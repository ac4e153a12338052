"""Record mapper - converts between the domain aggregate and flat JSON documents."""

from datetime import UTC, datetime
from typing import Any

from shelf.domain.catalog.model.aggregate import CatalogRecord
from shelf.domain.catalog.model.value import (
    ASSET_KEYS,
    OWNER_KEYS,
    RESERVED_FIELD_NAMES,
    RecordId,
)


def doc_to_record(doc: dict[str, Any]) -> CatalogRecord:
    """Convert a stored document to a CatalogRecord.

    Raises KeyError/TypeError/ValueError when the document is malformed.
    """
    if not isinstance(doc, dict):
        raise TypeError(f"Expected an object, got {type(doc).__name__}")

    return CatalogRecord(
        id=RecordId(str(doc["id"])),
        fields={
            k: str(v) for k, v in doc.items() if k not in RESERVED_FIELD_NAMES and _is_scalar(v)
        },
        owner=_first(doc, OWNER_KEYS),
        asset_ref=_first(doc, ASSET_KEYS) or "",
        created_at=_parse_dt(doc.get("created_at")),
        updated_at=_parse_dt(doc.get("updated_at")),
    )


def record_to_doc(record: CatalogRecord) -> dict[str, Any]:
    """Convert a CatalogRecord to its flat stored form."""
    return {
        "id": str(record.id),
        **record.fields,
        "image": record.asset_ref,
        "owner": record.owner,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }


def _first(doc: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = doc.get(key)
        if value:
            return str(value)
    return None


def _is_scalar(value: Any) -> bool:
    return isinstance(value, str | int | float) and not isinstance(value, bool)


def _parse_dt(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands DateTime(timezone=True) columns back without tzinfo
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(UTC)
    return value


def row_to_record(row: dict[str, Any]) -> CatalogRecord:
    """Convert database row to CatalogRecord."""
    return CatalogRecord(
        id=RecordId(row["id"]),
        fields=dict(row.get("fields") or {}),
        owner=row.get("owner"),
        asset_ref=row["asset_ref"],
        created_at=_as_utc(row.get("created_at")),
        updated_at=_as_utc(row.get("updated_at")),
    )


def record_to_row(record: CatalogRecord) -> dict[str, Any]:
    """Convert CatalogRecord to database dict."""
    return {
        "id": str(record.id),
        "fields": record.fields,
        "owner": record.owner,
        "asset_ref": record.asset_ref,
        "created_at": _to_utc(record.created_at),
        "updated_at": _to_utc(record.updated_at),
    }
