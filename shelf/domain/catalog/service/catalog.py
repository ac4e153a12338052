"""CatalogService - the list/get/create/update/delete use cases."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import cast
from uuid import uuid4

from shelf.domain.auth.model.identity import Identity, identity_value
from shelf.domain.catalog.model.aggregate import CatalogRecord, VisibleRecord
from shelf.domain.catalog.model.value import RecordId, UploadedAsset
from shelf.domain.catalog.port.record_store import RecordStore
from shelf.domain.catalog.service.asset import ASSET_FIELD, AssetManager
from shelf.domain.catalog.service.ownership import OwnershipPolicy
from shelf.domain.shared.error import FieldError, NotFoundError, ValidationError
from shelf.domain.shared.service import Service

logger = logging.getLogger(__name__)


class CatalogService(Service):
    """Orchestrates the record store, the ownership policy and the asset manager.

    Every use case is one short sequence against the store; the only
    cross-component rule is that an asset is never left orphaned: a new
    asset is reclaimed when the record write fails, and a replaced or
    deleted record's asset is reclaimed once the write succeeded.
    """

    store: RecordStore
    policy: OwnershipPolicy
    assets: AssetManager
    field_names: list[str]

    async def list_records(self, identity: Identity) -> list[VisibleRecord]:
        records = await self.store.load_all()
        return self.policy.visible_to(identity, records)

    async def get(self, identity: Identity, id: RecordId) -> VisibleRecord:
        record = await self._require(id)
        return self.policy.annotate(identity, record)

    async def create(
        self,
        identity: Identity,
        fields: Mapping[str, str | None],
        asset: UploadedAsset | None,
    ) -> VisibleRecord:
        errors: list[FieldError] = []
        cleaned: dict[str, str] = {}
        for name in self.field_names:
            value = (fields.get(name) or "").strip()
            if value:
                cleaned[name] = value
            else:
                errors.append(FieldError(field=name, message=f"{name} is required"))
        if asset is None:
            errors.append(FieldError(field=ASSET_FIELD, message=f"{ASSET_FIELD} is required"))
        self._raise_if_invalid(errors, asset)

        ref = await self.assets.store(cast(UploadedAsset, asset))
        now = datetime.now(UTC)
        record = CatalogRecord(
            id=RecordId(str(uuid4())),
            fields=cleaned,
            owner=identity_value(identity),
            asset_ref=ref,
            created_at=now,
            updated_at=now,
        )
        try:
            await self.store.append(record)
        except Exception:
            await self.assets.reclaim(ref)
            raise

        logger.info("Created record %s (owner=%s)", record.id, record.owner)
        return self.policy.annotate(identity, record)

    async def update(
        self,
        identity: Identity,
        id: RecordId,
        fields: Mapping[str, str | None],
        asset: UploadedAsset | None = None,
    ) -> VisibleRecord:
        existing = await self._require(id)
        self.policy.authorize(identity, existing)

        errors: list[FieldError] = []
        changes: dict[str, str] = {}
        for name in self.field_names:
            if fields.get(name) is None:
                continue
            value = (fields[name] or "").strip()
            if value:
                changes[name] = value
            else:
                errors.append(FieldError(field=name, message=f"{name} must not be empty"))
        self._raise_if_invalid(errors, asset)

        new_ref = await self.assets.store(asset) if asset is not None else None
        replaced_refs: list[str] = []

        def apply(record: CatalogRecord) -> CatalogRecord:
            replaced_refs.append(record.asset_ref)
            return record.revise(changes, asset_ref=new_ref)

        try:
            updated = await self.store.replace(id, apply)
        except Exception:
            await self.assets.reclaim(new_ref)
            raise

        if new_ref is not None:
            for old_ref in replaced_refs:
                if old_ref != new_ref:
                    await self.assets.reclaim(old_ref)

        logger.info(
            "Updated record %s (fields=%s, new_asset=%s)", id, sorted(changes), bool(new_ref)
        )
        return self.policy.annotate(identity, updated)

    async def delete(self, identity: Identity, id: RecordId) -> VisibleRecord:
        existing = await self._require(id)
        self.policy.authorize(identity, existing)

        removed = await self.store.remove(id)
        await self.assets.reclaim(removed.asset_ref)

        logger.info("Deleted record %s", id)
        return self.policy.annotate(identity, removed)

    async def _require(self, id: RecordId) -> CatalogRecord:
        record = await self.store.find_by_id(id)
        if record is None:
            raise NotFoundError(f"Record not found: {id}")
        return record

    def _raise_if_invalid(self, errors: list[FieldError], asset: UploadedAsset | None) -> None:
        """Raise one ValidationError itemising field errors and any asset rejection."""
        asset_error: ValidationError | None = None
        if asset is not None:
            try:
                self.assets.check(asset)
            except ValidationError as e:
                asset_error = e

        if errors:
            if asset_error is not None:
                errors = [*errors, *asset_error.errors]
            failing = ", ".join(e.field for e in errors)
            raise ValidationError(f"Invalid fields: {failing}", errors=errors)
        if asset_error is not None:
            raise asset_error
