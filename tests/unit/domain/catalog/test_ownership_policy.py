"""Unit tests for OwnershipPolicy - visibility and mutation rights."""

from datetime import UTC, datetime

import pytest

from shelf.domain.auth.model.identity import Anonymous, Caller
from shelf.domain.catalog.model.aggregate import CatalogRecord
from shelf.domain.catalog.model.value import RecordId
from shelf.domain.catalog.service.ownership import OwnershipPolicy
from shelf.domain.shared.error import ForbiddenError


def _make_record(id: str, owner: str | None = None) -> CatalogRecord:
    now = datetime(2024, 1, 1, tzinfo=UTC)
    return CatalogRecord(
        id=RecordId(id),
        fields={"title": f"Book {id}", "author": "Someone"},
        owner=owner,
        asset_ref=f"/uploads/{id}.png",
        created_at=now,
        updated_at=now,
    )


class TestCatalogRecord:
    def test_record_without_owner_is_public(self):
        assert _make_record("1").is_public
        assert not _make_record("2", owner="a@x.com").is_public


class TestVisibleTo:
    def setup_method(self):
        self.policy = OwnershipPolicy()
        self.records = [
            _make_record("1"),
            _make_record("2", owner="a@x.com"),
            _make_record("3", owner="b@x.com"),
            _make_record("4"),
        ]

    def test_anonymous_sees_only_public_records(self):
        visible = self.policy.visible_to(Anonymous(), self.records)

        assert [str(v.record.id) for v in visible] == ["1", "4"]
        assert all(v.mine is False for v in visible)

    def test_caller_sees_public_and_own_records_in_store_order(self):
        visible = self.policy.visible_to(Caller("a@x.com"), self.records)

        assert [str(v.record.id) for v in visible] == ["1", "2", "4"]
        assert [v.mine for v in visible] == [False, True, False]

    def test_owner_match_is_case_sensitive(self):
        visible = self.policy.visible_to(Caller("A@X.COM"), self.records)

        assert [str(v.record.id) for v in visible] == ["1", "4"]

    def test_empty_collection(self):
        assert self.policy.visible_to(Caller("a@x.com"), []) == []


class TestAnnotate:
    def test_mine_for_owner(self):
        policy = OwnershipPolicy()
        assert policy.annotate(Caller("a@x.com"), _make_record("1", "a@x.com")).mine is True

    def test_not_mine_for_public_record(self):
        policy = OwnershipPolicy()
        assert policy.annotate(Caller("a@x.com"), _make_record("1")).mine is False

    def test_not_mine_for_anonymous(self):
        policy = OwnershipPolicy()
        assert policy.annotate(Anonymous(), _make_record("1", "a@x.com")).mine is False


class TestAuthorize:
    def test_owner_may_mutate(self):
        OwnershipPolicy().authorize(Caller("a@x.com"), _make_record("1", "a@x.com"))

    def test_other_caller_is_forbidden(self):
        with pytest.raises(ForbiddenError) as exc_info:
            OwnershipPolicy().authorize(Caller("b@x.com"), _make_record("1", "a@x.com"))
        assert exc_info.value.code == "not_owner"

    def test_anonymous_cannot_mutate_owned_record(self):
        with pytest.raises(ForbiddenError):
            OwnershipPolicy().authorize(Anonymous(), _make_record("1", "a@x.com"))

    def test_public_record_is_immutable_by_default(self):
        with pytest.raises(ForbiddenError) as exc_info:
            OwnershipPolicy().authorize(Caller("a@x.com"), _make_record("1"))
        assert exc_info.value.code == "public_record"

    def test_public_record_mutable_when_allowed(self):
        policy = OwnershipPolicy(allow_mutation_of_unowned_records=True)
        policy.authorize(Anonymous(), _make_record("1"))
        policy.authorize(Caller("a@x.com"), _make_record("1"))

    def test_allow_flag_does_not_open_owned_records(self):
        policy = OwnershipPolicy(allow_mutation_of_unowned_records=True)
        with pytest.raises(ForbiddenError):
            policy.authorize(Caller("b@x.com"), _make_record("1", "a@x.com"))
