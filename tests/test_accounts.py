from __future__ import annotations

from typing import Any

import pytest
from pymongo.errors import PyMongoError

from sales_pipeline.accounts import (
    EVENTS_COLLECTION,
    USERS_COLLECTION,
    get_registration_status,
    set_registration_status,
    toggle_registration,
)


class FakeCollection:
    """Just enough of a pymongo Collection for the registration store."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []

    def _match(self, flt: dict[str, Any]) -> dict[str, Any] | None:
        return next((d for d in self.docs if all(d.get(k) == v for k, v in flt.items())), None)

    def find_one(self, flt: dict[str, Any], projection: Any = None) -> dict[str, Any] | None:
        doc = self._match(flt)
        return dict(doc) if doc is not None else None

    def update_one(self, flt: dict[str, Any], update: dict[str, Any], upsert: bool = False) -> None:
        doc = self._match(flt)
        if doc is None:
            if not upsert:
                return
            doc = dict(flt)
            doc.update(update.get("$setOnInsert", {}))
            self.docs.append(doc)
        doc.update(update.get("$set", {}))

    def insert_one(self, doc: dict[str, Any]) -> None:
        self.docs.append(dict(doc))


class FailingCollection(FakeCollection):
    def find_one(self, flt: dict[str, Any], projection: Any = None) -> dict[str, Any] | None:
        raise PyMongoError("unreachable")


@pytest.fixture
def db() -> dict[str, FakeCollection]:
    return {USERS_COLLECTION: FakeCollection(), EVENTS_COLLECTION: FakeCollection()}


def test_first_read_bootstraps_unregistered_document(db: dict[str, FakeCollection]) -> None:
    assert get_registration_status(db, "u1") is False
    assert db[USERS_COLLECTION].docs == [{"uid": "u1", "is_registered": False}]
    assert db[EVENTS_COLLECTION].docs == []


def test_document_without_flag_reads_false(db: dict[str, FakeCollection]) -> None:
    db[USERS_COLLECTION].docs.append({"uid": "u2"})
    assert get_registration_status(db, "u2") is False


def test_toggle_records_each_transition(db: dict[str, FakeCollection]) -> None:
    assert toggle_registration(db, "u1").is_registered is True
    assert toggle_registration(db, "u1").is_registered is False
    assert get_registration_status(db, "u1") is False

    events = db[EVENTS_COLLECTION].docs
    assert [(e["previous"], e["current"]) for e in events] == [(False, True), (True, False)]
    assert all(e["uid"] == "u1" for e in events)


def test_setting_same_value_is_not_an_event(db: dict[str, FakeCollection]) -> None:
    set_registration_status(db, "u1", False)
    assert db[EVENTS_COLLECTION].docs == []


def test_store_errors_propagate() -> None:
    db = {USERS_COLLECTION: FailingCollection(), EVENTS_COLLECTION: FakeCollection()}
    with pytest.raises(PyMongoError):
        get_registration_status(db, "u1")
