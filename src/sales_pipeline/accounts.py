"""Registration flag storage.

Each account (identified by the opaque uid its identity provider issues) has
one document in the `users` collection holding a boolean `is_registered`.
Every change of the flag is also appended to `registration_events`, so
register / unregister transitions can be audited later.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pymongo.errors import PyMongoError

from sales_pipeline.models import RegistrationStatus

log = logging.getLogger(__name__)

USERS_COLLECTION = "users"
EVENTS_COLLECTION = "registration_events"


def get_registration_status(db: Any, uid: str) -> bool:
    """Return the account's registration flag, creating the document if absent.

    Args:
        db: PyMongo Database (or anything indexable by collection name).
        uid: Account identifier.

    Returns:
        The stored flag; False for a freshly bootstrapped account.

    Raises:
        PyMongoError: if the document store is unreachable.
    """
    users = db[USERS_COLLECTION]
    try:
        doc = users.find_one({"uid": uid}, {"_id": 0})
        if doc is None:
            users.update_one(
                {"uid": uid},
                {"$setOnInsert": {"uid": uid, "is_registered": False}},
                upsert=True,
            )
            log.info("Created account document for uid=%s", uid)
            return False
    except PyMongoError:
        log.exception("Failed to read registration status for uid=%s", uid)
        raise

    return RegistrationStatus.model_validate({"uid": uid, **doc}).is_registered


def set_registration_status(db: Any, uid: str, is_registered: bool) -> RegistrationStatus:
    """Store `is_registered` for `uid`, recording an event when it changes."""
    previous = get_registration_status(db, uid)
    status = RegistrationStatus(uid=uid, is_registered=is_registered)
    if previous == is_registered:
        return status

    try:
        db[USERS_COLLECTION].update_one(
            {"uid": uid},
            {"$set": status.model_dump()},
            upsert=True,
        )
        db[EVENTS_COLLECTION].insert_one(
            {
                "uid": uid,
                "previous": previous,
                "current": is_registered,
                "changed_at": datetime.now(timezone.utc),
            }
        )
    except PyMongoError:
        log.exception("Failed to update registration status for uid=%s", uid)
        raise

    log.info("uid=%s registration %s -> %s", uid, previous, is_registered)
    return status


def toggle_registration(db: Any, uid: str) -> RegistrationStatus:
    """Flip the registration flag (register ↔ unregister)."""
    return set_registration_status(db, uid, not get_registration_status(db, uid))
