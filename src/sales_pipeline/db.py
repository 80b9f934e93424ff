"""MongoDB helpers.

Centralizes creation of Mongo clients for the account document store.
"""

from __future__ import annotations

from typing import Any

import certifi
from pymongo import MongoClient
from pymongo.database import Database


def get_client(uri: str) -> MongoClient[dict[str, Any]]:
    """Return a configured PyMongo MongoClient for the provided URI.

    TLS with the certifi CA bundle is enabled for `mongodb+srv://` URIs
    (hosted clusters); plain `mongodb://` URIs connect as given.

    Args:
        uri: MongoDB connection URI.

    Returns:
        Configured MongoClient instance.
    """
    options: dict[str, Any] = {
        "serverSelectionTimeoutMS": 30000,
        "socketTimeoutMS": 30000,
        "connectTimeoutMS": 30000,
    }
    if uri.startswith("mongodb+srv://"):
        options.update(tls=True, tlsCAFile=certifi.where())
    return MongoClient(uri, **options)


def get_db(
    client: MongoClient[dict[str, Any]],
    db_name: str,
) -> Database[dict[str, Any]]:
    """Return the named Database instance from a MongoClient.

    Args:
        client: PyMongo MongoClient.
        db_name: Database name.

    Returns:
        A Database object.
    """
    return client[db_name]
