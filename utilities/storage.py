import json
import logging
import re
from collections.abc import MutableMapping

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from utilities.errors import StorageError

logger = logging.getLogger(__name__)


# --- BASE ADAPTER ---

class KeyValueStore:
    """
    String-keyed store with a localStorage-like string API and JSON helpers on top.
    Backends only implement get_item, set_item, remove_item and keys.
    """

    def get_item(self, key: str) -> str | None:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def keys(self, prefix: str = "") -> list[str]:
        raise NotImplementedError

    # JSON helpers

    def get_json(self, key: str):
        """Returns the decoded value, or None if the key is missing or the payload is corrupt."""
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Discarding corrupt value under '%s'", key)
            return None

    def set_json(self, key: str, value) -> None:
        # allow_nan=False keeps payloads strict JSON
        self.set_item(key, json.dumps(value, allow_nan=False))

    def delete(self, key: str) -> None:
        self.remove_item(key)


# --- BACKENDS ---

class MemoryStore(KeyValueStore):
    """
    Keeps values in a mutable mapping. Pass st.session_state to scope the store
    to one browser session, or leave empty for a process-local dict.
    """

    def __init__(self, mapping: MutableMapping | None = None, namespace: str = "_kv"):
        self._mapping = {} if mapping is None else mapping
        self._namespace = namespace
        if self._namespace not in self._mapping:
            self._mapping[self._namespace] = {}

    @property
    def _data(self) -> dict:
        return self._mapping[self._namespace]

    def get_item(self, key):
        return self._data.get(key)

    def set_item(self, key, value):
        if not isinstance(value, str):
            raise TypeError(f"Store values must be strings, got {type(value).__name__}")
        self._data[key] = value

    def remove_item(self, key):
        self._data.pop(key, None)

    def keys(self, prefix=""):
        return [k for k in self._data if k.startswith(prefix)]


class BrowserStore(MemoryStore):
    """
    A session-cached store mirrored into the page's query parameters
    (st.query_params in the app), so values outlive a reload like localStorage entries.
    """

    def __init__(self, session: MutableMapping, query_params: MutableMapping, namespace: str = "_browser"):
        super().__init__(session, namespace)
        self._params = query_params

    def get_item(self, key):
        value = super().get_item(key)
        if value is None and self._params.get(key) is not None:
            value = str(self._params.get(key))
            super().set_item(key, value)
        return value

    def set_item(self, key, value):
        super().set_item(key, value)
        self._params[key] = value

    def remove_item(self, key):
        super().remove_item(key)
        self._params.pop(key, None)


class MongoStore(KeyValueStore):
    """One document per key: {"_id": key, "value": "<json string>"}."""

    def __init__(self, collection, client=None):
        self._collection = collection
        self._client = client

    @classmethod
    def from_settings(cls, settings) -> "MongoStore":
        client = MongoClient(settings.mongodb_uri)
        collection = client[settings.mongodb_database][settings.mongodb_collection]
        logger.info(
            "Using MongoDB store %s.%s", settings.mongodb_database, settings.mongodb_collection
        )
        return cls(collection, client=client)

    def get_item(self, key):
        try:
            doc = self._collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to read '{key}' from MongoDB: {e}") from e
        return None if doc is None else doc.get("value")

    def set_item(self, key, value):
        if not isinstance(value, str):
            raise TypeError(f"Store values must be strings, got {type(value).__name__}")
        try:
            self._collection.update_one({"_id": key}, {"$set": {"value": value}}, upsert=True)
        except PyMongoError as e:
            raise StorageError(f"Failed to write '{key}' to MongoDB: {e}") from e

    def remove_item(self, key):
        try:
            self._collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to delete '{key}' from MongoDB: {e}") from e

    def keys(self, prefix=""):
        query = {"_id": {"$regex": "^" + re.escape(prefix)}} if prefix else {}
        try:
            return [doc["_id"] for doc in self._collection.find(query, {"_id": 1})]
        except PyMongoError as e:
            raise StorageError(f"Failed to list keys from MongoDB: {e}") from e


def build_store(settings, mapping=None) -> KeyValueStore:
    """Picks the backend named by settings.store_backend."""
    if settings.store_backend == "mongodb":
        return MongoStore.from_settings(settings)
    return MemoryStore(mapping)
