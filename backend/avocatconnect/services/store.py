# document store adapter — narrow crud + query interface over the mongodb collections
# every pymongo failure surfaces as StoreError; ids are plain strings outside this module

import logging
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from avocatconnect.errors import StoreError
from avocatconnect.services.db import Database

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "lawyers",
    "clients",
    "cases",
    "conversations",
    "appointments",
    "invoices",
    "notifications",
)


def to_object_id(doc_id: str) -> Optional[ObjectId]:
    """parse a string id, returns none when it is not a valid objectid"""
    if isinstance(doc_id, ObjectId):
        return doc_id
    if not doc_id:
        return None
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return None


def normalize(doc: Optional[dict]) -> Optional[dict]:
    """replace mongo's _id with a string id"""
    if doc is None:
        return None
    out = {k: v for k, v in doc.items() if k != "_id"}
    out["id"] = str(doc["_id"])
    return out


class DocumentStore:
    """get / query / create / update / set over the portal collections.

    single-document atomicity is the only guarantee; there are no transactions.
    find_or_create and apply are the two primitives the messaging core needs
    to stay consistent under concurrent sessions.
    """

    def __init__(self, db: Database):
        self._db = db

    def _collection(self, name: str):
        if name not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {name}")
        return getattr(self._db, name)

    async def get(self, collection: str, doc_id: str) -> Optional[dict]:
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        try:
            doc = await self._collection(collection).find_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Store get failed ({collection}/{doc_id}): {e}")
            raise StoreError(f"Could not read {collection}") from e
        return normalize(doc)

    async def query(
        self,
        collection: str,
        filter: Optional[dict] = None,
        sort: Optional[list[tuple[str, int]]] = None,
        limit: int = 0,
    ) -> list[dict]:
        try:
            cursor = self._collection(collection).find(filter or {})
            if sort:
                cursor = cursor.sort(sort)
            if limit:
                cursor = cursor.limit(limit)
            results = []
            async for doc in cursor:
                results.append(normalize(doc))
        except PyMongoError as e:
            logger.error(f"Store query failed ({collection} {filter}): {e}")
            raise StoreError(f"Could not query {collection}") from e
        return results

    async def count(self, collection: str, filter: Optional[dict] = None) -> int:
        try:
            return await self._collection(collection).count_documents(filter or {})
        except PyMongoError as e:
            logger.error(f"Store count failed ({collection}): {e}")
            raise StoreError(f"Could not count {collection}") from e

    async def create(self, collection: str, data: dict) -> str:
        doc = dict(data)
        try:
            result = await self._collection(collection).insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Store create failed ({collection}): {e}")
            raise StoreError(f"Could not create {collection} record") from e
        return str(result.inserted_id)

    async def update(self, collection: str, doc_id: str, partial: dict) -> bool:
        """$set the given fields, returns false when the document does not exist"""
        oid = to_object_id(doc_id)
        if oid is None:
            return False
        try:
            result = await self._collection(collection).update_one({"_id": oid}, {"$set": partial})
        except PyMongoError as e:
            logger.error(f"Store update failed ({collection}/{doc_id}): {e}")
            raise StoreError(f"Could not update {collection}") from e
        return result.matched_count > 0

    async def update_many(self, collection: str, filter: dict, partial: dict) -> int:
        try:
            result = await self._collection(collection).update_many(filter, {"$set": partial})
        except PyMongoError as e:
            logger.error(f"Store update_many failed ({collection} {filter}): {e}")
            raise StoreError(f"Could not update {collection}") from e
        return result.modified_count

    async def set(self, collection: str, doc_id: str, data: dict, merge: bool = False) -> None:
        """write a whole document (or merge fields into it), creating it if missing"""
        oid = to_object_id(doc_id)
        if oid is None:
            raise StoreError(f"Invalid id for {collection}: {doc_id}")
        coll = self._collection(collection)
        try:
            if merge:
                await coll.update_one({"_id": oid}, {"$set": data}, upsert=True)
            else:
                await coll.replace_one({"_id": oid}, data, upsert=True)
        except PyMongoError as e:
            logger.error(f"Store set failed ({collection}/{doc_id}): {e}")
            raise StoreError(f"Could not write {collection}") from e

    async def apply(self, collection: str, doc_id: str, operators: dict) -> Optional[dict]:
        """atomic single-document update ($push, $inc, $set), returns the post-image"""
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        try:
            doc = await self._collection(collection).find_one_and_update(
                {"_id": oid},
                operators,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Store apply failed ({collection}/{doc_id}): {e}")
            raise StoreError(f"Could not update {collection}") from e
        return normalize(doc)

    async def find_or_create(self, collection: str, key: dict, defaults: dict) -> tuple[dict, bool]:
        """return the document matching key, inserting key+defaults if none exists.

        relies on a unique index over the key fields: when two callers race past
        the initial lookup, the loser's insert raises DuplicateKeyError and it
        re-reads the winner's document instead of creating a second one.
        """
        coll = self._collection(collection)
        try:
            existing = await coll.find_one(key)
            if existing:
                return normalize(existing), False

            doc = {**defaults, **key}
            try:
                result = await coll.insert_one(doc)
            except DuplicateKeyError:
                logger.info(f"Concurrent create on {collection} {key}, reusing existing record")
                winner = await coll.find_one(key)
                if winner is None:
                    raise StoreError(f"Conflicting {collection} record vanished")
                return normalize(winner), False

            doc["_id"] = result.inserted_id
            return normalize(doc), True
        except PyMongoError as e:
            logger.error(f"Store find_or_create failed ({collection} {key}): {e}")
            raise StoreError(f"Could not create {collection} record") from e
