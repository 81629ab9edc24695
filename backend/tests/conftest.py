# shared fixtures for backend api tests
# provides an in-memory mongo stand-in, test accounts, sample portal data, and httpx test clients

import asyncio
import copy
import re

import pytest
import pytest_asyncio
from unittest.mock import MagicMock
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from httpx import AsyncClient, ASGITransport

from avocatconnect.main import app
from avocatconnect.config import settings
from avocatconnect.services.db import Database, get_db
from avocatconnect.services.auth_service import hash_password
from avocatconnect.services.conversation_service import ConversationRepository, MessagingService
from avocatconnect.services.notification_service import NotificationEmitter
from avocatconnect.services.store import DocumentStore
from avocatconnect.dependencies import get_current_user


# test ids (fixed so tests importing conftest see the same values)
LAWYER_ID = "65f000000000000000000001"
CLIENT_ID = "65f000000000000000000002"
CLIENT_2_ID = "65f000000000000000000003"
CLIENT_3_ID = "65f000000000000000000004"
CASE_ID = "65f000000000000000000010"
CASE_CONVERSATION_ID = "65f000000000000000000020"
GENERAL_CONVERSATION_ID = "65f000000000000000000021"
APPOINTMENT_ID = "65f000000000000000000030"
INVOICE_ID = "65f000000000000000000040"
NOTIFICATION_ID = "65f000000000000000000050"

TEST_PASSWORD = "motdepasse123"
HASHED_PASSWORD = hash_password(TEST_PASSWORD)


# account documents (as they'd appear from mongodb)

LAWYER_DOC = {
    "_id": ObjectId(LAWYER_ID),
    "email": "avocat@avocatconnect.fr",
    "hashed_password": HASHED_PASSWORD,
    "name": "Maître Dupont",
    "avatar": "https://placehold.co/100x100.png?text=M",
    "title": "Avocat",
    "specialty": "Droit Général",
    "created_at": "2024-01-10T00:00:00+00:00",
}

CLIENT_DOC = {
    "_id": ObjectId(CLIENT_ID),
    "email": "jean.martin@example.com",
    "hashed_password": HASHED_PASSWORD,
    "name": "Jean Martin",
    "avatar": "https://placehold.co/100x100.png?text=J",
    "phone": "06 11 22 33 44",
    "created_at": "2024-02-01T00:00:00+00:00",
}

CLIENT_2_DOC = {
    "_id": ObjectId(CLIENT_2_ID),
    "email": "sophie.bernard@example.com",
    "hashed_password": HASHED_PASSWORD,
    "name": "Sophie Bernard",
    "avatar": "https://placehold.co/100x100.png?text=S",
    "created_at": "2024-02-05T00:00:00+00:00",
}

# no case, no conversation: shows up as a placeholder in the lawyer inbox
CLIENT_3_DOC = {
    "_id": ObjectId(CLIENT_3_ID),
    "email": "luc.petit@example.com",
    "hashed_password": HASHED_PASSWORD,
    "name": "Luc Petit",
    "avatar": "https://placehold.co/100x100.png?text=L",
    "created_at": "2024-02-09T00:00:00+00:00",
}


# sample portal data

SAMPLE_CASE = {
    "_id": ObjectId(CASE_ID),
    "case_number": "CASE-001",
    "client_id": CLIENT_ID,
    "client_name": "Jean Martin",
    "client_avatar": "https://placehold.co/100x100.png?text=J",
    "case_type": "Litige civil",
    "status": "En cours",
    "submitted_date": "2024-03-01T09:00:00+00:00",
    "last_update": "2024-03-05T09:00:00+00:00",
    "description": "Litige avec un voisin concernant une clôture.",
    "documents": [],
    "appointments": [
        {"id": APPOINTMENT_ID, "date": "2024-04-02", "time": "10:00", "notes": "", "status": "En attente"},
    ],
    "key_deadlines": [{"date": "2024-05-01", "description": "Dépôt des conclusions"}],
}

SAMPLE_CASE_CONVERSATION = {
    "_id": ObjectId(CASE_CONVERSATION_ID),
    "case_id": CASE_ID,
    "case_number": "CASE-001",
    "client_id": CLIENT_ID,
    "client_name": "Jean Martin",
    "client_avatar": "https://placehold.co/100x100.png?text=J",
    "unread_count": 1,
    "messages": [
        {
            "id": "msg-1",
            "sender_id": CLIENT_ID,
            "content": "Avez-vous reçu les photos ?",
            "timestamp": "2024-03-02T10:00:00+00:00",
            "read": False,
        },
    ],
    "created_at": "2024-03-01T09:00:00+00:00",
}

SAMPLE_GENERAL_CONVERSATION = {
    "_id": ObjectId(GENERAL_CONVERSATION_ID),
    "case_id": "",
    "case_number": "Discussion générale",
    "client_id": CLIENT_2_ID,
    "client_name": "Sophie Bernard",
    "client_avatar": "https://placehold.co/100x100.png?text=S",
    "unread_count": 2,
    "messages": [
        {
            "id": "msg-2",
            "sender_id": CLIENT_2_ID,
            "content": "Bonjour Maître.",
            "timestamp": "2024-03-03T08:00:00+00:00",
            "read": False,
        },
        {
            "id": "msg-3",
            "sender_id": CLIENT_2_ID,
            "content": "J'ai une question sur mon bail.",
            "timestamp": "2024-03-03T08:01:00+00:00",
            "read": False,
        },
    ],
    "created_at": "2024-03-03T08:00:00+00:00",
}

SAMPLE_APPOINTMENT = {
    "_id": ObjectId(APPOINTMENT_ID),
    "case_id": CASE_ID,
    "client_id": CLIENT_ID,
    "client_name": "Jean Martin",
    "date": "2024-04-02",
    "time": "10:00",
    "notes": "",
    "status": "En attente",
}

SAMPLE_INVOICE = {
    "_id": ObjectId(INVOICE_ID),
    "number": "INV-2024-001",
    "case_id": CASE_ID,
    "case_number": "CASE-001",
    "client_id": CLIENT_ID,
    "lawyer_id": LAWYER_ID,
    "date": "2024-03-10T00:00:00+00:00",
    "amount": 1200.0,
    "status": "En attente",
}

SAMPLE_NOTIFICATION = {
    "_id": ObjectId(NOTIFICATION_ID),
    "user_id": CLIENT_ID,
    "message": "Nouvelle facture INV-2024-001 de 1200.00€ pour l'affaire CASE-001.",
    "read": False,
    "date": "2024-03-10T00:00:00+00:00",
}


# in-memory motor stand-in

class AsyncCursorMock:
    """mock for motor's async cursor — supports async for and chained methods"""

    def __init__(self, data=None):
        self._data = data or []
        self._index = 0

    def sort(self, key_or_list, direction=None):
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction or 1)]
        # stable sort, least significant key first
        for key, order in reversed(keys):
            self._data = sorted(
                self._data,
                key=lambda d: d.get(key) if d.get(key) is not None else "",
                reverse=order == -1,
            )
        return self

    def skip(self, n):
        self._data = self._data[n:]
        return self

    def limit(self, n):
        if n:
            self._data = self._data[:n]
        return self

    def __aiter__(self):
        self._index = 0
        return self

    async def __anext__(self):
        if self._index >= len(self._data):
            raise StopAsyncIteration
        item = self._data[self._index]
        self._index += 1
        return item

    async def to_list(self, length=None):
        if length is not None:
            return self._data[:length]
        return self._data


class MockCollection:
    """mock for a motor collection with async methods.

    single operations yield to the event loop before touching data, so
    concurrent tasks interleave the way they would against a real server.
    unique indexes created through create_index are enforced on writes.
    """

    def __init__(self, data=None):
        self._data = [copy.deepcopy(d) for d in (data or [])]
        self._unique_indexes = []
        self.inserted = []

    def find(self, query=None, projection=None):
        results = [copy.deepcopy(d) for d in self._data if self._matches(d, query or {})]
        return AsyncCursorMock(results)

    async def find_one(self, query=None, projection=None):
        await asyncio.sleep(0)
        for doc in self._data:
            if self._matches(doc, query or {}):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, doc):
        await asyncio.sleep(0)
        doc.setdefault("_id", ObjectId())
        stored = copy.deepcopy(doc)
        self._check_unique(stored)
        self._data.append(stored)
        self.inserted.append(stored)
        result = MagicMock()
        result.inserted_id = stored["_id"]
        return result

    async def count_documents(self, query=None):
        return len([d for d in self._data if self._matches(d, query or {})])

    async def update_one(self, query, update, upsert=False):
        await asyncio.sleep(0)
        result = MagicMock()
        result.matched_count = 0
        result.modified_count = 0
        for doc in self._data:
            if self._matches(doc, query):
                self._apply(doc, update)
                result.matched_count = 1
                result.modified_count = 1
                return result
        if upsert:
            doc = {k: v for k, v in query.items() if not k.startswith("$")}
            self._apply(doc, update)
            await self.insert_one(doc)
        return result

    async def update_many(self, query, update):
        result = MagicMock()
        result.modified_count = 0
        for doc in self._data:
            if self._matches(doc, query):
                self._apply(doc, update)
                result.modified_count += 1
        result.matched_count = result.modified_count
        return result

    async def replace_one(self, query, replacement, upsert=False):
        await asyncio.sleep(0)
        result = MagicMock()
        result.matched_count = 0
        for i, doc in enumerate(self._data):
            if self._matches(doc, query):
                self._data[i] = {**copy.deepcopy(replacement), "_id": doc["_id"]}
                result.matched_count = 1
                return result
        if upsert:
            await self.insert_one({**replacement, "_id": query.get("_id", ObjectId())})
        return result

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        await asyncio.sleep(0)
        for doc in self._data:
            if self._matches(doc, query):
                before = copy.deepcopy(doc)
                self._apply(doc, update)
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before
        return None

    async def create_index(self, keys, unique=False, partialFilterExpression=None, name=None, **kwargs):
        fields = [keys] if isinstance(keys, str) else [k for k, _ in keys]
        if unique:
            self._unique_indexes.append((fields, partialFilterExpression))
        return name or "_".join(fields)

    def _check_unique(self, candidate):
        for fields, partial in self._unique_indexes:
            if partial and not self._matches(candidate, partial):
                continue
            key = tuple(candidate.get(f) for f in fields)
            for doc in self._data:
                if partial and not self._matches(doc, partial):
                    continue
                if tuple(doc.get(f) for f in fields) == key:
                    raise DuplicateKeyError(f"E11000 duplicate key error on {fields}: {key}", 11000)

    @staticmethod
    def _apply(doc, update):
        for key, val in update.get("$set", {}).items():
            doc[key] = val
        for key, val in update.get("$inc", {}).items():
            doc[key] = doc.get(key, 0) + val
        for key, val in update.get("$push", {}).items():
            doc.setdefault(key, []).append(copy.deepcopy(val))

    def _matches(self, doc, query):
        """basic mongodb query matching for tests"""
        for key, value in query.items():
            if key == "$or":
                if not any(self._matches(doc, cond) for cond in value):
                    return False
                continue
            doc_val = doc.get(key)
            if isinstance(value, dict):
                if "$in" in value and doc_val not in value["$in"]:
                    return False
                if "$gt" in value and (doc_val is None or not doc_val > value["$gt"]):
                    return False
                if "$gte" in value and (doc_val is None or doc_val < value["$gte"]):
                    return False
                if "$regex" in value:
                    flags = re.IGNORECASE if value.get("$options") == "i" else 0
                    if doc_val is None or not re.search(value["$regex"], str(doc_val), flags):
                        return False
            elif doc_val != value:
                return False
        return True


class MockDatabase(Database):
    """the real Database wired to in-memory collections, indexes included"""

    def __init__(self):
        super().__init__()
        self.db = {
            "lawyers": MockCollection([LAWYER_DOC]),
            "clients": MockCollection([CLIENT_DOC, CLIENT_2_DOC, CLIENT_3_DOC]),
            "cases": MockCollection([SAMPLE_CASE]),
            "conversations": MockCollection([SAMPLE_CASE_CONVERSATION, SAMPLE_GENERAL_CONVERSATION]),
            "appointments": MockCollection([SAMPLE_APPOINTMENT]),
            "invoices": MockCollection([SAMPLE_INVOICE]),
            "notifications": MockCollection([SAMPLE_NOTIFICATION]),
        }

    async def connect(self):
        pass

    async def close(self):
        pass


@pytest.fixture(autouse=True)
def no_configured_lawyer(monkeypatch):
    """tests start without a LAWYER_ID from the environment"""
    monkeypatch.setattr(settings, "LAWYER_ID", "")


@pytest_asyncio.fixture
async def mock_db():
    """create a fresh mock database for each test"""
    database = MockDatabase()
    await database.ensure_indexes()
    return database


@pytest.fixture
def store(mock_db):
    return DocumentStore(mock_db)


@pytest.fixture
def repository(store):
    return ConversationRepository(store, LAWYER_ID)


@pytest.fixture
def service(repository):
    return MessagingService(repository)


@pytest.fixture
def notifier(store):
    return NotificationEmitter(store)


def _account_dict(doc, role):
    """account dict as get_current_user would return it"""
    account = {k: v for k, v in doc.items() if k not in ("_id", "hashed_password")}
    account["id"] = str(doc["_id"])
    account["role"] = role
    return account


def _lawyer_dict():
    return _account_dict(LAWYER_DOC, "lawyer")


def _client_dict():
    return _account_dict(CLIENT_DOC, "client")


def _client_2_dict():
    return _account_dict(CLIENT_2_DOC, "client")


async def _client_for(mock_db, account=None):
    async def override_get_db():
        return mock_db

    app.dependency_overrides[get_db] = override_get_db
    if account is not None:
        async def override_get_current_user():
            return account()

        app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client(mock_db):
    """unauthenticated httpx async test client"""
    async with await _client_for(mock_db) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def lawyer_client(mock_db):
    """client authenticated as the lawyer"""
    async with await _client_for(mock_db, _lawyer_dict) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_client(mock_db):
    """client authenticated as Jean Martin (owner of CASE-001)"""
    async with await _client_for(mock_db, _client_dict) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_2_client(mock_db):
    """client authenticated as Sophie Bernard"""
    async with await _client_for(mock_db, _client_2_dict) as ac:
        yield ac
    app.dependency_overrides.clear()
