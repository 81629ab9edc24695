# async mongodb client for the backend api
# uses motor for non-blocking operations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from avocatconnect.config import settings

logger = logging.getLogger(__name__)


class Database:
    """async mongodb connection manager"""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        """establish connection to mongodb"""
        if self.client is not None:
            return

        logger.info(f"Connecting to MongoDB database: {settings.MONGODB_DATABASE}")
        self.client = AsyncIOMotorClient(settings.MONGODB_URI)
        self.db = self.client[settings.MONGODB_DATABASE]

        # verify connection
        await self.client.admin.command("ping")
        logger.info("MongoDB connection established")

    async def close(self):
        """close mongodb connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed")

    async def ensure_indexes(self):
        """create the indexes the portal relies on for uniqueness and ordering"""
        # one general thread per client, one thread per case
        await self.conversations.create_index(
            [("client_id", ASCENDING), ("case_id", ASCENDING)],
            unique=True,
            name="client_case_unique",
        )
        await self.conversations.create_index(
            "case_id",
            unique=True,
            partialFilterExpression={"case_id": {"$gt": ""}},
            name="case_conversation_unique",
        )
        await self.lawyers.create_index("email", unique=True)
        await self.clients.create_index("email", unique=True)
        await self.cases.create_index([("client_id", ASCENDING), ("submitted_date", DESCENDING)])
        await self.appointments.create_index("case_id")
        await self.invoices.create_index("client_id")
        await self.notifications.create_index([("user_id", ASCENDING), ("date", DESCENDING)])
        logger.info("MongoDB indexes ensured")

    # collection accessors

    @property
    def lawyers(self):
        return self.db["lawyers"]

    @property
    def clients(self):
        return self.db["clients"]

    @property
    def cases(self):
        return self.db["cases"]

    @property
    def conversations(self):
        return self.db["conversations"]

    @property
    def appointments(self):
        return self.db["appointments"]

    @property
    def invoices(self):
        return self.db["invoices"]

    @property
    def notifications(self):
        return self.db["notifications"]


# singleton instance
db = Database()


async def get_db() -> Database:
    """dependency injection for database access"""
    return db
