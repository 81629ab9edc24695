# conversation service — lookup-or-create of threads and message append
#
# send pipeline:
#   1. reject blank content before touching the store
#   2. resolve the reference: stored id as-is, pending client -> general thread
#      (created on first send, unique index guards concurrent creators)
#   3. check the sender is a participant (the thread's client or the lawyer)
#   4. $push the message and $inc the unread counter in one atomic update
#   5. hand back the stored message and the real conversation id

import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId

from avocatconnect.config import settings
from avocatconnect.errors import InvalidInput, NotFound, PortalError, StoreError
from avocatconnect.models.conversation import SendMessageResult, message_from_doc
from avocatconnect.services.placeholders import (
    ConversationRef,
    PendingRef,
    merge_with_roster,
    parse_conversation_ref,
)
from avocatconnect.services.read_state import can_mark_read, unread_increment
from avocatconnect.services.store import DocumentStore

logger = logging.getLogger(__name__)

GENERAL_CASE_NUMBER = "Discussion générale"


def _new_conversation(client: dict, case_id: str = "", case_number: str = GENERAL_CASE_NUMBER) -> dict:
    return {
        "case_id": case_id,
        "case_number": case_number,
        "client_id": client["id"],
        "client_name": client.get("name", ""),
        "client_avatar": client.get("avatar", ""),
        "unread_count": 0,
        "messages": [],
        "created_at": datetime.now(timezone.utc).isoformat(),
    }


class ConversationRepository:
    """owns which conversation a send/read applies to and how messages are appended.

    the lawyer is an explicit dependency: every thread is between one client and
    this lawyer id.
    """

    def __init__(self, store: DocumentStore, lawyer_id: str):
        self._store = store
        self._lawyer_id = lawyer_id

    @property
    def lawyer_id(self) -> str:
        return self._lawyer_id

    async def get_conversation(self, conversation_id: str) -> dict:
        convo = await self._store.get("conversations", conversation_id)
        if convo is None:
            raise NotFound("Conversation not found")
        return convo

    async def get_or_create_general_conversation(self, client_id: str) -> dict:
        """the client's thread with no case attached, created on first need"""
        client = await self._store.get("clients", client_id)
        if client is None:
            raise NotFound("Client not found.")

        convo, created = await self._store.find_or_create(
            "conversations",
            {"client_id": client["id"], "case_id": ""},
            _new_conversation(client),
        )
        if created:
            logger.info(f"General conversation {convo['id']} created for client {client_id}")
        return convo

    async def create_case_conversation(self, case: dict) -> dict:
        """empty thread for a new case. a retry for the same case is a no-op."""
        client = {
            "id": case["client_id"],
            "name": case.get("client_name", ""),
            "avatar": case.get("client_avatar", ""),
        }
        convo, created = await self._store.find_or_create(
            "conversations",
            {"client_id": case["client_id"], "case_id": case["id"]},
            _new_conversation(client, case_id=case["id"], case_number=case.get("case_number", "")),
        )
        if created:
            logger.info(f"Conversation {convo['id']} created for case {case.get('case_number', case['id'])}")
        else:
            logger.info(f"Conversation for case {case['id']} already exists, skipping")
        return convo

    async def resolve(self, ref: ConversationRef) -> dict:
        if isinstance(ref, PendingRef):
            return await self.get_or_create_general_conversation(ref.client_id)
        return await self.get_conversation(ref.conversation_id)

    async def send_message(self, ref: ConversationRef, sender_id: str, content: str) -> tuple[dict, str]:
        """append a message, returns (stored message, resolved conversation id)"""
        text = (content or "").strip()
        if not text:
            raise InvalidInput("Message content cannot be empty")
        if len(text) > settings.MESSAGE_MAX_LENGTH:
            raise InvalidInput(f"Message exceeds {settings.MESSAGE_MAX_LENGTH} characters")
        if not sender_id:
            raise InvalidInput("Sender is required")

        # a pending thread is created on resolve, so reject outsiders first
        if isinstance(ref, PendingRef) and sender_id not in (ref.client_id, self._lawyer_id):
            raise InvalidInput("Sender is not a participant of this conversation")

        convo = await self.resolve(ref)
        if sender_id not in (convo.get("client_id"), self._lawyer_id):
            raise InvalidInput("Sender is not a participant of this conversation")

        message = {
            "id": f"msg-{ObjectId()}",
            "sender_id": sender_id,
            "content": text,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "read": False,
        }
        operators: dict = {"$push": {"messages": message}}
        increment = unread_increment(convo, sender_id)
        if increment:
            operators["$inc"] = {"unread_count": increment}

        updated = await self._store.apply("conversations", convo["id"], operators)
        if updated is None:
            raise NotFound("Conversation not found")

        logger.info(
            f"Message {message['id']} appended to {convo['id']} "
            f"(sender={sender_id}, unread={updated.get('unread_count', 0)})"
        )
        return message, convo["id"]

    async def list_for_lawyer(self) -> list[dict]:
        """every known client, with a placeholder where no thread exists yet"""
        clients = await self._store.query("clients", sort=[("name", 1)])
        conversations = await self._store.query("conversations")
        return merge_with_roster(clients, conversations)

    async def list_for_client(self, client_id: str) -> list[dict]:
        if not client_id:
            return []
        return await self._store.query("conversations", {"client_id": client_id})

    async def mark_conversation_as_read(self, conversation_id: str, acting_user_id: str) -> bool:
        """reset the counter when the thread's client reads it, false for anyone else"""
        try:
            convo = await self._store.get("conversations", conversation_id)
            if convo is None or not can_mark_read(convo, acting_user_id):
                return False
            await self._store.update("conversations", conversation_id, {"unread_count": 0})
            return True
        except StoreError as e:
            logger.error(f"Error marking conversation {conversation_id} as read: {e}")
            return False

    async def refresh_client_identity(self, client: dict) -> int:
        """rewrite the denormalized client name/avatar on all of a client's threads"""
        return await self._store.update_many(
            "conversations",
            {"client_id": client["id"]},
            {"client_name": client.get("name", ""), "client_avatar": client.get("avatar", "")},
        )


class MessagingService:
    """ui-facing wrapper: every call returns an explicit result instead of raising"""

    def __init__(self, repository: ConversationRepository):
        self._repo = repository

    async def send_message(
        self,
        conversation_id: Optional[str],
        content: str,
        sender_id: str,
        client_id: Optional[str] = None,
    ) -> SendMessageResult:
        try:
            ref = parse_conversation_ref(conversation_id, client_id)
            message, resolved_id = await self._repo.send_message(ref, sender_id, content)
        except PortalError as e:
            if isinstance(e, StoreError):
                logger.error(f"Send failed for {conversation_id}: {e}")
            else:
                logger.info(f"Send rejected for {conversation_id}: {e}")
            return SendMessageResult(success=False, error=e.message, errorCode=e.error_code)

        return SendMessageResult(
            success=True,
            message=message_from_doc(message),
            conversationId=resolved_id,
        )

    async def mark_conversation_as_read(self, conversation_id: str, acting_user_id: str) -> bool:
        return await self._repo.mark_conversation_as_read(conversation_id, acting_user_id)
