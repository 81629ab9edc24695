# placeholder reconciliation — one inbox entry per known client before any message exists
# placeholders are display-only; they become real conversations on first send

from dataclasses import dataclass
from typing import Optional, Union

from avocatconnect.errors import InvalidInput

# wire form of a pending conversation id: "client-<clientId>"
PLACEHOLDER_PREFIX = "client-"
PLACEHOLDER_CASE_NUMBER = "N/A"


@dataclass(frozen=True)
class PersistedRef:
    """a conversation that already exists in the store"""
    conversation_id: str


@dataclass(frozen=True)
class PendingRef:
    """the general thread of a client that may not exist yet"""
    client_id: str


ConversationRef = Union[PersistedRef, PendingRef]


def placeholder_id(client_id: str) -> str:
    return f"{PLACEHOLDER_PREFIX}{client_id}"


def is_placeholder_id(conversation_id: str) -> bool:
    return conversation_id.startswith(PLACEHOLDER_PREFIX)


def parse_conversation_ref(raw: Optional[str], client_id: Optional[str] = None) -> ConversationRef:
    """turn the id sent by a caller into an explicit reference.

    accepts a stored conversation id, a "client-<id>" placeholder, or no id at
    all plus the client the lawyer wants to start a thread with.
    """
    raw = (raw or "").strip()

    if not raw:
        if not client_id:
            raise InvalidInput("Client ID is required to start a new conversation.")
        return PendingRef(client_id=client_id)

    if is_placeholder_id(raw):
        pending_client = raw[len(PLACEHOLDER_PREFIX):]
        if not pending_client:
            raise InvalidInput("Placeholder conversation id is missing its client.")
        if client_id and client_id != pending_client:
            raise InvalidInput("Placeholder conversation does not belong to this client.")
        return PendingRef(client_id=pending_client)

    return PersistedRef(conversation_id=raw)


def placeholder_for(client: dict) -> dict:
    """synthesize the inbox entry for a client with no persisted conversation"""
    return {
        "id": placeholder_id(client["id"]),
        "case_id": "",
        "case_number": PLACEHOLDER_CASE_NUMBER,
        "client_id": client["id"],
        "client_name": client.get("name", ""),
        "client_avatar": client.get("avatar", ""),
        "unread_count": 0,
        "messages": [],
        "is_placeholder": True,
    }


def merge_with_roster(clients: list[dict], conversations: list[dict]) -> list[dict]:
    """build the lawyer inbox: roster order, each client's persisted threads or a placeholder.

    conversations whose client is no longer in the roster are kept at the end
    so nothing already exchanged disappears from the inbox.
    """
    by_client: dict[str, list[dict]] = {}
    for convo in conversations:
        by_client.setdefault(convo.get("client_id", ""), []).append(convo)

    merged = []
    for client in clients:
        existing = by_client.pop(client["id"], None)
        if existing:
            merged.extend(existing)
        else:
            merged.append(placeholder_for(client))

    for orphans in by_client.values():
        merged.extend(orphans)

    return merged


def reconcile_placeholder(entries: list[dict], pending_id: str, conversation: dict) -> list[dict]:
    """re-point a placeholder entry at its persisted conversation, keeping list position"""
    reconciled = []
    for entry in entries:
        if entry.get("id") == pending_id:
            reconciled.append(conversation)
        elif entry.get("id") == conversation.get("id"):
            # already present elsewhere (refreshed inbox), keep only the re-pointed slot
            continue
        else:
            reconciled.append(entry)
    return reconciled
