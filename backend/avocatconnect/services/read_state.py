# unread / read-state tracking
# a conversation carries one counter: client messages the lawyer has not seen yet.
# both sides read it through their own lens, only the client can reset it remotely.


def unread_increment(conversation: dict, sender_id: str) -> int:
    """how much a new message moves the counter: +1 for the client, 0 for the lawyer"""
    return 1 if sender_id == conversation.get("client_id") else 0


def open_for_lawyer(conversation: dict) -> dict:
    """optimistic local view when the lawyer opens a thread.
    no store write: the inbox list stays the source of truth on next refresh."""
    opened = dict(conversation)
    opened["unread_count"] = 0
    return opened


def can_mark_read(conversation: dict, acting_user_id: str) -> bool:
    """the remote reset is identity-gated on the conversation's client"""
    return bool(acting_user_id) and acting_user_id == conversation.get("client_id")


def total_unread(conversations: list[dict]) -> int:
    """badge count for an inbox"""
    return sum(max(0, c.get("unread_count", 0)) for c in conversations)
