# conversation models — messaging inbox between the lawyer and a client
# mirrors frontend lib/data.ts Conversation and Message

from typing import Optional
from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """single message inside a conversation"""
    id: str
    sender_id: str = Field(..., alias="senderId")
    content: str
    timestamp: str
    read: bool = False

    model_config = {"populate_by_name": True}


class ConversationResponse(BaseModel):
    """conversation thread, persisted or placeholder"""
    id: str
    case_id: str = Field("", alias="caseId")
    case_number: str = Field("", alias="caseNumber")
    client_id: str = Field(..., alias="clientId")
    client_name: str = Field("", alias="clientName")
    client_avatar: str = Field("", alias="clientAvatar")
    unread_count: int = Field(0, alias="unreadCount", ge=0)
    messages: list[MessageResponse] = Field(default_factory=list)
    is_placeholder: bool = Field(False, alias="isPlaceholder")

    model_config = {"populate_by_name": True}


class ConversationListResponse(BaseModel):
    """inbox listing with the badge total"""
    conversations: list[ConversationResponse]
    total_unread: int = Field(0, alias="totalUnread")

    model_config = {"populate_by_name": True}


class SendMessageRequest(BaseModel):
    """send payload — conversationId may be a stored id or a client-<id> placeholder"""
    conversation_id: Optional[str] = Field(None, alias="conversationId")
    content: str = Field(..., description="message text, must not be blank")
    client_id: Optional[str] = Field(None, alias="clientId", description="client when the lawyer starts a thread")

    model_config = {"populate_by_name": True}


class SendMessageResult(BaseModel):
    """outcome of a send; conversationId is the real id even when a placeholder was used"""
    success: bool
    message: Optional[MessageResponse] = None
    conversation_id: Optional[str] = Field(None, alias="conversationId")
    error: Optional[str] = None
    error_code: Optional[str] = Field(None, alias="errorCode")

    model_config = {"populate_by_name": True}


class MarkReadResponse(BaseModel):
    conversation_id: str = Field(..., alias="conversationId")
    read: bool

    model_config = {"populate_by_name": True}


def message_from_doc(doc: dict) -> MessageResponse:
    return MessageResponse(
        id=doc.get("id", ""),
        senderId=doc.get("sender_id", ""),
        content=doc.get("content", ""),
        timestamp=doc.get("timestamp", ""),
        read=doc.get("read", False),
    )


def conversation_from_doc(doc: dict) -> ConversationResponse:
    """convert a stored (or synthesized placeholder) conversation to response model"""
    return ConversationResponse(
        id=doc.get("id", ""),
        caseId=doc.get("case_id", ""),
        caseNumber=doc.get("case_number", ""),
        clientId=doc.get("client_id", ""),
        clientName=doc.get("client_name", ""),
        clientAvatar=doc.get("client_avatar", ""),
        unreadCount=max(0, doc.get("unread_count", 0)),
        messages=[message_from_doc(m) for m in doc.get("messages", [])],
        isPlaceholder=doc.get("is_placeholder", False),
    )
