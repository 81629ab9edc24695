# conversations router — messaging inbox between the lawyer and clients
# lawyer sees every client (placeholders included), clients see their own threads

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from avocatconnect.errors import InvalidInput, NotFound, StoreError
from avocatconnect.models.conversation import (
    ConversationListResponse,
    ConversationResponse,
    MarkReadResponse,
    SendMessageRequest,
    SendMessageResult,
    conversation_from_doc,
)
from avocatconnect.services.conversation_service import ConversationRepository, MessagingService
from avocatconnect.services.placeholders import PendingRef, parse_conversation_ref
from avocatconnect.services.read_state import open_for_lawyer, total_unread
from avocatconnect.dependencies import (
    get_conversation_repository,
    get_current_user,
    get_messaging_service,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/conversations", tags=["conversations"])

_SEND_ERRORS = {
    NotFound.error_code: NotFound,
    InvalidInput.error_code: InvalidInput,
    StoreError.error_code: StoreError,
}


def _check_access(conversation: dict, current_user: dict) -> None:
    if current_user.get("role") == "client" and conversation.get("client_id") != current_user["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this conversation",
        )


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    current_user: dict = Depends(get_current_user),
    repository: ConversationRepository = Depends(get_conversation_repository),
):
    """lawyer: one entry per known client. client: own threads."""
    if current_user.get("role") == "lawyer":
        docs = await repository.list_for_lawyer()
    else:
        docs = await repository.list_for_client(current_user["id"])

    return ConversationListResponse(
        conversations=[conversation_from_doc(d) for d in docs],
        totalUnread=total_unread(docs),
    )


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def open_conversation(
    conversation_id: str,
    current_user: dict = Depends(get_current_user),
    repository: ConversationRepository = Depends(get_conversation_repository),
):
    """open one thread. the lawyer's view clears the unread badge locally only."""
    convo = await repository.get_conversation(conversation_id)
    _check_access(convo, current_user)

    if current_user.get("role") == "lawyer":
        convo = open_for_lawyer(convo)
    return conversation_from_doc(convo)


@router.post("/messages", response_model=SendMessageResult, response_model_exclude_none=True)
async def send_message(
    body: SendMessageRequest,
    current_user: dict = Depends(get_current_user),
    service: MessagingService = Depends(get_messaging_service),
):
    """send as the caller. a client-<id> placeholder resolves to the real thread
    and the response carries its id."""
    client_id = body.client_id
    if current_user.get("role") == "client":
        client_id = client_id or current_user["id"]
        try:
            ref = parse_conversation_ref(body.conversation_id, client_id)
        except InvalidInput as e:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
        if isinstance(ref, PendingRef) and ref.client_id != current_user["id"]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Clients can only write in their own conversations",
            )

    result = await service.send_message(
        body.conversation_id,
        body.content,
        current_user["id"],
        client_id,
    )
    if not result.success:
        error_type = _SEND_ERRORS.get(result.error_code, StoreError)
        raise error_type(result.error or "")
    return result


@router.post("/{conversation_id}/read", response_model=MarkReadResponse)
async def mark_conversation_as_read(
    conversation_id: str,
    current_user: dict = Depends(get_current_user),
    service: MessagingService = Depends(get_messaging_service),
):
    """reset the unread counter; only effective for the conversation's client"""
    read = await service.mark_conversation_as_read(conversation_id, current_user["id"])
    return MarkReadResponse(conversationId=conversation_id, read=read)
