# clients router — client roster for the lawyer, profile edits for both roles
# a client's name and avatar are copied onto their cases and conversations,
# so a profile edit rewrites those copies after the account itself

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from avocatconnect.errors import InvalidInput, NotFound
from avocatconnect.models.user import (
    ClientProfileUpdate,
    ClientResponse,
    LawyerProfileUpdate,
    LawyerResponse,
    client_from_doc,
    lawyer_from_doc,
)
from avocatconnect.services.conversation_service import ConversationRepository
from avocatconnect.services.store import DocumentStore
from avocatconnect.dependencies import (
    get_conversation_repository,
    get_current_user,
    get_store,
    require_role,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["clients"])


@router.get("/clients", response_model=list[ClientResponse])
async def list_clients(
    current_user: dict = Depends(require_role("lawyer")),
    store: DocumentStore = Depends(get_store),
):
    """every client known to the practice, by name"""
    docs = await store.query("clients", sort=[("name", 1)])
    return [client_from_doc(d) for d in docs]


@router.get("/clients/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    if current_user.get("role") == "client" and current_user["id"] != client_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this client",
        )
    client = await store.get("clients", client_id)
    if client is None:
        raise NotFound("Client non trouvé.")
    return client_from_doc(client)


@router.put("/profile/lawyer", response_model=LawyerResponse)
async def update_lawyer_profile(
    body: LawyerProfileUpdate,
    current_user: dict = Depends(require_role("lawyer")),
    store: DocumentStore = Depends(get_store),
):
    changes = body.model_dump(exclude_none=True)
    if not changes:
        raise InvalidInput("Nothing to update")
    await store.update("lawyers", current_user["id"], changes)
    logger.info(f"Lawyer profile {current_user['id']} updated: {sorted(changes)}")
    return lawyer_from_doc({**current_user, **changes})


@router.put("/profile/client", response_model=ClientResponse)
async def update_client_profile(
    body: ClientProfileUpdate,
    current_user: dict = Depends(require_role("client")),
    store: DocumentStore = Depends(get_store),
    repository: ConversationRepository = Depends(get_conversation_repository),
):
    """update the account, then the name/avatar copies held by cases and conversations"""
    changes = body.model_dump(exclude_none=True)
    if not changes:
        raise InvalidInput("Nothing to update")
    await store.update("clients", current_user["id"], changes)
    client = {**current_user, **changes}

    if "name" in changes or "avatar" in changes:
        identity = {"client_name": client.get("name", ""), "client_avatar": client.get("avatar", "")}
        cases = await store.update_many("cases", {"client_id": client["id"]}, identity)
        conversations = await repository.refresh_client_identity(client)
        logger.info(f"Client {client['id']} identity copied to {cases} cases, {conversations} conversations")

    return client_from_doc(client)
