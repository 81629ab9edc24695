# cases router — open, list, and progress legal cases
# every new case gets its own (empty) conversation; closing a case notifies the client

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from avocatconnect.errors import NotFound
from avocatconnect.models.case import (
    CLOSED_STATUS,
    CaseDocumentModel,
    CaseResponse,
    CaseStatusUpdate,
    ClientCaseCreate,
    CostEstimate,
    LawyerCaseCreate,
    case_from_doc,
)
from avocatconnect.models.user import default_avatar
from avocatconnect.services import ai_service
from avocatconnect.services.conversation_service import ConversationRepository
from avocatconnect.services.notification_service import NotificationEmitter, case_closed_message
from avocatconnect.services.store import DocumentStore
from avocatconnect.dependencies import (
    get_conversation_repository,
    get_current_user,
    get_notifier,
    get_store,
    require_role,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/cases", tags=["cases"])


async def _next_case_number(store: DocumentStore) -> str:
    count = await store.count("cases")
    return f"CASE-{count + 1:03d}"


async def _create_case(
    store: DocumentStore,
    repository: ConversationRepository,
    client: dict,
    case_type: str,
    description: str,
    estimate: Optional[CostEstimate] = None,
) -> dict:
    """persist a case and its conversation"""
    now = datetime.now(timezone.utc).isoformat()
    doc = {
        "case_number": await _next_case_number(store),
        "client_id": client["id"],
        "client_name": client.get("name", ""),
        "client_avatar": client.get("avatar", ""),
        "case_type": case_type,
        "status": "Nouveau",
        "submitted_date": now,
        "last_update": now,
        "description": description,
        "documents": [],
        "appointments": [],
        "key_deadlines": [],
    }
    if estimate is not None:
        doc["estimate"] = estimate.model_dump()

    case_id = await store.create("cases", doc)
    case = await store.get("cases", case_id)
    if case is None:
        raise NotFound("Affaire non trouvée.")

    await repository.create_case_conversation(case)
    logger.info(f"Case {case['case_number']} ({case_id}) opened for client {client['id']}")
    return case


async def _load_case(store: DocumentStore, case_id: str, current_user: dict) -> dict:
    case = await store.get("cases", case_id)
    if case is None:
        raise NotFound("Affaire non trouvée.")
    if current_user.get("role") == "client" and case.get("client_id") != current_user["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this case",
        )
    return case


@router.get("", response_model=list[CaseResponse])
async def list_cases(
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """lawyer sees every case, clients their own. newest first."""
    query = {} if current_user.get("role") == "lawyer" else {"client_id": current_user["id"]}
    docs = await store.query("cases", query, sort=[("submitted_date", -1)])
    return [case_from_doc(d) for d in docs]


@router.get("/{case_id}", response_model=CaseResponse)
async def get_case(
    case_id: str,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    return case_from_doc(await _load_case(store, case_id, current_user))


@router.post("", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
async def create_case_for_client(
    body: LawyerCaseCreate,
    current_user: dict = Depends(require_role("lawyer")),
    store: DocumentStore = Depends(get_store),
    repository: ConversationRepository = Depends(get_conversation_repository),
):
    """lawyer opens a case; an unknown client name creates the client"""
    name = body.client_name.strip()
    matches = await store.query("clients", {"name": name}, limit=1)
    if matches:
        client = matches[0]
    else:
        client_doc = {
            "name": name,
            "email": f"{'.'.join(name.lower().split())}@example.com",
            "avatar": default_avatar(name),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        client_id = await store.create("clients", client_doc)
        client = {**client_doc, "id": client_id}
        logger.info(f"Client {name} created while opening a case ({client_id})")

    case = await _create_case(store, repository, client, body.case_type, body.description)
    return case_from_doc(case)


@router.post("/mine", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
async def create_own_case(
    body: ClientCaseCreate,
    current_user: dict = Depends(require_role("client")),
    store: DocumentStore = Depends(get_store),
    repository: ConversationRepository = Depends(get_conversation_repository),
):
    """client submits a case; an ai cost estimate is attached when available"""
    estimate = None
    try:
        estimate = await ai_service.estimate_case_cost(body.case_type, body.description)
    except Exception as e:
        logger.warning(f"AI cost estimation failed, proceeding without it: {e}")

    case = await _create_case(store, repository, current_user, body.case_type, body.description, estimate)
    return case_from_doc(case)


@router.patch("/{case_id}/status", response_model=CaseResponse)
async def update_case_status(
    case_id: str,
    body: CaseStatusUpdate,
    current_user: dict = Depends(require_role("lawyer")),
    store: DocumentStore = Depends(get_store),
    notifier: NotificationEmitter = Depends(get_notifier),
):
    """move a case through its statuses; closing it notifies the client"""
    case = await _load_case(store, case_id, current_user)
    await store.update("cases", case_id, {
        "status": body.status,
        "last_update": datetime.now(timezone.utc).isoformat(),
    })
    logger.info(f"Case {case.get('case_number')} status -> {body.status}")

    if body.status == CLOSED_STATUS and case.get("status") != CLOSED_STATUS:
        await notifier.notify(case.get("client_id"), case_closed_message(case))

    return case_from_doc(await _load_case(store, case_id, current_user))


@router.post("/{case_id}/documents", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
async def add_document(
    case_id: str,
    body: CaseDocumentModel,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """attach an already-uploaded document to a case"""
    await _load_case(store, case_id, current_user)
    updated = await store.apply("cases", case_id, {
        "$push": {"documents": body.model_dump(exclude_none=True)},
        "$set": {"last_update": datetime.now(timezone.utc).isoformat()},
    })
    if updated is None:
        raise NotFound("Affaire non trouvée.")
    return case_from_doc(updated)
