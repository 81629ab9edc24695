# auth router — register, login, and current account
# lawyers and clients authenticate the same way; the role picks the collection

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from avocatconnect.models.user import (
    LoginRequest,
    RegisterRequest,
    SessionResponse,
    client_from_doc,
    default_avatar,
    lawyer_from_doc,
)
from avocatconnect.services.auth_service import (
    collection_for_role,
    create_session_token,
    hash_password,
    verify_password,
)
from avocatconnect.services.store import DocumentStore
from avocatconnect.dependencies import get_current_user, get_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, store: DocumentStore = Depends(get_store)):
    """create a lawyer or client account and open a session"""
    collection = collection_for_role(body.role)
    email = body.email.strip().lower()

    existing = await store.query(collection, {"email": email}, limit=1)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cet email est déjà utilisé pour ce rôle.",
        )

    doc = {
        "name": body.name.strip(),
        "email": email,
        "avatar": default_avatar(body.name.strip()),
        "hashed_password": hash_password(body.password),
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    if body.role == "lawyer":
        doc.update({"title": "Avocat", "specialty": "Droit Général"})

    user_id = await store.create(collection, doc)
    logger.info(f"Registered {body.role} account {user_id}")

    return SessionResponse(
        accessToken=create_session_token(user_id, body.role),
        role=body.role,
        userId=user_id,
    )


@router.post("/login", response_model=SessionResponse)
async def login(body: LoginRequest, store: DocumentStore = Depends(get_store)):
    """password login for either role"""
    collection = collection_for_role(body.role)
    matches = await store.query(collection, {"email": body.email.strip().lower()}, limit=1)

    if not matches or not verify_password(body.password, matches[0].get("hashed_password", "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Aucun compte trouvé pour l'email {body.email} avec le rôle {body.role}.",
        )

    user = matches[0]
    logger.info(f"Login: {body.role} {user['id']}")
    return SessionResponse(
        accessToken=create_session_token(user["id"], body.role),
        role=body.role,
        userId=user["id"],
    )


@router.get("/me")
async def me(current_user: dict = Depends(get_current_user)):
    """the authenticated account with its role"""
    if current_user.get("role") == "lawyer":
        profile = lawyer_from_doc(current_user).model_dump()
    else:
        profile = client_from_doc(current_user).model_dump()
    return {"role": current_user.get("role"), "profile": profile}
