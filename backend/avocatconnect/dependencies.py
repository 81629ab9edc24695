# fastapi dependency injection
# provides the current account, role checks, and the wired-up portal services

import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from avocatconnect.config import settings
from avocatconnect.services.auth_service import collection_for_role, decode_token, ROLES
from avocatconnect.services.conversation_service import ConversationRepository, MessagingService
from avocatconnect.services.db import Database, get_db
from avocatconnect.services.notification_service import NotificationEmitter
from avocatconnect.services.store import DocumentStore

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_store(db: Database = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    store: DocumentStore = Depends(get_store),
) -> dict:
    """extract and validate the current account from the jwt bearer token"""
    payload = decode_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in ROLES:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing subject or role",
        )

    user = await store.get(collection_for_role(role), user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    user.pop("hashed_password", None)
    user["role"] = role
    return user


def require_role(role: str):
    """factory for role-based access control dependency"""

    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        if current_user.get("role") != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {role}",
            )
        return current_user

    return role_checker


def get_lawyer_id(current_user: dict = Depends(get_current_user)) -> str:
    """the lawyer side of every conversation: the configured account, else the caller"""
    if settings.LAWYER_ID:
        return settings.LAWYER_ID
    if current_user.get("role") == "lawyer":
        return current_user["id"]
    return ""


async def get_conversation_repository(
    store: DocumentStore = Depends(get_store),
    lawyer_id: str = Depends(get_lawyer_id),
) -> ConversationRepository:
    return ConversationRepository(store, lawyer_id)


async def get_messaging_service(
    repository: ConversationRepository = Depends(get_conversation_repository),
) -> MessagingService:
    return MessagingService(repository)


async def get_notifier(store: DocumentStore = Depends(get_store)) -> NotificationEmitter:
    return NotificationEmitter(store)
