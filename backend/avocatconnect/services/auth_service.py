# auth service — session tokens and password hashing for lawyers and clients
# a session token carries the account id (sub) and its role (lawyer | client)

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from avocatconnect.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ROLES = ("lawyer", "client")


def collection_for_role(role: str) -> str:
    """lawyer accounts and client accounts live in separate collections"""
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")
    return "lawyers" if role == "lawyer" else "clients"


def hash_password(password: str) -> str:
    """hash a plaintext password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """verify a plaintext password against a bcrypt hash"""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_session_token(user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """create a jwt session token for an account"""
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": user_id, "role": role, "exp": expire, "type": "session"}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """decode and validate a jwt token, returns payload or none"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError as e:
        logger.warning(f"Token decode failed: {e}")
        return None
