# user models — auth, lawyer, and client schemas
# mirrors frontend lib/data.ts Lawyer and Client

from typing import Optional, Literal
from pydantic import BaseModel, Field


# auth

class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, description="account email, unique per role")
    password: str = Field(..., min_length=8, description="plaintext password (min 8 chars)")
    name: str = Field(..., min_length=1, description="full name")
    role: Literal["lawyer", "client"] = Field(..., description="account role")


class LoginRequest(BaseModel):
    email: str
    password: str
    role: Literal["lawyer", "client"]


class SessionResponse(BaseModel):
    access_token: str = Field(..., alias="accessToken")
    token_type: str = Field("bearer", alias="tokenType")
    role: Literal["lawyer", "client"]
    user_id: str = Field(..., alias="userId")

    model_config = {"populate_by_name": True}


# accounts

class ClientResponse(BaseModel):
    id: str
    name: str
    email: str
    avatar: str = ""
    address: Optional[str] = None
    phone: Optional[str] = None


class LawyerResponse(BaseModel):
    id: str
    name: str
    email: str
    avatar: str = ""
    role: str = "Avocat"
    specialty: Optional[str] = None
    phone: Optional[str] = None


# profile update

class ClientProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    avatar: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None


class LawyerProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    avatar: Optional[str] = None
    specialty: Optional[str] = None
    phone: Optional[str] = None


def default_avatar(name: str) -> str:
    initial = name[:1].upper() if name else "?"
    return f"https://placehold.co/100x100.png?text={initial}"


def client_from_doc(doc: dict) -> ClientResponse:
    return ClientResponse(
        id=doc.get("id", ""),
        name=doc.get("name", ""),
        email=doc.get("email", ""),
        avatar=doc.get("avatar", ""),
        address=doc.get("address"),
        phone=doc.get("phone"),
    )


def lawyer_from_doc(doc: dict) -> LawyerResponse:
    return LawyerResponse(
        id=doc.get("id", ""),
        name=doc.get("name", ""),
        email=doc.get("email", ""),
        avatar=doc.get("avatar", ""),
        role=doc.get("title", "Avocat"),
        specialty=doc.get("specialty"),
        phone=doc.get("phone"),
    )
