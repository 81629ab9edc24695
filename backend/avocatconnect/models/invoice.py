# invoice and notification models

from typing import Literal
from pydantic import BaseModel, Field

InvoiceStatus = Literal["Payée", "En attente"]

PAID_STATUS = "Payée"
UNPAID_STATUS = "En attente"


class InvoiceCreate(BaseModel):
    case_id: str = Field(..., alias="caseId", min_length=1)
    amount: float = Field(..., gt=0)

    model_config = {"populate_by_name": True}


class InvoiceResponse(BaseModel):
    id: str
    client_id: str = Field(..., alias="clientId")
    case_id: str = Field(..., alias="caseId")
    case_number: str = Field("", alias="caseNumber")
    number: str
    date: str
    amount: float
    status: InvoiceStatus

    model_config = {"populate_by_name": True}


class NotificationResponse(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    message: str
    read: bool = False
    date: str

    model_config = {"populate_by_name": True}


def invoice_from_doc(doc: dict) -> InvoiceResponse:
    return InvoiceResponse(
        id=doc.get("id", ""),
        clientId=doc.get("client_id", ""),
        caseId=doc.get("case_id", ""),
        caseNumber=doc.get("case_number", ""),
        number=doc.get("number", ""),
        date=doc.get("date", ""),
        amount=doc.get("amount", 0.0),
        status=doc.get("status", UNPAID_STATUS),
    )


def notification_from_doc(doc: dict) -> NotificationResponse:
    return NotificationResponse(
        id=doc.get("id", ""),
        userId=doc.get("user_id", ""),
        message=doc.get("message", ""),
        read=doc.get("read", False),
        date=doc.get("date", ""),
    )
