# appointment models — client requests, lawyer confirms / cancels / reschedules

from typing import Literal
from pydantic import BaseModel, Field

AppointmentStatus = Literal["Confirmé", "En attente", "Annulé", "Reporté"]

PENDING_STATUS = "En attente"
RESCHEDULED_STATUS = "Reporté"
# status changes the client hears about
NOTIFIED_STATUSES = ("Confirmé", "Annulé")


class AppointmentRequest(BaseModel):
    case_id: str = Field(..., alias="caseId", min_length=1)
    date: str = Field(..., description="iso date")
    time: str = Field(..., description="hh:mm")
    notes: str = ""

    model_config = {"populate_by_name": True}


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentReschedule(BaseModel):
    new_date: str = Field(..., alias="newDate")
    new_time: str = Field(..., alias="newTime")

    model_config = {"populate_by_name": True}


class AppointmentResponse(BaseModel):
    id: str
    case_id: str = Field(..., alias="caseId")
    client_name: str = Field("", alias="clientName")
    date: str
    time: str
    notes: str = ""
    status: str

    model_config = {"populate_by_name": True}


def appointment_from_doc(doc: dict) -> AppointmentResponse:
    return AppointmentResponse(
        id=doc.get("id", ""),
        caseId=doc.get("case_id", ""),
        clientName=doc.get("client_name", ""),
        date=doc.get("date", ""),
        time=doc.get("time", ""),
        notes=doc.get("notes", ""),
        status=doc.get("status", PENDING_STATUS),
    )
