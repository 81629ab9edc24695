# case models — legal matters, their documents, and embedded appointments
# mirrors frontend lib/data.ts Case

from typing import Optional, Literal
from pydantic import BaseModel, Field

CaseType = Literal["Litige civil", "Droit pénal", "Droit de la famille", "Droit des sociétés", "Autre"]
CaseStatus = Literal["Nouveau", "En cours", "Clôturé", "En attente du client"]

CLOSED_STATUS = "Clôturé"


class CaseDocumentModel(BaseModel):
    """metadata of an uploaded case document; storage itself happens elsewhere"""
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    summary: Optional[str] = None


class CaseAppointment(BaseModel):
    """appointment copy embedded in its case"""
    id: str
    date: str
    time: str
    notes: str = ""
    status: str


class Deadline(BaseModel):
    date: str
    description: str


class CostEstimate(BaseModel):
    estimated_cost: str = Field(..., alias="estimatedCost")
    justification: str

    model_config = {"populate_by_name": True}


class LawyerCaseCreate(BaseModel):
    """lawyer opens a case for a client, found (or created) by name"""
    client_name: str = Field(..., alias="clientName", min_length=1)
    case_type: CaseType = Field(..., alias="caseType")
    description: str = Field(..., min_length=1)

    model_config = {"populate_by_name": True}


class ClientCaseCreate(BaseModel):
    """client submits their own case"""
    case_type: CaseType = Field(..., alias="caseType")
    description: str = Field(..., min_length=1)

    model_config = {"populate_by_name": True}


class CaseStatusUpdate(BaseModel):
    status: CaseStatus


class CaseResponse(BaseModel):
    id: str
    case_number: str = Field(..., alias="caseNumber")
    client_id: str = Field(..., alias="clientId")
    client_name: str = Field("", alias="clientName")
    client_avatar: str = Field("", alias="clientAvatar")
    case_type: str = Field(..., alias="caseType")
    status: str
    submitted_date: str = Field(..., alias="submittedDate")
    last_update: str = Field(..., alias="lastUpdate")
    description: str = ""
    documents: list[CaseDocumentModel] = Field(default_factory=list)
    appointments: list[CaseAppointment] = Field(default_factory=list)
    key_deadlines: list[Deadline] = Field(default_factory=list, alias="keyDeadlines")
    estimate: Optional[CostEstimate] = None
    total_cost: Optional[float] = Field(None, alias="totalCost")
    first_installment: Optional[float] = Field(None, alias="firstInstallment")

    model_config = {"populate_by_name": True}


def case_from_doc(doc: dict) -> CaseResponse:
    estimate = doc.get("estimate")
    return CaseResponse(
        id=doc.get("id", ""),
        caseNumber=doc.get("case_number", ""),
        clientId=doc.get("client_id", ""),
        clientName=doc.get("client_name", ""),
        clientAvatar=doc.get("client_avatar", ""),
        caseType=doc.get("case_type", "Autre"),
        status=doc.get("status", "Nouveau"),
        submittedDate=doc.get("submitted_date", ""),
        lastUpdate=doc.get("last_update", ""),
        description=doc.get("description", ""),
        documents=[CaseDocumentModel(**d) for d in doc.get("documents", [])],
        appointments=[CaseAppointment(**a) for a in doc.get("appointments", [])],
        keyDeadlines=[Deadline(**d) for d in doc.get("key_deadlines", [])],
        estimate=CostEstimate(**estimate) if estimate else None,
        totalCost=doc.get("total_cost"),
        firstInstallment=doc.get("first_installment"),
    )
