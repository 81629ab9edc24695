# ai models — document summary, cost estimate, and preliminary legal chatbot

from typing import Literal, Optional
from pydantic import BaseModel, Field

from avocatconnect.models.case import CaseType, CostEstimate


class SummarizeRequest(BaseModel):
    document_data_uri: str = Field(
        ...,
        alias="documentDataUri",
        description="document as a data uri: data:<mimetype>;base64,<encoded_data>",
    )

    model_config = {"populate_by_name": True}


class SummarizeResponse(BaseModel):
    success: bool
    summary: Optional[str] = None
    error: Optional[str] = None


class EstimateCostRequest(BaseModel):
    case_type: CaseType = Field(..., alias="caseType")
    description: str = Field(..., min_length=1)

    model_config = {"populate_by_name": True}


class EstimateCostResponse(BaseModel):
    success: bool
    estimate: Optional[CostEstimate] = None
    error: Optional[str] = None


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    content: str


class ChatbotRequest(BaseModel):
    history: list[ChatTurn] = Field(default_factory=list)
    question: str = Field(..., min_length=1)


class ChatbotResponse(BaseModel):
    success: bool
    response: Optional[str] = None
    error: Optional[str] = None
