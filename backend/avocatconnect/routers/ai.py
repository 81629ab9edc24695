# ai router — document summaries, cost estimates, and the preliminary chatbot
# every flow answers with success/error instead of raising

import logging

from fastapi import APIRouter, Depends

from avocatconnect.models.ai import (
    ChatbotRequest,
    ChatbotResponse,
    EstimateCostRequest,
    EstimateCostResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from avocatconnect.services import ai_service
from avocatconnect.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/summarize", response_model=SummarizeResponse, response_model_exclude_none=True)
async def summarize_document(
    body: SummarizeRequest,
    current_user: dict = Depends(get_current_user),
):
    """summarize a case document sent inline as a data uri"""
    try:
        summary = await ai_service.summarize_document(body.document_data_uri)
    except Exception as e:
        logger.error(f"Document summary failed: {e}")
        return SummarizeResponse(success=False, error="Le résumé du document a échoué.")
    return SummarizeResponse(success=True, summary=summary)


@router.post("/estimate-cost", response_model=EstimateCostResponse, response_model_exclude_none=True)
async def estimate_cost(
    body: EstimateCostRequest,
    current_user: dict = Depends(get_current_user),
):
    try:
        estimate = await ai_service.estimate_case_cost(body.case_type, body.description)
    except Exception as e:
        logger.error(f"Cost estimate failed: {e}")
        return EstimateCostResponse(success=False, error="L'estimation des coûts a échoué.")
    return EstimateCostResponse(success=True, estimate=estimate)


@router.post("/chatbot", response_model=ChatbotResponse, response_model_exclude_none=True)
async def chatbot(
    body: ChatbotRequest,
    current_user: dict = Depends(get_current_user),
):
    """general legal information, never advice"""
    history = [turn.model_dump() for turn in body.history]
    try:
        answer = await ai_service.ask_chatbot(body.question, history)
    except Exception as e:
        logger.error(f"Chatbot failed: {e}")
        return ChatbotResponse(success=False, error="Le chatbot est indisponible pour le moment.")
    return ChatbotResponse(success=True, response=answer)
