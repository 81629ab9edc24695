# ai service — langchain + gemini text completions for the portal
# three thin flows: summarize a case document, estimate a case's cost, answer chatbot questions
# failures propagate to the caller; there is no retry

import logging
from typing import Optional

from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from avocatconnect.config import settings
from avocatconnect.errors import InvalidInput
from avocatconnect.models.case import CostEstimate

logger = logging.getLogger(__name__)

# max chatbot history turns sent to the llm
MAX_HISTORY_TURNS = 10


def get_llm(temperature: float = 0.3) -> ChatGoogleGenerativeAI:
    """create a gemini llm instance"""
    return ChatGoogleGenerativeAI(
        model=settings.GEMINI_MODEL,
        google_api_key=settings.GEMINI_API_KEY,
        temperature=temperature,
        max_output_tokens=2048,
    )


SUMMARY_INSTRUCTIONS = """You are a lawyer specializing in quickly understanding case documents.

You will be provided with a case document. Extract and summarize the key textual information within it.
If the document is an image, describe the relevant information.
If the document format is not suitable for text extraction (like a spreadsheet or binary file), state clearly that the format is unsupported for analysis."""

ESTIMATE_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You are an experienced lawyer providing a preliminary cost estimate for a potential new case.

Based on the case type and description provided, give a rough estimate of the legal fees. The estimate should be a price range
formatted as a currency string (e.g. '1,500€ - 3,000€').
Also provide a short justification explaining the main factors for this cost (e.g., complexity, expected duration, standard procedures).

Do not give legal advice. This is strictly for cost estimation."""),
    ("human", """Case Type: {case_type}
Description: {description}"""),
])

CHATBOT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You are a helpful and reassuring preliminary legal chatbot for the AvocatConnect platform.
Your goal is to provide basic legal information and answer frequently asked questions.

IMPORTANT: You must never give legal advice. Always remind the user that you are a bot and that they
should consult with their lawyer for any legal advice."""),
    ("human", """Here is the conversation history:
{history_block}

Here is the user's new question:
{question}

Please provide a helpful, general response and remember to include a disclaimer."""),
])

# chains
_estimate_chain = None
_chatbot_chain = None


def get_estimate_chain():
    """get or create the structured cost estimate chain"""
    global _estimate_chain
    if _estimate_chain is None:
        llm = get_llm(temperature=0.2)
        _estimate_chain = ESTIMATE_PROMPT | llm.with_structured_output(CostEstimate)
    return _estimate_chain


def get_chatbot_chain():
    """get or create the chatbot answer chain"""
    global _chatbot_chain
    if _chatbot_chain is None:
        llm = get_llm()
        _chatbot_chain = CHATBOT_PROMPT | llm | StrOutputParser()
    return _chatbot_chain


def parse_data_uri(data_uri: str) -> tuple[str, str]:
    """split 'data:<mime>;base64,<data>' into (mime, base64 payload)"""
    if not data_uri.startswith("data:") or ";base64," not in data_uri:
        raise InvalidInput("Document must be a base64 data URI")
    header, encoded = data_uri[len("data:"):].split(";base64,", 1)
    if not header or not encoded:
        raise InvalidInput("Document must be a base64 data URI")
    return header, encoded


def _format_history(history: list[dict]) -> str:
    """format chatbot history into a string block for the prompt"""
    if not history:
        return "(no previous messages)"
    return "\n".join(
        f"{turn.get('role', 'user')}: {turn.get('content', '')}"
        for turn in history[-MAX_HISTORY_TURNS:]
    )


async def summarize_document(document_data_uri: str) -> str:
    """summarize one case document passed inline as a data uri"""
    mime_type, encoded = parse_data_uri(document_data_uri)
    message = HumanMessage(content=[
        {"type": "text", "text": SUMMARY_INSTRUCTIONS},
        {"type": "media", "mime_type": mime_type, "data": encoded},
    ])
    result = await get_llm().ainvoke([message])
    summary = StrOutputParser().invoke(result).strip()
    logger.info(f"Document summarized ({mime_type}, {len(summary)} chars)")
    return summary


async def estimate_case_cost(case_type: str, description: str) -> CostEstimate:
    """preliminary fee range for a case"""
    estimate = await get_estimate_chain().ainvoke({
        "case_type": case_type,
        "description": description,
    })
    logger.info(f"Cost estimate for {case_type}: {estimate.estimated_cost}")
    return estimate


async def ask_chatbot(question: str, history: Optional[list[dict]] = None) -> str:
    """answer a general legal question, with disclaimer"""
    answer = await get_chatbot_chain().ainvoke({
        "question": question,
        "history_block": _format_history(history or []),
    })
    return answer.strip()
