"""
GrindProof Chat Service - Router

Chat endpoint. The gateway authenticates the user and forwards the user id
in the X-User-Id header.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, status
from fastapi.responses import JSONResponse

from grindproof_chat.errors import ErrorType, LLMProviderError, error_payload
from grindproof_chat.llm import build_llm_client
from grindproof_chat.schemas import ChatRequest, ChatResponse, ErrorResponse
from grindproof_chat.service import ChatInterpreterService
from grindproof_chat.tasks.service import HttpTaskService

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/chat", tags=["Chat"])


# Service instance (can be overridden in tests)
_chat_service = ChatInterpreterService(HttpTaskService(), build_llm_client())


def get_chat_service() -> ChatInterpreterService:
    """Get chat service instance."""
    return _chat_service


def set_chat_service(service: ChatInterpreterService) -> None:
    """Set chat service (for testing)."""
    global _chat_service
    _chat_service = service


@router.post(
    "",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def chat(
    request: ChatRequest,
    x_user_id: Optional[str] = Header(default=None),
):
    """
    Answer the latest user message of a conversation.

    The full transcript is sent on every turn; a pending flow is resumed from
    the stateToken when present, otherwise from the previous assistant reply.
    """
    if not x_user_id or not x_user_id.strip():
        logger.warning("Chat request without X-User-Id header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    user_id = x_user_id.strip()

    try:
        logger.info(f"Processing message for user {user_id}: {request.latest_message[:50]}...")
        response = await get_chat_service().handle_turn(request, user_id)
        logger.info(f"Replied to user {user_id} (command={response.command_executed})")
        return response
    except LLMProviderError:
        # Mapped to a status and error object by the app exception handler
        raise
    except Exception as e:
        logger.error(f"Unexpected error processing message: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_payload(ErrorType.UNKNOWN),
        )
