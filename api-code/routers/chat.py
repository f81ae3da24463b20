from __future__ import annotations

import logging

from fastapi import APIRouter

from domain import ForwarderError, InternalError
from schemas import ChatRequest, ChatResponse, ErrorResponse
from services import ChatForwarder


logger = logging.getLogger("gemini-relay.chat")


def build_chat_router(forwarder: ChatForwarder) -> APIRouter:
    """Create the chat router wired to the provided forwarder."""
    router = APIRouter(tags=["chat"])

    @router.post(
        "/chat",
        response_model=ChatResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        summary="Relay a conversation to Gemini and return its reply.",
    )
    async def chat_endpoint(payload: ChatRequest) -> ChatResponse:
        try:
            reply = await forwarder.handle(payload.to_conversation())
        except ForwarderError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure while relaying chat: %s", exc)
            raise InternalError() from exc

        return ChatResponse(reply=reply.text, model=forwarder.model_name)

    return router
