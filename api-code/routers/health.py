from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from schemas import HealthResponse
from services import ChatForwarder


ONLINE_MESSAGE = "Gemini Chat API is online. POST to /chat to talk."


def build_health_router(forwarder: ChatForwarder) -> APIRouter:
    router = APIRouter(tags=["health"])

    @router.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return ONLINE_MESSAGE

    @router.get("/healthz", response_model=HealthResponse)
    async def healthcheck() -> HealthResponse:
        return HealthResponse(
            status="ok",
            model=forwarder.model_name,
            credentials=len(forwarder.credentials),
        )

    return router
