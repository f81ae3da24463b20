from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


PROJECT_ROOT = Path(__file__).resolve().parent
API_CODE_PATH = PROJECT_ROOT / "api-code"
if str(API_CODE_PATH) not in sys.path:
    sys.path.insert(0, str(API_CODE_PATH))

from env_loader import load_local_env  # noqa: E402
from routers import (  # noqa: E402
    build_chat_router,
    build_health_router,
    install_error_handlers,
)
from services import ChatForwarder, GeminiClient  # noqa: E402
from settings import Settings, get_settings  # noqa: E402


logger = logging.getLogger("gemini-relay")


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the relay app; fails fast when no API key is configured."""
    if settings is None:
        load_local_env()
        settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # httpx logs request URLs, which carry the API key in the query string.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    credentials = settings.credential_pool()
    gemini_client = GeminiClient(
        api_base=settings.gemini_api_base,
        model=settings.gemini_model,
        timeout=settings.upstream_timeout_seconds,
        transport=transport,
    )
    forwarder = ChatForwarder(
        credentials,
        gemini_client,
        history_limit=settings.history_limit,
        system_prompt=settings.system_prompt,
        default_generation=settings.default_generation(),
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info(
            "Gemini relay ready: model=%s keys=%s",
            settings.gemini_model,
            ", ".join(credentials.masked()),
        )
        yield
        await gemini_client.aclose()

    app = FastAPI(
        title="Gemini Chat Relay",
        version="0.1.0",
        description="Relays chat conversations to Gemini with API key fallback.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)
    app.include_router(build_health_router(forwarder))
    app.include_router(build_chat_router(forwarder))

    logger.info("Loaded %d Gemini API key(s).", len(credentials))
    return app


if __name__ == "__main__":
    import uvicorn

    load_local_env()
    runtime_settings = get_settings()
    uvicorn.run(
        "app_main:create_app",
        factory=True,
        host=runtime_settings.host,
        port=runtime_settings.port,
    )
