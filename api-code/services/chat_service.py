from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from domain import (
    AllCredentialsExhausted,
    Conversation,
    CredentialPool,
    GenerationParams,
    InvalidInput,
    UpstreamError,
    UpstreamReply,
    build_contents,
    mask_credential,
)

from .gemini_client import GeminiClient
from .reply_extraction import describe_missing_reply, extract_reply


logger = logging.getLogger("gemini-relay.chat")

Attempt = Callable[[str], Awaitable[Dict[str, Any]]]

DEFAULT_HISTORY_LIMIT = 10


async def forward_with_fallback(credentials: Iterable[str], attempt: Attempt) -> UpstreamReply:
    """Call `attempt` with each key in order until one yields reply text.

    Keys are tried strictly one after another; the first extracted reply wins
    and no further keys are touched.
    """
    last_error: Optional[str] = None
    attempts = 0

    for api_key in credentials:
        attempts += 1
        try:
            body = await attempt(api_key)
        except UpstreamError as exc:
            last_error = exc.message
        else:
            text = extract_reply(body)
            if text:
                return UpstreamReply(text=text, attempts=attempts)
            last_error = describe_missing_reply(body)

        logger.warning(
            "Gemini key %s failed (attempt %d): %s",
            mask_credential(api_key),
            attempts,
            last_error,
        )

    logger.error("All %d Gemini key(s) failed; last error: %s", attempts, last_error)
    raise AllCredentialsExhausted(last_error, attempts=attempts)


class ChatForwarder:
    """Normalizes a conversation and relays it to Gemini with key fallback."""

    def __init__(
        self,
        credentials: CredentialPool,
        client: GeminiClient,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        system_prompt: Optional[str] = None,
        default_generation: Optional[GenerationParams] = None,
    ):
        self.credentials = credentials
        self.client = client
        self.history_limit = history_limit
        self.system_prompt = system_prompt
        self.default_generation = default_generation or GenerationParams()

    @property
    def model_name(self) -> str:
        return self.client.model_name

    def build_payload(self, conversation: Conversation) -> Dict[str, Any]:
        if not conversation.has_input:
            raise InvalidInput()

        preamble = conversation.system_preamble or self.system_prompt
        payload: Dict[str, Any] = {
            "contents": build_contents(
                conversation.history,
                conversation.new_message,
                system_preamble=preamble,
                history_limit=self.history_limit,
            )
        }
        generation_config = conversation.generation.merged_over(self.default_generation).to_upstream()
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    async def handle(self, conversation: Conversation) -> UpstreamReply:
        payload = self.build_payload(conversation)

        async def attempt(api_key: str) -> Dict[str, Any]:
            return await self.client.generate_content(api_key, payload)

        reply = await forward_with_fallback(self.credentials, attempt)
        if reply.attempts > 1:
            logger.info("Gemini reply obtained after %d attempt(s).", reply.attempts)
        return reply
