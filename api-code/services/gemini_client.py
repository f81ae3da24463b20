from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from domain import UpstreamError


logger = logging.getLogger("gemini-relay.gemini")


class GeminiClient:
    """Thin async wrapper around the Gemini `generateContent` REST endpoint."""

    def __init__(
        self,
        *,
        api_base: str,
        model: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model_name = model
        self.timeout = timeout
        self.endpoint = f"{api_base.rstrip('/')}/models/{model}:generateContent"
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def generate_content(self, api_key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            # httpx bounds each phase separately; wait_for bounds the whole attempt.
            response = await asyncio.wait_for(
                self._client.post(
                    self.endpoint,
                    params={"key": api_key},
                    json=payload,
                ),
                timeout=self.timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            raise UpstreamError(f"Gemini request timed out ({exc.__class__.__name__}).") from exc
        except httpx.HTTPError as exc:
            # Only the exception type is surfaced; messages may echo the keyed URL.
            raise UpstreamError(f"Gemini request failed ({exc.__class__.__name__}).") from exc

        data = _decode_json(response)

        if not response.is_success:
            message = _error_message(data) or f"Gemini API error (HTTP {response.status_code})"
            raise UpstreamError(message, http_status=response.status_code)

        if not isinstance(data, dict):
            raise UpstreamError(
                "Gemini returned a malformed response body.",
                http_status=response.status_code,
            )
        return data

    async def aclose(self) -> None:
        await self._client.aclose()


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        logger.debug("Non-JSON body from Gemini (HTTP %s)", response.status_code)
        return None


def _error_message(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    if isinstance(error, str) and error.strip():
        return error.strip()
    return None
