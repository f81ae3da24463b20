from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"

    @property
    def upstream_label(self) -> str:
        """Role name expected by the Gemini `contents` schema."""
        return "user" if self is Role.USER else "model"


ROLE_ALIASES: Dict[str, Role] = {
    "user": Role.USER,
    "human": Role.USER,
    "assistant": Role.ASSISTANT,
    "bot": Role.ASSISTANT,
    "model": Role.ASSISTANT,
    "ai": Role.ASSISTANT,
}


def normalize_role(label: Optional[str]) -> Optional[Role]:
    if not label:
        return None
    return ROLE_ALIASES.get(label.strip().lower())


class ConversationTurn(BaseModel):
    role: Role = Field(..., description="Speaker of the turn.")
    text: str = Field(..., min_length=1, description="Turn content.")

    model_config = {"frozen": True}


class GenerationParams(BaseModel):
    temperature: Optional[float] = Field(default=None, ge=0.0)
    top_k: Optional[int] = Field(default=None, ge=1)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    model_config = {"frozen": True}

    def merged_over(self, defaults: Optional["GenerationParams"]) -> "GenerationParams":
        """Fill unset fields from `defaults`."""
        if defaults is None:
            return self
        return GenerationParams(
            temperature=self.temperature if self.temperature is not None else defaults.temperature,
            top_k=self.top_k if self.top_k is not None else defaults.top_k,
            top_p=self.top_p if self.top_p is not None else defaults.top_p,
        )

    def to_upstream(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {}
        if self.temperature is not None:
            config["temperature"] = self.temperature
        if self.top_k is not None:
            config["topK"] = self.top_k
        if self.top_p is not None:
            config["topP"] = self.top_p
        return config


class Conversation(BaseModel):
    """A chat request after inbound role/field normalization."""

    new_message: Optional[str] = None
    history: List[ConversationTurn] = Field(default_factory=list)
    system_preamble: Optional[str] = None
    generation: GenerationParams = Field(default_factory=GenerationParams)

    @property
    def has_input(self) -> bool:
        return bool((self.new_message or "").strip()) or bool(self.history)


class UpstreamReply(BaseModel):
    text: str
    attempts: int = Field(default=1, description="Outbound calls made to obtain the reply.")


def _content(role: Role, text: str) -> Dict[str, Any]:
    return {"role": role.upstream_label, "parts": [{"text": text}]}


def build_contents(
    history: Sequence[ConversationTurn],
    new_message: Optional[str],
    *,
    system_preamble: Optional[str] = None,
    history_limit: int = 10,
) -> List[Dict[str, Any]]:
    """Assemble the ordered Gemini `contents` list.

    The preamble goes first as a user turn (Gemini has no system role in the
    `contents` array), then the most recent `history_limit` turns, then the new
    message.
    """
    contents: List[Dict[str, Any]] = []
    if system_preamble and system_preamble.strip():
        contents.append(_content(Role.USER, system_preamble.strip()))

    recent = list(history)[-history_limit:] if history_limit > 0 else []
    contents.extend(_content(turn.role, turn.text) for turn in recent)

    if new_message and new_message.strip():
        contents.append(_content(Role.USER, new_message))
    return contents
