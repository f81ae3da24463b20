from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from domain import Conversation, ConversationTurn, GenerationParams, normalize_role


TURN_FIELDS = ("role", "content", "text")


class ChatMessage(BaseModel):
    role: Optional[str] = Field(default=None, description="user, assistant, bot or model.")
    content: Optional[str] = Field(default=None, description="Message text.")
    text: Optional[str] = Field(default=None, description="Alternative name for `content`.")

    def to_turn(self) -> Optional[ConversationTurn]:
        role = normalize_role(self.role)
        body = self.content if self.content is not None else self.text
        if role is None or not body or not body.strip():
            return None
        return ConversationTurn(role=role, text=body)


class ChatRequest(BaseModel):
    message: Optional[str] = Field(default=None, description="New user message.")
    messages: Optional[List[ChatMessage]] = Field(
        default=None, description="Conversation so far, oldest first."
    )
    history: Optional[List[ChatMessage]] = Field(
        default=None, description="Alias of `messages` used by some clients."
    )
    custom_prompt: Optional[str] = Field(
        default=None, alias="customPrompt", description="System preamble for this request."
    )
    temperature: Optional[float] = Field(default=None, ge=0.0)
    top_k: Optional[int] = Field(default=None, alias="topK", ge=1)
    top_p: Optional[float] = Field(default=None, alias="topP", ge=0.0, le=1.0)

    model_config = {"populate_by_name": True}

    @field_validator("messages", "history", mode="before")
    @classmethod
    def _drop_malformed_turns(cls, value: Any) -> Any:
        """Keep only object entries and their string fields; anything else is dropped."""
        if not isinstance(value, list):
            return None
        value = [item.model_dump() if isinstance(item, ChatMessage) else item for item in value]
        return [
            {key: item[key] for key in TURN_FIELDS if isinstance(item.get(key), str)}
            for item in value
            if isinstance(item, dict)
        ]

    def to_conversation(self) -> Conversation:
        turns = _usable_turns(self.messages) or _usable_turns(self.history)
        preamble = (self.custom_prompt or "").strip() or None
        return Conversation(
            new_message=self.message,
            history=turns,
            system_preamble=preamble,
            generation=GenerationParams(
                temperature=self.temperature,
                top_k=self.top_k,
                top_p=self.top_p,
            ),
        )


def _usable_turns(messages: Optional[List[ChatMessage]]) -> List[ConversationTurn]:
    return [turn for turn in (message.to_turn() for message in messages or []) if turn]


class ChatResponse(BaseModel):
    reply: str = Field(..., description="Chatbot-generated response.")
    model: str = Field(..., description="Backend model identifier.")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable failure reason.")


class HealthResponse(BaseModel):
    status: str
    model: str
    credentials: int = Field(..., description="Number of configured API keys.")
