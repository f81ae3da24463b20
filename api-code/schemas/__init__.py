from .chat import ChatMessage, ChatRequest, ChatResponse, ErrorResponse, HealthResponse

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
]
