from .chat_service import ChatForwarder, forward_with_fallback
from .gemini_client import GeminiClient
from .reply_extraction import DEFAULT_EXTRACTORS, extract_reply

__all__ = [
    "ChatForwarder",
    "forward_with_fallback",
    "GeminiClient",
    "DEFAULT_EXTRACTORS",
    "extract_reply",
]
