from .conversation import (
    Conversation,
    ConversationTurn,
    GenerationParams,
    Role,
    UpstreamReply,
    build_contents,
    normalize_role,
)
from .credentials import CredentialPool, mask_credential
from .errors import (
    AllCredentialsExhausted,
    ForwarderError,
    InternalError,
    InvalidInput,
    UpstreamError,
)

__all__ = [
    "Conversation",
    "ConversationTurn",
    "GenerationParams",
    "Role",
    "UpstreamReply",
    "build_contents",
    "normalize_role",
    "CredentialPool",
    "mask_credential",
    "AllCredentialsExhausted",
    "ForwarderError",
    "InternalError",
    "InvalidInput",
    "UpstreamError",
]
