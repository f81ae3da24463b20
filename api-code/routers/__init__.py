from .chat import build_chat_router
from .errors import install_error_handlers
from .health import build_health_router

__all__ = ["build_chat_router", "build_health_router", "install_error_handlers"]
