"""Assistant module - role-specific AI reports and chats."""

from mwalimu.modules.assistant.router import router
from mwalimu.modules.assistant.service import AssistantService

__all__ = ["router", "AssistantService"]
