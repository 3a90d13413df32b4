"""Authentication module."""

from mwalimu.modules.auth.router import router
from mwalimu.modules.auth.schemas import DisplayNameResponse, SessionResponse

__all__ = ["router", "DisplayNameResponse", "SessionResponse"]
