"""Zakkur Python SDK."""

from .client import ZakkurClient
from .config import ClientConfig
from .errors import ZakkurError
from .executor import MultipartForm, RequestDescriptor, RequestExecutor
from .facades import AgentFacade, BoardFacade, KnowledgeFacade, agent_facade

__all__ = [
    "AgentFacade",
    "BoardFacade",
    "ClientConfig",
    "KnowledgeFacade",
    "MultipartForm",
    "RequestDescriptor",
    "RequestExecutor",
    "ZakkurClient",
    "ZakkurError",
    "agent_facade",
]
