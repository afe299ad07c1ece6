"""AI gateway: prompt construction and reply parsing over the Gemini API."""

from .client import GeminiClient
from .exceptions import GatewayError, ParseError
from .service import IService, Service

__all__ = ["GeminiClient", "GatewayError", "ParseError", "IService", "Service"]
