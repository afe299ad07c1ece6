"""Custom exceptions for the AI gateway service."""


class GatewayError(Exception):
    """Raised when a generateContent call fails."""


class ParseError(GatewayError):
    """Raised when a model reply cannot be decoded into the expected shape."""
