"""Custom exceptions for did-i-fumble."""


class FumbleError(Exception):
    """Base exception for did-i-fumble."""

    pass


class AuthenticationError(FumbleError):
    """Raised when the provider API key is invalid or missing."""

    pass


class RateLimitError(FumbleError):
    """Raised when the provider rate limit or quota is exceeded."""

    pass


class ImageError(FumbleError):
    """Raised when image cannot be read or is invalid."""

    pass


class ProviderError(FumbleError):
    """Raised when the model provider call fails for any other reason."""

    pass
