"""Error taxonomy shared by the consent flow and identity providers."""


class AppError(Exception):
    """Base class for application errors that map to an HTTP status."""

    status_code: int = 500
    public_message: str | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def response_message(self) -> str:
        """Message that is safe to return to the caller."""
        return self.public_message or self.message


class ValidationError(AppError):
    """Malformed input (bad tenant selector, missing field, bad TTL)."""

    status_code = 400


class ConfigurationError(AppError):
    """A required environment value is missing or unusable."""

    status_code = 500


class AuthenticationError(AppError):
    """Token or identity rejected (signature, expiry, purpose, tenant)."""

    status_code = 401


class UpstreamError(AppError):
    """Secret store or identity provider call failed."""

    status_code = 500
    # Upstream details stay in the logs
    public_message = "server_error"
