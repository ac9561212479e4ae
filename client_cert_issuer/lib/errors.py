"""Issuer exception hierarchy."""

CONFIGURATION_ERROR_MESSAGE = "Security options have not been properly configured"


class IssuerError(Exception):
    """Base class for certificate issuer errors."""


class ConfigurationError(IssuerError):
    """Raised when the CA is not ready; no cryptographic work was attempted."""

    def __init__(self) -> None:
        super().__init__(CONFIGURATION_ERROR_MESSAGE)


class ProviderError(IssuerError):
    """Raised by a cryptographic provider when key, CSR, signing or packaging work fails.

    The underlying library exception, if any, is kept as ``__cause__``.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class InvalidRequestError(IssuerError):
    """Raised when caller-supplied options cannot be parsed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)
