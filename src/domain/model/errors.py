"""Domain-level exceptions.

Services raise these errors to express business rule violations.
The API layer maps them to HTTP status codes and `{error, detail?}` bodies.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    def __init__(self, code: str, detail: str | None = None):
        self.code = code
        self.detail = detail
        super().__init__(detail or code)


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class DirectoryError(DomainError):
    """The user directory failed to complete an operation."""


class RegistrationError(DomainError):
    """The user directory rejected a registration."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class InvalidCredentialsError(DomainError):
    """Unknown email or wrong password. The two cases are never told apart."""


class InvalidTokenError(DomainError):
    """Token is malformed, forged, or expired. The causes are never told apart."""


class ConfigurationError(DomainError):
    """Required configuration is missing or malformed. Fatal at startup."""
