"""Custom exceptions for pyring."""


class PyRingException(Exception):
    """Base class for pyring exceptions."""


class AuthError(PyRingException):
    """Raised when authentication fails."""


class TwoFactorAuthRequired(AuthError):
    """Raised when the account needs a two-factor code to sign in."""

    def __init__(self, prompt: str) -> None:
        """Initialize the error with the prompt returned by Ring."""
        self.prompt = prompt
        super().__init__(f"Two-factor authentication required: {prompt}")


class ApiError(PyRingException):
    """Raised when an API call fails."""

    def __init__(self, status_code: int, error_message: str) -> None:
        """Initialize the API error."""
        self.status_code = status_code
        self.error_message = error_message
        super().__init__(f"API Error {status_code}: {error_message}")


class TopologyError(PyRingException):
    """Raised when the locations and cameras of the account cannot be built."""
