"""Custom exception hierarchy."""


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidInputError(AppError):
    """Raised when a caller violates a precondition (empty text, too few documents)."""
    pass


class UpstreamUnavailableError(AppError):
    """Raised when the model backend is not configured or rejects the credential."""
    pass


class UpstreamError(AppError):
    """Raised when a call to the model provider fails."""
    pass


class ExtractionError(AppError):
    """Raised when text cannot be extracted from a PDF."""
    pass


class NotFoundError(AppError):
    """Raised when a record does not exist or is not visible to the caller."""
    pass


class ConflictError(AppError):
    """Raised when a record would violate a uniqueness rule."""
    pass


class AuthenticationError(AppError):
    """Raised when credentials or tokens are invalid."""
    pass


class StorageError(AppError):
    """Raised when a file or record store operation fails."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass
