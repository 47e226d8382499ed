"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    error_code = "APP_ERROR"

    def __init__(self, message, status_code=400, path=None):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.path = path

    def to_dict(self):
        """Serialize the error for a JSON response."""
        payload = {"message": self.message, "error": self.error_code}
        if self.path:
            payload["path"] = self.path
        return payload


class ValidationError(AppError):
    """Raised when user input fails validation."""

    error_code = "VALIDATION"

    def __init__(self, message="Validation failed.", path=None):
        """Initialize the error."""
        super().__init__(message, 400, path)


class UnauthorizedError(AppError):
    """Raised when a nickname/password pair does not match."""

    error_code = "UNAUTHORIZED"

    def __init__(self, message="Password does not match.", path=None):
        """Initialize the error."""
        super().__init__(message, 401, path)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    error_code = "CONFLICT"

    def __init__(self, message="Resource already exists.", path=None):
        """Initialize the error."""
        super().__init__(message, 409, path)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    error_code = "NOT_FOUND"

    def __init__(self, message="Resource not found.", path=None):
        """Initialize the error."""
        super().__init__(message, 404, path)
