"""Custom exceptions for recipe section operations."""


class RecipeServiceError(Exception):
    """Base exception for recipe service errors."""

    pass


class ValidationError(RecipeServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class RecipeValidationError(ValidationError):
    """Raised when a recipe document fails validation at the save boundary.

    Carries every issue found, not just the first one.
    """

    def __init__(self, issues: list):
        self.issues = list(issues)
        summary = "; ".join(f"{issue.path}: {issue.message}" for issue in self.issues)
        super().__init__(f"Recipe failed validation: {summary}", None)


class InvalidIndexError(RecipeServiceError, IndexError):
    """Raised when a reorder or move is requested with an out-of-range index."""

    def __init__(self, message: str, index: int | None = None, length: int | None = None):
        super().__init__(message)
        self.index = index
        self.length = length


class NotFoundError(RecipeServiceError):
    """Raised when a recipe or section is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message)
        self.resource_type = resource_type
        self.resource_id = resource_id


class DatabaseError(RecipeServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
