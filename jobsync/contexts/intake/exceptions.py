"""Custom exceptions for intake context."""

from typing import Optional, Sequence


class GenerationError(Exception):
    """
    Base exception for failed resume or cover letter generation.

    Attributes:
        message: Error description
        model: Model that was being called when the failure happened, if any
    """

    def __init__(self, message: str, model: Optional[str] = None):
        self.message = message
        self.model = model
        super().__init__(f"{message} (model: {model})" if model else message)


class MissingFieldError(GenerationError, ValueError):
    """
    Exception raised when required request fields are empty.

    Attributes:
        fields: Names of the missing fields
    """

    def __init__(self, fields: Sequence[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}.")


class RateLimitExceededError(GenerationError):
    """
    Exception raised when every candidate model is rate limited.

    The caller should wait before retrying or switch providers.
    """

    def __init__(self, models: Sequence[str], original_error: Optional[Exception] = None):
        self.models = list(models)
        self.original_error = original_error
        super().__init__(
            "Rate limit or quota exceeded for all models "
            f"({', '.join(self.models)}). Please wait a minute and try again, or switch models."
        )


class EmptyGenerationError(GenerationError):
    """Exception raised when no model produced any content."""

    def __init__(self, models: Sequence[str]):
        self.models = list(models)
        super().__init__(f"No content generated by any model ({', '.join(self.models)}).")
