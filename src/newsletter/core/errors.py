class TransformError(Exception):
    """Base exception for all transform pipeline errors."""


class InvalidInputError(TransformError):
    """Raised when the pipeline receives empty or missing HTML."""


class ProcessingError(TransformError):
    """Raised when the HTML or CSS cannot be parsed or inlined."""
