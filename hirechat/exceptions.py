"""Error taxonomy for the ingestion, search and shortlisting pipelines."""


class HireChatError(Exception):
    """Base error carrying a user-facing message and an HTTP status code."""

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(HireChatError):
    """Bad input shape, size or type."""
    status_code = 400
    default_message = "Invalid request"


class FileTooLargeError(ValidationError):
    status_code = 413
    default_message = "File size exceeds the maximum allowed size"


class UnsupportedFileTypeError(ValidationError):
    default_message = "Only PDF files are accepted"


class InsufficientContentError(ValidationError):
    default_message = (
        "The resume appears to be empty or contains insufficient text content. "
        "Please upload a valid resume with meaningful content."
    )


class AccessDeniedError(HireChatError):
    status_code = 403
    default_message = "Access denied"


class ExtractionError(HireChatError):
    """PDF could not be read (corrupt, encrypted or not a PDF)."""
    status_code = 400
    default_message = "Failed to extract text from the PDF file"


class EmbeddingError(HireChatError):
    status_code = 502
    default_message = "The embedding service is unavailable. Please try again later."


class VectorIndexError(HireChatError):
    status_code = 502
    default_message = "The resume index is unavailable. Please try again later."


class IndexTimeout(VectorIndexError):
    status_code = 504
    default_message = "The resume index did not respond in time. Please try again later."


class StoreError(HireChatError):
    """Profile store or object storage failure."""
    status_code = 500
    default_message = "A storage operation failed. Please try again later."


class ProfileNotFoundError(StoreError):
    status_code = 404
    default_message = "User profile not found"


class ResumeNotFoundError(StoreError):
    status_code = 404
    default_message = "No resume found for this user"


class ChatNotFoundError(StoreError):
    status_code = 404
    default_message = "Chat not found or access denied"


class LLMError(HireChatError):
    status_code = 502
    default_message = "The language model request failed"


class LLMUnavailable(LLMError):
    """No credential configured for the language model."""
    status_code = 503
    default_message = "The language model is not configured"


class ConsistencyWarning(UserWarning):
    """A compensating cleanup step failed; the primary outcome still stands."""
