"""Domain-specific failure types for the summarizer."""

from dataclasses import dataclass
from enum import Enum


class SummarizerErrorKind(str, Enum):
    """Classification of summarizer failures.

    - MISSING_CREDENTIALS: No API key configured; no request is sent
    - RATE_LIMITED: HTTP 429 from the model endpoint
    - CONTEXT_EXCEEDED: Request rejected for exceeding the context window
    - API_ERROR: Any other non-2xx response
    - TIMEOUT: The request exceeded its timeout and was aborted
    - NETWORK_ERROR: Transport failure before a response arrived
    - EMPTY_RESPONSE: No message content in the completion
    - MALFORMED_OUTPUT: Content is not a JSON object
    - INVALID_STRUCTURE: JSON object with missing or mistyped fields
    """

    MISSING_CREDENTIALS = "missing_credentials"
    RATE_LIMITED = "rate_limited"
    CONTEXT_EXCEEDED = "context_exceeded"
    API_ERROR = "api_error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_OUTPUT = "malformed_output"
    INVALID_STRUCTURE = "invalid_structure"


@dataclass(frozen=True)
class SummarizerFailure:
    """Failed summarizer call.

    Attributes:
        kind: Failure classification.
        message: Human-readable detail, persisted as the item's error_reason.
        status_code: HTTP status code when the endpoint answered.
    """

    kind: SummarizerErrorKind
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class SummaryValidationError(Exception):
    """Raised when a model response fails the structural contract."""

    def __init__(self, kind: SummarizerErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
