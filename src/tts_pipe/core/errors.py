"""
Error Codes and Exceptions.

Every failure the pipeline can report is a TTSPipeError subclass carrying a
stable string code, so callers (CLI exit codes, HTTP status mapping, job
summaries) can branch on the code instead of parsing messages.

Hierarchy:
    TTSPipeError
    ├── InvalidInputError
    │   ├── EmptyInputError         - blank text, rejected before any network call
    │   └── InputTooLongError       - text above the configured character limit
    ├── RemoteError                 - non-zero status_code from the endpoint
    │   ├── SessionInvalidError     - status 1
    │   ├── TextTooLongError        - status 2
    │   ├── InvalidVoiceError       - status 4
    │   ├── NoSessionProvidedError  - status 5 (also raised locally)
    │   └── UnknownRemoteError      - any other non-zero status
    ├── TransportError              - network, JSON or payload decoding failure
    ├── PoolTerminatedError         - submit/await on a terminated worker pool
    └── NoSuccessfulChunksError     - every chunk of a job failed

Per-chunk errors (RemoteError, TransportError) are captured into that chunk's
result by the orchestrator; only input errors and NoSuccessfulChunksError stop
a job outright.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class ErrorCode:
    """Standardized error codes used in exceptions and API responses."""
    EMPTY_INPUT = "EMPTY_INPUT"
    INPUT_TOO_LONG = "INPUT_TOO_LONG"
    INVALID_INPUT = "INVALID_INPUT"
    SESSION_INVALID = "SESSION_INVALID"
    TEXT_TOO_LONG = "TEXT_TOO_LONG"
    INVALID_VOICE = "INVALID_VOICE"
    NO_SESSION = "NO_SESSION"
    UNKNOWN_REMOTE_ERROR = "UNKNOWN_REMOTE_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    POOL_TERMINATED = "POOL_TERMINATED"
    NO_SUCCESSFUL_CHUNKS = "NO_SUCCESSFUL_CHUNKS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class TTSPipeError(Exception):
    """
    Base exception for tts-pipe errors.

    Attributes:
        message: Human-readable error message.
        code: Error code from ErrorCode.
        details: Optional dictionary with additional context.
    """
    def __init__(self, message: str, code: str = ErrorCode.INTERNAL_ERROR, details: Optional[Dict] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the standardized error payload."""
        result = {
            "ok": False,
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class InvalidInputError(TTSPipeError):
    """Raised when job input is rejected before dispatch."""
    def __init__(self, message: str, code: str = ErrorCode.INVALID_INPUT, details: Optional[Dict] = None):
        super().__init__(message, code, details)


class EmptyInputError(InvalidInputError):
    """Raised when the text is blank after trimming."""
    def __init__(self, message: str = "Text cannot be empty", details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.EMPTY_INPUT, details)


class InputTooLongError(InvalidInputError):
    """Raised when the text exceeds the configured character limit."""
    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.INPUT_TOO_LONG, details)


# =============================================================================
# Remote endpoint errors
# =============================================================================

class RemoteError(TTSPipeError):
    """
    Raised when the endpoint answers with a non-zero status_code.

    Attributes:
        status_code: The status_code field of the response.
    """
    default_message = "Unknown error occurred"
    error_code = ErrorCode.UNKNOWN_REMOTE_ERROR

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        text = f"{message or self.default_message} (status_code: {status_code})"
        super().__init__(text, self.error_code, {"status_code": status_code})


class SessionInvalidError(RemoteError):
    default_message = "Your TikTok session ID might be invalid or expired. Try getting a new one."
    error_code = ErrorCode.SESSION_INVALID


class TextTooLongError(RemoteError):
    default_message = "The provided text is too long."
    error_code = ErrorCode.TEXT_TOO_LONG


class InvalidVoiceError(RemoteError):
    default_message = "Invalid speaker, please check the list of valid speaker values."
    error_code = ErrorCode.INVALID_VOICE


class NoSessionProvidedError(RemoteError):
    default_message = "No session ID found."
    error_code = ErrorCode.NO_SESSION

    def __init__(self, status_code: int = 5, message: Optional[str] = None):
        super().__init__(status_code, message)


class UnknownRemoteError(RemoteError):
    pass


_STATUS_ERRORS = {
    1: SessionInvalidError,
    2: TextTooLongError,
    4: InvalidVoiceError,
    5: NoSessionProvidedError,
}


def error_for_status(status_code: Any) -> RemoteError:
    """
    Map an endpoint status_code to its exception instance.

    Args:
        status_code: Non-zero status_code from the response. Non-integer
            values (missing field, garbage) map to UnknownRemoteError.

    Returns:
        RemoteError subclass instance, ready to raise.
    """
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        cls = _STATUS_ERRORS.get(status_code, UnknownRemoteError)
        return cls(status_code)
    return UnknownRemoteError(status_code)


class TransportError(TTSPipeError):
    """Raised when the request fails or the response cannot be decoded."""
    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.TRANSPORT_ERROR, details)


# =============================================================================
# Pipeline errors
# =============================================================================

class PoolTerminatedError(TTSPipeError):
    """Raised on submit after shutdown, or for tasks cut off by shutdown."""
    def __init__(self, message: str = "Worker pool terminated", details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.POOL_TERMINATED, details)


class NoSuccessfulChunksError(TTSPipeError):
    """
    Raised when a job finishes with zero successful chunks.

    Attributes:
        messages: Per-chunk result messages, in index order.
    """
    def __init__(self, messages: Optional[List[str]] = None):
        self.messages = list(messages or [])
        super().__init__(
            "No successful audio chunks were generated",
            ErrorCode.NO_SUCCESSFUL_CHUNKS,
            {"chunks": len(self.messages), "messages": self.messages} if self.messages else None,
        )
