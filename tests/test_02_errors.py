"""
Tests for error classes and the remote status mapping.

Tests cover:
- ErrorCode constants
- TTSPipeError serialization (to_dict)
- error_for_status() for every documented status_code
- Message format "<text> (status_code: N)"
- NoSuccessfulChunksError carrying per-chunk messages
- Exception inheritance
"""
import pytest

from tts_pipe.core.errors import (
    EmptyInputError,
    ErrorCode,
    InputTooLongError,
    InvalidInputError,
    InvalidVoiceError,
    NoSessionProvidedError,
    NoSuccessfulChunksError,
    PoolTerminatedError,
    RemoteError,
    SessionInvalidError,
    TextTooLongError,
    TransportError,
    TTSPipeError,
    UnknownRemoteError,
    error_for_status,
)


class TestTTSPipeError:
    """Tests for the base exception."""

    def test_defaults(self):
        err = TTSPipeError("boom")
        assert err.message == "boom"
        assert str(err) == "boom"
        assert err.code == ErrorCode.INTERNAL_ERROR
        assert err.details == {}

    def test_to_dict_without_details(self):
        assert TTSPipeError("boom").to_dict() == {
            "ok": False,
            "error": "INTERNAL_ERROR",
            "message": "boom",
        }

    def test_to_dict_with_details(self):
        err = InvalidInputError("bad", details={"field": "text"})
        data = err.to_dict()
        assert data["error"] == ErrorCode.INVALID_INPUT
        assert data["details"] == {"field": "text"}


class TestInputErrors:
    """Input errors share InvalidInputError as a base."""

    def test_empty_input(self):
        err = EmptyInputError()
        assert isinstance(err, InvalidInputError)
        assert err.code == ErrorCode.EMPTY_INPUT

    def test_too_long(self):
        err = InputTooLongError("Text is too long")
        assert isinstance(err, InvalidInputError)
        assert err.code == ErrorCode.INPUT_TOO_LONG


class TestStatusMapping:
    """Non-zero status_code values map to RemoteError subclasses."""

    @pytest.mark.parametrize("status,cls,code", [
        (1, SessionInvalidError, ErrorCode.SESSION_INVALID),
        (2, TextTooLongError, ErrorCode.TEXT_TOO_LONG),
        (4, InvalidVoiceError, ErrorCode.INVALID_VOICE),
        (5, NoSessionProvidedError, ErrorCode.NO_SESSION),
        (3, UnknownRemoteError, ErrorCode.UNKNOWN_REMOTE_ERROR),
        (-1, UnknownRemoteError, ErrorCode.UNKNOWN_REMOTE_ERROR),
        (99, UnknownRemoteError, ErrorCode.UNKNOWN_REMOTE_ERROR),
    ])
    def test_mapping(self, status, cls, code):
        err = error_for_status(status)
        assert type(err) is cls
        assert isinstance(err, RemoteError)
        assert err.code == code
        assert err.status_code == status
        assert err.message.endswith(f"(status_code: {status})")

    def test_session_invalid_message(self):
        err = error_for_status(1)
        assert "session ID might be invalid or expired" in err.message

    def test_unknown_message(self):
        assert error_for_status(7).message == "Unknown error occurred (status_code: 7)"

    def test_non_integer_status(self):
        err = error_for_status(None)
        assert isinstance(err, UnknownRemoteError)
        assert err.details == {"status_code": None}

    def test_boolean_status_is_unknown(self):
        assert isinstance(error_for_status(True), UnknownRemoteError)

    def test_local_no_session(self):
        err = NoSessionProvidedError()
        assert err.status_code == 5
        assert err.message == "No session ID found. (status_code: 5)"


class TestPipelineErrors:
    """Errors raised by the pool and the orchestrator."""

    def test_transport_error(self):
        err = TransportError("network down", details={"type": "ConnectError"})
        assert err.code == ErrorCode.TRANSPORT_ERROR
        assert not isinstance(err, RemoteError)

    def test_pool_terminated(self):
        err = PoolTerminatedError()
        assert err.code == ErrorCode.POOL_TERMINATED
        assert err.message == "Worker pool terminated"

    def test_no_successful_chunks(self):
        err = NoSuccessfulChunksError(["Worker No.0 failed: x", "Worker No.1 failed: y"])
        assert err.code == ErrorCode.NO_SUCCESSFUL_CHUNKS
        assert err.message == "No successful audio chunks were generated"
        assert err.messages == ["Worker No.0 failed: x", "Worker No.1 failed: y"]
        assert err.details["chunks"] == 2

    def test_no_successful_chunks_without_messages(self):
        err = NoSuccessfulChunksError()
        assert err.messages == []
        assert err.details == {}
