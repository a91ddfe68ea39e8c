"""Tests for file helpers and timing utilities."""
from __future__ import annotations

import time

import pytest


class TestInputFiles:
    """read_input_text() and read_session_id()."""

    def test_read_input_strips_bom(self, tmp_path):
        from tts_pipe.utils.files import read_input_text

        path = tmp_path / "input.txt"
        path.write_bytes("\ufeffMerhaba dünya".encode("utf-8"))
        assert read_input_text(path) == "Merhaba dünya"

    def test_read_session_id(self, tmp_path):
        from tts_pipe.utils.files import read_session_id

        path = tmp_path / "sessionId.txt"
        path.write_text("  abc123\n", encoding="utf-8")
        assert read_session_id(path) == "abc123"

    def test_missing_session_file(self, tmp_path):
        from tts_pipe.core.errors import NoSessionProvidedError
        from tts_pipe.utils.files import read_session_id

        with pytest.raises(NoSessionProvidedError):
            read_session_id(tmp_path / "nope.txt")

    def test_blank_session_file(self, tmp_path):
        from tts_pipe.core.errors import NoSessionProvidedError
        from tts_pipe.utils.files import read_session_id

        path = tmp_path / "sessionId.txt"
        path.write_text("\n", encoding="utf-8")
        with pytest.raises(NoSessionProvidedError, match="empty"):
            read_session_id(path)


class TestWriteArtifact:
    """write_artifact()."""

    def test_creates_parents(self, tmp_path):
        from tts_pipe.utils.files import write_artifact

        dest = write_artifact(tmp_path / "a" / "b" / "out.mp3", b"ID3data")
        assert dest.read_bytes() == b"ID3data"

    def test_refuses_existing(self, tmp_path):
        from tts_pipe.utils.files import write_artifact

        dest = tmp_path / "out.mp3"
        dest.write_bytes(b"old")
        with pytest.raises(FileExistsError):
            write_artifact(dest, b"new")
        assert dest.read_bytes() == b"old"

    def test_overwrite(self, tmp_path):
        from tts_pipe.utils.files import write_artifact

        dest = tmp_path / "out.mp3"
        dest.write_bytes(b"old")
        write_artifact(dest, b"new", overwrite=True)
        assert dest.read_bytes() == b"new"

    def test_no_temp_files_left(self, tmp_path):
        from tts_pipe.utils.files import write_artifact

        write_artifact(tmp_path / "out.mp3", b"x")
        assert [p.name for p in tmp_path.iterdir()] == ["out.mp3"]


class TestTiming:
    """timeit context manager."""

    def test_timeit(self):
        from tts_pipe.utils.timeit import timeit

        with timeit("sleep", meta={"n": 1}) as t:
            time.sleep(0.01)
        assert t.timing.name == "sleep"
        assert t.timing.seconds >= 0.01
        assert t.timing.meta == {"n": 1}
        assert t.elapsed == t.timing.seconds

    def test_timeit_records_on_error(self):
        from tts_pipe.utils.timeit import timeit

        t = timeit("boom")
        with pytest.raises(RuntimeError):
            with t:
                raise RuntimeError("boom")
        assert t.timing is not None

