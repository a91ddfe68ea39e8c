"""
File helpers for the CLI: input text, session credential, output artifact.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Union

from tts_pipe.core.errors import NoSessionProvidedError

PathLike = Union[str, os.PathLike]


def read_input_text(path: PathLike) -> str:
    """Read a UTF-8 text file. A leading BOM is dropped."""
    return Path(path).read_text(encoding="utf-8-sig")


def read_session_id(path: PathLike) -> str:
    """
    Read a session credential from a file.

    Raises:
        NoSessionProvidedError: If the file is missing or blank.
    """
    p = Path(path)
    if not p.is_file():
        raise NoSessionProvidedError(message=f"No session ID found in {p}.")
    session_id = p.read_text(encoding="utf-8").strip()
    if not session_id:
        raise NoSessionProvidedError(message=f"Session ID file {p} is empty.")
    return session_id


def write_artifact(path: PathLike, data: bytes, overwrite: bool = False) -> Path:
    """
    Write the audio artifact atomically.

    Parent directories are created. The bytes go to a temporary file in the
    target directory first and are moved into place with os.replace(), so a
    crash never leaves a truncated artifact behind.

    Args:
        path: Destination file.
        data: Audio bytes.
        overwrite: Replace an existing file instead of refusing.

    Returns:
        The destination path.

    Raises:
        FileExistsError: If the destination exists and overwrite is False.
    """
    dest = Path(path)
    if dest.exists() and not overwrite:
        raise FileExistsError(f"{dest} already exists")

    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, dest)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return dest
