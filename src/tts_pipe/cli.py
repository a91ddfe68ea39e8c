"""
Command-Line Interface for tts-pipe.

Runs one synthesis job and writes the combined audio file.

Usage Examples:
    # Positional text
    tts-pipe "Hello there, this is a test." --out hello.mp3

    # No text argument: reads input.txt (files.input) if present
    tts-pipe --session-id "$SESSION"

    # Text from a file, session id from a file
    tts-pipe --file input.txt --session-file sessionId.txt --out out/story.mp3

    # Different voice, fewer workers
    tts-pipe --file input.txt --voice en_uk_001 --max-workers 2

    # Segment and summarize only (no network)
    tts-pipe --file input.txt --dry-run --json

    # List the voice catalog
    tts-pipe --voices

Session Credential (first match wins):
    --session-id, --session-file, TIKTOK_SESSION_ID, api.session_id in
    settings.yaml, then the files.session_id file (sessionId.txt).

Exit Codes:
    0  success
    2  text too long
    3  output file exists (use --force)
    4  invalid input (empty text, unknown voice, missing session, bad config)
    5  remote/network failure (no chunk could be synthesized)
"""

from __future__ import annotations

import argparse
import json
import sys
from enum import IntEnum
from pathlib import Path
from typing import List, Optional

from tts_pipe.core.config import ConfigValidationError, PipelineConfig, load_settings
from tts_pipe.core.errors import (
    InputTooLongError,
    InvalidInputError,
    NoSessionProvidedError,
    NoSuccessfulChunksError,
    TTSPipeError,
)
from tts_pipe.core.logging import configure_logging, get_logger, info
from tts_pipe.core.voices import get_voice_by_code, is_known_voice, popular_voices, voices_by_category
from tts_pipe.services import Orchestrator
from tts_pipe.tts.chunker import clean_text, split_text, text_stats, validate_text
from tts_pipe.tts.client import SynthesisClient
from tts_pipe.utils.files import read_input_text, read_session_id, write_artifact


class ExitCode(IntEnum):
    SUCCESS = 0
    TOO_LONG = 2
    OUTPUT_EXISTS = 3
    INVALID_INPUT = 4
    NETWORK_ERROR = 5


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="tts-pipe", description="tts-pipe CLI (chunked remote synthesis)")

    # Input options
    parser.add_argument("text_pos", nargs="?", help="Text to synthesize (positional)")
    parser.add_argument("--text", help="Text to synthesize")
    parser.add_argument("--file", help="UTF-8 text file to synthesize")

    # Output options
    parser.add_argument("--out", help="Output audio path (default from config: output/out.mp3)")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing output file")

    # Job parameters
    parser.add_argument("--voice", help="Voice code (see --voices)")
    parser.add_argument("--session-id", help="Session credential")
    parser.add_argument("--session-file", help="File containing the session credential")
    parser.add_argument("--max-chunk-length", type=int, help="Maximum characters per chunk")
    parser.add_argument("--max-workers", type=int, help="Maximum concurrent workers")

    # Execution modes
    parser.add_argument("--dry-run", action="store_true", help="Segment and summarize without synthesis")
    parser.add_argument("--json", action="store_true", help="Print JSON summary")
    parser.add_argument("--voices", action="store_true", help="List available voices and exit")
    parser.add_argument("--config", help="Settings YAML path (default: config/settings.yaml)")
    parser.add_argument("--log-level", help="Log level (1-4 or name)")

    return parser.parse_args(argv)


def _emit_error(args: argparse.Namespace, err: TTSPipeError, code: ExitCode) -> int:
    if args.json:
        print(json.dumps(err.to_dict(), ensure_ascii=False))
    else:
        print(f"error: {err.message}", file=sys.stderr)
    return int(code)


def _load_text(args: argparse.Namespace, config: PipelineConfig) -> str:
    """
    Resolve the input text.

    Falls back to the files.input file (input.txt) when it exists and no
    text was given.

    Raises:
        InvalidInputError: No input, or conflicting inputs.
        OSError: The input file cannot be read.
    """
    text = args.text or args.text_pos
    if args.file:
        if text:
            raise InvalidInputError("Use --file without --text or positional text.")
        return read_input_text(args.file)
    if not text:
        if Path(config.files.input).is_file():
            return read_input_text(config.files.input)
        raise InvalidInputError("Provide --text, a positional text or --file.")
    return text


def _resolve_session(args: argparse.Namespace, config: PipelineConfig) -> str:
    """
    Resolve the session credential.

    Raises:
        NoSessionProvidedError: No source yields a credential.
    """
    if args.session_id and args.session_id.strip():
        return args.session_id.strip()
    if args.session_file:
        return read_session_id(args.session_file)
    if config.api.session_id:
        return config.api.session_id
    if Path(config.files.session_id).is_file():
        return read_session_id(config.files.session_id)
    raise NoSessionProvidedError()


def _print_voices(as_json: bool) -> int:
    grouped = voices_by_category()
    if as_json:
        payload = {
            category: [voice._asdict() for voice in voices]
            for category, voices in grouped.items()
        }
        print(json.dumps(payload, ensure_ascii=False))
        return int(ExitCode.SUCCESS)

    print("Popular:")
    for voice in popular_voices():
        print(f"  {voice.code:<36} {voice.name}")
    for category, voices in grouped.items():
        if not voices:
            continue
        print(f"{category}:")
        for voice in voices:
            print(f"  {voice.code:<36} {voice.name}")
    return int(ExitCode.SUCCESS)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Optional list of command-line arguments.

    Returns:
        Exit code (see ExitCode).
    """
    args = _parse_args(argv)

    if args.log_level:
        configure_logging(args.log_level, force=True)
    else:
        configure_logging()
    log = get_logger("tts-pipe.cli")

    if args.voices:
        return _print_voices(args.json)

    # Settings
    try:
        config = load_settings(args.config).get_pipeline_config()
    except (FileNotFoundError, ConfigValidationError) as e:
        return _emit_error(args, InvalidInputError(str(e)), ExitCode.INVALID_INPUT)

    # Input text
    try:
        text = clean_text(_load_text(args, config))
        validate_text(text, config.performance.max_text_length)
    except InputTooLongError as e:
        return _emit_error(args, e, ExitCode.TOO_LONG)
    except InvalidInputError as e:
        return _emit_error(args, e, ExitCode.INVALID_INPUT)
    except OSError as e:
        return _emit_error(args, InvalidInputError(f"Cannot read input file: {e}"), ExitCode.INVALID_INPUT)

    voice = args.voice or config.api.default_voice
    if not is_known_voice(voice):
        return _emit_error(
            args,
            InvalidInputError(f"Unknown voice code: {voice} (see --voices)", details={"voice": voice}),
            ExitCode.INVALID_INPUT,
        )
    max_chunk_length = args.max_chunk_length
    if max_chunk_length is None:
        max_chunk_length = config.performance.max_chunk_length

    # Dry run: segmentation summary only
    if args.dry_run:
        try:
            stats = text_stats(text, max_chunk_length)
            chunks = split_text(text, max_chunk_length)
        except InvalidInputError as e:
            return _emit_error(args, e, ExitCode.INVALID_INPUT)
        payload = {
            "ok": True,
            "dry_run": True,
            "voice": voice,
            "characters": stats.characters,
            "words": stats.words,
            "chunks": stats.chunks,
            "average_chunk_size": stats.average_chunk_size,
            "chunk_lengths": [len(c.text) for c in chunks],
        }
        if args.json:
            print(json.dumps(payload, ensure_ascii=False))
        else:
            info(log, "dry_run", chunks=stats.chunks, chars=stats.characters, voice=voice)
            print(payload)
        print("DRY_RUN_OK")
        return int(ExitCode.SUCCESS)

    try:
        session_id = _resolve_session(args, config)
    except NoSessionProvidedError as e:
        return _emit_error(args, e, ExitCode.INVALID_INPUT)

    out_path = Path(args.out or config.files.output)
    if out_path.exists() and not args.force:
        return _emit_error(
            args,
            InvalidInputError(f"Output file {out_path} already exists (use --force to overwrite)"),
            ExitCode.OUTPUT_EXISTS,
        )

    voice_info = get_voice_by_code(voice)
    info(
        log,
        "job_request",
        chars=len(text),
        voice=voice_info.name if voice_info else voice,
        out=str(out_path),
        preview=text[:config.logging.text_preview_chars],
    )

    try:
        with SynthesisClient.from_config(config) as client:
            job = Orchestrator(client, config).run(
                text,
                voice,
                session_id,
                max_chunk_length=max_chunk_length,
                max_workers=args.max_workers,
            )
    except NoSuccessfulChunksError as e:
        return _emit_error(args, e, ExitCode.NETWORK_ERROR)
    except InputTooLongError as e:
        return _emit_error(args, e, ExitCode.TOO_LONG)
    except (InvalidInputError, NoSessionProvidedError) as e:
        return _emit_error(args, e, ExitCode.INVALID_INPUT)

    try:
        write_artifact(out_path, job.audio, overwrite=args.force)
    except FileExistsError as e:
        return _emit_error(args, InvalidInputError(str(e)), ExitCode.OUTPUT_EXISTS)

    payload = {"ok": True, "dry_run": False, "out": str(out_path), **job.summary()}
    if args.json:
        print(json.dumps(payload, ensure_ascii=False))
    else:
        for message in payload.pop("messages"):
            print(f"  {message}")
        print(payload)
    print("CLI_OK")
    return int(ExitCode.SUCCESS)


if __name__ == "__main__":
    raise SystemExit(main())
