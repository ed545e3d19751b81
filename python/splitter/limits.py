from __future__ import annotations

from fractions import Fraction
from pathlib import Path

from .errors import DurationExceededError, PartTooLargeError, SizeExceededError
from .planner import DEFAULT_MAX_BYTES, DURATION_LIMIT_SEC

PROG = "audio_splitter_cli"
MAX_SIZE_LABEL = f"{DEFAULT_MAX_BYTES // (1000 * 1000)} MB"


def check_chunk_size(path: str | Path, size_bytes: int) -> None:
    if size_bytes > DEFAULT_MAX_BYTES:
        raise SizeExceededError(f"chunk '{path}' is larger than the {MAX_SIZE_LABEL} limit")


def check_chunk_duration(path: str | Path, duration_sec: Fraction) -> None:
    if duration_sec > DURATION_LIMIT_SEC:
        raise DurationExceededError(
            f"chunk '{path}' is longer than the {DURATION_LIMIT_SEC} second limit for transcription"
        )


def check_ready_for_split(path: str | Path, size_bytes: int, duration_sec: Fraction) -> None:
    if size_bytes > DEFAULT_MAX_BYTES or duration_sec > DURATION_LIMIT_SEC:
        raise PartTooLargeError(f"input '{path}' exceeds the chunk limits; run `{PROG} chunk {path}` first")


def check_part(path: Path, size_bytes: int, duration_sec: Fraction) -> None:
    if size_bytes > DEFAULT_MAX_BYTES:
        raise PartTooLargeError(f"{path.name} exceeded the {MAX_SIZE_LABEL} limit")
    if duration_sec > DURATION_LIMIT_SEC:
        raise PartTooLargeError(f"{path.name} exceeded the {DURATION_LIMIT_SEC} second limit")
