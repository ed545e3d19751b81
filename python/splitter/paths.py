from __future__ import annotations

from pathlib import Path

CHUNK = "chunk"
PART = "part"

# Chunks are numbered from 000, parts from 001.
_FIRST_INDEX = {CHUNK: 0, PART: 1}


def output_path(source: Path, idx: int, kind: str = CHUNK) -> Path:
    if kind not in _FIRST_INDEX:
        raise ValueError(f"unknown output kind '{kind}'")
    stem = source.stem or "chunk"
    number = idx + _FIRST_INDEX[kind]
    return source.parent / f"{stem}_{kind}{number:03d}{source.suffix}"


def transcript_path(chunk: Path) -> Path:
    name = chunk.name or "transcript"
    return chunk.parent / f"{name}.txt"
