from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path
from typing import Iterator, Union

Seconds = Union[int, Fraction]


@dataclass(frozen=True, slots=True)
class MediaMetadata:
    duration_sec: Fraction
    bitrate_bps: int
    codec_name: str | None = None
    format_name: str | None = None


@dataclass(frozen=True, slots=True)
class ChunkWindow:
    idx: int
    start_sec: Seconds
    end_sec: Seconds

    @property
    def duration_sec(self) -> Seconds:
        return self.end_sec - self.start_sec


@dataclass(frozen=True, slots=True)
class ChunkPlan:
    """Ordered, gapless windows covering ``[0, total_sec)`` of one source."""

    windows: tuple[ChunkWindow, ...]
    total_sec: Seconds

    def __iter__(self) -> Iterator[ChunkWindow]:
        return iter(self.windows)

    def __len__(self) -> int:
        return len(self.windows)

    def __getitem__(self, idx: int) -> ChunkWindow:
        return self.windows[idx]

    @property
    def is_whole_source(self) -> bool:
        return len(self.windows) == 1 and self.windows[0].start_sec == 0 and self.windows[0].end_sec == self.total_sec


@dataclass(frozen=True, slots=True)
class Transcript:
    text: str
    path: Path
