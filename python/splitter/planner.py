from __future__ import annotations

import math
from fractions import Fraction

from .errors import InvalidArgumentError, InvalidPlanError, PartTooLargeError
from .models import ChunkPlan, ChunkWindow, Seconds
from .units import bytes_for_duration, duration_for_bytes, format_size

DEFAULT_MAX_BYTES = 25 * 1000 * 1000
DURATION_LIMIT_SEC = 1400
# `chunk` plans windows this far below the transcription ceiling.
CHUNK_DURATION_BUFFER_SEC = 100
PLANNED_MAX_DURATION_SEC = DURATION_LIMIT_SEC - CHUNK_DURATION_BUFFER_SEC

# Share of the byte budget a planned window may fill. The rest is left for
# container overhead and bitrate variance.
BUDGET_NUMERATOR = 985
BUDGET_DENOMINATOR = 1000


def _as_seconds(value: int | float | Fraction) -> Seconds:
    value = Fraction(value)
    return value.numerator if value.denominator == 1 else value


def _require_positive(name: str, value) -> None:
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be greater than zero")


def usable_bytes(max_bytes: int) -> int:
    return max_bytes * BUDGET_NUMERATOR // BUDGET_DENOMINATOR


def fits_limits(
    duration_sec: int | float | Fraction,
    bitrate_bps: int,
    max_bytes: int,
    max_duration_sec: int | float | Fraction,
) -> bool:
    return bytes_for_duration(duration_sec, bitrate_bps) <= max_bytes and Fraction(duration_sec) <= Fraction(max_duration_sec)


def _build_plan(bounds: list[Seconds], total: Seconds) -> ChunkPlan:
    windows = tuple(
        ChunkWindow(idx=idx, start_sec=start, end_sec=end)
        for idx, (start, end) in enumerate(zip(bounds, bounds[1:]))
    )
    return ChunkPlan(windows=windows, total_sec=total)


def plan_chunks(
    total_sec: int | float | Fraction,
    bitrate_bps: int,
    max_bytes: int,
    max_duration_sec: int | float | Fraction,
    *,
    fit_duration_sec: int | float | Fraction | None = None,
) -> ChunkPlan:
    """Cut ``[0, total_sec)`` into windows that respect both the byte and the duration limit.

    Every window but the last is ``min(byte-bound length, duration limit)`` whole
    seconds long; the last one ends exactly at ``total_sec``. A source that already
    fits both limits yields a single window over the whole file. When given,
    ``fit_duration_sec`` replaces ``max_duration_sec`` for that whole-file check only.
    """
    _require_positive("duration", total_sec)
    _require_positive("bitrate", bitrate_bps)
    _require_positive("max_bytes", max_bytes)
    _require_positive("max_duration_sec", max_duration_sec)

    total = _as_seconds(total_sec)
    if fit_duration_sec is None:
        fit_duration_sec = max_duration_sec
    _require_positive("fit_duration_sec", fit_duration_sec)
    if fits_limits(total, bitrate_bps, max_bytes, fit_duration_sec):
        return _build_plan([0, total], total)

    by_bytes = duration_for_bytes(usable_bytes(max_bytes), bitrate_bps)
    window = min(by_bytes, math.floor(max_duration_sec))
    if window <= 0:
        raise InvalidPlanError(
            f"a {bitrate_bps} bit/s source cannot fit one second of audio into "
            f"{format_size(max_bytes)}; use a larger size limit or a lower-bitrate source"
        )

    bounds: list[Seconds] = []
    start: Seconds = 0
    while start < total:
        bounds.append(start)
        start += window
    bounds.append(total)
    return _build_plan(bounds, total)


def plan_equal_parts(
    total_sec: int | float | Fraction,
    parts: int,
    bitrate_bps: int,
    max_bytes: int = DEFAULT_MAX_BYTES,
    max_duration_sec: int | float | Fraction = DURATION_LIMIT_SEC,
) -> ChunkPlan:
    """Divide a compliant chunk into ``parts`` windows of ``floor(total / parts)`` seconds.

    The last window absorbs the remainder. Raises :class:`PartTooLargeError` if any
    window would break the size or duration limit; oversized sources go through
    :func:`plan_chunks` instead.
    """
    if isinstance(parts, bool) or not isinstance(parts, int) or parts < 1:
        raise InvalidArgumentError("parts must be a whole number of at least 1")
    _require_positive("duration", total_sec)
    _require_positive("bitrate", bitrate_bps)

    total = _as_seconds(total_sec)
    part = math.floor(Fraction(total) / parts)
    if part <= 0:
        raise InvalidPlanError(f"cannot split {float(total):.3f}s into {parts} parts of at least one second")

    bounds: list[Seconds] = [idx * part for idx in range(parts)]
    bounds.append(total)
    plan = _build_plan(bounds, total)

    for window in plan:
        if not fits_limits(window.duration_sec, bitrate_bps, max_bytes, max_duration_sec):
            raise PartTooLargeError(
                f"part {window.idx + 1} of {parts} ({float(window.duration_sec):.3f}s) exceeds the "
                f"{format_size(max_bytes)} / {max_duration_sec} second limits; run chunk first"
            )
    return plan
