from __future__ import annotations

import json
import logging
import shutil
import subprocess
from fractions import Fraction
from pathlib import Path
from typing import Any

from .config import ffmpeg_bin, ffprobe_bin, subprocess_timeout_sec
from .errors import CutFailedError, InputNotFoundError, ProbeFailedError
from .models import ChunkPlan, MediaMetadata
from .paths import CHUNK, output_path

logger = logging.getLogger(__name__)


def run(cmd: list[str]) -> subprocess.CompletedProcess:
    logger.debug("running %s", " ".join(cmd))
    return subprocess.run(
        cmd,
        check=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        timeout=subprocess_timeout_sec(),
    )


def _stderr_text(exc: subprocess.CalledProcessError) -> str:
    raw = exc.stderr or b""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return raw.strip()


def ensure_input_exists(path: str | Path) -> None:
    # Report the path exactly as the caller spelled it.
    if not Path(path).exists():
        raise InputNotFoundError(f"input file '{path}' was not found")


def file_size(path: Path) -> int:
    ensure_input_exists(path)
    return path.stat().st_size


def _parse_positive(raw: Any, what: str) -> Fraction:
    if raw in (None, "", "N/A"):
        raise ProbeFailedError(f"{what} missing from ffprobe output")
    try:
        value = Fraction(str(raw).strip())
    except (ValueError, ZeroDivisionError) as exc:
        raise ProbeFailedError(f"failed to parse {what} '{raw}' from ffprobe output") from exc
    if value <= 0:
        raise ProbeFailedError(f"ffprobe reported a non-positive {what}: {raw}")
    return value


def parse_probe_payload(payload: dict[str, Any]) -> MediaMetadata:
    fmt = payload.get("format") or {}
    streams = payload.get("streams") or []
    stream = streams[0] if streams else {}

    duration = _parse_positive(fmt.get("duration"), "duration")
    raw_bitrate = fmt.get("bit_rate")
    if raw_bitrate in (None, "", "N/A"):
        raw_bitrate = stream.get("bit_rate")
    bitrate = int(_parse_positive(raw_bitrate, "bitrate"))
    if bitrate <= 0:
        raise ProbeFailedError(f"ffprobe reported a bitrate below 1 bit/s: {raw_bitrate}")

    return MediaMetadata(
        duration_sec=duration,
        bitrate_bps=bitrate,
        codec_name=stream.get("codec_name") or None,
        format_name=fmt.get("format_name") or None,
    )


def probe(source: Path) -> MediaMetadata:
    ensure_input_exists(source)
    cmd = [
        ffprobe_bin(),
        "-v",
        "error",
        "-select_streams",
        "a:0",
        "-show_entries",
        "format=duration,bit_rate,format_name:stream=bit_rate,codec_name",
        "-of",
        "json",
        str(source),
    ]
    try:
        completed = run(cmd)
    except FileNotFoundError as exc:
        raise ProbeFailedError(f"failed to run {cmd[0]}, is it installed and on PATH?") from exc
    except subprocess.CalledProcessError as exc:
        raise ProbeFailedError(f"ffprobe returned a non-zero status:\n{_stderr_text(exc)}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ProbeFailedError(f"ffprobe timed out after {exc.timeout}s on '{source}'") from exc

    try:
        payload = json.loads(completed.stdout.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProbeFailedError("failed to parse ffprobe JSON output") from exc
    if not isinstance(payload, dict):
        raise ProbeFailedError("failed to parse ffprobe JSON output")

    metadata = parse_probe_payload(payload)
    logger.debug(
        "probed %s: %.3fs at %d bit/s (%s)",
        source,
        float(metadata.duration_sec),
        metadata.bitrate_bps,
        metadata.codec_name,
    )
    return metadata


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def remove_outputs(paths: list[Path]) -> None:
    for path in paths:
        _discard(path)


def render_chunk(source: Path, out_path: Path, start_sec: float, duration_sec: float) -> None:
    cmd = [
        ffmpeg_bin(),
        "-hide_banner",
        "-loglevel",
        "error",
        "-y",
        "-i",
        str(source),
        "-ss",
        f"{start_sec:.3f}",
        "-t",
        f"{duration_sec:.3f}",
        "-c",
        "copy",
        str(out_path),
    ]
    try:
        run(cmd)
    except FileNotFoundError as exc:
        raise CutFailedError(f"failed to run {cmd[0]}, is it installed and on PATH?") from exc
    except subprocess.CalledProcessError as exc:
        _discard(out_path)
        raise CutFailedError(f"ffmpeg failed to create {out_path.name}:\n{_stderr_text(exc)}") from exc
    except subprocess.TimeoutExpired as exc:
        _discard(out_path)
        raise CutFailedError(f"ffmpeg timed out after {exc.timeout}s while creating {out_path.name}") from exc


def copy_whole(source: Path, out_path: Path) -> None:
    try:
        shutil.copyfile(source, out_path)
    except OSError as exc:
        _discard(out_path)
        raise CutFailedError(f"failed to copy '{source}' to {out_path.name}: {exc}") from exc


def cut(source: Path, plan: ChunkPlan, kind: str = CHUNK) -> list[Path]:
    """Materialise every window of ``plan`` as a file next to ``source``.

    A plan with one window over the whole source is a plain byte copy. On failure the
    partial output is removed and :class:`CutFailedError` propagates; files created
    for earlier windows are left in place.
    """
    ensure_input_exists(source)
    outputs: list[Path] = []
    for window in plan:
        out_path = output_path(source, window.idx, kind)
        if out_path.resolve() == source.resolve():
            raise CutFailedError(f"refusing to overwrite the input file '{source}'")
        if plan.is_whole_source:
            copy_whole(source, out_path)
        else:
            render_chunk(source, out_path, float(window.start_sec), float(window.duration_sec))
        logger.info("created %s [%.3fs, %.3fs)", out_path.name, float(window.start_sec), float(window.end_sec))
        outputs.append(out_path)
    return outputs
