#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure local package is importable when running from source.
SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from splitter.audio import cut, ensure_input_exists, file_size, probe, remove_outputs
from splitter.config import load_env
from splitter.errors import InvalidArgumentError, SplitterError
from splitter.limits import PROG, check_chunk_duration, check_chunk_size, check_part, check_ready_for_split
from splitter.models import ChunkPlan
from splitter.openai_engine import transcribe_chunk_openai, write_transcript
from splitter.paths import CHUNK, PART
from splitter.planner import DURATION_LIMIT_SEC, PLANNED_MAX_DURATION_SEC, plan_chunks, plan_equal_parts
from splitter.units import format_duration, format_size, parse_size_limit

__version__ = "0.1.0"

COMMANDS = ("inspect", "chunk", "split", "transcribe")

logger = logging.getLogger(PROG)


def report_created(plan: ChunkPlan, outputs: list[Path]) -> None:
    for window, out_path in zip(plan, outputs):
        print(
            f"Created {out_path.name} "
            f"(start: {float(window.start_sec):.3f}s, duration: {float(window.duration_sec):.3f}s)"
        )


def command_inspect(args: argparse.Namespace) -> int:
    ensure_input_exists(args.input)
    source = Path(args.input)
    metadata = probe(source)
    size = file_size(source)

    print(f"File: {args.input}")
    print(f"Codec: {metadata.codec_name or 'unknown'}")
    print(f"Container: {metadata.format_name or 'unknown'}")
    print(f"Duration: {format_duration(metadata.duration_sec)} ({float(metadata.duration_sec):.3f}s)")
    print(f"Bitrate: {metadata.bitrate_bps / 1000:.0f} kb/s ({metadata.bitrate_bps} bit/s)")
    print(f"Size: {format_size(size)} ({size} bytes)")
    return 0


def command_chunk(args: argparse.Namespace) -> int:
    max_bytes = parse_size_limit(args.max_size)
    ensure_input_exists(args.input)
    source = Path(args.input)

    metadata = probe(source)
    plan = plan_chunks(
        metadata.duration_sec,
        metadata.bitrate_bps,
        max_bytes,
        PLANNED_MAX_DURATION_SEC,
        fit_duration_sec=DURATION_LIMIT_SEC,
    )
    logger.info("planned %d chunk(s) for %s", len(plan), source)

    outputs = cut(source, plan, CHUNK)
    report_created(plan, outputs)
    return 0


def command_split(args: argparse.Namespace) -> int:
    if args.parts < 1:
        raise InvalidArgumentError("parts must be at least 1")

    ensure_input_exists(args.input)
    source = Path(args.input)
    metadata = probe(source)
    check_ready_for_split(args.input, file_size(source), metadata.duration_sec)

    plan = plan_equal_parts(metadata.duration_sec, args.parts, metadata.bitrate_bps)
    outputs = cut(source, plan, PART)
    try:
        for out_path in outputs:
            check_part(out_path, file_size(out_path), probe(out_path).duration_sec)
    except SplitterError:
        remove_outputs(outputs)
        raise

    report_created(plan, outputs)
    return 0


def command_transcribe(args: argparse.Namespace) -> int:
    ensure_input_exists(args.input)
    source = Path(args.input)
    check_chunk_size(args.input, file_size(source))
    check_chunk_duration(args.input, probe(source).duration_sec)

    text = transcribe_chunk_openai(source)
    transcript = write_transcript(source, text)
    print(f"Transcript saved to '{transcript.path}'")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Inspect, chunk, split and transcribe audio files with ffmpeg",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="log ffmpeg/ffprobe calls and uploads")
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect", help="show codec, duration and bitrate of a file")
    inspect.add_argument("input", help="audio file to inspect")
    inspect.set_defaults(func=command_inspect)

    chunk = sub.add_parser("chunk", help="chunk a file into segments within the upload limits")
    chunk.add_argument("input", help="audio file to chunk")
    chunk.add_argument(
        "--max-size",
        default="25MB",
        help="maximum chunk size, e.g. 25MB, 500KB or 1000000B (default: %(default)s)",
    )
    chunk.set_defaults(func=command_chunk)

    split = sub.add_parser("split", help="split an already compliant chunk into N sequential parts")
    split.add_argument("input", help="chunk to split further")
    split.add_argument("--parts", type=int, required=True, help="number of parts to create")
    split.set_defaults(func=command_split)

    transcribe = sub.add_parser("transcribe", help="transcribe a chunk with OpenAI")
    transcribe.add_argument("input", help="audio chunk to transcribe")
    transcribe.set_defaults(func=command_transcribe)

    return parser


def normalize_argv(argv: list[str]) -> list[str]:
    """Treat ``audio_splitter_cli <file>`` as ``audio_splitter_cli inspect <file>``."""
    for pos, token in enumerate(argv):
        if token.startswith("-"):
            continue
        if token not in COMMANDS:
            return argv[:pos] + ["inspect"] + argv[pos:]
        break
    return argv


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    load_env()
    parser = build_parser()
    args = parser.parse_args(normalize_argv(list(sys.argv[1:] if argv is None else argv)))
    configure_logging(args.verbose)

    try:
        return int(args.func(args))
    except SplitterError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
