from __future__ import annotations

import os

from dotenv import find_dotenv, load_dotenv

from .errors import InvalidArgumentError, MissingApiKeyError

DEFAULT_TRANSCRIBE_MODEL = "gpt-4o-transcribe"
DEFAULT_REQUEST_TIMEOUT_SEC = 600.0


def load_env() -> None:
    # Values already present in the environment win over the .env file.
    load_dotenv(find_dotenv(usecwd=True), override=False)


def _float_env(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise InvalidArgumentError(f"{name} must be a number, got '{raw}'") from exc
    if value < 0:
        raise InvalidArgumentError(f"{name} cannot be negative")
    return value


def ffmpeg_bin() -> str:
    return os.environ.get("FFMPEG_BIN", "ffmpeg")


def ffprobe_bin() -> str:
    return os.environ.get("FFPROBE_BIN", "ffprobe")


def subprocess_timeout_sec() -> float | None:
    return _float_env("SPLITTER_FFMPEG_TIMEOUT_SEC", None)


def request_timeout_sec() -> float:
    return _float_env("OPENAI_REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC)


def transcribe_model() -> str:
    return os.environ.get("OPENAI_TRANSCRIBE_MODEL", "").strip() or DEFAULT_TRANSCRIBE_MODEL


def openai_api_key() -> str:
    if "OPENAI_API_KEY" not in os.environ:
        raise MissingApiKeyError("OPENAI_API_KEY environment variable is required for transcription")
    api_key = os.environ["OPENAI_API_KEY"].strip()
    if not api_key:
        raise MissingApiKeyError("OPENAI_API_KEY cannot be empty")
    return api_key
