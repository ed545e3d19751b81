from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import openai_api_key, request_timeout_sec, transcribe_model
from .errors import UploadFailedError
from .models import Transcript
from .paths import transcript_path

logger = logging.getLogger(__name__)


def _response_text(response: Any) -> str:
    if isinstance(response, str):
        return response
    if isinstance(response, dict):
        text = response.get("text")
    else:
        text = getattr(response, "text", None)
    if text is None:
        raise UploadFailedError("transcription response did not contain any text")
    return str(text)


def transcribe_chunk_openai(chunk_path: Path, *, model: str | None = None) -> str:
    api_key = openai_api_key()
    try:
        from openai import OpenAI
    except ImportError as exc:  # pragma: no cover - env dependent
        raise UploadFailedError("the openai package is missing; install the project dependencies") from exc

    client = OpenAI(api_key=api_key)
    model = model or transcribe_model()

    logger.info("uploading %s to %s", chunk_path.name, model)
    try:
        with chunk_path.open("rb") as audio_file:
            response = client.audio.transcriptions.create(
                model=model,
                file=audio_file,
                timeout=request_timeout_sec(),
            )
    except OSError as exc:
        raise UploadFailedError(f"failed to read '{chunk_path}': {exc}") from exc
    except Exception as exc:  # noqa: BLE001 - provider error typing is broad
        raise UploadFailedError(f"transcription request for '{chunk_path}' failed: {exc}") from exc

    text = _response_text(response)
    logger.info("received %d characters for %s", len(text), chunk_path.name)
    return text


def write_transcript(chunk_path: Path, text: str) -> Transcript:
    out_path = transcript_path(chunk_path)
    try:
        out_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise UploadFailedError(f"failed to write transcript to '{out_path}'") from exc
    return Transcript(text=text, path=out_path)
