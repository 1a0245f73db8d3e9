"""
Event helper functions for structured JSON logging.

Consistent event emission and stage timing for the transcript pipeline.
"""

import logging
import time
from typing import Optional

logger = logging.getLogger('transcripts.events')


def evt(event: str, **fields) -> None:
    """
    Emit a structured event with consistent field naming.

    Example:
        evt("watch_page_fetched", video_id="dQw4w9WgXcQ", bytes=512000)
        evt("stage_result", stage="player_api", outcome="success", dur_ms=420)
    """
    event_data = {"event": event}
    event_data.update(fields)
    logger.info("", extra=event_data)


class StageTimer:
    """
    Context manager for automatic stage timing with structured logging.

    Emits stage_start on entry and stage_result on exit with the duration;
    exceptions are reported with outcome=error and re-raised.

    Example:
        with StageTimer("watch_page", video_id=video_id):
            html = fetch_page()
    """

    def __init__(self, stage: str, **context_fields):
        self.stage = stage
        self.context_fields = context_fields
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.monotonic()
        evt("stage_start", stage=self.stage, **self.context_fields)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        duration_ms = int((time.monotonic() - self.start_time) * 1000) if self.start_time else 0

        event_fields = {
            "stage": self.stage,
            "outcome": "success" if exc_type is None else "error",
            "dur_ms": duration_ms,
            **self.context_fields,
        }
        if exc_type is not None:
            message_lines = str(exc_value).splitlines() or [""]
            event_fields["detail"] = f"{exc_type.__name__}: {message_lines[0]}"
            event_fields["error_type"] = classify_error_type(exc_value)

        evt("stage_result", **event_fields)
        return False


def classify_error_type(exception: BaseException) -> str:
    """
    Classify an exception into a coarse error type for structured logging.

    Returns:
        One of blocked, unplayable, no_transcript, translation_error,
        parse_error, network_error, input_error, service_error
    """
    # imported late so log_events stays importable from every module
    from transcript_errors import (
        AgeRestricted, HttpError, InvalidVideoId, JsonParseError,
        NoTranscriptFound, NotTranslatable, PoTokenRequired, RequestBlockedError,
        TranscriptsDisabled, TranslationLanguageNotAvailable, VideoUnavailable,
        VideoUnplayable, XmlParseError, YouTubeDataUnparsable,
        FailedToCreateConsentCookie,
    )

    if isinstance(exception, (RequestBlockedError, FailedToCreateConsentCookie)):
        return "blocked"
    if isinstance(exception, (AgeRestricted, VideoUnavailable, VideoUnplayable, PoTokenRequired)):
        return "unplayable"
    if isinstance(exception, (TranscriptsDisabled, NoTranscriptFound)):
        return "no_transcript"
    if isinstance(exception, (NotTranslatable, TranslationLanguageNotAvailable)):
        return "translation_error"
    if isinstance(exception, (JsonParseError, XmlParseError, YouTubeDataUnparsable)):
        return "parse_error"
    if isinstance(exception, HttpError):
        return "network_error"
    if isinstance(exception, InvalidVideoId):
        return "input_error"
    return "service_error"
