"""Renderings of a TranscriptResult for files and terminals."""

import json
from typing import Dict, Iterable, List, Type

from transcript_models import TranscriptItem, TranscriptResult


class Formatter:
    """Base class: format one transcript or several."""

    def format_transcript(self, transcript: TranscriptResult) -> str:
        raise NotImplementedError

    def format_transcripts(self, transcripts: Iterable[TranscriptResult]) -> str:
        return "\n\n".join(self.format_transcript(t) for t in transcripts)


class TextFormatter(Formatter):
    def format_transcript(self, transcript: TranscriptResult) -> str:
        return "\n".join(item.text for item in transcript)


class JSONFormatter(Formatter):
    def __init__(self, indent: int = None):
        self.indent = indent

    def format_transcript(self, transcript: TranscriptResult) -> str:
        return json.dumps(transcript.to_dict(), indent=self.indent, ensure_ascii=False)

    def format_transcripts(self, transcripts: Iterable[TranscriptResult]) -> str:
        return json.dumps([t.to_dict() for t in transcripts], indent=self.indent, ensure_ascii=False)


class _TimedFormatter(Formatter):
    """Cue based formats; an item ends where the next one starts if they overlap."""

    separator = ","
    header = ""

    def format_timestamp(self, seconds: float) -> str:
        milliseconds = max(0, round(seconds * 1000))
        hours, milliseconds = divmod(milliseconds, 3600000)
        minutes, milliseconds = divmod(milliseconds, 60000)
        secs, milliseconds = divmod(milliseconds, 1000)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}{self.separator}{milliseconds:03d}"

    def _cue_end(self, items: List[TranscriptItem], index: int) -> float:
        item = items[index]
        end = item.start + item.duration
        if index + 1 < len(items) and items[index + 1].start < end:
            return items[index + 1].start
        return end

    def format_cue(self, index: int, start: str, end: str, text: str) -> str:
        raise NotImplementedError

    def format_transcript(self, transcript: TranscriptResult) -> str:
        items = list(transcript)
        cues = [
            self.format_cue(
                index + 1,
                self.format_timestamp(item.start),
                self.format_timestamp(self._cue_end(items, index)),
                item.text,
            )
            for index, item in enumerate(items)
        ]
        return self.header + "\n\n".join(cues) + "\n"


class SRTFormatter(_TimedFormatter):
    separator = ","

    def format_cue(self, index: int, start: str, end: str, text: str) -> str:
        return f"{index}\n{start} --> {end}\n{text}"


class WebVTTFormatter(_TimedFormatter):
    separator = "."
    header = "WEBVTT\n\n"

    def format_cue(self, index: int, start: str, end: str, text: str) -> str:
        return f"{start} --> {end}\n{text}"


FORMATTERS: Dict[str, Type[Formatter]] = {
    "text": TextFormatter,
    "json": JSONFormatter,
    "srt": SRTFormatter,
    "webvtt": WebVTTFormatter,
}


def get_formatter(name: str) -> Formatter:
    try:
        return FORMATTERS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown format {name!r}, expected one of {sorted(FORMATTERS)}") from None
