"""
Data model for transcript catalogs and fetched transcripts.

Tracks, items and results are frozen dataclasses; a TranscriptCatalog owns its
tracks and hands out the same objects from every lookup.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from transcript_errors import InvalidVideoId, NoTranscriptFound

VIDEO_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{11}")


class VideoId(str):
    """An 11 character YouTube video identifier, validated on construction."""

    __slots__ = ()

    def __new__(cls, value: str):
        if not isinstance(value, str) or not VIDEO_ID_PATTERN.fullmatch(value):
            raise InvalidVideoId(str(value))
        return super().__new__(cls, value)


@dataclass(frozen=True)
class TranslationLanguage:
    language_code: str
    language: str


@dataclass(frozen=True)
class TranscriptItem:
    """One caption cue, times in seconds as given by the payload."""
    text: str
    start: float
    duration: float


@dataclass(frozen=True)
class TranscriptTrack:
    """A selectable caption track of one video."""
    video_id: str
    language_code: str
    language: str
    is_generated: bool
    is_translatable: bool
    base_url: str
    translation_languages: Tuple[TranslationLanguage, ...] = ()

    def translation_language(self, language_code: str):
        """Return the TranslationLanguage for a code, or None if not offered."""
        for translation in self.translation_languages:
            if translation.language_code == language_code:
                return translation
        return None

    def __str__(self) -> str:
        suffix = " [TRANSLATABLE]" if self.is_translatable else ""
        return f'{self.language_code} ("{self.language}"){suffix}'


@dataclass(frozen=True)
class TranscriptResult:
    """A fetched transcript. Items keep the order of the caption payload."""
    video_id: str
    language: str
    language_code: str
    is_generated: bool
    is_translatable: bool
    items: Tuple[TranscriptItem, ...] = ()

    def __iter__(self) -> Iterator[TranscriptItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def to_raw_data(self) -> List[Dict[str, Any]]:
        return [
            {"text": item.text, "start": item.start, "duration": item.duration}
            for item in self.items
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "video_id": self.video_id,
            "language": self.language,
            "language_code": self.language_code,
            "is_generated": self.is_generated,
            "is_translatable": self.is_translatable,
            "transcript": self.to_raw_data(),
        }


@dataclass
class TranscriptCatalog:
    """
    Every caption track available for one video.

    Authored and generated tracks live in separate mappings keyed by language
    code. When upstream lists both kinds for one code, both are kept and the
    lookup order decides which one is returned.
    """
    video_id: str
    manually_created: Mapping[str, TranscriptTrack] = field(default_factory=dict)
    generated: Mapping[str, TranscriptTrack] = field(default_factory=dict)
    translation_languages: Tuple[TranslationLanguage, ...] = ()

    def find_transcript(self, language_codes: Iterable[str]) -> TranscriptTrack:
        """
        Return the first track matching the preferred language codes.

        Codes are tried in order; for each code an authored track wins over a
        generated one, but an earlier code's generated track wins over a later
        code's authored track.

        Raises:
            NoTranscriptFound: if no code matches either mapping
        """
        return self._find(language_codes, (self.manually_created, self.generated))

    def find_manually_created_transcript(self, language_codes: Iterable[str]) -> TranscriptTrack:
        return self._find(language_codes, (self.manually_created,))

    def find_generated_transcript(self, language_codes: Iterable[str]) -> TranscriptTrack:
        return self._find(language_codes, (self.generated,))

    def all_transcripts(self) -> List[TranscriptTrack]:
        return list(self.manually_created.values()) + list(self.generated.values())

    def _find(self, language_codes: Iterable[str], mappings: Sequence[Mapping[str, TranscriptTrack]]) -> TranscriptTrack:
        requested = list(language_codes)
        for language_code in requested:
            for mapping in mappings:
                if language_code in mapping:
                    return mapping[language_code]
        raise NoTranscriptFound(self.video_id, requested, self)

    def __iter__(self) -> Iterator[TranscriptTrack]:
        return iter(self.all_transcripts())

    def __len__(self) -> int:
        return len(self.manually_created) + len(self.generated)

    def __str__(self) -> str:
        def describe(tracks) -> str:
            lines = [f" - {track}" for track in tracks]
            return "\n".join(lines) if lines else "None"

        translations = [
            f' - {t.language_code} ("{t.language}")' for t in self.translation_languages
        ]
        return (
            f"For this video ({self.video_id}) transcripts are available in the following languages:\n\n"
            f"(MANUALLY CREATED)\n{describe(self.manually_created.values())}\n\n"
            f"(GENERATED)\n{describe(self.generated.values())}\n\n"
            f"(TRANSLATION LANGUAGES)\n{chr(10).join(translations) if translations else 'None'}"
        )
