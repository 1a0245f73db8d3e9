"""
Transcript service: the public entry point for listing and fetching captions.

One TranscriptService is one logical session: it owns the HTTP session (and
its cookie jar) and the pre-request delay. Independent instances can be used
side by side in one process.
"""

from typing import Iterable, Optional, Sequence

from caption_tracks import CaptionTrackExtractor
from consent_handler import ConsentHandshake
from log_events import evt
from logging_setup import clear_video_ctx, get_logger, set_video_ctx
from playability import PlayabilityGate
from timedtext_service import TranscriptContentFetcher
from transcript_config import TranscriptConfig
from transcript_errors import NotTranslatable, TranslationLanguageNotAvailable
from transcript_models import TranscriptCatalog, TranscriptResult, TranscriptTrack
from video_id_resolver import resolve_video_id
from youtube_http import DEFAULT_DELAY_MS, YouTubeHttpSession
from youtubei_service import TranscriptCatalogFetcher

logger = get_logger(__name__)

DEFAULT_LANGUAGES = ("en",)


class TranscriptService:
    """
    List, fetch and translate YouTube caption transcripts.

    Example:
        service = TranscriptService(delay_ms=500)
        result = service.fetch_transcript("https://youtu.be/dQw4w9WgXcQ", ["de", "en"])
        for item in result:
            print(item.start, item.text)
    """

    def __init__(
        self,
        delay_ms: int = DEFAULT_DELAY_MS,
        http: Optional[YouTubeHttpSession] = None,
        consent_handler: Optional[ConsentHandshake] = None,
        preserve_formatting: bool = False,
    ):
        self.http = http if http is not None else YouTubeHttpSession(delay_ms=delay_ms)
        self.preserve_formatting = preserve_formatting
        self.catalog_fetcher = TranscriptCatalogFetcher(
            self.http,
            consent_handler=consent_handler,
            playability_gate=PlayabilityGate(),
            track_extractor=CaptionTrackExtractor(),
        )
        self.content_fetcher = TranscriptContentFetcher(self.http, preserve_formatting=preserve_formatting)

    @classmethod
    def from_config(cls, config: TranscriptConfig) -> 'TranscriptService':
        http = YouTubeHttpSession(
            delay_ms=config.request_delay_ms,
            timeout=config.http_timeout,
            accept_language=config.accept_language,
            proxies=config.proxies,
        )
        return cls(http=http, preserve_formatting=config.preserve_formatting)

    @property
    def delay_ms(self) -> int:
        return self.http.delay_ms

    def list_transcripts(self, video: str) -> TranscriptCatalog:
        """
        Return the catalog of caption tracks for a video id or URL.

        Raises:
            TranscriptError subclasses, see transcript_errors
        """
        video_id = resolve_video_id(video)
        try:
            return self.catalog_fetcher.fetch_catalog(video_id, requested=video)
        finally:
            clear_video_ctx()

    def fetch(self, video_id: str, track: TranscriptTrack, translate_to: Optional[str] = None) -> TranscriptResult:
        """Download one catalog track, optionally machine translated."""
        set_video_ctx(video_id=video_id)
        try:
            return self.content_fetcher.fetch(video_id, track, translate_to)
        finally:
            clear_video_ctx()

    def fetch_transcript(self, video: str, languages: Optional[Iterable[str]] = None) -> TranscriptResult:
        """
        Fetch the best matching transcript.

        Args:
            video: video id or URL
            languages: language codes in descending priority, default ["en"]
        """
        catalog = self.list_transcripts(video)
        track = catalog.find_transcript(list(languages or DEFAULT_LANGUAGES))
        evt("transcript_track_selected", video_id=catalog.video_id,
            language_code=track.language_code, is_generated=track.is_generated)
        return self.fetch(catalog.video_id, track)

    def translate_transcript(self, video: str, source_languages: Sequence[str], target_language: str) -> TranscriptResult:
        """
        Fetch a transcript machine translated into ``target_language``.

        Raises:
            NoTranscriptFound: no source track for ``source_languages``
            NotTranslatable: the chosen source track cannot be translated
            TranslationLanguageNotAvailable: target not offered for the track
        """
        catalog = self.list_transcripts(video)
        track = catalog.find_transcript(list(source_languages))
        return self.translate_track(catalog.video_id, track, target_language)

    def translate_track(self, video_id: str, track: TranscriptTrack, target_language: str) -> TranscriptResult:
        """Check translation preconditions, then fetch; no request on failure."""
        if not track.is_translatable:
            raise NotTranslatable(video_id)
        if track.translation_language(target_language) is None:
            raise TranslationLanguageNotAvailable(video_id, target_language)
        return self.fetch(video_id, track, translate_to=target_language)

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
