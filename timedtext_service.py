"""
Timed-text fetching for a selected caption track.

Downloads the caption payload behind a track's base URL (optionally machine
translated through ``tlang``) and decodes it into a TranscriptResult.
"""

from typing import Optional

from caption_xml import CaptionXmlDecoder
from log_events import StageTimer, evt
from logging_setup import get_logger, mask_url
from transcript_errors import PoTokenRequired
from transcript_models import TranscriptResult, TranscriptTrack
from youtube_http import YouTubeHttpSession

logger = get_logger(__name__)

TRANSLATION_PARAM = "tlang"
PO_TOKEN_MARKER = "&exp=xpe"


def build_timedtext_url(track: TranscriptTrack, translate_to: Optional[str] = None) -> str:
    url = track.base_url
    if translate_to:
        url = f"{url}&{TRANSLATION_PARAM}={translate_to}"
    return url


class TranscriptContentFetcher:
    """Fetch and decode the caption payload of one TranscriptTrack."""

    def __init__(self, http: YouTubeHttpSession, preserve_formatting: bool = False):
        self.http = http
        self.decoder = CaptionXmlDecoder(preserve_formatting=preserve_formatting)

    def fetch(self, video_id: str, track: TranscriptTrack, translate_to: Optional[str] = None) -> TranscriptResult:
        """
        Args:
            video_id: video the track belongs to
            track: catalog entry to download
            translate_to: language code to machine translate into

        Raises:
            PoTokenRequired: the track URL is a proof-of-origin protected
                stream; raised before any request is made
            IpBlocked, HttpError: transport failures
            XmlParseError: the payload is not valid timed-text XML
        """
        translate_to = translate_to or None
        url = build_timedtext_url(track, translate_to)
        if PO_TOKEN_MARKER in url:
            evt("timedtext_po_token_required", video_id=video_id, language_code=track.language_code)
            raise PoTokenRequired(video_id)

        with StageTimer("timedtext", video_id=video_id, language_code=track.language_code,
                        translate_to=translate_to):
            response = self.http.get(url, video_id)
            items = self.decoder.decode(response.text, video_id)

        evt("timedtext_decoded", video_id=video_id, url=mask_url(url), items=len(items))

        return TranscriptResult(
            video_id=video_id,
            language=self._resolve_language(track, translate_to),
            language_code=translate_to or track.language_code,
            is_generated=track.is_generated or translate_to is not None,
            is_translatable=track.is_translatable,
            items=items,
        )

    @staticmethod
    def _resolve_language(track: TranscriptTrack, translate_to: Optional[str]) -> str:
        if translate_to is None:
            return track.language
        translation = track.translation_language(translate_to)
        if translation is None:
            logger.warning(
                f"Translation language {translate_to} not listed for track {track.language_code}, "
                f"reporting the source language name"
            )
            return track.language
        return translation.language
