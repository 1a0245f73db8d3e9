"""
Transcript catalog discovery through the watch page and the youtubei player API.

Pipeline, single pass per call:

    watch page -> [consent handshake -> watch page again] -> INNERTUBE_API_KEY
        -> youtubei/v1/player (ANDROID client) -> playability gate -> caption tracks

Only the consent retry re-issues a request; every other failure propagates.
Nothing (page, API key) is cached between calls.
"""

import re
from typing import Any, Dict, Optional

from caption_tracks import CaptionTrackExtractor
from consent_handler import ConsentHandshake
from log_events import StageTimer, evt
from logging_setup import get_logger, set_video_ctx
from playability import PlayabilityGate
from transcript_errors import (
    FailedToCreateConsentCookie,
    IpBlocked,
    JsonParseError,
    YouTubeDataUnparsable,
)
from transcript_models import TranscriptCatalog
from youtube_http import YouTubeHttpSession

logger = get_logger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
INNERTUBE_API_URL = "https://www.youtube.com/youtubei/v1/player?key={api_key}"
INNERTUBE_CONTEXT = {
    "client": {
        "clientName": "ANDROID",
        "clientVersion": "20.10.38",
    }
}

API_KEY_PATTERN = re.compile(r'"INNERTUBE_API_KEY":\s*"([a-zA-Z0-9_-]+)"')
RECAPTCHA_MARKER = 'g-recaptcha'


def extract_innertube_api_key(html: str, video_id: str) -> str:
    """
    Pull the INNERTUBE_API_KEY out of the watch page.

    Raises:
        IpBlocked: the page is a captcha challenge (checked before the key)
        YouTubeDataUnparsable: no key in the page
    """
    if RECAPTCHA_MARKER in html:
        evt("watch_page_captcha", video_id=video_id)
        raise IpBlocked(video_id)

    match = API_KEY_PATTERN.search(html)
    if match is None:
        evt("innertube_api_key_missing", video_id=video_id, html_bytes=len(html))
        raise YouTubeDataUnparsable(video_id)
    return match.group(1)


def build_player_request(video_id: str) -> Dict[str, Any]:
    return {"context": INNERTUBE_CONTEXT, "videoId": video_id}


class TranscriptCatalogFetcher:
    """
    Produce the TranscriptCatalog of one video.

    Collaborators are injected so tests and callers can swap the consent
    strategy, the playability gate or the track extractor.
    """

    def __init__(
        self,
        http: YouTubeHttpSession,
        consent_handler: Optional[ConsentHandshake] = None,
        playability_gate: Optional[PlayabilityGate] = None,
        track_extractor: Optional[CaptionTrackExtractor] = None,
    ):
        self.http = http
        self.consent_handler = consent_handler or ConsentHandshake()
        self.playability_gate = playability_gate or PlayabilityGate()
        self.track_extractor = track_extractor or CaptionTrackExtractor()

    def fetch_catalog(self, video_id: str, requested: Optional[str] = None) -> TranscriptCatalog:
        """
        Args:
            video_id: resolved VideoId
            requested: identifier as the caller supplied it, for diagnostics

        Returns:
            TranscriptCatalog with at least one track
        """
        set_video_ctx(video_id=video_id)

        with StageTimer("watch_page", video_id=video_id):
            html = self.fetch_watch_page(video_id)

        api_key = extract_innertube_api_key(html, video_id)

        with StageTimer("player_api", video_id=video_id):
            player_response = self.fetch_player_response(video_id, api_key)

        self.playability_gate.check(video_id, player_response, requested)
        return self.track_extractor.extract(video_id, player_response)

    def fetch_watch_page(self, video_id: str) -> str:
        url = WATCH_URL.format(video_id=video_id)
        html = self.http.get(url, video_id).text

        if not self.consent_handler.is_consent_wall(html):
            evt("watch_page_fetched", video_id=video_id, html_bytes=len(html))
            return html

        evt("consent_wall_detected", video_id=video_id)
        self.consent_handler.acknowledge(self.http, html, video_id)

        html = self.http.get(url, video_id).text
        if self.consent_handler.is_consent_wall(html):
            evt("consent_wall_persisted", video_id=video_id)
            raise FailedToCreateConsentCookie(video_id)

        evt("watch_page_fetched", video_id=video_id, html_bytes=len(html), consent_retry=True)
        return html

    def fetch_player_response(self, video_id: str, api_key: str) -> Dict[str, Any]:
        response = self.http.post_json(
            INNERTUBE_API_URL.format(api_key=api_key),
            build_player_request(video_id),
            video_id,
        )
        try:
            data = response.json()
        except ValueError as e:
            raise JsonParseError(video_id, f"Failed to parse InnerTube response: {e}") from e

        if not isinstance(data, dict):
            raise JsonParseError(video_id, f"Expected a JSON object, got {type(data).__name__}")
        return data
