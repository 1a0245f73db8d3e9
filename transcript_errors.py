"""
Error taxonomy for transcript retrieval.

Every failure raised by the pipeline is a TranscriptError subclass carrying the
video id it concerns, so callers can act on it without re-deriving context.
"""

from typing import List, Optional, Sequence

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class TranscriptError(Exception):
    """Base class for all transcript retrieval failures."""

    CAUSE_MESSAGE = ""

    def __init__(self, video_id: str, detail: Optional[str] = None):
        self.video_id = video_id
        self.detail = detail
        super().__init__(self._build_message())

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE

    def _build_message(self) -> str:
        message = (
            f"Could not retrieve a transcript for the video "
            f"{WATCH_URL.format(video_id=self.video_id)}! "
            f"This is most likely caused by:\n\n{self.cause}"
        )
        if self.detail:
            message += f"\n\nDetail: {self.detail}"
        return message


class InvalidVideoId(TranscriptError):
    CAUSE_MESSAGE = (
        "You provided an invalid video id. Make sure you are using the video id "
        "and NOT the url! YouTube video IDs must be 11 characters, or a valid "
        "YouTube URL."
    )

    def _build_message(self) -> str:
        message = f"Invalid video id: {self.video_id!r}. {self.cause}"
        if self.detail:
            message += f" ({self.detail})"
        return message


class HttpError(TranscriptError):
    """Transport failure or non-2xx status not classified otherwise."""

    CAUSE_MESSAGE = "Request to YouTube failed: {detail}"

    def __init__(self, video_id: str, detail: Optional[str] = None, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(video_id, detail)

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE.format(detail=self.detail or "unknown error")

    def _build_message(self) -> str:
        # detail is already part of the cause
        return (
            f"Could not retrieve a transcript for the video "
            f"{WATCH_URL.format(video_id=self.video_id)}! "
            f"This is most likely caused by:\n\n{self.cause}"
        )


class RequestBlockedError(TranscriptError):
    """Common base for the ways YouTube refuses to serve a client."""

    CAUSE_MESSAGE = (
        "YouTube is blocking requests from your IP. This usually happens when too "
        "many requests were made in a short time or the IP belongs to a cloud "
        "provider."
    )


class IpBlocked(RequestBlockedError):
    """HTTP 429 or a captcha challenge on the watch page."""


class RequestBlocked(RequestBlockedError):
    """Player endpoint asked to sign in to prove the client is not a bot."""

    CAUSE_MESSAGE = (
        "YouTube asked to sign in to confirm you're not a bot. Requests from "
        "this client are being flagged as automated."
    )


class FailedToCreateConsentCookie(TranscriptError):
    CAUSE_MESSAGE = "Failed to automatically give consent to saving cookies"


ConsentCookieCreationFailed = FailedToCreateConsentCookie


class YouTubeDataUnparsable(TranscriptError):
    CAUSE_MESSAGE = (
        "The data required to fetch the transcript is not parsable. This should "
        "not happen, please open an issue (make sure to include the video ID)!"
    )


class JsonParseError(TranscriptError):
    CAUSE_MESSAGE = "The player response returned by YouTube is not valid JSON"


class XmlParseError(TranscriptError):
    CAUSE_MESSAGE = "The caption payload returned by YouTube is not valid timed-text XML"


class AgeRestricted(TranscriptError):
    CAUSE_MESSAGE = (
        "This video is age-restricted. Transcripts of age-restricted videos "
        "cannot be retrieved without authentication."
    )


class VideoUnavailable(TranscriptError):
    CAUSE_MESSAGE = "The video is no longer available"


class VideoUnplayable(TranscriptError):
    CAUSE_MESSAGE = "The video is unplayable for the following reason: {reason}"

    def __init__(self, video_id: str, reason: Optional[str], sub_reasons: Optional[Sequence[str]] = None):
        self.reason = reason or ""
        self.sub_reasons: List[str] = list(sub_reasons or [])
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        cause = self.CAUSE_MESSAGE.format(reason=self.reason or "No reason specified!")
        if self.sub_reasons:
            cause += "\n\nAdditional details:\n" + "\n".join(f" - {sub}" for sub in self.sub_reasons)
        return cause


class TranscriptsDisabled(TranscriptError):
    CAUSE_MESSAGE = "Subtitles are disabled for this video"


class NoTranscriptFound(TranscriptError):
    CAUSE_MESSAGE = (
        "No transcripts were found for any of the requested language codes: {codes}"
    )

    def __init__(self, video_id: str, requested_language_codes: Sequence[str], catalog=None):
        self.requested_language_codes: List[str] = list(requested_language_codes)
        self.catalog = catalog
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        cause = self.CAUSE_MESSAGE.format(codes=self.requested_language_codes)
        if self.catalog is not None:
            cause += f"\n\n{self.catalog}"
        return cause


class NotTranslatable(TranscriptError):
    CAUSE_MESSAGE = "The requested language is not translatable"


class TranslationLanguageNotAvailable(TranscriptError):
    CAUSE_MESSAGE = "The requested translation language is not available: {language_code}"

    def __init__(self, video_id: str, language_code: str):
        self.language_code = language_code
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE.format(language_code=self.language_code)


class PoTokenRequired(TranscriptError):
    CAUSE_MESSAGE = (
        "The requested video cannot be retrieved without a PO Token. "
        "Proof-of-origin protected caption streams are not supported."
    )
