"""
Normalize free-form video input into a VideoId.

Accepted shapes: a bare 11 character id, a watch URL with a ``v`` parameter,
a ``youtu.be/<id>`` short link and an ``/embed/<id>`` URL. No network access.
"""

from typing import Optional
from urllib.parse import parse_qs, urlparse

from transcript_errors import InvalidVideoId
from transcript_models import VIDEO_ID_PATTERN, VideoId

YOUTUBE_HOSTS = ("youtube.com", "youtu.be")
SHORT_LINK_HOST = "youtu.be"


def is_valid_video_id(value: Optional[str]) -> bool:
    return bool(value) and VIDEO_ID_PATTERN.fullmatch(value) is not None


def looks_like_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def _with_scheme(value: str) -> str:
    if looks_like_url(value):
        return value
    if any(host in value for host in YOUTUBE_HOSTS):
        if value.startswith("//"):
            return "https:" + value
        return "https://" + value
    return value


def _id_from_url(url: str) -> Optional[str]:
    try:
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
    except ValueError:
        return None

    if not any(candidate in host for candidate in YOUTUBE_HOSTS):
        return None

    # watch?v=<id>
    for candidate in parse_qs(parsed.query).get("v", []):
        if is_valid_video_id(candidate):
            return candidate

    segments = parsed.path.split("/")
    if segments and segments[0] == "":
        segments = segments[1:]

    if host == SHORT_LINK_HOST and segments and is_valid_video_id(segments[0]):
        return segments[0]

    if len(segments) >= 2 and segments[0] == "embed" and is_valid_video_id(segments[1]):
        return segments[1]

    return None


def resolve_video_id(value: str) -> VideoId:
    """
    Resolve a raw id or YouTube URL to a VideoId.

    Args:
        value: bare id, watch URL, short link or embed URL

    Returns:
        VideoId

    Raises:
        InvalidVideoId: if no id can be extracted; the message names the input
    """
    if not isinstance(value, str):
        raise InvalidVideoId(repr(value))

    candidate = value.strip()
    if is_valid_video_id(candidate):
        return VideoId(candidate)

    video_id = _id_from_url(_with_scheme(candidate))
    if video_id is None:
        raise InvalidVideoId(value)
    return VideoId(video_id)
