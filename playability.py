"""
Playability gate for player responses.

Maps the ``playabilityStatus`` block of an internal player response onto the
error taxonomy. The mapping is exact per status/reason pair.
"""

from typing import Any, Dict, List, Optional

from log_events import evt
from transcript_errors import (
    AgeRestricted,
    InvalidVideoId,
    RequestBlocked,
    VideoUnavailable,
    VideoUnplayable,
)
from video_id_resolver import looks_like_url

STATUS_OK = "OK"
STATUS_LOGIN_REQUIRED = "LOGIN_REQUIRED"
STATUS_ERROR = "ERROR"

BOT_CHALLENGE_REASON = "Sign in to confirm you're not a bot"
AGE_RESTRICTED_REASON = "inappropriate for some users"
UNAVAILABLE_REASON = "unavailable"


def _as_dict(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


def _sub_reasons(status: Dict[str, Any]) -> List[str]:
    node: Any = status
    for key in ("errorScreen", "playerErrorMessageRenderer", "subreason"):
        node = _as_dict(node)
        if node is None:
            return []
        node = node.get(key)
    runs = (_as_dict(node) or {}).get("runs")
    if not isinstance(runs, list):
        return []
    return [run["text"] for run in runs if isinstance(run, dict) and isinstance(run.get("text"), str)]


def assert_playable(video_id: str, player_response: Dict[str, Any], requested: Optional[str] = None) -> None:
    """
    Raise the matching error if the video cannot be played, else return None.

    Args:
        video_id: resolved video id used in error context
        player_response: decoded internal player response
        requested: identifier as originally supplied by the caller; an
            ``unavailable`` error for a URL-looking input is reported as an
            invalid id

    Raises:
        RequestBlocked, AgeRestricted, InvalidVideoId, VideoUnavailable,
        VideoUnplayable
    """
    status = _as_dict(player_response.get("playabilityStatus"))
    if status is None:
        return

    status_code = status.get("status") if isinstance(status.get("status"), str) else ""
    if status_code == STATUS_OK:
        return

    reason = status.get("reason") if isinstance(status.get("reason"), str) else ""
    original = requested if requested is not None else video_id

    evt("playability_rejected", video_id=video_id, status=status_code, reason=reason[:200])

    if status_code == STATUS_LOGIN_REQUIRED:
        if BOT_CHALLENGE_REASON in reason:
            raise RequestBlocked(video_id)
        if AGE_RESTRICTED_REASON in reason:
            raise AgeRestricted(video_id)
    elif status_code == STATUS_ERROR and UNAVAILABLE_REASON in reason:
        if looks_like_url(original):
            raise InvalidVideoId(original)
        raise VideoUnavailable(video_id)

    raise VideoUnplayable(video_id, reason, _sub_reasons(status))


class PlayabilityGate:
    """Callable wrapper so the catalog fetcher can take the gate as a collaborator."""

    def check(self, video_id: str, player_response: Dict[str, Any], requested: Optional[str] = None) -> None:
        assert_playable(video_id, player_response, requested)
