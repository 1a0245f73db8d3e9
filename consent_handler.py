"""
Consent wall handling for the watch page.

EU visitors get an interstitial consent form instead of the watch page. The
handshake reads the hidden ``v`` form value and stores the matching CONSENT
cookie on the session, after which one re-fetch of the page is expected to
succeed. Kept separate from the fetch path so it can be replaced or dropped
when YouTube changes its consent flow.
"""

import re
from typing import Optional

from log_events import evt
from transcript_errors import FailedToCreateConsentCookie

CONSENT_FORM_MARKER = 'action="https://consent.youtube.com/s"'
CONSENT_VALUE_PATTERN = re.compile(r'name="v" value="(.*?)"')
CONSENT_COOKIE_NAME = "CONSENT"
CONSENT_COOKIE_DOMAIN = ".youtube.com"


class ConsentHandshake:
    """Detects the consent form and acknowledges it through the cookie jar."""

    marker = CONSENT_FORM_MARKER

    def is_consent_wall(self, html: str) -> bool:
        return self.marker in html

    def extract_consent_value(self, html: str) -> Optional[str]:
        match = CONSENT_VALUE_PATTERN.search(html)
        return match.group(1) if match else None

    def acknowledge(self, http, html: str, video_id: str) -> None:
        """
        Prepare the session for a retry of the watch page.

        Args:
            http: YouTubeHttpSession whose cookie jar receives the cookie
            html: body of the consent page
            video_id: for error context

        Raises:
            FailedToCreateConsentCookie: if the form value cannot be found
        """
        value = self.extract_consent_value(html)
        if value is None:
            evt("consent_value_missing", video_id=video_id)
            raise FailedToCreateConsentCookie(video_id)

        http.cookies.set(CONSENT_COOKIE_NAME, "YES+" + value, domain=CONSENT_COOKIE_DOMAIN)
        evt("consent_cookie_set", video_id=video_id)


class NoConsentHandshake(ConsentHandshake):
    """Strategy that never acknowledges: a consent wall fails the fetch at once."""

    def acknowledge(self, http, html: str, video_id: str) -> None:
        evt("consent_handshake_disabled", video_id=video_id)
        raise FailedToCreateConsentCookie(video_id)
