"""
Tests for the transcript error taxonomy and its messages.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from transcript_errors import (
    ConsentCookieCreationFailed,
    FailedToCreateConsentCookie,
    HttpError,
    IpBlocked,
    NoTranscriptFound,
    RequestBlocked,
    RequestBlockedError,
    TranscriptError,
    TranslationLanguageNotAvailable,
    VideoUnplayable,
    XmlParseError,
)

VIDEO_ID = "dQw4w9WgXcQ"


class TestTranscriptErrors(unittest.TestCase):

    def test_every_error_names_the_video(self):
        for error in [
            IpBlocked(VIDEO_ID),
            RequestBlocked(VIDEO_ID),
            XmlParseError(VIDEO_ID, "Failed to parse XML: no element found"),
            HttpError(VIDEO_ID, "HTTP 503: Service Unavailable", 503),
            VideoUnplayable(VIDEO_ID, "Video unplayable"),
        ]:
            with self.subTest(error=type(error).__name__):
                self.assertIsInstance(error, TranscriptError)
                self.assertEqual(error.video_id, VIDEO_ID)
                self.assertIn(f"https://www.youtube.com/watch?v={VIDEO_ID}", str(error))

    def test_blocked_errors_share_a_base(self):
        self.assertIsInstance(IpBlocked(VIDEO_ID), RequestBlockedError)
        self.assertIsInstance(RequestBlocked(VIDEO_ID), RequestBlockedError)

    def test_detail_is_appended(self):
        error = XmlParseError(VIDEO_ID, "Failed to parse XML: syntax error")

        self.assertEqual(error.detail, "Failed to parse XML: syntax error")
        self.assertIn("Detail: Failed to parse XML: syntax error", str(error))

    def test_http_error_message(self):
        error = HttpError(VIDEO_ID, "HTTP 403: Forbidden", 403)

        self.assertEqual(error.status_code, 403)
        self.assertEqual(str(error).count("HTTP 403: Forbidden"), 1)

    def test_no_transcript_found_lists_codes(self):
        error = NoTranscriptFound(VIDEO_ID, ("de", "en"))

        self.assertEqual(error.requested_language_codes, ["de", "en"])
        self.assertIn("['de', 'en']", str(error))

    def test_translation_language_in_message(self):
        error = TranslationLanguageNotAvailable(VIDEO_ID, "xx")
        self.assertIn("xx", str(error))

    def test_consent_alias(self):
        self.assertIs(ConsentCookieCreationFailed, FailedToCreateConsentCookie)


if __name__ == '__main__':
    unittest.main()
