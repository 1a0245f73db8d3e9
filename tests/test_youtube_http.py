"""
Unit tests for the HTTP session wrapper: pacing, status mapping, transport errors.
"""

import os
import sys
import unittest
from unittest.mock import MagicMock

import requests

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from transcript_errors import HttpError, IpBlocked
from youtube_fixtures import VIDEO_ID, fake_response, fake_session
from youtube_http import YouTubeHttpSession, check_http_errors


class TestCheckHttpErrors(unittest.TestCase):

    def test_success_statuses_pass(self):
        for status in [200, 204, 299]:
            with self.subTest(status=status):
                self.assertIsNone(check_http_errors(fake_response(status_code=status), VIDEO_ID))

    def test_too_many_requests_is_ip_blocked(self):
        with self.assertRaises(IpBlocked) as ctx:
            check_http_errors(fake_response(status_code=429, reason="Too Many Requests"), VIDEO_ID)
        self.assertEqual(ctx.exception.video_id, VIDEO_ID)

    def test_other_statuses_are_http_errors(self):
        for status, reason in [(403, "Forbidden"), (404, "Not Found"), (500, "Internal Server Error"), (302, "Found")]:
            with self.subTest(status=status):
                with self.assertRaises(HttpError) as ctx:
                    check_http_errors(fake_response(status_code=status, reason=reason), VIDEO_ID)
                self.assertEqual(ctx.exception.status_code, status)
                self.assertIn(f"HTTP {status}: {reason}", str(ctx.exception))

    def test_missing_reason(self):
        with self.assertRaises(HttpError) as ctx:
            check_http_errors(fake_response(status_code=503, reason=None), VIDEO_ID)
        self.assertIn("Unknown error", str(ctx.exception))


class TestYouTubeHttpSession(unittest.TestCase):

    def test_delay_before_every_request(self):
        sleep = MagicMock()
        session = fake_session(
            get_responses=[fake_response("a"), fake_response("b")],
            post_responses=[fake_response(json_data={})],
        )
        http = YouTubeHttpSession(delay_ms=500, session=session, sleep=sleep)

        http.get("https://www.youtube.com/watch?v=x", VIDEO_ID)
        http.get("https://www.youtube.com/watch?v=x", VIDEO_ID)
        http.post_json("https://www.youtube.com/youtubei/v1/player", {"videoId": VIDEO_ID}, VIDEO_ID)

        self.assertEqual(sleep.call_count, 3)
        sleep.assert_called_with(0.5)

    def test_zero_delay_skips_sleep(self):
        sleep = MagicMock()
        http = YouTubeHttpSession(delay_ms=0, session=fake_session([fake_response()]), sleep=sleep)

        http.get("https://www.youtube.com", VIDEO_ID)

        sleep.assert_not_called()

    def test_negative_delay_rejected(self):
        with self.assertRaises(ValueError):
            YouTubeHttpSession(delay_ms=-1, session=fake_session())

    def test_headers_timeout_and_proxies(self):
        session = fake_session([fake_response()])
        http = YouTubeHttpSession(
            delay_ms=0, timeout=7, accept_language="de-DE",
            proxies={"https": "http://proxy:8080"}, session=session,
        )

        http.get("https://www.youtube.com", VIDEO_ID)

        self.assertEqual(session.headers["Accept-Language"], "de-DE")
        self.assertEqual(session.proxies, {"https": "http://proxy:8080"})
        session.get.assert_called_once_with("https://www.youtube.com", timeout=7)

    def test_post_json_sends_payload(self):
        session = fake_session(post_responses=[fake_response(json_data={"ok": True})])
        http = YouTubeHttpSession(delay_ms=0, session=session)

        response = http.post_json("https://example.invalid/api", {"videoId": VIDEO_ID}, VIDEO_ID)

        self.assertEqual(response.json(), {"ok": True})
        session.post.assert_called_once_with(
            "https://example.invalid/api", json={"videoId": VIDEO_ID}, timeout=15,
        )

    def test_rate_limit_surfaces_without_retry(self):
        session = fake_session([fake_response(status_code=429), fake_response()])
        http = YouTubeHttpSession(delay_ms=0, session=session)

        with self.assertRaises(IpBlocked):
            http.get("https://www.youtube.com", VIDEO_ID)
        self.assertEqual(session.get.call_count, 1)

    def test_transport_failure_is_http_error(self):
        session = fake_session([requests.exceptions.ConnectionError("connection reset")])
        http = YouTubeHttpSession(delay_ms=0, session=session)

        with self.assertRaises(HttpError) as ctx:
            http.get("https://www.youtube.com/youtubei/v1/player?key=secret", VIDEO_ID)

        self.assertIsNone(ctx.exception.status_code)
        self.assertIn("connection reset", str(ctx.exception))
        self.assertNotIn("secret", str(ctx.exception))

    def test_context_manager_closes_session(self):
        session = fake_session()
        with YouTubeHttpSession(delay_ms=0, session=session) as http:
            self.assertIs(http.cookies, session.cookies)
        session.close.assert_called_once_with()


if __name__ == '__main__':
    unittest.main()
