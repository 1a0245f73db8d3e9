"""
Unit tests for transcript output formats.
"""

import json
import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from transcript_formatters import (
    JSONFormatter,
    SRTFormatter,
    TextFormatter,
    WebVTTFormatter,
    get_formatter,
)
from transcript_models import TranscriptItem, TranscriptResult


def _result(items, video_id="dQw4w9WgXcQ"):
    return TranscriptResult(
        video_id=video_id,
        language="English",
        language_code="en",
        is_generated=False,
        is_translatable=True,
        items=tuple(items),
    )


ITEMS = [
    TranscriptItem("Hey there", 0.0, 1.54),
    TranscriptItem("how are you", 1.54, 4.16),
    TranscriptItem("late", 3661.5, 2.0),
]


class TestTextFormatter(unittest.TestCase):

    def test_one_line_per_item(self):
        self.assertEqual(TextFormatter().format_transcript(_result(ITEMS)), "Hey there\nhow are you\nlate")

    def test_several_transcripts(self):
        text = TextFormatter().format_transcripts([_result(ITEMS[:1]), _result(ITEMS[1:2])])
        self.assertEqual(text, "Hey there\n\nhow are you")


class TestJSONFormatter(unittest.TestCase):

    def test_single_transcript(self):
        data = json.loads(JSONFormatter().format_transcript(_result(ITEMS[:1])))

        self.assertEqual(data["language_code"], "en")
        self.assertEqual(data["transcript"], [{"text": "Hey there", "start": 0.0, "duration": 1.54}])

    def test_several_transcripts_form_a_list(self):
        data = json.loads(JSONFormatter(indent=2).format_transcripts([_result(ITEMS), _result(ITEMS)]))

        self.assertEqual(len(data), 2)
        self.assertEqual(len(data[0]["transcript"]), 3)

    def test_non_ascii_kept(self):
        output = JSONFormatter().format_transcript(_result([TranscriptItem("café", 0.0, 1.0)]))
        self.assertIn("café", output)


class TestTimedFormatters(unittest.TestCase):

    def test_srt(self):
        output = SRTFormatter().format_transcript(_result(ITEMS))

        self.assertEqual(output, (
            "1\n00:00:00,000 --> 00:00:01,540\nHey there\n\n"
            "2\n00:00:01,540 --> 00:00:05,700\nhow are you\n\n"
            "3\n01:01:01,500 --> 01:01:03,500\nlate\n"
        ))

    def test_webvtt(self):
        output = WebVTTFormatter().format_transcript(_result(ITEMS[:2]))

        self.assertEqual(output, (
            "WEBVTT\n\n"
            "00:00:00.000 --> 00:00:01.540\nHey there\n\n"
            "00:00:01.540 --> 00:00:05.700\nhow are you\n"
        ))

    def test_overlapping_cue_ends_at_next_start(self):
        items = [TranscriptItem("a", 0.0, 5.0), TranscriptItem("b", 2.0, 1.0)]

        output = SRTFormatter().format_transcript(_result(items))

        self.assertIn("00:00:00,000 --> 00:00:02,000\na", output)
        self.assertIn("00:00:02,000 --> 00:00:03,000\nb", output)

    def test_timestamp_rounding(self):
        formatter = SRTFormatter()
        self.assertEqual(formatter.format_timestamp(0.0016), "00:00:00,002")
        self.assertEqual(formatter.format_timestamp(59.9999), "00:01:00,000")
        self.assertEqual(formatter.format_timestamp(-1), "00:00:00,000")

    def test_empty_transcript(self):
        self.assertEqual(WebVTTFormatter().format_transcript(_result([])), "WEBVTT\n\n\n")


class TestGetFormatter(unittest.TestCase):

    def test_known_names(self):
        for name, cls in [("text", TextFormatter), ("json", JSONFormatter), ("SRT", SRTFormatter), ("webvtt", WebVTTFormatter)]:
            with self.subTest(name=name):
                self.assertIsInstance(get_formatter(name), cls)

    def test_unknown_name(self):
        with self.assertRaises(ValueError):
            get_formatter("docx")


if __name__ == '__main__':
    unittest.main()
