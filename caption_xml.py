"""
Timed-text XML decoding.

Turns the ``<transcript><text start=".." dur="..">..</text></transcript>``
payload served by a caption track's base URL into TranscriptItems. Pure, no I/O.
"""

import html
import re
import xml.etree.ElementTree as ET
from typing import Optional, Tuple

from transcript_errors import XmlParseError
from transcript_models import TranscriptItem

FORMATTING_TAGS = (
    "strong",
    "em",
    "b",
    "i",
    "mark",
    "small",
    "del",
    "ins",
    "sub",
    "sup",
)

_ANY_TAG = re.compile(r"<[^>]*>", re.IGNORECASE)
_NON_FORMATTING_TAG = re.compile(
    r"<\/?(?!\/?(?:" + "|".join(FORMATTING_TAGS) + r")\b)[^>]*>",
    re.IGNORECASE,
)


class CaptionXmlDecoder:
    """
    Decode a timed-text document into an ordered tuple of TranscriptItems.

    Items keep document order; no sorting by start time is done. Missing
    ``dur`` (or ``start``) attributes decode as 0.0. With ``preserve_formatting``
    basic emphasis tags survive, every other markup is stripped.
    """

    def __init__(self, preserve_formatting: bool = False):
        self.preserve_formatting = preserve_formatting
        self._tag_pattern = _NON_FORMATTING_TAG if preserve_formatting else _ANY_TAG

    def decode(self, xml_text: str, video_id: str = "") -> Tuple[TranscriptItem, ...]:
        """
        A well-formed document without cues (``<transcript/>``) decodes to an
        empty tuple. An empty or whitespace-only body is not a document and
        raises.

        Raises:
            XmlParseError: if the document is not well-formed (empty body
                included) or a cue carries non-numeric timing
        """
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            raise XmlParseError(video_id, f"Failed to parse XML: {e}") from e

        items = []
        for cue in root.iter("text"):
            items.append(
                TranscriptItem(
                    text=self._clean_text("".join(cue.itertext())),
                    start=self._seconds(cue.get("start"), video_id),
                    duration=self._seconds(cue.get("dur"), video_id),
                )
            )
        return tuple(items)

    def _clean_text(self, raw: str) -> str:
        # entities are double encoded upstream; ElementTree only undoes one level
        return self._tag_pattern.sub("", html.unescape(raw))

    @staticmethod
    def _seconds(value: Optional[str], video_id: str) -> float:
        if value is None or value == "":
            return 0.0
        try:
            return float(value)
        except ValueError as e:
            raise XmlParseError(video_id, f"Invalid timing attribute {value!r}") from e


def decode_caption_xml(xml_text: str, preserve_formatting: bool = False, video_id: str = "") -> Tuple[TranscriptItem, ...]:
    return CaptionXmlDecoder(preserve_formatting).decode(xml_text, video_id)
