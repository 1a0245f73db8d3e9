"""
Caption track extraction from an internal player response.

The player response has no published schema, so every field is read through a
small option-returning accessor: a missing or mistyped field drops the one
entry it belongs to instead of aborting the whole extraction.
"""

from typing import Any, Dict, List, Optional, Tuple

from log_events import evt
from logging_setup import get_logger
from transcript_errors import TranscriptsDisabled
from transcript_models import TranscriptCatalog, TranscriptTrack, TranslationLanguage

logger = get_logger(__name__)

SRV3_FORMAT_SUFFIX = "&fmt=srv3"
GENERATED_KIND = "asr"


# --- Field readers ---

def _get_dict(node: Any, key: str) -> Optional[Dict[str, Any]]:
    if not isinstance(node, dict):
        return None
    value = node.get(key)
    return value if isinstance(value, dict) else None


def _get_list(node: Any, key: str) -> Optional[List[Any]]:
    if not isinstance(node, dict):
        return None
    value = node.get(key)
    return value if isinstance(value, list) else None


def _get_str(node: Any, key: str) -> Optional[str]:
    if not isinstance(node, dict):
        return None
    value = node.get(key)
    return value if isinstance(value, str) else None


def _get_bool(node: Any, key: str) -> Optional[bool]:
    if not isinstance(node, dict):
        return None
    value = node.get(key)
    return value if isinstance(value, bool) else None


def _first_run_text(node: Any, key: str) -> Optional[str]:
    """Text of ``node[key].runs[0].text``."""
    runs = _get_list(_get_dict(node, key), "runs")
    if not runs:
        return None
    return _get_str(runs[0], "text")


def _simple_text(node: Any, key: str) -> Optional[str]:
    return _get_str(_get_dict(node, key), "simpleText")


# --- Extraction ---

def _read_translation_languages(renderer: Dict[str, Any]) -> Tuple[TranslationLanguage, ...]:
    languages = []
    for entry in _get_list(renderer, "translationLanguages") or []:
        language_code = _get_str(entry, "languageCode")
        language = _first_run_text(entry, "languageName")
        if language_code is None or language is None:
            continue
        languages.append(TranslationLanguage(language_code=language_code, language=language))
    return tuple(languages)


def _read_track(
    video_id: str,
    entry: Any,
    translation_languages: Tuple[TranslationLanguage, ...],
) -> Optional[TranscriptTrack]:
    language_code = _get_str(entry, "languageCode")
    base_url = _get_str(entry, "baseUrl")
    if language_code is None or base_url is None:
        return None

    language = _first_run_text(entry, "name") or _simple_text(entry, "name") or language_code
    is_translatable = bool(_get_bool(entry, "isTranslatable"))

    return TranscriptTrack(
        video_id=video_id,
        language_code=language_code,
        language=language,
        is_generated=_get_str(entry, "kind") == GENERATED_KIND,
        is_translatable=is_translatable,
        base_url=base_url.replace(SRV3_FORMAT_SUFFIX, ""),
        translation_languages=translation_languages if is_translatable else (),
    )


class CaptionTrackExtractor:
    """Build a TranscriptCatalog from ``captions.playerCaptionsTracklistRenderer``."""

    def extract(self, video_id: str, player_response: Dict[str, Any]) -> TranscriptCatalog:
        """
        Raises:
            TranscriptsDisabled: if there is no captions renderer or it yields
                no usable track
        """
        renderer = _get_dict(_get_dict(player_response, "captions"), "playerCaptionsTracklistRenderer")
        if renderer is None:
            evt("caption_tracks_missing", video_id=video_id)
            raise TranscriptsDisabled(video_id)

        translation_languages = _read_translation_languages(renderer)
        manually_created: Dict[str, TranscriptTrack] = {}
        generated: Dict[str, TranscriptTrack] = {}
        skipped = 0

        for entry in _get_list(renderer, "captionTracks") or []:
            track = _read_track(video_id, entry, translation_languages)
            if track is None:
                skipped += 1
                continue
            target = generated if track.is_generated else manually_created
            target[track.language_code] = track

        if skipped:
            logger.debug(f"Skipped {skipped} incomplete caption track entries for {video_id}")

        if not manually_created and not generated:
            evt("caption_tracks_empty", video_id=video_id, skipped=skipped)
            raise TranscriptsDisabled(video_id)

        evt(
            "caption_tracks_extracted",
            video_id=video_id,
            manual=len(manually_created),
            generated=len(generated),
            translations=len(translation_languages),
        )
        return TranscriptCatalog(
            video_id=video_id,
            manually_created=manually_created,
            generated=generated,
            translation_languages=translation_languages,
        )


def extract_catalog(video_id: str, player_response: Dict[str, Any]) -> TranscriptCatalog:
    return CaptionTrackExtractor().extract(video_id, player_response)
