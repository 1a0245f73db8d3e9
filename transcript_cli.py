#!/usr/bin/env python3
"""
Command line entry point.

    yt-transcript dQw4w9WgXcQ https://youtu.be/_NuH3D4SN-c --languages de en --format srt
    yt-transcript dQw4w9WgXcQ --list

Settings default to the environment (and a .env file), see transcript_config.
"""

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv

from logging_setup import configure_logging, get_logger
from transcript_config import TranscriptConfig
from transcript_errors import TranscriptError
from transcript_formatters import FORMATTERS, get_formatter
from transcript_service import TranscriptService

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_TRANSCRIPT_ERROR = 1
EXIT_UNEXPECTED = 2


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def create_parser(config: TranscriptConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yt-transcript",
        description="Retrieve closed-caption transcripts of YouTube videos.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("videos", nargs="+", help="Video IDs or YouTube URLs")
    parser.add_argument(
        "--languages", nargs="+", default=config.default_languages,
        help="Language codes in descending priority",
    )
    parser.add_argument("--translate", default=None, help="Machine translate into this language code")
    parser.add_argument("--list", action="store_true", help="List available transcripts instead of fetching")

    kind = parser.add_mutually_exclusive_group()
    kind.add_argument("--manual-only", action="store_true", help="Only use manually created transcripts")
    kind.add_argument("--generated-only", action="store_true", help="Only use automatically generated transcripts")

    parser.add_argument("--format", choices=sorted(FORMATTERS), default="text", help="Output format")
    parser.add_argument(
        "--preserve-formatting", action="store_true", default=config.preserve_formatting,
        help="Keep basic HTML formatting tags in transcript text",
    )
    parser.add_argument(
        "--delay-ms", type=non_negative_int, default=config.request_delay_ms,
        help="Delay before every request to YouTube, in milliseconds",
    )
    parser.add_argument(
        "--log-level", default=config.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level",
    )
    return parser


def _select_track(catalog, args):
    if args.manual_only:
        return catalog.find_manually_created_transcript(args.languages)
    if args.generated_only:
        return catalog.find_generated_transcript(args.languages)
    return catalog.find_transcript(args.languages)


def run(args: argparse.Namespace, config: TranscriptConfig) -> int:
    config.request_delay_ms = args.delay_ms
    config.preserve_formatting = args.preserve_formatting
    formatter = get_formatter(args.format)

    results = []
    listings = []
    failures = 0

    with TranscriptService.from_config(config) as service:
        for video in args.videos:
            try:
                catalog = service.list_transcripts(video)
                if args.list:
                    listings.append(str(catalog))
                    continue

                track = _select_track(catalog, args)
                if args.translate:
                    results.append(service.translate_track(catalog.video_id, track, args.translate))
                else:
                    results.append(service.fetch(catalog.video_id, track))
            except TranscriptError as e:
                failures += 1
                logger.error(f"Transcript retrieval failed for {video}: {type(e).__name__}")
                print(str(e), file=sys.stderr)

    if listings:
        print("\n\n".join(listings))
    if len(results) == 1:
        print(formatter.format_transcript(results[0]))
    elif results:
        print(formatter.format_transcripts(results))

    return EXIT_TRANSCRIPT_ERROR if failures else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=False)
    config = TranscriptConfig.from_env()
    args = create_parser(config).parse_args(argv)

    configure_logging(log_level=args.log_level, use_json=config.log_json)

    try:
        return run(args, config)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_TRANSCRIPT_ERROR
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    sys.exit(main())
