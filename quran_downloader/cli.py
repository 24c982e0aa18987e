"""Command-line entry point for the Quran.com JSON downloader."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Dict, List, Optional, Sequence

from .catalog import ChapterNotFoundError, ChapterResolver, list_translations
from .config import DEFAULT_BASE_URL, Settings, build_settings
from .downloader import FIRST_SURAH, LAST_SURAH, Downloader
from .http import FetchClient, FetchError, Throttle

LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

PROG = "quran-downloader"
API_PREFIXES = ("/chapters", "/verses", "/quran", "/resources")

EPILOG = f"""\
examples:
  {PROG} download --surah 1
  {PROG} download --all --output ./quran-data
  {PROG} download --from 1 --to 10
  {PROG} list
  {PROG} translations --language indonesian
  {PROG} fetch --path /verses/by_chapter/1 --param words=true --param translations=33
  {PROG} list --base-url https://your-api.com/api/v4

Each surah file holds meta, surah, ayahs (Imlaei, Uthmani and Tajweed text,
English and Indonesian word-by-word data, English and Indonesian translations)
and stats. Indonesian word-by-word data may fall back to English when the API
has none for a word.
"""


class MissingArgumentError(ValueError):
    """Raised when a command is missing a flag it needs."""


def normalize_api_path(value: str) -> str:
    """Undo MSYS path conversion, e.g. ``C:/Program Files/Git/chapters/1``."""
    if ":/" in value:
        starts = [value.index(prefix) for prefix in API_PREFIXES if prefix in value]
        if starts:
            return value[min(starts):]
    return value


def parse_params(pairs: Sequence[str] | None) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for pair in pairs or []:
        key, _, value = pair.partition("=")
        if key:
            params[key] = value
    return params


def _make_client(settings: Settings) -> FetchClient:
    return FetchClient(settings.base_url, timeout=settings.timeout, max_attempts=settings.max_attempts)


def cmd_download(args: argparse.Namespace) -> int:
    if args.surah is None and not args.all and args.from_id is None and args.to_id is None:
        raise MissingArgumentError("Please specify --surah <id>, --all or --from/--to")
    settings = build_settings(
        base_url=args.base_url,
        output_dir=args.output,
        english_translation=args.translation_en,
        indonesian_translation=args.translation_id,
        request_delay=args.request_delay,
        chapter_delay=args.chapter_delay,
        max_attempts=args.max_attempts,
        timeout=args.timeout,
    )
    throttle = Throttle(request_delay=settings.request_delay, chapter_delay=settings.chapter_delay)
    with _make_client(settings) as client:
        downloader = Downloader(
            client,
            settings.output_dir,
            sources=settings.translations,
            throttle=throttle,
        )
        if args.surah is not None:
            downloader.download_one(args.surah)
        else:
            from_id = FIRST_SURAH if args.from_id is None else args.from_id
            to_id = LAST_SURAH if args.to_id is None else args.to_id
            report = downloader.download_range(from_id, to_id)
            for failure in report.failures:
                print(f"  x Surah {failure.chapter_id} ({failure.name}): {failure.error}")
        if args.write_index:
            LOGGER.info("Wrote chapters index to %s", downloader.write_index())
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    settings = build_settings(base_url=args.base_url)
    with _make_client(settings) as client:
        chapters = ChapterResolver(client).list_chapters()
    print(f"All Surahs ({len(chapters)} Chapters)\n")
    print("  ID   Name                     Arabic           Verses  Place")
    print("  " + "-" * 61)
    for ch in chapters:
        print(
            f"  {ch.id:>3}  {ch.name_simple:<24} {ch.name_arabic or '':<16} "
            f"{ch.verses_count or 0:>3}    {ch.revelation_place or ''}"
        )
    return 0


def cmd_translations(args: argparse.Namespace) -> int:
    settings = build_settings(base_url=args.base_url)
    with _make_client(settings) as client:
        resources = list_translations(client, args.language or "")
    if args.language:
        print(f'Filtered by language: "{args.language}"')
    print("  ID    Language             Name")
    print("  " + "-" * 59)
    for item in resources:
        print(f"  {item.id:>4}  {item.language_name:<20} {item.name}")
    print(f"\nTotal: {len(resources)} translations")
    return 0


def cmd_fetch(args: argparse.Namespace) -> int:
    if not args.path:
        raise MissingArgumentError("Please specify --path <api-path>, e.g. --path /chapters/1")
    settings = build_settings(base_url=args.base_url)
    with _make_client(settings) as client:
        url = client.api_url(normalize_api_path(args.path), parse_params(args.param))
        LOGGER.info("GET %s", url)
        data = client.fetch_json(url)
    print(json.dumps(data, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--base-url",
        default=argparse.SUPPRESS,
        help=f"API base URL (default: $QURAN_API_BASE_URL or {DEFAULT_BASE_URL})",
    )
    common.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Debug logging")

    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Download Quran resources from the Quran.com API as per-surah JSON files.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[common],
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")

    download = subparsers.add_parser("download", parents=[common], help="Download one surah or a range of surahs")
    download.add_argument("-s", "--surah", type=int, help="Surah ID to download (1-114)")
    download.add_argument("--all", action="store_true", help="Download all surahs")
    download.add_argument("--from", dest="from_id", type=int, help="First surah ID of the range")
    download.add_argument("--to", dest="to_id", type=int, help="Last surah ID of the range")
    download.add_argument("-o", "--output", help="Output directory (default: $QURAN_API_OUTPUT_DIR or ./data)")
    download.add_argument("--write-index", action="store_true", help="Also write chapters.json to the output directory")
    download.add_argument("--request-delay", type=float, help="Seconds to wait after each API request (default: 0.1)")
    download.add_argument("--chapter-delay", type=float, help="Seconds to wait between surahs (default: 0.5)")
    download.add_argument("--max-attempts", type=int, help="Attempts per request on network errors (default: 1)")
    download.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default: none)")
    download.add_argument("--translation-en", type=int, help="English translation resource ID (default: 20)")
    download.add_argument("--translation-id", type=int, help="Indonesian translation resource ID (default: 33)")
    download.set_defaults(handler=cmd_download)

    listing = subparsers.add_parser("list", parents=[common], help="List all surahs")
    listing.set_defaults(handler=cmd_list)

    translations = subparsers.add_parser("translations", parents=[common], help="List available translations")
    translations.add_argument("--language", help="Filter by language name substring")
    translations.set_defaults(handler=cmd_translations)

    fetch = subparsers.add_parser("fetch", parents=[common], help="Fetch raw JSON from an API path")
    fetch.add_argument("--path", help="API path, e.g. /chapters/1")
    fetch.add_argument("--param", action="append", help="Query parameter key=value (repeatable)")
    fetch.set_defaults(handler=cmd_fetch)

    subparsers.add_parser("help", help="Show this help message")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.base_url = getattr(args, "base_url", None)
    if getattr(args, "verbose", False):
        logging.getLogger().setLevel(logging.DEBUG)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except MissingArgumentError as exc:
        print(f"Error: {exc}")
        print(f'Run "{PROG} help" for usage information')
        return 0
    except (FetchError, ChapterNotFoundError, OSError, ValueError) as exc:
        print(f"\nError: {exc}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
