"""Download Quran.com API data into per-surah JSON documents."""

from .aggregator import VerseAggregator
from .catalog import ChapterNotFoundError, ChapterResolver
from .downloader import Downloader
from .http import FetchClient, NetworkError, ParseError, Throttle
from .models import Ayah, Chapter, SurahDocument

__all__ = [
    "Ayah",
    "Chapter",
    "ChapterNotFoundError",
    "ChapterResolver",
    "Downloader",
    "FetchClient",
    "NetworkError",
    "ParseError",
    "SurahDocument",
    "Throttle",
    "VerseAggregator",
]
