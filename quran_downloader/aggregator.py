"""Merge the five per-chapter API responses into normalized ayah records.

Quran.com exposes the same verse sequence through several endpoints: three
Arabic renderings (Uthmani, Imlaei, Uthmani Tajweed) and the word-enriched
``/verses/by_chapter`` listing, requested once per word language. All of them
are ordered by verse number, so they are joined by position rather than by key.
The English word listing is the primary sequence: it fixes the number of ayahs
and supplies identity, position indices and full translations.

If an endpoint skips a verse without leaving a gap, every later ayah of that
chapter is misaligned. There is no cross-check for that.
"""

from __future__ import annotations

import enum
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .config import TranslationSources
from .http import FetchClient, Throttle
from .models import Ayah, AyahTranslations, AyahWords, Chapter, SurahDocument, SurahMeta, WordSegment, WordTranslation

LOGGER = logging.getLogger(__name__)

PRIMARY_WORD_LANGUAGE = "en"
SECONDARY_WORD_LANGUAGE = "id"
WORD_FIELDS = "text_uthmani,translation,transliteration"
VERSES_PER_PAGE = 300

POSITION_FIELDS = (
    "juz_number",
    "hizb_number",
    "rub_el_hizb_number",
    "manzil_number",
    "ruku_number",
    "page_number",
    "sajdah_number",
)


class FieldState(str, enum.Enum):
    OK = "ok"
    DEGRADED = "degraded"
    EMPTY = "empty"


@dataclass
class ChapterFragments:
    """The five raw verse sequences fetched for one chapter."""

    uthmani: List[Dict[str, Any]] = field(default_factory=list)
    imlaei: List[Dict[str, Any]] = field(default_factory=list)
    tajweed: List[Dict[str, Any]] = field(default_factory=list)
    primary: List[Dict[str, Any]] = field(default_factory=list)
    secondary: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class JoinedVerse:
    """Fragments sharing one ordinal position, with a state tag per joined field."""

    index: int
    primary: Dict[str, Any]
    secondary: Dict[str, Any]
    uthmani: Optional[Dict[str, Any]]
    imlaei: Optional[Dict[str, Any]]
    tajweed: Optional[Dict[str, Any]]
    states: Dict[str, FieldState]


def unwrap_verses(payload: Any) -> List[Dict[str, Any]]:
    """Return the ``verses`` array of a response, or an empty list."""
    if not isinstance(payload, dict):
        return []
    verses = payload.get("verses")
    return verses if isinstance(verses, list) else []


def _at(items: List[Dict[str, Any]], index: int) -> Optional[Dict[str, Any]]:
    return items[index] if index < len(items) else None


def join_fragments(fragments: ChapterFragments) -> List[JoinedVerse]:
    """Align the five sequences over the length of the primary one.

    A missing secondary verse is replaced by the primary verse at the same
    index, so its ``words.id`` duplicates the English words. That fallback is
    tagged ``DEGRADED``. Missing Arabic renderings are tagged ``EMPTY``.
    """
    joined: List[JoinedVerse] = []
    for index, primary in enumerate(fragments.primary):
        secondary = _at(fragments.secondary, index)
        uthmani = _at(fragments.uthmani, index)
        imlaei = _at(fragments.imlaei, index)
        tajweed = _at(fragments.tajweed, index)
        states = {
            "words_id": FieldState.OK if secondary is not None else FieldState.DEGRADED,
            "uthmani": FieldState.OK if uthmani is not None else FieldState.EMPTY,
            "imlaei": FieldState.OK if imlaei is not None else FieldState.EMPTY,
            "tajweed": FieldState.OK if tajweed is not None else FieldState.EMPTY,
        }
        joined.append(
            JoinedVerse(
                index=index,
                primary=primary,
                secondary=secondary if secondary is not None else primary,
                uthmani=uthmani,
                imlaei=imlaei,
                tajweed=tajweed,
                states=states,
            )
        )
    return joined


def _nested_text(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("text") or ""
    return ""


def _secondary_language(word: Dict[str, Any]) -> str:
    # The API falls back to English word translations when Indonesian is missing.
    translation = word.get("translation")
    if isinstance(translation, dict) and translation.get("language_name") == "indonesian":
        return SECONDARY_WORD_LANGUAGE
    return PRIMARY_WORD_LANGUAGE


def extract_words(
    verse: Dict[str, Any],
    language_of: Optional[Callable[[Dict[str, Any]], str]] = None,
) -> List[WordSegment]:
    """Map the verse's word tokens to segments, skipping pause marks and verse-end glyphs.

    Words are tagged with the primary language unless ``language_of`` decides per word.
    """
    segments: List[WordSegment] = []
    for word in verse.get("words") or []:
        if word.get("char_type_name") != "word":
            continue
        segments.append(
            WordSegment(
                position=word.get("position"),
                text_code=word.get("code_v1") or word.get("text"),
                audio_url=word.get("audio_url"),
                translation=WordTranslation(
                    text=_nested_text(word.get("translation")),
                    language=language_of(word) if language_of else PRIMARY_WORD_LANGUAGE,
                ),
                transliteration=_nested_text(word.get("transliteration")),
            )
        )
    return segments


def extract_translation(verse: Dict[str, Any], resource_id: int) -> str:
    for translation in verse.get("translations") or []:
        if translation.get("resource_id") == resource_id:
            return translation.get("text") or ""
    return ""


def _text(fragment: Optional[Dict[str, Any]], key: str) -> str:
    if fragment is None:
        return ""
    return fragment.get(key) or ""


def build_ayah(joined: JoinedVerse, chapter_id: int, sources: TranslationSources) -> Ayah:
    primary = joined.primary
    verse_number = primary.get("verse_number") or joined.index + 1
    positions = {name: primary.get(name) for name in POSITION_FIELDS}
    return Ayah(
        id=primary.get("id"),
        verse_number=verse_number,
        verse_key=primary.get("verse_key") or f"{chapter_id}:{verse_number}",
        **positions,
        text_arabic_simple=_text(joined.imlaei, "text_imlaei"),
        text_arabic_uthmani=_text(joined.uthmani, "text_uthmani"),
        text_arabic_tajweed=_text(joined.tajweed, "text_uthmani_tajweed"),
        words=AyahWords(
            en=extract_words(primary),
            id=extract_words(joined.secondary, _secondary_language),
        ),
        translations=AyahTranslations(
            en=extract_translation(primary, sources.english),
            id=extract_translation(primary, sources.indonesian),
        ),
    )


class VerseAggregator:
    """Fetches and merges everything needed for one surah document."""

    def __init__(
        self,
        client: FetchClient,
        sources: TranslationSources | None = None,
        throttle: Throttle | None = None,
    ) -> None:
        self._client = client
        self.sources = sources or TranslationSources()
        self._throttle = throttle or Throttle()

    def _fetch(self, label: str, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        LOGGER.debug("Fetching %s: %s", label, path)
        payload = self._client.get(path, params)
        self._throttle.after_request()
        return unwrap_verses(payload)

    def _word_params(self, language: str) -> Dict[str, Any]:
        return {
            "language": language,
            "words": "true",
            "word_fields": WORD_FIELDS,
            "translations": ",".join(str(rid) for rid in self.sources.ids()),
            "per_page": VERSES_PER_PAGE,
        }

    def fetch_fragments(self, chapter_id: int) -> ChapterFragments:
        """Issue the five requests in order; any failure propagates."""
        script_params = {"chapter_number": chapter_id}
        uthmani = self._fetch("Arabic text (Uthmani)", "/quran/verses/uthmani", script_params)
        imlaei = self._fetch("Arabic text (Imlaei)", "/quran/verses/imlaei", script_params)
        tajweed = self._fetch("Arabic text (Uthmani Tajweed)", "/quran/verses/uthmani_tajweed", script_params)
        verses_path = f"/verses/by_chapter/{chapter_id}"
        primary = self._fetch(
            "verses with English words", verses_path, self._word_params(PRIMARY_WORD_LANGUAGE)
        )
        secondary = self._fetch(
            "verses with Indonesian words", verses_path, self._word_params(SECONDARY_WORD_LANGUAGE)
        )
        return ChapterFragments(
            uthmani=uthmani,
            imlaei=imlaei,
            tajweed=tajweed,
            primary=primary,
            secondary=secondary,
        )

    def aggregate(self, chapter: Chapter) -> SurahDocument:
        fragments = self.fetch_fragments(chapter.id)
        joined = join_fragments(fragments)
        _log_degraded(chapter, joined)
        ayahs = [build_ayah(item, chapter.id, self.sources) for item in joined]
        meta = SurahMeta(
            base_url=self._client.base_url,
            translation_ids=self.sources.as_meta(),
        )
        return SurahDocument(meta=meta, surah=chapter, ayahs=ayahs)


def _log_degraded(chapter: Chapter, joined: List[JoinedVerse]) -> None:
    counts: Counter[str] = Counter()
    for item in joined:
        for name, state in item.states.items():
            if state is not FieldState.OK:
                counts[f"{name}={state.value}"] += 1
    if counts:
        summary = ", ".join(f"{key} x{count}" for key, count in sorted(counts.items()))
        LOGGER.warning("Surah %s (%s) has incomplete fragments: %s", chapter.id, chapter.name_simple, summary)


__all__ = [
    "ChapterFragments",
    "FieldState",
    "JoinedVerse",
    "VerseAggregator",
    "build_ayah",
    "extract_translation",
    "extract_words",
    "join_fragments",
    "unwrap_verses",
]
