"""Data models for the per-surah JSON documents."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

DEFAULT_SOURCE = "Quran.com API v4"


class TranslatedName(BaseModel):
    model_config = {"extra": "ignore"}

    language_name: Optional[str] = None
    name: Optional[str] = None


class Chapter(BaseModel):
    """Surah metadata as returned by the ``/chapters`` listing."""

    model_config = {"extra": "ignore"}

    id: int
    name_simple: str = ""
    name_complex: Optional[str] = None
    name_arabic: Optional[str] = None
    translated_name: Optional[TranslatedName] = None
    revelation_place: Optional[str] = None
    revelation_order: Optional[int] = None
    bismillah_pre: Optional[bool] = None
    verses_count: Optional[int] = None
    pages: List[int] = Field(default_factory=list)


class WordTranslation(BaseModel):
    text: str = ""
    language: str = "en"


class WordSegment(BaseModel):
    position: Optional[int] = None
    text_code: Optional[str] = None
    audio_url: Optional[str] = None
    translation: WordTranslation = Field(default_factory=WordTranslation)
    transliteration: str = ""


class AyahWords(BaseModel):
    en: List[WordSegment] = Field(default_factory=list)
    id: List[WordSegment] = Field(default_factory=list)


class AyahTranslations(BaseModel):
    en: str = ""
    id: str = ""


class Ayah(BaseModel):
    """One verse merged from the five per-chapter API responses."""

    id: Optional[int] = None
    verse_number: int
    verse_key: str

    juz_number: Optional[int] = None
    hizb_number: Optional[int] = None
    rub_el_hizb_number: Optional[int] = None
    manzil_number: Optional[int] = None
    ruku_number: Optional[int] = None
    page_number: Optional[int] = None
    sajdah_number: Optional[int] = None

    text_arabic_simple: str = ""
    text_arabic_uthmani: str = ""
    text_arabic_tajweed: str = ""

    words: AyahWords = Field(default_factory=AyahWords)
    translations: AyahTranslations = Field(default_factory=AyahTranslations)


class SurahMeta(BaseModel):
    source: str = DEFAULT_SOURCE
    base_url: str
    downloaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    translation_ids: Dict[str, int] = Field(default_factory=dict)


class SurahStats(BaseModel):
    total_ayahs: int
    total_words_en: int
    total_words_id: int


class SurahDocument(BaseModel):
    """Unit of persistence: one file per surah.

    ``stats`` is derived from ``ayahs`` on every access and ignored on load.
    """

    model_config = {"extra": "ignore", "frozen": True}

    meta: SurahMeta
    surah: Chapter
    ayahs: List[Ayah]

    @computed_field
    @property
    def stats(self) -> SurahStats:
        return SurahStats(
            total_ayahs=len(self.ayahs),
            total_words_en=sum(len(ayah.words.en) for ayah in self.ayahs),
            total_words_id=sum(len(ayah.words.id) for ayah in self.ayahs),
        )


class TranslationResource(BaseModel):
    """Entry of the ``/resources/translations`` catalog."""

    model_config = {"extra": "ignore"}

    id: int
    name: str = ""
    author_name: Optional[str] = None
    slug: Optional[str] = None
    language_name: str = ""


__all__ = [
    "TranslatedName",
    "Chapter",
    "WordTranslation",
    "WordSegment",
    "AyahWords",
    "AyahTranslations",
    "Ayah",
    "SurahMeta",
    "SurahStats",
    "SurahDocument",
    "TranslationResource",
]
