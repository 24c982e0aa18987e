"""Drive chapter resolution, aggregation and persistence for one or many surahs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .aggregator import VerseAggregator
from .catalog import ChapterResolver
from .config import TranslationSources
from .http import FetchClient, Throttle
from .models import Chapter, SurahDocument
from . import storage

LOGGER = logging.getLogger(__name__)

FIRST_SURAH = 1
LAST_SURAH = 114


@dataclass
class DownloadResult:
    path: Path
    document: SurahDocument


@dataclass
class ChapterFailure:
    chapter_id: int
    name: str
    error: str


@dataclass
class BatchReport:
    written: List[DownloadResult] = field(default_factory=list)
    failures: List[ChapterFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class Downloader:
    """Download surahs sequentially into ``output_dir``.

    A file is written only once its whole ayah sequence has been built.
    """

    def __init__(
        self,
        client: FetchClient,
        output_dir: Path,
        *,
        sources: TranslationSources | None = None,
        throttle: Throttle | None = None,
        resolver: ChapterResolver | None = None,
        aggregator: VerseAggregator | None = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self._throttle = throttle or Throttle()
        self.resolver = resolver or ChapterResolver(client)
        self.aggregator = aggregator or VerseAggregator(client, sources, self._throttle)

    def _download(self, chapter: Chapter) -> DownloadResult:
        document = self.aggregator.aggregate(chapter)
        path = storage.write_surah_document(document, self.output_dir)
        return DownloadResult(path=path, document=document)

    def download_one(self, chapter_id: int) -> DownloadResult:
        chapter = self.resolver.resolve_chapter(chapter_id)
        LOGGER.info(
            "Downloading surah %s %s (%s): %s verses, %s",
            chapter.id,
            chapter.name_simple,
            chapter.name_arabic,
            chapter.verses_count,
            chapter.revelation_place,
        )
        result = self._download(chapter)
        stats = result.document.stats
        LOGGER.info(
            "Saved %s: %d ayahs, %d words (EN), %d words (ID)",
            result.path,
            stats.total_ayahs,
            stats.total_words_en,
            stats.total_words_id,
        )
        return result

    def download_range(self, from_id: int = FIRST_SURAH, to_id: int = LAST_SURAH) -> BatchReport:
        """Download every listed chapter in ``[from_id, to_id]``.

        Per-chapter errors are logged and recorded in the report; the batch
        always continues with the next chapter.
        """
        chapters = [c for c in self.resolver.list_chapters() if from_id <= c.id <= to_id]
        LOGGER.info(
            "Downloading %d surahs (%d to %d) into %s", len(chapters), from_id, to_id, self.output_dir
        )
        report = BatchReport()
        for position, chapter in enumerate(chapters):
            if position:
                self._throttle.between_chapters()
            LOGGER.info("[%d/%d] %s (%s)", chapter.id, LAST_SURAH, chapter.name_simple, chapter.name_arabic)
            try:
                result = self._download(chapter)
            except Exception as exc:
                LOGGER.error("Surah %s failed: %s", chapter.id, exc)
                report.failures.append(
                    ChapterFailure(chapter_id=chapter.id, name=chapter.name_simple, error=str(exc))
                )
                continue
            LOGGER.info("Wrote %s (%d ayahs)", result.path.name, result.document.stats.total_ayahs)
            report.written.append(result)
        LOGGER.info(
            "Download complete: %d written, %d failed", len(report.written), len(report.failures)
        )
        return report

    def write_index(self, path: Optional[Path] = None) -> Path:
        target = Path(path) if path else self.output_dir / "chapters.json"
        storage.write_chapters_index(self.resolver.list_chapters(), target)
        return target
