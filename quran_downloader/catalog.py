"""Chapter listing, chapter lookup and the translation catalog."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .http import FetchClient
from .models import Chapter, TranslationResource

LOGGER = logging.getLogger(__name__)


class ChapterNotFoundError(LookupError):
    """Raised when a chapter id is absent from the chapter listing."""


class ChapterResolver:
    """Fetches the chapter list once per process run and resolves ids against it."""

    def __init__(self, client: FetchClient) -> None:
        self._client = client
        self._chapters: Optional[List[Chapter]] = None

    def list_chapters(self) -> List[Chapter]:
        if self._chapters is None:
            LOGGER.debug("Fetching chapters list")
            payload = self._client.get("/chapters")
            self._chapters = [Chapter.model_validate(item) for item in _items(payload, "chapters")]
        return list(self._chapters)

    def resolve_chapter(self, chapter_id: int) -> Chapter:
        for chapter in self.list_chapters():
            if chapter.id == chapter_id:
                return chapter
        raise ChapterNotFoundError(f"Surah with ID {chapter_id} not found")


def list_translations(client: FetchClient, language: str = "") -> List[TranslationResource]:
    """Return catalog entries whose language name contains ``language``."""
    payload = client.get("/resources/translations")
    resources = [TranslationResource.model_validate(item) for item in _items(payload, "translations")]
    if language:
        needle = language.lower()
        resources = [item for item in resources if needle in item.language_name.lower()]
    return resources


def _items(payload: Any, key: str) -> List[Any]:
    if not isinstance(payload, dict):
        return []
    items = payload.get(key)
    return items if isinstance(items, list) else []


__all__ = ["ChapterNotFoundError", "ChapterResolver", "list_translations"]
