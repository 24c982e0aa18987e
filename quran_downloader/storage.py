"""Storage helpers for downloaded surah documents."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable

from .models import Chapter, SurahDocument

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def slugify(name: str) -> str:
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


def surah_filename(chapter: Chapter) -> str:
    """Zero-padded id first so that files sort in mushaf order."""
    return f"{chapter.id:03d}-{slugify(chapter.name_simple)}.json"


def write_surah_document(document: SurahDocument, output_dir: Path) -> Path:
    path = Path(output_dir) / surah_filename(document.surah)
    ensure_parent(path)
    payload = document.model_dump(mode="json")
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


def read_surah_document(path: Path) -> SurahDocument:
    return SurahDocument.model_validate_json(Path(path).read_text(encoding="utf-8"))


def write_chapters_index(chapters: Iterable[Chapter], path: Path) -> None:
    ensure_parent(path)
    payload = [chapter.model_dump(mode="json") for chapter in chapters]
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
