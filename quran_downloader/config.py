"""Runtime configuration resolved from CLI arguments and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

DEFAULT_BASE_URL = "https://api.quran.com/api/v4"
DEFAULT_OUTPUT_DIR = Path("data")
DEFAULT_REQUEST_DELAY = 0.1
DEFAULT_CHAPTER_DELAY = 0.5
DEFAULT_MAX_ATTEMPTS = 1


@dataclass(frozen=True)
class TranslationSources:
    """Quran.com resource ids of the two full translations stored per ayah."""

    english: int = 20  # Saheeh International
    indonesian: int = 33  # Indonesian Islamic Affairs Ministry

    def ids(self) -> List[int]:
        return [self.english, self.indonesian]

    def as_meta(self) -> Dict[str, int]:
        return {"indonesian": self.indonesian, "english": self.english}


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    output_dir: Path = DEFAULT_OUTPUT_DIR
    translations: TranslationSources = field(default_factory=TranslationSources)
    request_delay: float = DEFAULT_REQUEST_DELAY
    chapter_delay: float = DEFAULT_CHAPTER_DELAY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    timeout: Optional[float] = None


def resolve_base_url(base_url: str | None) -> str:
    value = base_url or os.getenv("QURAN_API_BASE_URL") or DEFAULT_BASE_URL
    return value.rstrip("/")


def resolve_output_dir(output_dir: str | Path | None) -> Path:
    if output_dir:
        return Path(output_dir)
    env_dir = os.getenv("QURAN_API_OUTPUT_DIR")
    return Path(env_dir) if env_dir else DEFAULT_OUTPUT_DIR


def _env_float(name: str, value: float | None, default: float | None) -> float | None:
    if value is not None:
        return value
    raw = os.getenv(name)
    if raw:
        try:
            return float(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid {name} value: {raw!r}") from exc
    return default


def _env_int(name: str, value: int | None, default: int) -> int:
    if value is not None:
        return value
    raw = os.getenv(name)
    if raw:
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid {name} value: {raw!r}") from exc
    return default


def build_settings(
    *,
    base_url: str | None = None,
    output_dir: str | Path | None = None,
    english_translation: int | None = None,
    indonesian_translation: int | None = None,
    request_delay: float | None = None,
    chapter_delay: float | None = None,
    max_attempts: int | None = None,
    timeout: float | None = None,
) -> Settings:
    """Merge explicit values over environment overrides over defaults."""
    defaults = TranslationSources()
    translations = TranslationSources(
        english=english_translation if english_translation is not None else defaults.english,
        indonesian=indonesian_translation if indonesian_translation is not None else defaults.indonesian,
    )
    return Settings(
        base_url=resolve_base_url(base_url),
        output_dir=resolve_output_dir(output_dir),
        translations=translations,
        request_delay=_env_float("QURAN_API_REQUEST_DELAY", request_delay, DEFAULT_REQUEST_DELAY),
        chapter_delay=_env_float("QURAN_API_CHAPTER_DELAY", chapter_delay, DEFAULT_CHAPTER_DELAY),
        max_attempts=max(1, _env_int("QURAN_API_MAX_ATTEMPTS", max_attempts, DEFAULT_MAX_ATTEMPTS)),
        timeout=_env_float("QURAN_API_TIMEOUT", timeout, None),
    )
