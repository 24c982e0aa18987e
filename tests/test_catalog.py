from __future__ import annotations

import unittest

from quran_downloader.catalog import ChapterNotFoundError, ChapterResolver, list_translations

from tests.fakes import FakeClient, canonical_chapters


class ChapterResolverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = FakeClient({"/chapters": {"chapters": canonical_chapters()}})
        self.resolver = ChapterResolver(self.client)

    def test_resolves_every_canonical_id(self) -> None:
        for chapter_id in range(1, 115):
            self.assertEqual(self.resolver.resolve_chapter(chapter_id).id, chapter_id)

    def test_unknown_ids_raise(self) -> None:
        for chapter_id in (0, -1, 115, 999):
            with self.assertRaises(ChapterNotFoundError):
                self.resolver.resolve_chapter(chapter_id)

    def test_listing_is_fetched_once_per_resolver(self) -> None:
        self.resolver.resolve_chapter(1)
        self.resolver.resolve_chapter(114)
        self.resolver.list_chapters()
        self.assertEqual([path for path, _ in self.client.requests], ["/chapters"])

    def test_listing_keeps_source_order(self) -> None:
        chapters = canonical_chapters()
        chapters[0], chapters[1] = chapters[1], chapters[0]
        resolver = ChapterResolver(FakeClient({"/chapters": {"chapters": chapters}}))
        self.assertEqual([c.id for c in resolver.list_chapters()[:3]], [2, 1, 3])

    def test_missing_chapters_key_yields_empty_listing(self) -> None:
        resolver = ChapterResolver(FakeClient({"/chapters": {"message": "not found"}}))
        self.assertEqual(resolver.list_chapters(), [])
        with self.assertRaises(ChapterNotFoundError):
            resolver.resolve_chapter(1)


class TranslationCatalogTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = FakeClient({
            "/resources/translations": {
                "translations": [
                    {"id": 20, "name": "Saheeh International", "language_name": "english"},
                    {"id": 33, "name": "Indonesian Islamic affairs ministry", "language_name": "indonesian"},
                    {"id": 134, "name": "King Fahad Quran Complex", "language_name": "indonesian"},
                ]
            }
        })

    def test_without_filter_returns_all(self) -> None:
        self.assertEqual([t.id for t in list_translations(self.client)], [20, 33, 134])

    def test_filter_is_case_insensitive_substring(self) -> None:
        self.assertEqual([t.id for t in list_translations(self.client, "INDO")], [33, 134])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
