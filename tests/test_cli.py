from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from quran_downloader import cli
from quran_downloader.http import NetworkError

from tests.fakes import FakeClient, canonical_chapters, verse_routes


def _run(argv: list[str]) -> tuple[int, str]:
    buffer = io.StringIO()
    with redirect_stdout(buffer):
        code = cli.main(argv)
    return code, buffer.getvalue()


class HelperTests(unittest.TestCase):
    def test_normalize_api_path_undoes_msys_conversion(self) -> None:
        self.assertEqual(cli.normalize_api_path("C:/Program Files/Git/chapters/1"), "/chapters/1")
        self.assertEqual(cli.normalize_api_path("C:/Program Files/Git/quran/verses/uthmani"), "/quran/verses/uthmani")
        self.assertEqual(cli.normalize_api_path("/verses/by_chapter/1"), "/verses/by_chapter/1")

    def test_normalize_api_path_cuts_at_earliest_api_segment(self) -> None:
        self.assertEqual(
            cli.normalize_api_path("C:/Program Files/Git/quran/verses/uthmani_tajweed"),
            "/quran/verses/uthmani_tajweed",
        )
        self.assertEqual(
            cli.normalize_api_path("D:/msys64/verses/by_chapter/1/resources"), "/verses/by_chapter/1/resources"
        )
        self.assertEqual(cli.normalize_api_path("C:/Git/resources/translations"), "/resources/translations")

    def test_parse_params_splits_on_first_equals(self) -> None:
        self.assertEqual(
            cli.parse_params(["words=true", "filter=a=b", "flag"]),
            {"words": "true", "filter": "a=b", "flag": ""},
        )
        self.assertEqual(cli.parse_params(None), {})


class CommandTests(unittest.TestCase):
    def setUp(self) -> None:
        routes = {
            "/chapters": {"chapters": canonical_chapters()},
            "/resources/translations": {
                "translations": [
                    {"id": 20, "name": "Saheeh International", "language_name": "english"},
                    {"id": 33, "name": "Kemenag", "language_name": "indonesian"},
                ]
            },
        }
        routes.update(verse_routes(1, 7))
        self.client = FakeClient(routes)
        patcher = patch("quran_downloader.cli._make_client", return_value=self.client)
        self.make_client = patcher.start()
        self.addCleanup(patcher.stop)
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def test_no_arguments_prints_help(self) -> None:
        code, out = _run([])
        self.assertEqual(code, 0)
        self.assertIn("download", out)

    def test_list(self) -> None:
        code, out = _run(["list"])
        self.assertEqual(code, 0)
        self.assertIn("Al-Fatihah", out)
        self.assertIn("All Surahs (114 Chapters)", out)

    def test_translations_filter(self) -> None:
        code, out = _run(["translations", "--language", "indo"])
        self.assertEqual(code, 0)
        self.assertIn("Kemenag", out)
        self.assertNotIn("Saheeh", out)
        self.assertIn("Total: 1 translations", out)

    def test_fetch_prints_json(self) -> None:
        code, out = _run(["fetch", "--path", "/chapters"])
        self.assertEqual(code, 0)
        self.assertEqual(len(json.loads(out)["chapters"]), 114)

    def test_fetch_without_path_reports_missing_argument(self) -> None:
        code, out = _run(["fetch"])
        self.assertEqual(code, 0)
        self.assertIn("--path", out)
        self.assertEqual(self.client.requests, [])

    def test_download_without_selection_reports_missing_argument(self) -> None:
        code, out = _run(["download"])
        self.assertEqual(code, 0)
        self.assertIn("--surah", out)

    def test_download_single_surah(self) -> None:
        output = Path(self._tmp.name) / "out"
        code, _ = _run(["download", "--surah", "1", "-o", str(output), "--request-delay", "0", "--write-index"])
        self.assertEqual(code, 0)
        self.assertTrue((output / "001-al-fatihah.json").exists())
        self.assertTrue((output / "chapters.json").exists())

    def test_base_url_accepted_before_and_after_command(self) -> None:
        _run(["--base-url", "https://one.test/", "list"])
        _run(["list", "--base-url", "https://two.test"])
        urls = [call.args[0].base_url for call in self.make_client.call_args_list]
        self.assertEqual(urls, ["https://one.test", "https://two.test"])

    def test_surah_zero_is_looked_up_not_ignored(self) -> None:
        code, out = _run(["download", "--surah", "0", "--to", "1", "-o", self._tmp.name])
        self.assertEqual(code, 1)
        self.assertIn("Surah with ID 0 not found", out)
        self.assertEqual(list(Path(self._tmp.name).iterdir()), [])

    def test_from_zero_counts_as_range_selection(self) -> None:
        output = Path(self._tmp.name) / "range"
        code, out = _run(["download", "--from", "0", "--to", "1", "-o", str(output), "--request-delay", "0"])
        self.assertEqual(code, 0)
        self.assertNotIn("Please specify", out)
        self.assertEqual([p.name for p in output.iterdir()], ["001-al-fatihah.json"])

    def test_unknown_surah_exits_non_zero(self) -> None:
        code, out = _run(["download", "--surah", "115", "-o", self._tmp.name])
        self.assertEqual(code, 1)
        self.assertIn("Surah with ID 115 not found", out)

    def test_network_error_exits_non_zero(self) -> None:
        self.client.routes["/chapters"] = NetworkError("HTTP request failed for /chapters: refused")
        code, out = _run(["list"])
        self.assertEqual(code, 1)
        self.assertIn("HTTP request failed", out)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
