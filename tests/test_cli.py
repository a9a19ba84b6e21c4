import contextlib
import io
import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch


SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_ROOT))

from homed_devlist.cli import build_parser, expand_short_flags, main  # noqa: E402
from homed_devlist.render import HEADER  # noqa: E402


def _run(argv: list[str]) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
        code = main(argv)
    return code, stdout.getvalue(), stderr.getvalue()


class TestUsage(unittest.TestCase):
    def test_invalid_option_exits_3(self) -> None:
        stdout = io.StringIO()
        stderr = io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as ctx:
                main(["-x"])

        self.assertEqual(ctx.exception.code, 3)
        self.assertIn("Invalid option(s)", stderr.getvalue())
        self.assertIn("usage: hddl", stdout.getvalue())

    def test_stray_argument_exits_3(self) -> None:
        with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["devices"])
        self.assertEqual(ctx.exception.code, 3)

    def test_help_exits_0(self) -> None:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as ctx:
                main(["-h"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn("HOMEd supported device list", stdout.getvalue())

    def test_flags_without_values_keep_defaults(self) -> None:
        args = build_parser().parse_args(["-f", "-d"])
        self.assertIsNone(args.out)
        self.assertIsNone(args.directory)

    def test_clustered_flags_take_values_in_order(self) -> None:
        self.assertEqual(expand_short_flags(["-fd", "out.md", "lib"]), ["-f", "out.md", "-d", "lib"])
        self.assertEqual(expand_short_flags(["-df", "lib"]), ["-d", "lib", "-f"])
        self.assertEqual(expand_short_flags(["-fd", "--strict"]), ["-f", "-d", "--strict"])
        self.assertEqual(expand_short_flags(["--timeout", "5", "-x"]), ["--timeout", "5", "-x"])

    def test_unknown_letter_in_cluster_exits_3(self) -> None:
        with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()) as stderr:
            with self.assertRaises(SystemExit) as ctx:
                main(["-fx", "out.md"])
        self.assertEqual(ctx.exception.code, 3)
        self.assertIn("Invalid option(s)", stderr.getvalue())


class TestDirectoryMode(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.lib = self.root / "homed-zigbee"
        self.lib.mkdir()
        (self.lib / "ikea.json").write_text(
            '{\n  "ikea": [\n    {"description": "IKEA Bulb"}\n  ]\n}\n', encoding="utf-8"
        )
        (self.lib / "other.json").write_text('{"other": [{"description": "Misc"}]}', encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_writes_output_file(self) -> None:
        out_path = self.root / "devs.md"

        code, stdout, _ = _run(["-d", str(self.lib), "-f", str(out_path)])

        self.assertEqual(code, 0)
        text = out_path.read_text(encoding="utf-8")
        self.assertTrue(text.startswith(HEADER))
        self.assertIn("## IKEA\n\n* [IKEA Bulb](", text)
        self.assertIn("ikea.json#L3)", text)
        self.assertTrue(text.rstrip().endswith("other.json#L1)"))
        self.assertIn(f"Wrote device list: {out_path}", stdout)

    def test_combined_short_flags(self) -> None:
        out_path = self.root / "devs.md"

        code, stdout, _ = _run(["-fd", str(out_path), str(self.lib)])

        self.assertEqual(code, 0)
        self.assertIn("ikea.json#L3)", out_path.read_text(encoding="utf-8"))
        self.assertIn(f"Wrote device list: {out_path}", stdout)

    def test_prints_to_stdout_by_default(self) -> None:
        code, stdout, _ = _run(["-d", str(self.lib)])

        self.assertEqual(code, 0)
        self.assertTrue(stdout.startswith(HEADER))
        self.assertNotIn("Wrote device list", stdout)

    def test_bad_file_still_writes_document(self) -> None:
        (self.lib / "empty.json").write_text("{}", encoding="utf-8")
        out_path = self.root / "devs.md"

        code, _, stderr = _run(["-d", str(self.lib), "-f", str(out_path)])

        self.assertEqual(code, 1)
        self.assertIn("The JSON is empty.", stderr)
        self.assertIn("## IKEA", out_path.read_text(encoding="utf-8"))

    def test_missing_directory(self) -> None:
        code, stdout, stderr = _run(["-d", str(self.root / "missing")])

        self.assertEqual(code, 2)
        self.assertEqual(stdout, "")
        self.assertIn("Directory not found", stderr)

    def test_output_file_cannot_be_created(self) -> None:
        out_path = self.root / "no-such-dir" / "devs.md"

        code, _, stderr = _run(["-d", str(self.lib), "-f", str(out_path)])

        self.assertEqual(code, 2)
        self.assertIn("Couldn't create file", stderr)
        self.assertFalse(out_path.exists())


class TestRemoteMode(unittest.TestCase):
    listing_url = "https://api.example.test/contents/homed-zigbee"

    def _fake_urlopen(self, pages: dict[str, bytes]):
        import urllib.error

        class Response(io.BytesIO):
            def __init__(self, body: bytes) -> None:
                super().__init__(body)
                self.headers = {"Content-Type": "application/json"}

            def getcode(self) -> int:
                return 200

        def urlopen(request, timeout=None):
            body = pages.get(request.full_url)
            if body is None:
                raise urllib.error.URLError("connection refused")
            return Response(body)

        return urlopen

    def test_remote_listing(self) -> None:
        listing = [
            {"name": "tuya.json", "type": "file", "download_url": "https://raw.example.test/tuya.json"},
        ]
        pages = {
            self.listing_url: json.dumps(listing).encode("utf-8"),
            "https://raw.example.test/tuya.json": b'{"tuya": [{"description": "TUYA Plug"}]}',
        }

        with patch("urllib.request.urlopen", side_effect=self._fake_urlopen(pages)):
            code, stdout, _ = _run(["--listing-url", self.listing_url])

        self.assertEqual(code, 0)
        self.assertIn("## TUYA\n\n* [TUYA Plug](", stdout)
        self.assertIn("tuya.json#L1)", stdout)

    def test_listing_failure_exits_2(self) -> None:
        with patch("urllib.request.urlopen", side_effect=self._fake_urlopen({})):
            code, stdout, stderr = _run(["--listing-url", self.listing_url])

        self.assertEqual(code, 2)
        self.assertEqual(stdout, "")
        self.assertIn("connection refused", stderr)

    def test_invalid_listing_url_exits_2(self) -> None:
        with patch("urllib.request.urlopen", side_effect=self._fake_urlopen({})) as urlopen:
            code, stdout, stderr = _run(["--listing-url", "not-a-url"])

        self.assertEqual(code, 2)
        self.assertEqual(stdout, "")
        self.assertIn("Invalid URL", stderr)
        urlopen.assert_not_called()


if __name__ == "__main__":
    unittest.main()
