import os
import tempfile
import unittest
from pathlib import Path
from typing import Optional

from epubread.env import DEFAULT_MAX_DEPTH, MAX_DEPTH_ENV, max_depth, read_env, read_int_env
from epubread.errors import TooDeeplyNested
from epubread.nodes import parse_xml


def _restore_env(name: str, previous: Optional[str]) -> None:
    if previous is None:
        os.environ.pop(name, None)
    else:
        os.environ[name] = previous


class EnvFileTests(unittest.TestCase):
    def test_read_env_prefers_plain_value(self) -> None:
        prev_plain = os.environ.get("EPUBREAD_SAMPLE")
        prev_file = os.environ.get("EPUBREAD_SAMPLE_FILE")
        with tempfile.NamedTemporaryFile("w", encoding="utf-8", delete=False) as tmp:
            tmp.write("from-file")
            file_path = tmp.name
        try:
            os.environ["EPUBREAD_SAMPLE"] = "from-env"
            os.environ["EPUBREAD_SAMPLE_FILE"] = file_path
            self.assertEqual(read_env("EPUBREAD_SAMPLE"), "from-env")
        finally:
            Path(file_path).unlink(missing_ok=True)
            _restore_env("EPUBREAD_SAMPLE", prev_plain)
            _restore_env("EPUBREAD_SAMPLE_FILE", prev_file)

    def test_read_env_supports_file_suffix(self) -> None:
        prev_plain = os.environ.get("EPUBREAD_SAMPLE")
        prev_file = os.environ.get("EPUBREAD_SAMPLE_FILE")
        with tempfile.NamedTemporaryFile("w", encoding="utf-8", delete=False) as tmp:
            tmp.write("from-file\n")
            file_path = tmp.name
        try:
            os.environ.pop("EPUBREAD_SAMPLE", None)
            os.environ["EPUBREAD_SAMPLE_FILE"] = file_path
            self.assertEqual(read_env("EPUBREAD_SAMPLE"), "from-file")
        finally:
            Path(file_path).unlink(missing_ok=True)
            _restore_env("EPUBREAD_SAMPLE", prev_plain)
            _restore_env("EPUBREAD_SAMPLE_FILE", prev_file)

    def test_missing_file_falls_back_to_default(self) -> None:
        prev_plain = os.environ.get("EPUBREAD_SAMPLE")
        prev_file = os.environ.get("EPUBREAD_SAMPLE_FILE")
        with tempfile.TemporaryDirectory() as tmp:
            try:
                os.environ.pop("EPUBREAD_SAMPLE", None)
                os.environ["EPUBREAD_SAMPLE_FILE"] = str(Path(tmp) / "absent.txt")
                self.assertEqual(read_env("EPUBREAD_SAMPLE", "fallback"), "fallback")
            finally:
                _restore_env("EPUBREAD_SAMPLE", prev_plain)
                _restore_env("EPUBREAD_SAMPLE_FILE", prev_file)

    def test_read_int_env_ignores_garbage(self) -> None:
        prev = os.environ.get("EPUBREAD_SAMPLE")
        try:
            os.environ["EPUBREAD_SAMPLE"] = " 42 "
            self.assertEqual(read_int_env("EPUBREAD_SAMPLE", 7), 42)
            os.environ["EPUBREAD_SAMPLE"] = "lots"
            self.assertEqual(read_int_env("EPUBREAD_SAMPLE", 7), 7)
        finally:
            _restore_env("EPUBREAD_SAMPLE", prev)


class MaxDepthTests(unittest.TestCase):
    def setUp(self) -> None:
        self.prev = os.environ.get(MAX_DEPTH_ENV)
        self.prev_file = os.environ.get(f"{MAX_DEPTH_ENV}_FILE")
        os.environ.pop(f"{MAX_DEPTH_ENV}_FILE", None)

    def tearDown(self) -> None:
        _restore_env(MAX_DEPTH_ENV, self.prev)
        _restore_env(f"{MAX_DEPTH_ENV}_FILE", self.prev_file)

    def test_default_limit(self) -> None:
        os.environ.pop(MAX_DEPTH_ENV, None)
        self.assertEqual(max_depth(), DEFAULT_MAX_DEPTH)

    def test_non_positive_limit_uses_default(self) -> None:
        os.environ[MAX_DEPTH_ENV] = "0"
        self.assertEqual(max_depth(), DEFAULT_MAX_DEPTH)
        os.environ[MAX_DEPTH_ENV] = "-3"
        self.assertEqual(max_depth(), DEFAULT_MAX_DEPTH)

    def test_limit_applies_to_decoders(self) -> None:
        os.environ[MAX_DEPTH_ENV] = "2"
        with self.assertRaises(TooDeeplyNested) as ctx:
            parse_xml(b"<a><b><c><d/></c></b></a>", source="deep.xml")
        self.assertEqual(ctx.exception.limit, 2)
        self.assertEqual(parse_xml(b"<a><b><c/></b></a>").find("c").name, "c")


if __name__ == "__main__":
    unittest.main()
