"""Test W3C validation."""

import unittest
from pathlib import Path

from curie.w3c import find_invalid_prefix_character, is_w3c_curie, is_w3c_prefix

HERE = Path(__file__).parent.resolve()
DIRECTORY = HERE.joinpath("resources")
VALID_CURIES_PATH = DIRECTORY.joinpath("valid_curies.txt")
INVALID_CURIES_PATH = DIRECTORY.joinpath("invalid_curies.txt")
VALID_PREFIXES_PATH = DIRECTORY.joinpath("valid_prefixes.txt")
INVALID_PREFIXES_PATH = DIRECTORY.joinpath("invalid_prefixes.txt")


def _read(path: Path) -> list[str]:
    return path.read_text().splitlines()


class TestValidators(unittest.TestCase):
    """Test W3C validation."""

    def test_prefixes(self) -> None:
        """Test prefixes validation."""
        for prefix in _read(VALID_PREFIXES_PATH):
            with self.subTest(prefix=prefix):
                self.assertTrue(is_w3c_prefix(prefix))
                self.assertIsNone(find_invalid_prefix_character(prefix))

        for prefix in _read(INVALID_PREFIXES_PATH):
            with self.subTest(prefix=prefix):
                self.assertFalse(is_w3c_prefix(prefix))
                self.assertIsNotNone(find_invalid_prefix_character(prefix))

    def test_empty_prefix(self) -> None:
        """Test the empty string isn't a prefix."""
        self.assertFalse(is_w3c_prefix(""))

    def test_trailing_newline(self) -> None:
        """Test a trailing newline isn't accepted by the anchored patterns."""
        self.assertFalse(is_w3c_prefix("foaf\n"))
        self.assertEqual(4, find_invalid_prefix_character("foaf\n"))
        self.assertFalse(is_w3c_curie("foaf:name\n"))
        self.assertFalse(is_w3c_curie("name\n"))

    def test_curies(self) -> None:
        """Test CURIE validation."""
        for curie in _read(VALID_CURIES_PATH):
            with self.subTest(curie=curie):
                self.assertTrue(is_w3c_curie(curie), msg="CURIE should test as valid, but did not")

        for curie in _read(INVALID_CURIES_PATH):
            with self.subTest(curie=curie):
                self.assertFalse(
                    is_w3c_curie(curie), msg="CURIE should test as invalid, but did not"
                )
