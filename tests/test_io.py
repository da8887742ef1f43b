"""Test reading and writing prefix maps."""

import json
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from pydantic import ValidationError

import curie
from curie import PrefixMapping

FOAF_URI_PREFIX = "http://xmlns.com/foaf/0.1/"
VOCAB_URI_PREFIX = "http://example.org/vocab#"


class TestIO(unittest.TestCase):
    """Test I/O."""

    def setUp(self) -> None:
        """Set up the test case."""
        self.mapping = PrefixMapping()
        self.mapping.add_prefix("foaf", FOAF_URI_PREFIX)
        self.mapping.set_default(VOCAB_URI_PREFIX)

    def test_write_prefix_map(self) -> None:
        """Test writing and reading a prefix map."""
        with TemporaryDirectory() as d:
            path = Path(d).joinpath("test.json")
            curie.write_prefix_map(self.mapping, path)
            data = json.loads(path.read_text())
            nm = curie.load_prefix_map(path)
            nm_from_str = curie.load_prefix_map(path.as_posix())
        self.assertEqual({"": VOCAB_URI_PREFIX, "foaf": FOAF_URI_PREFIX}, data)
        for mapping in [nm, nm_from_str]:
            self.assertEqual(self.mapping.prefix_map, mapping.prefix_map)
            self.assertEqual(self.mapping.default, mapping.default)
            self.assertEqual(self.mapping.reverse_prefix_map, mapping.reverse_prefix_map)

    def test_write_without_default(self) -> None:
        """Test writing a prefix map without a default binding."""
        self.mapping.remove_default()
        with TemporaryDirectory() as d:
            path = Path(d).joinpath("test.json")
            curie.write_prefix_map(self.mapping, path.as_posix())
            data = json.loads(path.read_text())
        self.assertEqual({"foaf": FOAF_URI_PREFIX}, data)

    def test_load_malformed(self) -> None:
        """Test loading a file that isn't a prefix map."""
        with TemporaryDirectory() as d:
            path = Path(d).joinpath("test.json")
            path.write_text(json.dumps({"foaf": ["not", "a", "string"]}))
            with self.assertRaises(ValidationError):
                curie.load_prefix_map(path)
