"""Compact URI expressions (CURIEs) and the prefix mappings that expand them."""

from .api import (
    CompressionError,
    Curie,
    CURIEError,
    CURIESyntaxError,
    ExpansionError,
    InvalidPrefix,
    PrefixMap,
    PrefixMapping,
    UnboundPrefix,
    load_prefix_map,
    parse,
    write_prefix_map,
)
from .version import get_version

__all__ = [
    "Curie",
    "PrefixMap",
    "PrefixMapping",
    "parse",
    "get_version",
    # errors
    "CURIEError",
    "CURIESyntaxError",
    "CompressionError",
    "ExpansionError",
    "InvalidPrefix",
    "UnboundPrefix",
    # i/o
    "load_prefix_map",
    "write_prefix_map",
]
