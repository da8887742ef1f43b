"""Validation based on W3C standards.

The Worldwide Web Consortium (W3C) defines
`prefixes <https://www.w3.org/TR/1999/REC-xml-names-19990114/#NT-NCName>`_ (i.e., ``NCName``)
and `CURIEs <https://www.w3.org/TR/2010/NOTE-curie-20101216/>`_. This module
turns the parts of those documents that matter for splitting and binding
CURIEs into regular expressions and small predicates.

The reference part of a CURIE is only checked loosely (no whitespace). Full
`IRI <https://www.ietf.org/rfc/rfc3987.txt>`_ validation is out of scope.
"""

from __future__ import annotations

import re

__all__ = [
    "CURIE_PATTERN",
    "NCNAME_PATTERN",
    "REFERENCE_PATTERN",
    "find_invalid_prefix_character",
    "is_w3c_curie",
    "is_w3c_prefix",
]

NCNAME_PATTERN = r"[A-Za-z_][A-Za-z0-9\.\-_]*"
"""A regex for prefixes, from https://www.w3.org/TR/1999/REC-xml-names-19990114/#NT-NCName.

.. code-block::

    prefix := NCName
    NCName := (Letter | '_') (NCNameChar)*
    NCNameChar	::=	Letter | Digit | '.' | '-' | '_'
"""

NCNAME_START_RE = re.compile(r"[A-Za-z_]")
NCNAME_CHAR_RE = re.compile(r"[A-Za-z0-9\.\-_]")

REFERENCE_PATTERN = r"(/[^\s/][^\s]*|[^\s/][^\s]*|[^\s]?)"
"""A regex for the reference part of a CURIE, a loose reading of ``irelative-ref``.

This pattern was adapted from https://gist.github.com/niklasl/2506955.
"""

REFERENCE_RE = re.compile(REFERENCE_PATTERN)

CURIE_PATTERN = rf"^({NCNAME_PATTERN}?:)?{REFERENCE_PATTERN}$"
"""A regex for CURIEs, based on https://www.w3.org/TR/2010/NOTE-curie-20101216.

.. code-block::

    curie       :=   [ [ prefix ] ':' ] reference
    prefix      :=   NCName
    reference   :=   irelative-ref
"""


def is_w3c_prefix(prefix: str) -> bool:
    """Return if the string is a valid prefix under the W3C specification.

    :param prefix: A string
    :return: If the string is a valid prefix under the W3C specification.

    Strings containing letters, numbers, and underscores are valid prefixes.

    >>> is_w3c_prefix("foaf")
    True

    The prefix '_' is reserved for blank nodes by RDF languages, but it
    is still a syntactically valid prefix.

    >>> is_w3c_prefix("_")
    True

    Strings starting with a number are not valid prefixes.

    >>> is_w3c_prefix("3dmet")
    False

    Neither is the empty string, which stands for the default prefix.

    >>> is_w3c_prefix("")
    False
    """
    return bool(prefix) and find_invalid_prefix_character(prefix) is None


def find_invalid_prefix_character(prefix: str) -> int | None:
    """Get the position of the first character that makes the prefix an invalid NCName.

    :param prefix: A non-empty candidate prefix
    :return: The index of the first offending character, or None if the prefix is valid.

    >>> find_invalid_prefix_character("rdfs")
    >>> find_invalid_prefix_character("3dmet")
    0
    >>> find_invalid_prefix_character("a b")
    1
    """
    for position, character in enumerate(prefix):
        pattern = NCNAME_START_RE if position == 0 else NCNAME_CHAR_RE
        if not pattern.fullmatch(character):
            return position
    return None


def _is_w3c_reference(reference: str) -> bool:
    return REFERENCE_RE.fullmatch(reference) is not None


def is_w3c_curie(curie: str) -> bool:
    """Return if the string is a valid CURIE under the W3C specification.

    :param curie: A string to check
    :return: True if the string is a valid CURIE under the W3C specification.

    If no prefix is given, the host language chooses how to assign a default
    prefix.

    >>> is_w3c_curie(":test")
    True
    >>> is_w3c_curie("_:test")
    True

    A prefix can't start with a number.

    >>> is_w3c_curie("4cdn:test")
    False

    Empty strings are invalid.

    >>> is_w3c_curie("")
    False
    """
    # safe CURIE brackets belong to the host language, not the CURIE
    if "[" in curie or "]" in curie:
        return False

    if not curie.strip():
        return False

    prefix, sep, reference = curie.partition(":")
    if not sep:
        return _is_w3c_reference(curie)

    # an empty prefix is fine even though NCName itself can't be empty
    if not prefix:
        return _is_w3c_reference(reference)

    return is_w3c_prefix(prefix) and _is_w3c_reference(reference)
