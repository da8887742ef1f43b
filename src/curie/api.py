"""Data structures and algorithms for :mod:`curie`."""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Literal, Union, cast, overload

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator
from pytrie import StringTrie
from typing_extensions import Self

from .w3c import find_invalid_prefix_character, is_w3c_prefix

__all__ = [
    "CURIEError",
    "CURIESyntaxError",
    "CompressionError",
    "Curie",
    "ExpansionError",
    "InvalidPrefix",
    "PrefixMap",
    "PrefixMapping",
    "UnboundPrefix",
    "load_prefix_map",
    "parse",
    "write_prefix_map",
]

logger = logging.getLogger(__name__)

DELIMITER = ":"

LocationOr = Union[str, Path, Mapping[str, str]]


class CURIEError(ValueError):
    """The base class for errors raised by :mod:`curie`."""


class CURIESyntaxError(CURIEError):
    """An error raised by strict parsing when the prefix contains a character not allowed in an NCName."""

    def __init__(self, text: str, character: str, position: int) -> None:
        """Initialize the error.

        :param text: The text that was being parsed
        :param character: The offending character
        :param position: The index of the offending character in the text
        """
        self.text = text
        self.character = character
        self.position = position

    def __str__(self) -> str:
        return (
            f"invalid character {self.character!r} at position {self.position} "
            f"in the prefix of {self.text!r}"
        )


class InvalidPrefix(CURIEError):
    """An error raised when binding a prefix that can't be used as a prefix."""

    def __init__(self, prefix: str, reason: str) -> None:
        """Initialize the error."""
        self.prefix = prefix
        self.reason = reason

    def __str__(self) -> str:
        return f"invalid prefix {self.prefix!r}: {self.reason}"


class ExpansionError(CURIEError):
    """An error raised on expansion."""


class UnboundPrefix(ExpansionError):
    """An error raised on expansion if the prefix can't be looked up.

    The ``prefix`` attribute is ``None`` or the empty string when it's the
    default binding that is missing.
    """

    def __init__(self, prefix: str | None) -> None:
        """Initialize the error."""
        self.prefix = prefix

    @property
    def is_default(self) -> bool:
        """Get if the missing binding is the default one."""
        return not self.prefix

    def __str__(self) -> str:
        if self.is_default:
            return "no default prefix is bound"
        return f"prefix is not bound: {self.prefix}"


class CompressionError(CURIEError):
    """An error raised on compression if no URI prefix matches."""

    def __init__(self, uri: str) -> None:
        """Initialize the error."""
        self.uri = uri

    def __str__(self) -> str:
        return f"no URI prefix matches: {self.uri}"


class Curie(BaseModel):
    """A parsed compact URI, made from an optional prefix and a reference.

    There are three shapes of CURIE, which are kept apart by the ``prefix`` field:

    >>> Curie.from_curie("foaf:name")
    Curie(prefix='foaf', reference='name')

    An empty prefix is the explicit default prefix:

    >>> Curie.from_curie(":name")
    Curie(prefix='', reference='name')

    Text without a colon is a bare reference, which has no prefix at all:

    >>> Curie.from_curie("name")
    Curie(prefix=None, reference='name')

    Only the first colon splits, so references can contain colons:

    >>> Curie.from_curie("urn:isbn:0451450523").reference
    'isbn:0451450523'

    A CURIE can be formatted back into a string with the ``curie`` attribute

    >>> Curie.from_curie(":name").curie
    ':name'

    Instances are frozen, so they can be hashed and used in sets.
    """

    prefix: str | None = Field(
        None,
        description="The prefix of the CURIE. None means no delimiter was present, "
        "the empty string means the explicit default prefix.",
    )
    reference: str = Field(..., description="The part of the CURIE after the delimiter.")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    def _parse_from_string(cls, values: str | dict[str, Any]) -> dict[str, Any]:  # noqa:N805
        if isinstance(values, str):
            return cls.from_curie(values).model_dump()
        return values

    def __lt__(self, other: Curie) -> bool:
        """Sort bare references first, then lexically by prefix and reference."""
        return (self.prefix is not None, self.prefix or "", self.reference) < (
            other.prefix is not None,
            other.prefix or "",
            other.reference,
        )

    @property
    def uses_default(self) -> bool:
        """Get if this CURIE is resolved against the default binding.

        >>> Curie.from_curie("name").uses_default
        True
        >>> Curie.from_curie(":name").uses_default
        True
        >>> Curie.from_curie("foaf:name").uses_default
        False
        """
        return not self.prefix

    @property
    def curie(self) -> str:
        """Get the CURIE as a string.

        >>> Curie(prefix="foaf", reference="name").curie
        'foaf:name'
        >>> Curie(reference="name").curie
        'name'
        """
        if self.prefix is None:
            return self.reference
        return f"{self.prefix}{DELIMITER}{self.reference}"

    def __str__(self) -> str:
        return self.curie

    @classmethod
    def from_curie(cls, curie: str, *, strict: bool = False) -> Self:
        """Parse a CURIE string.

        :param curie: A string representation of a compact URI (CURIE)
        :param strict: If true, the prefix has to be a valid NCName
        :return: A CURIE object
        :raises CURIESyntaxError: If strict and the prefix has an invalid character
        """
        prefix, delimiter, reference = curie.partition(DELIMITER)
        if not delimiter:
            return cls(prefix=None, reference=curie)
        if strict and prefix:
            position = find_invalid_prefix_character(prefix)
            if position is not None:
                raise CURIESyntaxError(curie, prefix[position], position)
        return cls(prefix=prefix, reference=reference)


def parse(text: str, *, strict: bool = False) -> Curie:
    """Split text into a CURIE, without consulting a prefix mapping.

    :param text: Any string
    :param strict: If true, a non-empty prefix must be a valid NCName
    :return: A CURIE. Without strict, this never fails.
    :raises CURIESyntaxError: If strict and the prefix has an invalid character

    >>> parse("rdfs:label")
    Curie(prefix='rdfs', reference='label')
    >>> parse("3dmet:B00001")
    Curie(prefix='3dmet', reference='B00001')
    >>> parse("3dmet:B00001", strict=True)
    Traceback (most recent call last):
    ...
    curie.api.CURIESyntaxError: invalid character '3' at position 0 in the prefix of '3dmet:B00001'
    """
    return Curie.from_curie(text, strict=strict)


class PrefixMap(RootModel[dict[str, str]]):
    """A simple prefix map, used to validate prefix maps read from files.

    The empty string key holds the default binding:

    .. code-block:: python

        from curie import PrefixMap

        prefix_map = PrefixMap.model_validate(
            {
                "": "http://example.org/vocab#",
                "foaf": "http://xmlns.com/foaf/0.1/",
            }
        ).root
    """


class PrefixMapping:
    """A bidirectional table between prefixes and URI prefixes, with an optional default binding.

    .. code-block::

        >>> mapping = PrefixMapping()
        >>> mapping.add_prefix("foaf", "http://xmlns.com/foaf/0.1/")
        >>> mapping.set_default("http://example.org/vocab#")

        # Expansion
        >>> mapping.expand("foaf:name")
        'http://xmlns.com/foaf/0.1/name'
        >>> mapping.expand("knows")
        'http://example.org/vocab#knows'
        >>> mapping.expand(":knows")
        'http://example.org/vocab#knows'

        # Compression
        >>> mapping.compress("http://xmlns.com/foaf/0.1/name")
        Curie(prefix='foaf', reference='name')

    URI prefixes are used as-is, so they should already end with their
    separator (e.g., ``/`` or ``#``).

    Instances are not thread-safe. Guard mutations with a lock if an
    instance is shared between threads.
    """

    #: The expansion dictionary with prefixes as keys and URI prefixes as values
    prefix_map: dict[str, str]
    #: The URI prefix of the default binding
    default: str | None
    #: The mapping from URI prefixes to prefixes, where the default binding is the empty string
    reverse_prefix_map: dict[str, str]
    #: A prefix trie over URI prefixes for compression
    trie: StringTrie

    def __init__(self, *, strict: bool = True) -> None:
        """Instantiate an empty prefix mapping.

        :param strict:
            If true, prefixes have to be valid NCNames, both when they are
            added and when strings are parsed by :meth:`expand`.
        """
        self.strict = strict
        self.prefix_map = {}
        self.default = None
        self.reverse_prefix_map = {}
        self.trie = StringTrie()
        # prefixes bound to each URI prefix, in binding order
        self._uri_prefix_to_prefixes: dict[str, list[str]] = {}

    @classmethod
    def new(cls, **kwargs: Any) -> Self:
        """Get an empty prefix mapping."""
        return cls(**kwargs)

    def __len__(self) -> int:
        return len(self.prefix_map)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self.prefix_map

    def __iter__(self) -> Iterator[str]:
        return iter(self.prefix_map)

    def _check_prefix(self, prefix: str) -> None:
        if not prefix:
            raise InvalidPrefix(prefix, "the empty prefix is reserved, use set_default() instead")
        if DELIMITER in prefix:
            raise InvalidPrefix(prefix, f"prefixes can't contain the delimiter {DELIMITER!r}")
        if self.strict and not is_w3c_prefix(prefix):
            raise InvalidPrefix(prefix, "not a valid NCName")

    def _reindex(self, uri_prefix: str) -> None:
        """Point the reverse index for the URI prefix to its earliest bound prefix."""
        prefixes = self._uri_prefix_to_prefixes.get(uri_prefix)
        if prefixes:
            prefix: str | None = prefixes[0]
        elif self.default == uri_prefix:
            prefix = ""
        else:
            prefix = None
        if prefix is not None:
            self.reverse_prefix_map[uri_prefix] = prefix
            self.trie[uri_prefix] = prefix
        elif uri_prefix in self.reverse_prefix_map:
            del self.reverse_prefix_map[uri_prefix]
            del self.trie[uri_prefix]

    def _unbind(self, prefix: str, uri_prefix: str) -> None:
        prefixes = self._uri_prefix_to_prefixes[uri_prefix]
        prefixes.remove(prefix)
        if not prefixes:
            del self._uri_prefix_to_prefixes[uri_prefix]

    def add_prefix(self, prefix: str, uri_prefix: str) -> None:
        """Bind a prefix to a URI prefix.

        :param prefix: The prefix to bind, e.g., ``foaf``
        :param uri_prefix: The URI prefix, e.g., ``http://xmlns.com/foaf/0.1/``
        :raises InvalidPrefix: If the prefix is empty, contains a colon, or
            (in strict mode) isn't a valid NCName

        Binding an existing prefix again replaces its URI prefix:

        >>> mapping = PrefixMapping()
        >>> mapping.add_prefix("ex", "http://example.com/a/")
        >>> mapping.add_prefix("ex", "http://example.com/b/")
        >>> mapping.expand("ex:1")
        'http://example.com/b/1'
        """
        self._check_prefix(prefix)
        previous = self.prefix_map.get(prefix)
        if previous is not None and previous != uri_prefix:
            logger.debug("rebinding prefix %s from %s to %s", prefix, previous, uri_prefix)
        if previous == uri_prefix:
            return
        self.prefix_map[prefix] = uri_prefix
        if previous is not None:
            self._unbind(prefix, previous)
            self._reindex(previous)
        self._uri_prefix_to_prefixes.setdefault(uri_prefix, []).append(prefix)
        self._reindex(uri_prefix)

    def remove_prefix(self, prefix: str) -> None:
        """Unbind a prefix. Unbound prefixes are ignored."""
        uri_prefix = self.prefix_map.pop(prefix, None)
        if uri_prefix is not None:
            self._unbind(prefix, uri_prefix)
            self._reindex(uri_prefix)

    def set_default(self, uri_prefix: str) -> None:
        """Bind the default prefix, used by bare references and an empty prefix."""
        previous = self.default
        self.default = uri_prefix
        if previous is not None:
            self._reindex(previous)
        self._reindex(uri_prefix)

    def remove_default(self) -> None:
        """Unbind the default prefix, if bound."""
        previous = self.default
        self.default = None
        if previous is not None:
            self._reindex(previous)

    def get_uri_for_prefix(self, prefix: str | None) -> str | None:
        """Get the URI prefix bound to a prefix.

        :param prefix: A prefix. None or the empty string look up the default binding.
        :return: The URI prefix, or None if unbound
        """
        if not prefix:
            return self.default
        return self.prefix_map.get(prefix)

    def get_prefix_for_uri(self, uri_prefix: str) -> str | None:
        """Get the prefix bound to exactly this URI prefix.

        :param uri_prefix: A URI prefix
        :return: The prefix, the empty string if only the default binding
            matches, or None if nothing is bound to this URI prefix

        >>> mapping = PrefixMapping()
        >>> mapping.add_prefix("foaf", "http://xmlns.com/foaf/0.1/")
        >>> mapping.get_prefix_for_uri("http://xmlns.com/foaf/0.1/")
        'foaf'
        >>> mapping.get_prefix_for_uri("http://xmlns.com/foaf/0.1/name")
        """
        return self.reverse_prefix_map.get(uri_prefix)

    def expand(self, curie: Curie | str) -> str:
        """Expand a CURIE to a URI.

        :param curie: A CURIE object, or a string that gets parsed first
            (strictly, if this mapping is strict)
        :return: The URI prefix of the binding concatenated with the reference
        :raises UnboundPrefix: If the prefix, or the default, isn't bound
        :raises CURIESyntaxError: If a string is given, this mapping is strict,
            and the prefix isn't a valid NCName

        Both bare references and the empty prefix use the default binding.

        >>> mapping = PrefixMapping()
        >>> mapping.expand("ex:foo")
        Traceback (most recent call last):
        ...
        curie.api.UnboundPrefix: prefix is not bound: ex
        """
        if isinstance(curie, str):
            curie = parse(curie, strict=self.strict)
        uri_prefix = self.get_uri_for_prefix(curie.prefix)
        if uri_prefix is None:
            raise UnboundPrefix(curie.prefix)
        return uri_prefix + curie.reference

    def is_expandable(self, curie: Curie | str) -> bool:
        """Check if the CURIE can be expanded with this mapping.

        >>> mapping = PrefixMapping()
        >>> mapping.add_prefix("foaf", "http://xmlns.com/foaf/0.1/")
        >>> mapping.is_expandable("foaf:name")
        True
        >>> mapping.is_expandable("name")
        False
        """
        try:
            self.expand(curie)
        except CURIEError:
            return False
        return True

    # docstr-coverage:excused `overload`
    @overload
    def compress(self, uri: str, *, strict: Literal[True] = True) -> Curie: ...

    # docstr-coverage:excused `overload`
    @overload
    def compress(self, uri: str, *, strict: Literal[False] = False) -> Curie | None: ...

    def compress(self, uri: str, *, strict: bool = False) -> Curie | None:
        """Compress a URI to a CURIE, if possible.

        :param uri: A URI
        :param strict: If true and no URI prefix matches, raise an error
        :return: A CURIE using the binding with the longest matching URI prefix,
            or None if none matches and not strict
        :raises CompressionError: If strict and no URI prefix matches

        >>> mapping = PrefixMapping()
        >>> mapping.add_prefix("obo", "http://purl.obolibrary.org/obo/")
        >>> mapping.add_prefix("GO", "http://purl.obolibrary.org/obo/GO_")
        >>> mapping.compress("http://purl.obolibrary.org/obo/GO_0032571")
        Curie(prefix='GO', reference='0032571')
        >>> mapping.compress("http://example.org/missing")

        A match on the default binding gives an explicit default CURIE, so
        references containing a colon survive a round trip:

        >>> mapping.set_default("urn:")
        >>> mapping.compress("urn:isbn:0451450523").curie
        ':isbn:0451450523'
        """
        item = self.trie.longest_prefix_item(uri, default=None)
        if item is None:
            if strict:
                raise CompressionError(uri)
            return None
        uri_prefix, prefix = cast(tuple[str, str], item)
        return Curie(prefix=prefix, reference=uri[len(uri_prefix) :])

    def to_prefix_map(self) -> dict[str, str]:
        """Get a prefix map, where the empty string key holds the default binding."""
        rv = dict(self.prefix_map)
        if self.default is not None:
            rv[""] = self.default
        return rv

    @classmethod
    def from_prefix_map(cls, prefix_map: LocationOr, **kwargs: Any) -> Self:
        """Get a prefix mapping from a simple prefix map.

        :param prefix_map:
            One of the following:

            - A mapping whose keys are prefixes and values are URI prefixes.
              The empty string key sets the default binding.
            - A string or :class:`pathlib.Path` object corresponding to a local
              file path to a JSON file containing a prefix map
        :param kwargs: Keyword arguments to pass to :meth:`PrefixMapping.__init__`
        :returns: A prefix mapping
        :raises InvalidPrefix: If one of the prefixes can't be bound

        >>> mapping = PrefixMapping.from_prefix_map(
        ...     {
        ...         "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
        ...         "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
        ...     }
        ... )
        >>> mapping.expand("rdfs:label")
        'http://www.w3.org/2000/01/rdf-schema#label'
        """
        data = PrefixMap.model_validate(_prepare(prefix_map)).root
        duplicates = sorted(
            uri_prefix for uri_prefix, count in Counter(data.values()).items() if count > 1
        )
        if duplicates:
            logger.warning(
                "URI prefixes bound to more than one prefix can't be compressed unambiguously: %s",
                ", ".join(duplicates),
            )
        rv = cls(**kwargs)
        for prefix, uri_prefix in data.items():
            if prefix:
                rv.add_prefix(prefix, uri_prefix)
            else:
                rv.set_default(uri_prefix)
        return rv


def _prepare(data: LocationOr) -> Mapping[str, str]:
    if isinstance(data, Path):
        with data.open() as file:
            return cast(Mapping[str, str], json.load(file))
    elif isinstance(data, str):
        with open(data) as file:
            return cast(Mapping[str, str], json.load(file))
    else:
        return data


def load_prefix_map(prefix_map: LocationOr, **kwargs: Any) -> PrefixMapping:
    """Get a prefix mapping from a simple prefix map.

    :param prefix_map: A mapping, or a path to a JSON file containing one
    :param kwargs: Keyword arguments to pass to :meth:`PrefixMapping.__init__`
    :returns: A prefix mapping

    >>> import curie
    >>> mapping = curie.load_prefix_map({"": "http://example.org/vocab#"})
    >>> mapping.expand("knows")
    'http://example.org/vocab#knows'
    """
    return PrefixMapping.from_prefix_map(prefix_map, **kwargs)


def _ensure_path(path: str | Path) -> Path:
    if isinstance(path, str):
        path = Path(path).resolve()
    return path


def write_prefix_map(mapping: PrefixMapping, path: str | Path) -> None:
    """Write a prefix mapping as a JSON prefix map to a file.

    The default binding, if any, is written with the empty string as its key.
    """
    path = _ensure_path(path)
    path.write_text(
        json.dumps(mapping.to_prefix_map(), indent=4, sort_keys=True, ensure_ascii=False)
    )
