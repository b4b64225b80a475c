"""Package URL value object, parser and builder

A package URL names a software package across ecosystems:

    type:namespace/name@version?qualifiers#subpath

`parse` turns text into a validated `PackageUrl`, `PackageUrl.render` turns it
back into canonical text, and `PackageUrlBuilder` assembles one from discrete
field values.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .codec import decode, encode
from .errors import EmptySegmentError, InvalidPackageUrlError, MissingFieldError
from .grammar import (
    NAME_PATTERN,
    NAMESPACE_SEGMENT_PATTERN,
    SEGMENT_SEPARATOR,
    SUBPATH_FORBIDDEN,
    SUBPATH_SEGMENT_PATTERN,
    TYPE_PATTERN,
    VERSION_PATTERN,
    join_segments,
    split_qualifiers,
    split_segments,
    validate,
    validate_qualifiers,
    validate_segments,
)

logger = logging.getLogger(__name__)

SegmentsInput = Union[str, Sequence[str], None]
QualifiersInput = Union[str, Mapping[str, str], None]


def _split_zone(value: str, delimiter: str) -> Tuple[str, Optional[str]]:
    """Split on the first delimiter; the tail is None when the delimiter is absent"""
    head, sep, tail = value.partition(delimiter)
    return head, (tail if sep else None)


def parse(value: str) -> "PackageUrl":
    """Parse a package URL from text

    Format: `type:namespace/name@version?qualifiers#subpath`

    Zones are found by scanning for delimiters rather than by a single
    pattern:
    - type ends at the first ':' and must match the type pattern
    - an optional '//' right after the ':' is skipped
    - subpath follows the first '#', qualifiers the first '?' before it
    - version follows the first '@' before the qualifiers, and may itself
      contain '/' and '@'
    - name follows the last '/' before the version; the namespace precedes it

    Every delimiter that is present must be followed by a non-empty zone.
    Raises InvalidPackageUrlError (or one of its subclasses) on failure.
    """
    if not isinstance(value, str):
        raise InvalidPackageUrlError(f"Package URL must be a string: {value!r}")

    try:
        purl = _parse(value)
    except InvalidPackageUrlError as e:
        logger.debug("Rejected package URL %r: %s", value, e)
        raise

    logger.debug("Parsed package URL %r -> %r", value, purl)
    return purl


def _parse(value: str) -> "PackageUrl":
    type_, sep, rest = value.partition(":")
    if not sep or not TYPE_PATTERN.fullmatch(type_):
        raise InvalidPackageUrlError(f"Invalid package URL: {value}", value)

    # Authority-style 'type://...' is tolerated
    if rest.startswith("//"):
        rest = rest[2:]

    rest, subpath = _split_zone(rest, "#")
    rest, qualifiers = _split_zone(rest, "?")
    rest, version = _split_zone(rest, "@")
    for zone in (subpath, qualifiers, version):
        if zone == "":
            raise InvalidPackageUrlError(f"Invalid package URL: {value}", value)

    namespace, sep, name = rest.rpartition(SEGMENT_SEPARATOR)
    if not name:
        raise InvalidPackageUrlError(f"Invalid package URL: {value}", value)

    if sep:
        # The separator before the name is a single '/'; anything else is an
        # empty segment
        if not namespace or namespace.endswith(SEGMENT_SEPARATOR):
            raise EmptySegmentError(value)
        namespace_segments: Optional[List[str]] = split_segments(namespace)
    else:
        namespace_segments = None

    return PackageUrl(
        type_,
        namespace_segments,
        decode(name),
        decode(version) if version is not None else None,
        split_qualifiers(qualifiers),
        split_segments(subpath, SUBPATH_FORBIDDEN),
    )


class PackageUrl:
    """An immutable, validated package URL

    Examples:
    - `maven:org.apache.commons/commons-lang3@3.9`
    - `npm:%40angular/animation@12.3.1`
    - `golang:google.golang.org/genproto#googleapis/api/annotations`
    """

    __slots__ = ("_type", "_namespace", "_name", "_version", "_qualifiers", "_subpath")

    def __init__(self,
                 type: str,
                 namespace: SegmentsInput,
                 name: str,
                 version: Optional[str] = None,
                 qualifiers: QualifiersInput = None,
                 subpath: SegmentsInput = None):
        """Create a package URL from structured fields

        Namespace and subpath may be given as segment sequences or as raw
        slash-delimited strings; qualifiers as a mapping or a raw query
        string. Raw strings are split and decoded exactly as `parse` does.
        Empty sequences and mappings are treated as absent.
        """
        self._type = validate("type", TYPE_PATTERN, type)

        if isinstance(namespace, str):
            namespace = split_segments(namespace)
        self._namespace: Optional[Tuple[str, ...]] = None
        if namespace:
            self._namespace = tuple(validate_segments("namespace", NAMESPACE_SEGMENT_PATTERN, namespace))

        self._name = validate("name", NAME_PATTERN, name)

        self._version: Optional[str] = None
        if version is not None:
            self._version = validate("version", VERSION_PATTERN, version)

        if isinstance(qualifiers, str):
            qualifiers = split_qualifiers(qualifiers)
        self._qualifiers: Optional[Mapping[str, str]] = None
        if qualifiers:
            self._qualifiers = MappingProxyType(validate_qualifiers(qualifiers))

        if isinstance(subpath, str):
            subpath = split_segments(subpath, SUBPATH_FORBIDDEN)
        self._subpath: Optional[Tuple[str, ...]] = None
        if subpath:
            self._subpath = tuple(
                validate_segments("subpath", SUBPATH_SEGMENT_PATTERN, subpath, SUBPATH_FORBIDDEN)
            )

    @classmethod
    def from_string(cls, s: str) -> 'PackageUrl':
        """Create a package URL from its string representation"""
        return parse(s)

    @property
    def type(self) -> str:
        """Type as given; rendered lower-case"""
        return self._type

    @property
    def namespace(self) -> Optional[Tuple[str, ...]]:
        return self._namespace

    @property
    def namespace_as_string(self) -> Optional[str]:
        """Namespace as an encoded, slash-joined string, or None when absent"""
        if self._namespace:
            return join_segments(self._namespace)
        return None

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> Optional[str]:
        return self._version

    @property
    def qualifiers(self) -> Optional[Mapping[str, str]]:
        """Read-only view of the qualifiers in insertion order"""
        return self._qualifiers

    def get_qualifier(self, key: str) -> Optional[str]:
        """Get a qualifier value

        Key is normalized to lowercase for lookup
        """
        if self._qualifiers is None:
            return None
        return self._qualifiers.get(key.lower())

    @property
    def subpath(self) -> Optional[Tuple[str, ...]]:
        return self._subpath

    @property
    def subpath_as_string(self) -> Optional[str]:
        """Subpath as an encoded, slash-joined string, or None when absent"""
        if self._subpath:
            return join_segments(self._subpath)
        return None

    def render(self) -> str:
        """Get the canonical string representation of this package URL

        - type is lower-cased
        - namespace, name, version, qualifier values and subpath segments are
          percent-encoded
        - qualifiers keep insertion order
        """
        parts = [self._type.lower(), ":"]

        if self._namespace:
            parts.append(join_segments(self._namespace))
            parts.append(SEGMENT_SEPARATOR)

        parts.append(encode(self._name))

        if self._version is not None:
            parts.append("@")
            parts.append(encode(self._version))

        if self._qualifiers:
            parts.append("?")
            parts.append("&".join(f"{k}={encode(v)}" for k, v in self._qualifiers.items()))

        if self._subpath:
            parts.append("#")
            parts.append(join_segments(self._subpath))

        return "".join(parts)

    def explain(self) -> str:
        """Field-by-field dump for diagnostics; not a package URL"""
        qualifiers = dict(self._qualifiers) if self._qualifiers is not None else None
        namespace = list(self._namespace) if self._namespace is not None else None
        subpath = list(self._subpath) if self._subpath is not None else None
        return (
            f"{{type={self._type!r}, namespace={namespace!r}, name={self._name!r}, "
            f"version={self._version!r}, qualifiers={qualifiers!r}, subpath={subpath!r}}}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view of the fields"""
        return {
            "type": self._type,
            "namespace": list(self._namespace) if self._namespace is not None else None,
            "name": self._name,
            "version": self._version,
            "qualifiers": dict(self._qualifiers) if self._qualifiers is not None else None,
            "subpath": list(self._subpath) if self._subpath is not None else None,
        }

    def to_builder(self) -> 'PackageUrlBuilder':
        """Start a builder pre-filled with this package URL's fields"""
        builder = PackageUrlBuilder().type(self._type).name(self._name)
        if self._namespace is not None:
            builder.namespace(list(self._namespace))
        if self._version is not None:
            builder.version(self._version)
        if self._qualifiers is not None:
            builder.qualifiers(dict(self._qualifiers))
        if self._subpath is not None:
            builder.subpath(list(self._subpath))
        return builder

    @staticmethod
    def canonical(package_url: str) -> str:
        """Get the canonical form of a package URL string"""
        return parse(package_url).render()

    @staticmethod
    def canonical_option(package_url: Optional[str]) -> Optional[str]:
        """Get the canonical form of an optional package URL string"""
        if package_url is not None:
            return parse(package_url).render()
        else:
            return None

    def _key(self) -> tuple:
        qualifiers = frozenset(self._qualifiers.items()) if self._qualifiers is not None else None
        return (self._type.lower(), self._namespace, self._name, self._version, qualifiers, self._subpath)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"PackageUrl('{self.render()}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageUrl):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class PackageUrlBuilder:
    """Builder for creating package URLs fluently

    Setters record values; nothing is validated until `build`, which hands
    everything to the `PackageUrl` constructor. Raw namespace, subpath and
    qualifier strings are split when set.
    """

    def __init__(self):
        self._type: Optional[str] = None
        self._namespace: Optional[List[str]] = None
        self._name: Optional[str] = None
        self._version: Optional[str] = None
        self._qualifiers: Optional[Dict[str, str]] = None
        self._subpath: Optional[List[str]] = None

    def type(self, type: str) -> 'PackageUrlBuilder':
        self._type = type
        return self

    def namespace(self, namespace: SegmentsInput) -> 'PackageUrlBuilder':
        """Set the namespace from segments or a raw 'a/b/c' string"""
        if isinstance(namespace, str):
            self._namespace = split_segments(namespace)
        else:
            self._namespace = list(namespace) if namespace is not None else None
        return self

    def name(self, name: str) -> 'PackageUrlBuilder':
        self._name = name
        return self

    def version(self, version: Optional[str]) -> 'PackageUrlBuilder':
        self._version = version
        return self

    def qualifiers(self, qualifiers: QualifiersInput) -> 'PackageUrlBuilder':
        """Replace the qualifiers from a mapping or a raw 'k=v&k2=v2' string"""
        if isinstance(qualifiers, str):
            self._qualifiers = split_qualifiers(qualifiers)
        else:
            self._qualifiers = dict(qualifiers) if qualifiers is not None else None
        return self

    def qualifier(self, key: str, value: str) -> 'PackageUrlBuilder':
        """Add a qualifier, overwriting any previous value for the key"""
        if self._qualifiers is None:
            self._qualifiers = {}
        self._qualifiers[key] = value
        return self

    def subpath(self, subpath: SegmentsInput) -> 'PackageUrlBuilder':
        """Set the subpath from segments or a raw 'a/b/c' string"""
        if isinstance(subpath, str):
            self._subpath = split_segments(subpath, SUBPATH_FORBIDDEN)
        else:
            self._subpath = list(subpath) if subpath is not None else None
        return self

    def build(self) -> PackageUrl:
        """Build the package URL

        Raises MissingFieldError if type or name was never set
        """
        if self._type is None:
            raise MissingFieldError("type")
        if self._name is None:
            raise MissingFieldError("name")

        purl = PackageUrl(self._type, self._namespace, self._name, self._version,
                          self._qualifiers, self._subpath)
        logger.debug("Built package URL %s", purl)
        return purl
