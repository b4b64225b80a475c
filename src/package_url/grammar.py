"""Field grammar for package URLs

Character-class patterns for every field, the validators the constructor runs
against them, and the segment and qualifier splitting shared by the parser and
the builder.
"""

import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .codec import decode, encode
from .errors import EmptySegmentError, IllegalSegmentContentError, InvalidPackageUrlError

TYPE_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9.+-]*")
NAMESPACE_SEGMENT_PATTERN = re.compile(r"[^/]+")
NAME_PATTERN = re.compile(r"[^/@]+")
VERSION_PATTERN = re.compile(r".+", re.DOTALL)
QUALIFIER_KEY_PATTERN = re.compile(r"[a-zA-Z.\-_][a-zA-Z0-9.\-_]*")
QUALIFIER_VALUE_PATTERN = re.compile(r"[^&]+")
SUBPATH_SEGMENT_PATTERN = re.compile(r"[^/]+")

SEGMENT_SEPARATOR = "/"
QUALIFIER_SEPARATOR = "&"
KEY_VALUE_SEPARATOR = "="

# Subpath segments that would allow directory traversal
SUBPATH_FORBIDDEN = (".", "..")


def validate(field: str, pattern: "re.Pattern[str]", value: Optional[str]) -> str:
    """Full-match value against pattern or raise InvalidPackageUrlError"""
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise InvalidPackageUrlError(f"Invalid {field}: {value}", value)

    # Lone surrogates match the patterns but cannot be percent-encoded
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidPackageUrlError(f"Invalid {field}: {value!r}", value) from e
    return value


def validate_segments(field: str, pattern: "re.Pattern[str]", segments: Iterable[str],
                      forbidden: Sequence[str] = ()) -> List[str]:
    """Validate each segment of a namespace or subpath, returning a copy"""
    segments = list(segments)
    result = []
    for segment in segments:
        validate(f"{field}.segment", pattern, segment)
        if segment in forbidden:
            raise IllegalSegmentContentError(segment, SEGMENT_SEPARATOR.join(segments))
        result.append(segment)
    return result


def validate_qualifiers(qualifiers: Mapping[str, str]) -> Dict[str, str]:
    """Validate qualifier pairs, returning a copy with lower-cased keys

    Later keys overwrite earlier ones that fold to the same lower-case key.
    """
    result: Dict[str, str] = {}
    for key, value in qualifiers.items():
        validate("qualifier.key", QUALIFIER_KEY_PATTERN, key)
        validate("qualifier.value", QUALIFIER_VALUE_PATTERN, value)
        result[key.lower()] = value
    return result


def strip_slashes(value: str) -> str:
    """Strip at most one leading and one trailing '/'"""
    if value.startswith(SEGMENT_SEPARATOR):
        value = value[1:]
    if value.endswith(SEGMENT_SEPARATOR):
        value = value[:-1]
    return value


def split_segments(value: Optional[str], forbidden: Sequence[str] = ()) -> Optional[List[str]]:
    """Split a raw slash-delimited path into decoded segments

    Returns None for None or the empty string. Raises EmptySegmentError for an
    empty raw segment and IllegalSegmentContentError when a decoded segment
    contains '/' or equals one of the forbidden literals.
    """
    if not value:
        return None

    result = []
    for part in strip_slashes(value).split(SEGMENT_SEPARATOR):
        if not part:
            raise EmptySegmentError(value)
        part = decode(part)

        # Decoded segment must not contain a separator
        if SEGMENT_SEPARATOR in part:
            raise IllegalSegmentContentError(SEGMENT_SEPARATOR, value)

        if part in forbidden:
            raise IllegalSegmentContentError(part, value)
        result.append(part)

    return result


def join_segments(segments: Iterable[str]) -> str:
    """Encode segments and join them with '/'"""
    return SEGMENT_SEPARATOR.join(encode(segment) for segment in segments)


def split_qualifiers(value: Optional[str]) -> Optional[Dict[str, str]]:
    """Split a raw 'k=v&k2=v2' string into an ordered dict

    Keys are lower-cased, values decoded, pairs whose decoded value is empty
    are dropped. A pair without '=' or with an illegal key is invalid.
    """
    if not value:
        return None

    result: Dict[str, str] = {}
    for pair in value.split(QUALIFIER_SEPARATOR):
        key, sep, raw = pair.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            raise InvalidPackageUrlError(f"Invalid qualifier: {pair!r} in: {value}", value)
        if not QUALIFIER_KEY_PATTERN.fullmatch(key):
            raise InvalidPackageUrlError(f"Invalid qualifier.key: {key!r} in: {value}", value)

        decoded = decode(raw)
        if not decoded:
            continue

        result[key.lower()] = decoded

    return result
