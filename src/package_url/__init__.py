"""Package URL - parse, validate, build and render purls

This package provides the package URL (`type:namespace/name@version?qualifiers#subpath`)
engine: a delimiter-driven parser, a validated immutable value object with a
canonical rendering, and a fluent builder.
"""

import logging

from .codec import decode, encode
from .errors import (
    InvalidPackageUrlError,
    EmptySegmentError,
    IllegalSegmentContentError,
    MalformedEncodingError,
    MissingFieldError,
)
from .grammar import join_segments, split_qualifiers, split_segments
from .package_url import PackageUrl, PackageUrlBuilder, parse

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    "PackageUrl",
    "PackageUrlBuilder",
    "parse",
    "encode",
    "decode",
    "split_segments",
    "join_segments",
    "split_qualifiers",
    "InvalidPackageUrlError",
    "EmptySegmentError",
    "IllegalSegmentContentError",
    "MalformedEncodingError",
    "MissingFieldError",
]
