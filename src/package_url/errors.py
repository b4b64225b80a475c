"""Package URL error classes"""

from typing import Optional


class InvalidPackageUrlError(Exception):
    """Input does not satisfy the package URL grammar or a field fails its pattern"""

    def __init__(self, message: str, value: Optional[str] = None):
        self.value = value
        super().__init__(message)


class EmptySegmentError(InvalidPackageUrlError):
    """A namespace or subpath segment is empty"""

    def __init__(self, value: str):
        super().__init__(f"Empty segment in: {value}", value)


class IllegalSegmentContentError(InvalidPackageUrlError):
    """A decoded namespace or subpath segment holds forbidden content"""

    def __init__(self, content: str, value: str):
        self.content = content
        super().__init__(f"Illegal segment content: {content} in: {value}", value)


class MalformedEncodingError(InvalidPackageUrlError):
    """A percent-escape could not be decoded"""
    pass


class MissingFieldError(InvalidPackageUrlError):
    """Builder was asked to build without a required field"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing: {field}")
