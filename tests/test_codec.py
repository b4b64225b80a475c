import pytest
from package_url import (
    InvalidPackageUrlError,
    MalformedEncodingError,
    decode,
    encode,
)


def test_encode_unreserved_untouched():
    assert encode("AZaz09-._~") == "AZaz09-._~"


def test_encode_reserved():
    assert encode("a b") == "a%20b"
    assert encode("@") == "%40"
    assert encode("a/b:c") == "a%2Fb%3Ac"
    assert encode("?#&=+") == "%3F%23%26%3D%2B"
    assert encode("é") == "%C3%A9"
    assert encode("") == ""


def test_decode():
    assert decode("a%20b") == "a b"
    assert decode("%40angular") == "@angular"
    assert decode("%c3%a9") == "é"
    assert decode("plain") == "plain"
    # '+' is not a space
    assert decode("a+b") == "a+b"


def test_decode_malformed():
    for value in ["%", "%2", "abc%", "%zz", "%2g", "a%%20"]:
        with pytest.raises(MalformedEncodingError) as exc_info:
            decode(value)
        assert exc_info.value.value == value

    # Invalid UTF-8 octets
    with pytest.raises(MalformedEncodingError):
        decode("%FF")

    # Malformed encodings are invalid package URL input
    with pytest.raises(InvalidPackageUrlError):
        decode("%")
