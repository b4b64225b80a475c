import pytest

from conftest import load_suite_entries
from package_url import InvalidPackageUrlError, PackageUrl, parse

ENTRIES = load_suite_entries()


@pytest.mark.parametrize("entry", ENTRIES, ids=[e["description"] for e in ENTRIES])
def test_suite_entry(entry):
    if entry["is_invalid"]:
        with pytest.raises(InvalidPackageUrlError):
            parse(entry["purl"])
        return

    purl = parse(entry["purl"])
    assert purl.render() == entry["canonical_purl"]
    assert purl.type == entry["type"]
    assert purl.namespace_as_string == entry["namespace"]
    assert purl.name == entry["name"]
    assert purl.version == entry["version"]
    qualifiers = dict(purl.qualifiers) if purl.qualifiers is not None else None
    assert qualifiers == entry["qualifiers"]
    assert purl.subpath_as_string == entry["subpath"]


def test_suite_canonical_forms_are_fixed_points(suite_entries):
    for entry in suite_entries:
        if entry["is_invalid"]:
            continue
        canonical = entry["canonical_purl"]
        assert PackageUrl.canonical(canonical) == canonical
        assert parse(canonical) == parse(entry["purl"])
