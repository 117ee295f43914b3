import pytest

from errors import ValidationError
from models import (
    Alternate, GeneratedFiles, PayloadList, SinglePayload, as_alternates, as_number, as_payload,
)


def test_as_payload():
    single = as_payload({"loc": "a"})
    assert isinstance(single, SinglePayload)
    assert single.items == ({"loc": "a"},)
    many = as_payload([{"loc": "a"}, {"loc": "b"}])
    assert isinstance(many, PayloadList)
    assert len(many.items) == 2
    assert as_payload(many) is many
    with pytest.raises(ValidationError):
        as_payload(42)


def test_as_alternates():
    result = as_alternates([
        Alternate("en", "https://example.com/en"),
        {"hreflang": "de", "href": "https://example.com/de"},
        {"href": "https://example.com/x"},
        ("fr", "https://example.com/fr"),
    ])
    assert [a.hreflang for a in result] == ["en", "de", "fr"]
    assert as_alternates(None) == ()


def test_as_number():
    assert as_number(1) == 1.0
    assert as_number("0.5") == 0.5
    assert as_number(True) is None
    assert as_number("abc") is None
    assert as_number(None) is None


def test_generated_files_to_dict():
    single = GeneratedFiles(["/out/sitemap.xml"], "https://example.com/sitemap.xml")
    assert single.to_dict() == {
        "sitemaps_location": ["/out/sitemap.xml"],
        "sitemaps_index_url": "https://example.com/sitemap.xml",
    }
    multi = GeneratedFiles(
        ["/out/sitemap1.xml", "/out/sitemap2.xml"],
        "https://example.com/sitemap-index.xml",
        "/out/sitemap-index.xml",
    )
    assert multi.has_index
    assert multi.to_dict()["sitemaps_index_location"] == "/out/sitemap-index.xml"
