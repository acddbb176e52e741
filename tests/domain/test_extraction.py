from __future__ import annotations

import pytest

from feedsync.domain.errors import PathSyntaxError
from feedsync.domain.extraction import PathKind, compile_path, extract
from feedsync.domain.model import ShopContext

DOCUMENT: dict[str, object] = {
    "name": "Blue Shirt",
    "images": [{"src": "https://cdn.example.com/a.jpg"}, {"src": "https://cdn.example.com/b.jpg"}],
    "dimensions": {"length": "10", "width": None},
    "meta_data": [
        {"key": "_gtin", "value": "4006381333931"},
        {"key": "color", "value": "Navy"},
        {"key": "color", "value": "Ignored"},
    ],
    "attributes": [
        {"name": "pa_Size", "options": ["S", "M", "L"]},
        {"name": "Material", "option": "Cotton"},
        {"name": "Fit", "options": ["Slim"]},
    ],
}


def test_extract_walks_keys_and_indices() -> None:
    assert extract(DOCUMENT, "name") == "Blue Shirt"
    assert extract(DOCUMENT, "images[1].src") == "https://cdn.example.com/b.jpg"
    assert extract(DOCUMENT, "dimensions.length") == "10"


@pytest.mark.parametrize(
    "path",
    [
        "missing",
        "images[5].src",
        "dimensions.width.value",
        "name.first",
        "name[0]",
        "dimensions[0]",
    ],
)
def test_extract_returns_none_for_absent_data(path: str) -> None:
    assert extract(DOCUMENT, path) is None


def test_extract_from_missing_document_is_none() -> None:
    assert extract(None, "name") is None


def test_meta_data_prefix_returns_first_matching_entry() -> None:
    assert extract(DOCUMENT, "meta_data.color") == "Navy"
    assert extract(DOCUMENT, "meta_data._gtin") == "4006381333931"
    assert extract(DOCUMENT, "meta_data.unknown") is None


def test_attributes_prefix_matches_pa_names_case_insensitively() -> None:
    assert extract(DOCUMENT, "attributes.size") == "S, M, L"
    assert extract(DOCUMENT, "attributes.material") == "Cotton"
    assert extract(DOCUMENT, "attributes.fit") == "Slim"
    assert extract(DOCUMENT, "attributes.color") is None


def test_shop_prefix_reads_shop_context() -> None:
    context = ShopContext(shop_name="Example Store", return_window=14)

    assert extract(DOCUMENT, "shop.shop_name", shop_context=context) == "Example Store"
    assert extract(DOCUMENT, "shop.return_window", shop_context=context) == 14
    assert extract(DOCUMENT, "shop.currency", shop_context=context) is None
    assert extract(DOCUMENT, "shop.not_a_field", shop_context=context) is None
    assert extract(DOCUMENT, "shop.shop_name") is None


@pytest.mark.parametrize(
    "path",
    ["", "   ", " name", "images[x].src", "images..src", "a b", "shop.", "shop.a.b", "meta_data."],
)
def test_malformed_paths_raise(path: str) -> None:
    with pytest.raises(PathSyntaxError):
        compile_path(path)


def test_compile_path_is_cached_and_classified() -> None:
    first = compile_path("images[0].src")

    assert compile_path("images[0].src") is first
    assert first.kind is PathKind.DOCUMENT
    assert first.steps == ("images", 0, "src")
    assert compile_path("shop.currency").is_shop_level
    assert compile_path("meta_data.color").kind is PathKind.META_DATA
