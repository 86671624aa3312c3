"""Tests for perch.data.path: path expressions over records."""

import pytest

from perch.data.path import PathSegment, parse_path
from perch.data.record import DynamicRecord


@pytest.fixture
def order() -> DynamicRecord:
    return DynamicRecord.from_json(
        {
            "customer": {"name": "Ada", "address": {"city": "London"}},
            "items": [
                {"sku": "A-1", "qty": "2"},
                {"sku": "B-7", "qty": "1"},
            ],
            "tags": ["gift", "rush"],
            "note": "fragile",
        }
    )


class TestParsePath:
    def test_keys(self) -> None:
        assert parse_path("a.b") == (PathSegment("a"), PathSegment("b"))

    def test_indexed(self) -> None:
        assert parse_path("items[2].sku") == (PathSegment("items", 2), PathSegment("sku"))

    @pytest.mark.parametrize("path", ["items[x].sku", "items[-1].sku", "items[1.sku", "a.b]"])
    def test_malformed(self, path: str) -> None:
        assert parse_path(path) is None


class TestFind:
    def test_nested_key(self, order: DynamicRecord) -> None:
        assert order.find("customer.address.city") == "London"

    def test_indexed_record(self, order: DynamicRecord) -> None:
        assert order.find("items[1].sku") == "B-7"

    def test_final_index_returns_raw_element(self, order: DynamicRecord) -> None:
        assert order.find("customer.name") == "Ada"
        record = DynamicRecord.from_json({"wrap": {"tags": ["gift", "rush"]}})
        assert record.find("wrap.tags[1]") == "rush"

    def test_no_dot_is_plain_get(self, order: DynamicRecord) -> None:
        assert order.find("note") == "fragile"
        assert order.find("tags[0]") is None

    def test_missing_segment(self, order: DynamicRecord) -> None:
        assert order.find("customer.phone.number") is None
        assert order.find("supplier.name") is None

    def test_index_out_of_range(self, order: DynamicRecord) -> None:
        assert order.find("items[5].sku") is None

    def test_descend_into_non_record(self, order: DynamicRecord) -> None:
        assert order.find("note.length") is None
        assert order.find("tags[0].value") is None

    def test_index_into_non_list(self, order: DynamicRecord) -> None:
        assert order.find("customer[0].name") is None

    def test_malformed_path(self, order: DynamicRecord) -> None:
        assert order.find("items[x].sku") is None
