import pytest

from app.utils.helpers import (
    calculate_skip,
    calculate_total_pages,
    is_supplied,
    parse_page_number,
    to_object_id,
)


@pytest.mark.parametrize("raw, expected", [
    (None, 1),
    ("3", 3),
    ("abc", 1),
    ("", 1),
    ("0", 1),
    ("-4", 1),
    ("2.0", 2),
])
def test_parse_page_number(raw, expected):
    assert parse_page_number(raw) == expected


def test_calculate_skip():
    assert calculate_skip(1, 10) == 0
    assert calculate_skip(3, 10) == 20
    with pytest.raises(ValueError):
        calculate_skip(0, 10)


def test_calculate_total_pages_is_ceiling():
    assert calculate_total_pages(0, 10) == 0
    assert calculate_total_pages(10, 10) == 1
    assert calculate_total_pages(11, 10) == 2
    with pytest.raises(ValueError):
        calculate_total_pages(-1, 10)


def test_is_supplied_follows_sparse_merge_rules():
    assert is_supplied("Drama")
    assert is_supplied(7.5)
    assert not is_supplied(None)
    assert not is_supplied("")
    assert not is_supplied(0)
    # lists overwrite even when empty
    assert is_supplied([])


def test_to_object_id_rejects_malformed_ids():
    assert to_object_id("not-an-id") is None
    assert str(to_object_id("65a1f0c2b3d4e5f601234567")) == "65a1f0c2b3d4e5f601234567"
