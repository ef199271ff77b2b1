import pytest

from webauthnkit.cbor import marshal, unmarshal


def test_round_trip_cose_key():
    key = {1: 2, 3: -7, -1: 1, -2: b"x" * 32, -3: b"y" * 32}
    assert unmarshal(marshal(key)) == key


def test_marshal_small_map_wire_bytes():
    assert marshal({1: 2, 3: -7}) == b"\xa2\x01\x02\x03\x26"


def test_marshal_orders_keys_canonically():
    encoded = marshal({"bb": 1, "a": 2, 3: 4})
    assert list(unmarshal(encoded).keys()) == [3, "a", "bb"]


def test_marshal_is_deterministic_regardless_of_insertion_order():
    assert marshal({"b": 1, "a": 2}) == marshal({"a": 2, "b": 1})


def test_unmarshal_ignores_trailing_data():
    assert unmarshal(marshal(1) + marshal(2)) == 1


def test_unmarshal_allows_four_levels():
    assert unmarshal(b"\x81\x81\x81\x81\x00") == [[[[0]]]]


def test_unmarshal_rejects_five_levels():
    with pytest.raises(ValueError, match="nested"):
        unmarshal(b"\x81\x81\x81\x81\x81\x00")


def test_unmarshal_rejects_indefinite_length():
    with pytest.raises(ValueError, match="indefinite"):
        unmarshal(b"\x9f\x01\xff")


def test_unmarshal_rejects_tags():
    with pytest.raises(ValueError, match="tags"):
        unmarshal(b"\xc1\x01")


def test_unmarshal_rejects_duplicate_keys():
    with pytest.raises(ValueError, match="duplicate"):
        unmarshal(b"\xa2\x01\x01\x01\x02")


def test_unmarshal_rejects_truncated_data():
    with pytest.raises(ValueError):
        unmarshal(marshal(b"abcdef")[:-2])


def test_unmarshal_rejects_empty_input():
    with pytest.raises(ValueError):
        unmarshal(b"")