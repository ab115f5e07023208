"""Tests for bencode_decode.values."""

import pytest

from bencode_decode.values import (
    INT64_MAX,
    INT64_MIN,
    ByteString,
    Dictionary,
    Integer,
    List,
)


# ---------------------------------------------------------------------------
# Ordering across variants
# ---------------------------------------------------------------------------

def test_variant_rank_order():
    values = [
        Dictionary(),
        List([]),
        Integer(-100),
        ByteString(b"zzz"),
    ]
    assert sorted(values) == [
        ByteString(b"zzz"),
        Integer(-100),
        List([]),
        Dictionary(),
    ]

def test_bytestring_is_less_than_any_integer():
    assert ByteString(b"\xff" * 10) < Integer(INT64_MIN)

def test_different_variants_are_not_equal():
    assert ByteString(b"1") != Integer(1)
    assert List([]) != Dictionary()


# ---------------------------------------------------------------------------
# Ordering within a variant
# ---------------------------------------------------------------------------

def test_bytestring_order_is_raw_bytes():
    assert ByteString(b"a") < ByteString(b"b")
    assert ByteString(b"Z") < ByteString(b"a")
    assert ByteString(b"ab") < ByteString(b"abc")

def test_integer_order_is_numeric():
    assert Integer(-5) < Integer(0) < Integer(10)

def test_list_order_is_elementwise():
    assert List([Integer(1), Integer(2)]) < List([Integer(1), Integer(3)])
    assert List([Integer(1)]) < List([Integer(1), Integer(0)])
    assert List([ByteString(b"x")]) < List([Integer(0)])

def test_dictionary_order_compares_pairs():
    a = Dictionary({b"a": Integer(1)})
    b = Dictionary({b"a": Integer(2)})
    c = Dictionary({b"b": Integer(0)})
    assert a < b < c


# ---------------------------------------------------------------------------
# Dictionary
# ---------------------------------------------------------------------------

def test_dictionary_keys_are_sorted():
    d = Dictionary(
        [
            (b"spam", ByteString(b"eggs")),
            (b"cow", ByteString(b"moo")),
        ]
    )
    assert list(d) == [b"cow", b"spam"]
    assert list(d.keys()) == [b"cow", b"spam"]

def test_dictionary_equality_ignores_input_order():
    a = Dictionary([(b"x", Integer(1)), (b"y", Integer(2))])
    b = Dictionary([(b"y", Integer(2)), (b"x", Integer(1))])
    assert a == b
    assert hash(a) == hash(b)

def test_dictionary_access():
    d = Dictionary({b"cow": ByteString(b"moo")})
    assert d[b"cow"] == ByteString(b"moo")
    assert d.get(b"cow") == ByteString(b"moo")
    assert d.get(b"missing") is None
    assert b"cow" in d
    assert len(d) == 1

def test_dictionary_rejects_text_keys():
    with pytest.raises(TypeError):
        Dictionary({"cow": ByteString(b"moo")})


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_bytestring_rejects_str():
    with pytest.raises(TypeError):
        ByteString("spam")

def test_integer_bounds():
    assert Integer(INT64_MAX).value == INT64_MAX
    assert Integer(INT64_MIN).value == INT64_MIN
    with pytest.raises(ValueError):
        Integer(INT64_MAX + 1)

def test_integer_rejects_bool():
    with pytest.raises(TypeError):
        Integer(True)


# ---------------------------------------------------------------------------
# Hashing and conversion
# ---------------------------------------------------------------------------

def test_values_as_mapping_keys():
    index = {
        ByteString(b"a"): 1,
        List([Integer(1)]): 2,
        Dictionary({b"k": List([])}): 3,
    }
    assert index[List([Integer(1)])] == 2
    assert index[Dictionary({b"k": List([])})] == 3

def test_to_python():
    value = Dictionary(
        {
            b"list": List([Integer(1), ByteString(b"two")]),
            b"n": Integer(-3),
        }
    )
    assert value.to_python() == {b"list": [1, b"two"], b"n": -3}

def test_str():
    assert str(List([ByteString(b"spam"), Integer(4)])) == "[b'spam', 4]"
    assert str(Dictionary({b"a": Integer(1)})) == "{b'a': 1}"
