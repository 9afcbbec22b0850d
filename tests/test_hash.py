import hashlib

import pytest

from eg_core.constants import get_parameters
from eg_core.group import ElementModP, ElementModQ
from eg_core.hash import hash_elems, hash_sequence, hash_string
from eg_core.manifest import SelectionDescription


def test_serialization():
    assert hash_string() == "|null|"
    assert hash_string("a", 1) == "|a|1|"
    assert hash_string(None, []) == "|null|null|"
    assert hash_string(ElementModQ(10), ElementModP(255)) == "|0A|FF|"


def test_matches_sha256_reduced_mod_q():
    digest = hashlib.sha256(b"|abc|42|").digest()
    expected = int.from_bytes(digest, "big") % get_parameters().small_prime
    assert hash_elems("abc", 42) == ElementModQ(expected)


def test_result_in_bounds_and_deterministic():
    h = hash_elems("x", 1, ElementModQ(5))
    assert h.is_in_bounds()
    assert h == hash_elems("x", 1, ElementModQ(5))


def test_order_and_type_matter():
    assert hash_elems("a", "b") != hash_elems("b", "a")
    # "1" and 1 serialize identically; hex and decimal differ
    assert hash_elems("1") == hash_elems(1)
    assert hash_elems(ElementModQ(10)) != hash_elems(10)


def test_nested_sequences_hash_recursively():
    inner = hash_elems("a", "b")
    assert hash_elems(["a", "b"]) == hash_elems(inner)
    assert hash_elems(("a", "b"), "c") == hash_elems(inner, "c")
    assert hash_sequence(["a", "b"]) == inner


def test_empty_sequence_is_null():
    assert hash_elems([]) == hash_elems(None)
    assert hash_elems() == hash_elems(None)


def test_crypto_hashable_uses_its_hash():
    selection = SelectionDescription("s1", "c1", 1)
    assert hash_elems(selection) == hash_elems(selection.crypto_hash())


@pytest.mark.parametrize("value", [True, 1.5, object()])
def test_unhashable_values(value):
    with pytest.raises(TypeError):
        hash_elems(value)
