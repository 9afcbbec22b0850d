import pytest

from eg_core.errors import InvalidInputError
from eg_core.group import ElementModQ
from eg_core.hash import hash_elems
from eg_core.nonces import Nonces


SEED = ElementModQ(12345)


def test_nonces_are_deterministic():
    a = Nonces(SEED)
    b = Nonces(SEED)
    assert a[3] == b[3]
    assert a[3] == hash_elems(SEED, 3)
    assert a.get(3) == a[3]
    assert a[0] != a[1]


def test_headers_change_the_seed():
    plain = Nonces(SEED)
    headed = Nonces(SEED, "header")
    assert headed.seed == hash_elems(SEED, "header")
    assert plain[0] != headed[0]
    assert Nonces(SEED, "a")[0] != Nonces(SEED, "b")[0]


def test_get_with_headers():
    nonces = Nonces(SEED)
    assert nonces.get_with_headers(2, "x") == hash_elems(SEED, 2, "x")
    assert nonces.get_with_headers(2, "x") != nonces[2]


def test_slices():
    nonces = Nonces(SEED)
    assert nonces[0:4] == [nonces[0], nonces[1], nonces[2], nonces[3]]
    assert nonces[2:8:3] == [nonces[2], nonces[5]]
    with pytest.raises(InvalidInputError):
        nonces[3:]


def test_negative_index_raises():
    nonces = Nonces(SEED)
    with pytest.raises(InvalidInputError):
        nonces[-1]
    with pytest.raises(InvalidInputError):
        nonces.get_with_headers(-1)
