"""Fiat-Shamir hash onto the exponent group.

`hash_elems` serializes its arguments into a "|"-separated string:

    |elem_1|elem_2|...|elem_n|

Group elements contribute their hex, strings themselves, integers their
decimal form, objects with a ``crypto_hash`` method the hex of that hash and
nested sequences the hex of their own hash. ``None`` and empty sequences
contribute the literal ``null``; no arguments at all hash as ``|null|``.
The UTF-8 bytes go through SHA-256 and the big-endian digest is reduced
mod q.
"""

from __future__ import annotations

import hashlib
from typing import Any, Protocol, Sequence, runtime_checkable

from .constants import get_parameters
from .group import ElementModP, ElementModQ

NULL = "null"
SEPARATOR = "|"


@runtime_checkable
class CryptoHashable(Protocol):
    def crypto_hash(self) -> ElementModQ:
        ...


def _represent(x: Any) -> str:
    if x is None:
        return NULL
    if isinstance(x, (ElementModP, ElementModQ)):
        return x.to_hex()
    if isinstance(x, CryptoHashable):
        return x.crypto_hash().to_hex()
    if isinstance(x, str):
        return x
    if isinstance(x, bool):
        raise TypeError("booleans have no canonical hash representation")
    if isinstance(x, int):
        return str(x)
    if isinstance(x, (list, tuple)):
        if not x:
            return NULL
        return hash_elems(*x).to_hex()
    raise TypeError(f"cannot hash value of type {type(x).__name__}")


def hash_string(*a: Any) -> str:
    """The exact string that `hash_elems` feeds to SHA-256."""
    if not a:
        return SEPARATOR + NULL + SEPARATOR
    return SEPARATOR + "".join(_represent(x) + SEPARATOR for x in a)


def hash_elems(*a: Any) -> ElementModQ:
    """Hash any mix of group elements, strings, ints, hashables and sequences.

    Args
    - a: the elements, in order; order and type both change the result

    Returns: the digest as an ElementModQ
    """
    digest = hashlib.sha256(hash_string(*a).encode("utf-8")).digest()
    return ElementModQ(int.from_bytes(digest, "big") % get_parameters().small_prime)


def hash_sequence(items: Sequence[Any]) -> ElementModQ:
    return hash_elems(*items)
