"""Modular arithmetic over the election group.

Elements mod p and mod q are immutable wrappers around non-negative integers.
The moduli come from the process-wide `GroupParameters` fixed in
`eg_core.constants`; heavy lifting is done by gmpy2.
"""

from __future__ import annotations

from dataclasses import dataclass
from secrets import randbelow
from typing import Optional, Union

from gmpy2 import invert, mpz, powmod

from .constants import get_parameters
from .errors import InvalidInputError


def _p() -> mpz:
    return mpz(get_parameters().large_prime)


def _q() -> mpz:
    return mpz(get_parameters().small_prime)


def _hex(value: int) -> str:
    h = format(value, "02X")
    if len(h) % 2:
        h = "0" + h
    return h


@dataclass(frozen=True)
class ElementModQ:
    """An element of the exponent group, in [0, q)."""

    elem: int

    def to_hex(self) -> str:
        """Uppercase, even-length hex of the underlying integer."""
        return _hex(self.elem)

    def to_int(self) -> int:
        return int(self.elem)

    def is_in_bounds(self) -> bool:
        return 0 <= self.elem < _q()

    def is_in_bounds_no_zero(self) -> bool:
        return 0 < self.elem < _q()

    def __str__(self) -> str:
        return str(self.elem)


@dataclass(frozen=True)
class ElementModP:
    """An element of Z_p^*, in [0, p)."""

    elem: int

    def to_hex(self) -> str:
        return _hex(self.elem)

    def to_int(self) -> int:
        return int(self.elem)

    def is_in_bounds(self) -> bool:
        return 0 <= self.elem < _p()

    def is_in_bounds_no_zero(self) -> bool:
        return 0 < self.elem < _p()

    def is_valid_residue(self) -> bool:
        """True when 1 <= x < p and x is in the order-q subgroup."""
        if not self.is_in_bounds_no_zero():
            return False
        return powmod(mpz(self.elem), _q(), _p()) == 1

    def __str__(self) -> str:
        return str(self.elem)


ElementModQorInt = Union[ElementModQ, int]
ElementModPorInt = Union[ElementModP, int]
ElementModPOrQ = Union[ElementModP, ElementModQ]
ElementModPOrQorInt = Union[ElementModP, ElementModQ, int]

ZERO_MOD_Q = ElementModQ(0)
ONE_MOD_Q = ElementModQ(1)
TWO_MOD_Q = ElementModQ(2)

ZERO_MOD_P = ElementModP(0)
ONE_MOD_P = ElementModP(1)
TWO_MOD_P = ElementModP(2)


def _as_int(e: ElementModPOrQorInt) -> int:
    return e if isinstance(e, int) else e.elem


## --- conversions -------------------------------------------------------


def int_to_q(value: Union[str, int]) -> Optional[ElementModQ]:
    """Checked conversion; None when the value is outside [0, q)."""
    i = int(value)
    if 0 <= i < _q():
        return ElementModQ(i)
    return None


def int_to_q_unchecked(value: Union[str, int]) -> ElementModQ:
    """Conversion without a bounds check, for values the caller has already reduced."""
    return ElementModQ(int(value))


def int_to_p(value: Union[str, int]) -> Optional[ElementModP]:
    i = int(value)
    if 0 <= i < _p():
        return ElementModP(i)
    return None


def int_to_p_unchecked(value: Union[str, int]) -> ElementModP:
    return ElementModP(int(value))


def hex_to_q(value: str) -> Optional[ElementModQ]:
    return int_to_q(int(value, 16))


def hex_to_q_unchecked(value: str) -> ElementModQ:
    return ElementModQ(int(value, 16))


def hex_to_p_unchecked(value: str) -> ElementModP:
    return ElementModP(int(value, 16))


def g_mod_p() -> ElementModP:
    return ElementModP(get_parameters().generator)


## --- mod q ------------------------------------------------------------


def add_q(*elems: ElementModQorInt) -> ElementModQ:
    """Sum of one or more elements, mod q."""
    q = _q()
    t = mpz(0)
    for e in elems:
        t = (t + _as_int(e)) % q
    return ElementModQ(int(t))


def a_minus_b_q(a: ElementModQorInt, b: ElementModQorInt) -> ElementModQ:
    return ElementModQ(int((mpz(_as_int(a)) - _as_int(b)) % _q()))


def a_plus_bc_q(
    a: ElementModQorInt, b: ElementModQorInt, c: ElementModQorInt
) -> ElementModQ:
    """(a + b * c) mod q, the response shape shared by all the proofs."""
    return ElementModQ(int((mpz(_as_int(a)) + mpz(_as_int(b)) * _as_int(c)) % _q()))


def negate_q(a: ElementModQorInt) -> ElementModQ:
    return ElementModQ(int((-mpz(_as_int(a))) % _q()))


def mult_q(*elems: ElementModQorInt) -> ElementModQ:
    q = _q()
    product = mpz(1)
    for e in elems:
        product = (product * _as_int(e)) % q
    return ElementModQ(int(product))


def div_q(a: ElementModQorInt, b: ElementModQorInt) -> ElementModQ:
    """a / b mod q. Raises ZeroDivisionError when b is 0 mod q."""
    q = _q()
    inverse = invert(mpz(_as_int(b)) % q, q)
    return ElementModQ(int((mpz(_as_int(a)) * inverse) % q))


def pow_q(b: ElementModQorInt, e: ElementModQorInt) -> ElementModQ:
    return ElementModQ(int(powmod(mpz(_as_int(b)), mpz(_as_int(e)), _q())))


## --- mod p ------------------------------------------------------------


def mult_p(*elems: ElementModPorInt) -> ElementModP:
    """Product of zero or more elements, mod p. The empty product is 1."""
    p = _p()
    product = mpz(1)
    for e in elems:
        product = (product * _as_int(e)) % p
    return ElementModP(int(product))


def mult_inv_p(e: ElementModPOrQorInt) -> ElementModP:
    """Multiplicative inverse mod p. Raises ZeroDivisionError for 0."""
    return ElementModP(int(invert(mpz(_as_int(e)), _p())))


def div_p(a: ElementModPOrQorInt, b: ElementModPOrQorInt) -> ElementModP:
    p = _p()
    return ElementModP(int((mpz(_as_int(a)) * invert(mpz(_as_int(b)), p)) % p))


def pow_p(b: ElementModPOrQorInt, e: ElementModPOrQorInt) -> ElementModP:
    """b^e mod p. Negative integer exponents go through the inverse of b."""
    p = _p()
    base = mpz(_as_int(b))
    exponent = mpz(_as_int(e))
    if exponent < 0:
        base = invert(base, p)
        exponent = -exponent
    return ElementModP(int(powmod(base, exponent, p)))


def g_pow_p(e: ElementModPOrQorInt) -> ElementModP:
    return pow_p(get_parameters().generator, e)


## --- sampling ---------------------------------------------------------


def rand_q() -> ElementModQ:
    """Uniform element of [0, q)."""
    return ElementModQ(randbelow(get_parameters().small_prime))


def rand_range_q(start: ElementModQorInt) -> ElementModQ:
    """Uniform element of [start, q)."""
    low = _as_int(start)
    q = get_parameters().small_prime
    if not 0 <= low < q:
        raise InvalidInputError(f"start {low} outside [0, q)")
    return ElementModQ(low + randbelow(q - low))
