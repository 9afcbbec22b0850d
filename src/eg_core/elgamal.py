"""Exponential ElGamal over the election group.

A message m is encrypted as (g^r, g^m * K^r). Multiplying ciphertexts
component-wise adds their plaintexts, which is what tallying relies on.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Optional

from .dlog import DiscreteLog, default_discrete_log
from .errors import InvalidInputError
from .group import (
    ElementModP,
    ElementModQ,
    div_p,
    g_pow_p,
    int_to_q,
    mult_p,
    pow_p,
    rand_range_q,
)
from .hash import hash_elems

log = logging.getLogger(__name__)

ElGamalSecretKey = ElementModQ
ElGamalPublicKey = ElementModP


@dataclass(frozen=True)
class ElGamalKeyPair:
    """Attributes
    - secret_key: a in [2, q)
    - public_key: g^a mod p
    """

    secret_key: ElGamalSecretKey
    public_key: ElGamalPublicKey


@dataclass(frozen=True)
class ElGamalCiphertext:
    """An encryption (pad, data) = (g^r, g^m * K^r)."""

    pad: ElementModP
    data: ElementModP

    def decrypt_known_product(
        self, product: ElementModP, dlog: Optional[DiscreteLog] = None
    ) -> int:
        """Plaintext given K^r (equivalently pad^a) for this ciphertext."""
        table = dlog if dlog is not None else default_discrete_log()
        return table.discrete_log(div_p(self.data, product))

    def decrypt(
        self, secret_key: ElGamalSecretKey, dlog: Optional[DiscreteLog] = None
    ) -> int:
        return self.decrypt_known_product(pow_p(self.pad, secret_key), dlog)

    def decrypt_known_nonce(
        self,
        public_key: ElGamalPublicKey,
        nonce: ElementModQ,
        dlog: Optional[DiscreteLog] = None,
    ) -> int:
        """Decrypt with the encryption nonce instead of the secret key."""
        return self.decrypt_known_product(pow_p(public_key, nonce), dlog)

    def partial_decrypt(self, secret_share: ElementModQ) -> ElementModP:
        """A guardian's share M_i = pad^s_i."""
        return pow_p(self.pad, secret_share)

    def is_valid_residue(self) -> bool:
        return self.pad.is_valid_residue() and self.data.is_valid_residue()

    def crypto_hash(self) -> ElementModQ:
        return hash_elems(self.pad, self.data)


def elgamal_keypair_from_secret(a: ElementModQ) -> Optional[ElGamalKeyPair]:
    """Key pair for a given secret, or None when the secret is below 2."""
    if a.elem < 2:
        return None
    return ElGamalKeyPair(a, g_pow_p(a))


def elgamal_keypair_random() -> ElGamalKeyPair:
    secret = rand_range_q(2)
    return ElGamalKeyPair(secret, g_pow_p(secret))


def elgamal_combine_public_keys(keys: Iterable[ElGamalPublicKey]) -> ElGamalPublicKey:
    """Joint key: the product of the guardians' public keys."""
    return mult_p(*keys)


def elgamal_encrypt(
    m: int, nonce: ElementModQ, public_key: ElGamalPublicKey
) -> Optional[ElGamalCiphertext]:
    """Encrypt m under ``public_key`` with the given nonce.

    Args
    - m: non-negative message
    - nonce: non-zero element of [1, q)
    - public_key: K

    Returns: the ciphertext, or None when m does not fit in [0, q)

    Raises InvalidInputError for a negative message or a zero nonce.
    """
    if m < 0:
        raise InvalidInputError(f"cannot encrypt negative message {m}")
    if nonce.elem == 0:
        raise InvalidInputError("ElGamal encryption requires a non-zero nonce")
    message = int_to_q(m)
    if message is None:
        log.warning("message %d does not fit in the exponent group", m)
        return None
    pad = g_pow_p(nonce)
    data = mult_p(g_pow_p(message), pow_p(public_key, nonce))
    return ElGamalCiphertext(pad, data)


def elgamal_add(*ciphertexts: ElGamalCiphertext) -> ElGamalCiphertext:
    """Homomorphic sum; at least one ciphertext is required."""
    if not ciphertexts:
        raise InvalidInputError("elgamal_add needs at least one ciphertext")
    return ElGamalCiphertext(
        mult_p(*[c.pad for c in ciphertexts]), mult_p(*[c.data for c in ciphertexts])
    )


def elgamal_accumulate(
    ciphertexts: Iterable[ElGamalCiphertext],
) -> ElGamalCiphertext:
    return elgamal_add(*ciphertexts)
