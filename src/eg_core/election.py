"""Cryptographic context shared by every ballot of an election."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from .constants import get_parameters
from .elgamal import ElGamalPublicKey
from .errors import InvalidInputError
from .group import ElementModQ, int_to_p_unchecked, int_to_q_unchecked
from .hash import hash_elems

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CiphertextElectionContext:
    """Attributes
    - number_of_guardians: n
    - quorum: k, guardians needed to decrypt
    - elgamal_public_key: joint key K
    - commitment_hash: hash of every guardian's coefficient commitments
    - manifest_hash: crypto hash of the manifest
    - crypto_base_hash: Q = H(p, q, g, n, k, manifest_hash)
    - crypto_extended_base_hash: Q-bar = H(Q, commitment_hash)
    """

    number_of_guardians: int
    quorum: int
    elgamal_public_key: ElGamalPublicKey
    commitment_hash: ElementModQ
    manifest_hash: ElementModQ
    crypto_base_hash: ElementModQ
    crypto_extended_base_hash: ElementModQ


def make_crypto_base_hash(
    number_of_guardians: int, quorum: int, manifest_hash: ElementModQ
) -> ElementModQ:
    params = get_parameters()
    return hash_elems(
        int_to_p_unchecked(params.large_prime),
        int_to_q_unchecked(params.small_prime),
        int_to_p_unchecked(params.generator),
        number_of_guardians,
        quorum,
        manifest_hash,
    )


def make_ciphertext_election_context(
    number_of_guardians: int,
    quorum: int,
    elgamal_public_key: ElGamalPublicKey,
    commitment_hash: ElementModQ,
    manifest_hash: ElementModQ,
) -> CiphertextElectionContext:
    """Bind the group, the guardian set and the manifest into Q and Q-bar."""
    if not 1 <= quorum <= number_of_guardians:
        raise InvalidInputError(
            f"quorum {quorum} must be between 1 and {number_of_guardians}"
        )
    crypto_base_hash = make_crypto_base_hash(number_of_guardians, quorum, manifest_hash)
    crypto_extended_base_hash = hash_elems(crypto_base_hash, commitment_hash)
    log.debug("election context: %d guardians, quorum %d", number_of_guardians, quorum)
    return CiphertextElectionContext(
        number_of_guardians,
        quorum,
        elgamal_public_key,
        commitment_hash,
        manifest_hash,
        crypto_base_hash,
        crypto_extended_base_hash,
    )
