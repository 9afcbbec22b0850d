"""Guardian key material: election keys, share backups and the joint key."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, List, Optional

from .elgamal import ElGamalKeyPair, ElGamalPublicKey, elgamal_combine_public_keys
from .errors import InvalidInputError
from .group import ElementModP, ElementModQ
from .hash import hash_elems
from .polynomial import (
    ElectionPolynomial,
    compute_polynomial_coordinate,
    generate_polynomial,
    verify_polynomial_coordinate,
)
from .schnorr import SchnorrProof

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElectionPublicKey:
    """What a guardian publishes.

    Attributes
    - owner_id: guardian id
    - sequence_order: the guardian's x coordinate, 1-based
    - key: K_i = g^{a_0}
    - coefficient_commitments: g^{a_j} for each coefficient
    - coefficient_proofs: Schnorr proofs for each commitment
    """

    owner_id: str
    sequence_order: int
    key: ElGamalPublicKey
    coefficient_commitments: List[ElementModP]
    coefficient_proofs: List[SchnorrProof]

    def is_valid(self) -> bool:
        if not self.coefficient_commitments or self.key != self.coefficient_commitments[0]:
            log.info("public key of %s does not match its first commitment", self.owner_id)
            return False
        for commitment, proof in zip(self.coefficient_commitments, self.coefficient_proofs):
            if proof.public_key != commitment or not proof.is_valid():
                log.info("invalid coefficient proof from %s", self.owner_id)
                return False
        return len(self.coefficient_commitments) == len(self.coefficient_proofs)


@dataclass(frozen=True)
class ElectionKeys:
    """A guardian's secret key material. Never leaves the guardian.

    Attributes
    - owner_id: guardian id
    - sequence_order: x coordinate, 1-based
    - key_pair: (a_0, g^{a_0})
    - polynomial: secret polynomial with a_0 as constant term
    """

    owner_id: str
    sequence_order: int
    key_pair: ElGamalKeyPair
    polynomial: ElectionPolynomial

    def share(self) -> ElectionPublicKey:
        return ElectionPublicKey(
            self.owner_id,
            self.sequence_order,
            self.key_pair.public_key,
            list(self.polynomial.coefficient_commitments),
            list(self.polynomial.coefficient_proofs),
        )


def generate_election_keys(
    owner_id: str, sequence_order: int, quorum: int, nonce: Optional[ElementModQ] = None
) -> ElectionKeys:
    """Secret polynomial and key pair for a guardian.

    Args
    - owner_id: guardian id
    - sequence_order: x coordinate, must be at least 1
    - quorum: degree + 1 of the polynomial
    - nonce: optional seed for reproducible keys in tests
    """
    if sequence_order < 1:
        raise InvalidInputError(f"sequence_order must be at least 1, got {sequence_order}")
    polynomial = generate_polynomial(quorum, nonce)
    key_pair = ElGamalKeyPair(
        polynomial.coefficients[0], polynomial.coefficient_commitments[0]
    )
    return ElectionKeys(owner_id, sequence_order, key_pair, polynomial)


@dataclass(frozen=True)
class ElectionPartialKeyBackup:
    """P_i(l): guardian i's polynomial at guardian l's coordinate.

    Attributes
    - owner_id: guardian i, whose polynomial this is
    - designated_id: guardian l, who holds the backup
    - designated_sequence_order: l
    - value: P_i(l)
    - coefficient_commitments: guardian i's public commitments
    """

    owner_id: str
    designated_id: str
    designated_sequence_order: int
    value: ElementModQ
    coefficient_commitments: List[ElementModP]


def generate_election_partial_key_backup(
    keys: ElectionKeys, designated_id: str, designated_sequence_order: int
) -> ElectionPartialKeyBackup:
    value = compute_polynomial_coordinate(designated_sequence_order, keys.polynomial)
    return ElectionPartialKeyBackup(
        keys.owner_id,
        designated_id,
        designated_sequence_order,
        value,
        list(keys.polynomial.coefficient_commitments),
    )


def verify_election_partial_key_backup(backup: ElectionPartialKeyBackup) -> bool:
    """True when the backup lies on the owner's committed polynomial."""
    valid = verify_polynomial_coordinate(
        backup.value, backup.designated_sequence_order, backup.coefficient_commitments
    )
    if not valid:
        log.warning(
            "backup from %s for %s does not match commitments",
            backup.owner_id,
            backup.designated_id,
        )
    return valid


def combine_election_public_keys(
    public_keys: Iterable[ElectionPublicKey],
) -> ElGamalPublicKey:
    return elgamal_combine_public_keys(k.key for k in public_keys)


def compute_commitment_hash(public_keys: Iterable[ElectionPublicKey]) -> ElementModQ:
    """H([K_{1,0}, K_{1,1}, ..., K_{n,k-1}]) over guardians in sequence order.

    The commitments go in as one list argument, so the result is the hash of
    their nested hash.
    """
    commitments: List[ElementModP] = []
    for key in sorted(public_keys, key=lambda k: k.sequence_order):
        commitments.extend(key.coefficient_commitments)
    return hash_elems(commitments)
