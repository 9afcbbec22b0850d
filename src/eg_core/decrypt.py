"""Threshold decryption, including shares reconstructed for missing guardians.

A present guardian i contributes M_i = A^{s_i} with a proof. For a missing
guardian m, each present guardian l contributes M_{m,l} = A^{P_m(l)} from
its backup of m's polynomial, and

    M_m = prod over l of M_{m,l}^{w_l}

with w_l the Lagrange coefficients of the present guardians. The plaintext
is then dlog(B / prod M_i).
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .chaum_pedersen import ChaumPedersenProof, make_chaum_pedersen
from .dlog import DiscreteLog
from .elgamal import ElGamalCiphertext
from .errors import InvalidInputError, ProofVerificationError
from .group import ElementModP, ElementModQ, mult_p, pow_p, rand_q
from .guardian import ElectionKeys, ElectionPartialKeyBackup
from .polynomial import calculate_g_exp_p_at, compute_lagrange_coefficient
from .proof import ProofValidation

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecryptionShare:
    """M_i = A^{s_i} from a present guardian, with proof."""

    guardian_id: str
    public_key: ElementModP
    share: ElementModP
    proof: ChaumPedersenProof

    def is_valid(
        self, ciphertext: ElGamalCiphertext, extended_hash: ElementModQ
    ) -> ProofValidation:
        return self.proof.is_valid(ciphertext, self.public_key, self.share, extended_hash)


@dataclass(frozen=True)
class CompensatedDecryptionShare:
    """M_{m,l}: guardian l's share on behalf of missing guardian m.

    Attributes
    - guardian_id: l, the guardian computing the share
    - missing_guardian_id: m
    - share: A^{P_m(l)}
    - recovery_public_key: g^{P_m(l)}, derived from m's commitments
    - proof: proof that share and recovery key use the same exponent
    """

    guardian_id: str
    missing_guardian_id: str
    share: ElementModP
    recovery_public_key: ElementModP
    proof: ChaumPedersenProof

    def is_valid(
        self, ciphertext: ElGamalCiphertext, extended_hash: ElementModQ
    ) -> ProofValidation:
        return self.proof.is_valid(
            ciphertext, self.recovery_public_key, self.share, extended_hash
        )


def compute_decryption_share(
    keys: ElectionKeys,
    ciphertext: ElGamalCiphertext,
    extended_hash: ElementModQ,
    nonce_seed: Optional[ElementModQ] = None,
) -> DecryptionShare:
    secret = keys.key_pair.secret_key
    share = ciphertext.partial_decrypt(secret)
    seed = nonce_seed if nonce_seed is not None else rand_q()
    proof = make_chaum_pedersen(ciphertext, secret, share, seed, extended_hash)
    return DecryptionShare(keys.owner_id, keys.key_pair.public_key, share, proof)


def compute_recovery_public_key(backup: ElectionPartialKeyBackup) -> ElementModP:
    """g^{P_m(l)} computed from the missing guardian's public commitments."""
    return calculate_g_exp_p_at(
        backup.designated_sequence_order, backup.coefficient_commitments
    )


def compute_compensated_decryption_share(
    backup: ElectionPartialKeyBackup,
    ciphertext: ElGamalCiphertext,
    extended_hash: ElementModQ,
    nonce_seed: Optional[ElementModQ] = None,
) -> CompensatedDecryptionShare:
    """Share for ``backup.owner_id`` computed by the backup's holder.

    Args
    - backup: P_m(l), held by guardian l
    - ciphertext: what is being decrypted
    - extended_hash: Q-bar
    - nonce_seed: proof seed; random when omitted
    """
    share = ciphertext.partial_decrypt(backup.value)
    recovery_key = compute_recovery_public_key(backup)
    seed = nonce_seed if nonce_seed is not None else rand_q()
    proof = make_chaum_pedersen(ciphertext, backup.value, share, seed, extended_hash)
    return CompensatedDecryptionShare(
        backup.designated_id, backup.owner_id, share, recovery_key, proof
    )


def compute_lagrange_coefficients_for_guardians(
    sequence_orders: Dict[str, int],
) -> Dict[str, ElementModQ]:
    """Lagrange coefficient of each present guardian against the others.

    Raises InvalidInputError when two guardians share a sequence order.
    """
    if len(set(sequence_orders.values())) != len(sequence_orders):
        raise InvalidInputError(
            f"duplicate sequence orders: {sorted(sequence_orders.values())}"
        )
    coefficients = {}
    for guardian_id, order in sequence_orders.items():
        others = [o for g, o in sequence_orders.items() if g != guardian_id]
        coefficients[guardian_id] = compute_lagrange_coefficient(order, *others)
    return coefficients


def reconstruct_decryption_share(
    compensated_shares: Iterable[CompensatedDecryptionShare],
    lagrange_coefficients: Dict[str, ElementModQ],
) -> ElementModP:
    """M_m = prod of M_{m,l}^{w_l} over the present guardians l."""
    factors = []
    for share in compensated_shares:
        coefficient = lagrange_coefficients.get(share.guardian_id)
        if coefficient is None:
            raise InvalidInputError(
                f"no lagrange coefficient for guardian {share.guardian_id}"
            )
        factors.append(pow_p(share.share, coefficient))
    if not factors:
        raise InvalidInputError("no compensated shares to reconstruct from")
    return mult_p(*factors)


def decrypt_with_shares(
    ciphertext: ElGamalCiphertext,
    shares: Sequence[ElementModP],
    dlog: Optional[DiscreteLog] = None,
) -> int:
    """Plaintext from one share per guardian, present or reconstructed."""
    if not shares:
        raise InvalidInputError("decryption needs at least one share")
    return ciphertext.decrypt_known_product(mult_p(*shares), dlog)


def decrypt_with_keys(
    ciphertext: ElGamalCiphertext,
    all_keys: List[ElectionKeys],
    extended_hash: ElementModQ,
    dlog: Optional[DiscreteLog] = None,
) -> int:
    """Decrypt with every guardian present, checking each share's proof.

    Raises ProofVerificationError carrying the failed validation.
    """
    shares = []
    for keys in all_keys:
        share = compute_decryption_share(keys, ciphertext, extended_hash)
        validation = share.is_valid(ciphertext, extended_hash)
        if not validation:
            log.warning("invalid decryption share from %s", keys.owner_id)
            raise ProofVerificationError(validation)
        shares.append(share.share)
    return decrypt_with_shares(ciphertext, shares, dlog)
