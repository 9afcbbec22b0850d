"""Schnorr proof of knowledge of a secret key."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .elgamal import ElGamalKeyPair
from .group import (
    ElementModP,
    ElementModQ,
    a_plus_bc_q,
    div_p,
    g_pow_p,
    mult_p,
    pow_p,
)
from .hash import hash_elems
from .proof import ProofUsage, ProofValidation, report


@dataclass(frozen=True)
class SchnorrProof:
    """Proof that the holder knows a with K = g^a.

    Attributes
    - public_key: K
    - commitment: h = g^w, or None when it is to be derived from (c, u)
    - challenge: c = H(K, h)
    - response: u = w + a * c mod q
    """

    public_key: ElementModP
    commitment: Optional[ElementModP]
    challenge: ElementModQ
    response: ElementModQ
    usage: ProofUsage = ProofUsage.SecretValue

    def get_commitment(self) -> ElementModP:
        if self.commitment is not None:
            return self.commitment
        # h = g^u / K^c
        return div_p(g_pow_p(self.response), pow_p(self.public_key, self.challenge))

    def without_commitment(self) -> "SchnorrProof":
        return replace(self, commitment=None)

    def is_valid(self) -> ProofValidation:
        k = self.public_key
        h = self.get_commitment()
        u = self.response
        checks = {
            "valid_public_key": k.is_valid_residue(),
            "in_bounds_h": h.is_in_bounds(),
            "in_bounds_u": u.is_in_bounds(),
            "valid_challenge": self.challenge == hash_elems(k, h),
            "valid_response": g_pow_p(u) == mult_p(h, pow_p(k, self.challenge)),
        }
        return report(ProofValidation("SchnorrProof", checks))


def make_schnorr_proof(keypair: ElGamalKeyPair, nonce: ElementModQ) -> SchnorrProof:
    """Prove possession of ``keypair.secret_key`` using ``nonce`` as w."""
    k = keypair.public_key
    h = g_pow_p(nonce)
    c = hash_elems(k, h)
    u = a_plus_bc_q(nonce, keypair.secret_key, c)
    return SchnorrProof(k, h, c, u)
