"""Chaum-Pedersen proofs of discrete-log equality.

A generic proof shows that (g, gx) and (h, hx) share the exponent x:
commitment (a, b) = (g^w, h^w), challenge c = H(header..., a, b, footer...),
response r = w + x * c. Every proof here is one or two generic proofs read
against a particular (g, gx, h, hx):

- the decryption-share proof: (g, K_i, A, M_i)
- the constant proof: (g, A, K, B / g^L)
- each half of the disjunctive proof: (g, A, K, B) for zero and
  (g, A, K, B / g) for one

A generic proof is held either expanded, with its commitments stored, or
compact, with only (c, r). `expand` turns either form into the expanded one,
so both validate through the same equations.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence, Union

from .elgamal import ElGamalCiphertext
from .errors import InvalidInputError
from .group import (
    ElementModP,
    ElementModQ,
    ZERO_MOD_Q,
    a_minus_b_q,
    a_plus_bc_q,
    add_q,
    div_p,
    g_mod_p,
    g_pow_p,
    int_to_q,
    mult_p,
    mult_q,
    negate_q,
    pow_p,
)
from .hash import hash_elems
from .nonces import Nonces
from .proof import ProofUsage, ProofValidation, report

DISJUNCTIVE_HEADER = "disjoint-chaum-pedersen-proof"
CONSTANT_HEADER = "constant-chaum-pedersen-proof"

# keeps decryption of the accumulated total tractable
MAX_CONSTANT = 1_000_000_000


## --- generic proof -----------------------------------------------------


@dataclass(frozen=True)
class ExpandedChaumPedersenProof:
    """Generic proof with stored commitments.

    Attributes
    - pad: a = g^w
    - data: b = h^w
    - challenge: c
    - response: r = w + x * c mod q
    """

    pad: ElementModP
    data: ElementModP
    challenge: ElementModQ
    response: ElementModQ

    def expand(
        self, g: ElementModP, gx: ElementModP, h: ElementModP, hx: ElementModP
    ) -> "ExpandedChaumPedersenProof":
        return self

    def compact(self) -> "CompactChaumPedersenProof":
        return CompactChaumPedersenProof(self.challenge, self.response)

    def check(
        self,
        g: ElementModP,
        gx: ElementModP,
        h: ElementModP,
        hx: ElementModP,
        hash_header: Sequence = (),
        hash_footer: Sequence = (),
        check_c: bool = True,
    ) -> Dict[str, bool]:
        """Itemized checks without logging, for composition into larger proofs."""
        a, b, c, r = self.pad, self.data, self.challenge, self.response
        checks = {
            "in_bounds_a": a.is_valid_residue(),
            "in_bounds_b": b.is_valid_residue(),
            "in_bounds_c": c.is_in_bounds(),
            "in_bounds_r": r.is_in_bounds(),
        }
        if check_c:
            checks["same_c"] = c == hash_elems(*hash_header, a, b, *hash_footer)
        checks["consistent_gr"] = pow_p(g, r) == mult_p(a, pow_p(gx, c))
        checks["consistent_hr"] = pow_p(h, r) == mult_p(b, pow_p(hx, c))
        return checks

    def is_valid(
        self,
        g: ElementModP,
        gx: ElementModP,
        h: ElementModP,
        hx: ElementModP,
        hash_header: Sequence = (),
        hash_footer: Sequence = (),
        check_c: bool = True,
    ) -> ProofValidation:
        checks = self.check(g, gx, h, hx, hash_header, hash_footer, check_c)
        return report(ProofValidation("GenericChaumPedersenProof", checks))


@dataclass(frozen=True)
class CompactChaumPedersenProof:
    """Generic proof holding only (c, r); commitments are recomputed on demand."""

    challenge: ElementModQ
    response: ElementModQ

    def expand(
        self, g: ElementModP, gx: ElementModP, h: ElementModP, hx: ElementModP
    ) -> ExpandedChaumPedersenProof:
        """a = g^r / gx^c and b = h^r / hx^c."""
        c, r = self.challenge, self.response
        a = div_p(pow_p(g, r), pow_p(gx, c))
        b = div_p(pow_p(h, r), pow_p(hx, c))
        return ExpandedChaumPedersenProof(a, b, c, r)

    def compact(self) -> "CompactChaumPedersenProof":
        return self

    def is_valid(
        self,
        g: ElementModP,
        gx: ElementModP,
        h: ElementModP,
        hx: ElementModP,
        hash_header: Sequence = (),
        hash_footer: Sequence = (),
        check_c: bool = True,
    ) -> ProofValidation:
        return self.expand(g, gx, h, hx).is_valid(
            g, gx, h, hx, hash_header, hash_footer, check_c
        )


GenericChaumPedersenProof = Union[ExpandedChaumPedersenProof, CompactChaumPedersenProof]


def make_generic_chaum_pedersen(
    g: ElementModP,
    h: ElementModP,
    x: ElementModQ,
    w: ElementModQ,
    hash_header: Sequence = (),
    hash_footer: Sequence = (),
) -> ExpandedChaumPedersenProof:
    """Prove log_g(g^x) == log_h(h^x) with commitment nonce w."""
    a = pow_p(g, w)
    b = pow_p(h, w)
    c = hash_elems(*hash_header, a, b, *hash_footer)
    r = a_plus_bc_q(w, x, c)
    return ExpandedChaumPedersenProof(a, b, c, r)


## --- decryption share proof -------------------------------------------


@dataclass(frozen=True)
class ChaumPedersenProof:
    """Proof that M = A^s for the s behind a guardian key K = g^s."""

    proof: GenericChaumPedersenProof
    usage: ProofUsage = ProofUsage.DecryptionShare

    @property
    def challenge(self) -> ElementModQ:
        return self.proof.challenge

    @property
    def response(self) -> ElementModQ:
        return self.proof.response

    def expand(
        self, ciphertext: ElGamalCiphertext, k: ElementModP, m: ElementModP
    ) -> "ChaumPedersenProof":
        return replace(self, proof=self.proof.expand(g_mod_p(), k, ciphertext.pad, m))

    def compact(self) -> "ChaumPedersenProof":
        return replace(self, proof=self.proof.compact())

    def is_valid(
        self,
        ciphertext: ElGamalCiphertext,
        k: ElementModP,
        m: ElementModP,
        extended_hash: ElementModQ,
    ) -> ProofValidation:
        """Check the proof for share m of ``ciphertext`` under guardian key k.

        Args
        - ciphertext: (A, B)
        - k: the guardian's public key share K_i
        - m: the claimed share M_i
        - extended_hash: Q-bar
        """
        g = g_mod_p()
        A, B = ciphertext.pad, ciphertext.data
        expanded = self.proof.expand(g, k, A, m)
        checks = {
            "in_bounds_alpha": A.is_valid_residue(),
            "in_bounds_beta": B.is_valid_residue(),
            "in_bounds_k": k.is_valid_residue(),
            "in_bounds_m": m.is_valid_residue(),
            "in_bounds_q": extended_hash.is_in_bounds(),
        }
        checks.update(
            expanded.check(g, k, A, m, (extended_hash, A, B), (m,), check_c=True)
        )
        return report(ProofValidation("ChaumPedersenProof", checks))


def make_chaum_pedersen(
    ciphertext: ElGamalCiphertext,
    s: ElementModQ,
    m: ElementModP,
    seed: ElementModQ,
    hash_header: ElementModQ,
) -> ChaumPedersenProof:
    """Prove that m = A^s where A is the ciphertext pad.

    Args
    - ciphertext: the ciphertext being partially decrypted
    - s: the secret (key share) used to compute m
    - m: the partial decryption A^s
    - seed: seeds the commitment nonce
    - hash_header: usually the extended base hash Q-bar
    """
    u = Nonces(seed, CONSTANT_HEADER)[0]
    A, B = ciphertext.pad, ciphertext.data
    proof = make_generic_chaum_pedersen(g_mod_p(), A, s, u, (hash_header, A, B), (m,))
    return ChaumPedersenProof(proof)


## --- disjunctive proof ------------------------------------------------


@dataclass(frozen=True)
class DisjunctiveChaumPedersenProof:
    """Proof that a ciphertext encrypts 0 or 1, without saying which.

    Attributes
    - proof_zero: half for the "encrypts 0" branch, challenge c0, response v0
    - proof_one: half for the "encrypts 1" branch, challenge c1, response v1
    - challenge: c = H(Q-bar, A, B, a0, b0, a1, b1) = c0 + c1
    """

    proof_zero: GenericChaumPedersenProof
    proof_one: GenericChaumPedersenProof
    challenge: ElementModQ
    usage: ProofUsage = ProofUsage.SelectionValue

    def expand(
        self, ciphertext: ElGamalCiphertext, k: ElementModP
    ) -> "DisjunctiveChaumPedersenProof":
        g = g_mod_p()
        alpha, beta = ciphertext.pad, ciphertext.data
        return replace(
            self,
            proof_zero=self.proof_zero.expand(g, alpha, k, beta),
            proof_one=self.proof_one.expand(g, alpha, k, div_p(beta, g)),
        )

    def compact(self) -> "DisjunctiveChaumPedersenProof":
        return replace(
            self,
            proof_zero=self.proof_zero.compact(),
            proof_one=self.proof_one.compact(),
        )

    def is_valid(
        self, ciphertext: ElGamalCiphertext, k: ElementModP, q: ElementModQ
    ) -> ProofValidation:
        """Check the proof against ``ciphertext`` under key k and extended hash q.

        Every check is evaluated; the result lists each one by name.
        """
        alpha, beta = ciphertext.pad, ciphertext.data
        expanded = self.expand(ciphertext, k)
        zero = expanded.proof_zero
        one = expanded.proof_one
        a0, b0, c0, v0 = zero.pad, zero.data, zero.challenge, zero.response
        a1, b1, c1, v1 = one.pad, one.data, one.challenge, one.response
        c = self.challenge

        checks = {
            "in_bounds_alpha": alpha.is_valid_residue(),
            "in_bounds_beta": beta.is_valid_residue(),
            "in_bounds_a0": a0.is_valid_residue(),
            "in_bounds_b0": b0.is_valid_residue(),
            "in_bounds_a1": a1.is_valid_residue(),
            "in_bounds_b1": b1.is_valid_residue(),
            "in_bounds_c0": c0.is_in_bounds(),
            "in_bounds_c1": c1.is_in_bounds(),
            "in_bounds_v0": v0.is_in_bounds(),
            "in_bounds_v1": v1.is_in_bounds(),
            "consistent_c": add_q(c0, c1) == c,
            "consistent_hash": c == hash_elems(q, alpha, beta, a0, b0, a1, b1),
            "consistent_gv0": g_pow_p(v0) == mult_p(a0, pow_p(alpha, c0)),
            "consistent_gv1": g_pow_p(v1) == mult_p(a1, pow_p(alpha, c1)),
            "consistent_kv0": pow_p(k, v0) == mult_p(b0, pow_p(beta, c0)),
            "consistent_gc1kv1": mult_p(g_pow_p(c1), pow_p(k, v1))
            == mult_p(b1, pow_p(beta, c1)),
        }
        return report(ProofValidation("DisjunctiveChaumPedersenProof", checks))


def make_disjunctive_chaum_pedersen(
    ciphertext: ElGamalCiphertext,
    r: ElementModQ,
    k: ElementModP,
    q: ElementModQ,
    seed: ElementModQ,
    plaintext: int,
) -> DisjunctiveChaumPedersenProof:
    """Prove that ``ciphertext`` encrypts ``plaintext``, which must be 0 or 1.

    Args
    - ciphertext: the encryption (A, B)
    - r: nonce used to create the ciphertext
    - k: election public key
    - q: value bound into the challenge, usually the extended base hash
    - seed: seeds the simulated branch and commitment nonces
    - plaintext: 0 or 1
    """
    if plaintext == 0:
        return make_disjunctive_chaum_pedersen_zero(ciphertext, r, k, q, seed)
    if plaintext == 1:
        return make_disjunctive_chaum_pedersen_one(ciphertext, r, k, q, seed)
    raise InvalidInputError(
        f"disjunctive proofs only cover plaintexts 0 and 1, got {plaintext}"
    )


def make_disjunctive_chaum_pedersen_zero(
    ciphertext: ElGamalCiphertext,
    r: ElementModQ,
    k: ElementModP,
    q: ElementModQ,
    seed: ElementModQ,
) -> DisjunctiveChaumPedersenProof:
    alpha, beta = ciphertext.pad, ciphertext.data
    nonces = Nonces(seed, DISJUNCTIVE_HEADER)
    c1, v, u0 = nonces[0], nonces[1], nonces[2]

    # real branch 0, simulated branch 1
    a0 = g_pow_p(u0)
    b0 = pow_p(k, u0)
    a1 = g_pow_p(v)
    b1 = mult_p(pow_p(k, v), g_pow_p(c1))

    c = hash_elems(q, alpha, beta, a0, b0, a1, b1)
    c0 = a_minus_b_q(c, c1)
    v0 = a_plus_bc_q(u0, c0, r)
    v1 = a_plus_bc_q(v, c1, r)
    return DisjunctiveChaumPedersenProof(
        ExpandedChaumPedersenProof(a0, b0, c0, v0),
        ExpandedChaumPedersenProof(a1, b1, c1, v1),
        c,
    )


def make_disjunctive_chaum_pedersen_one(
    ciphertext: ElGamalCiphertext,
    r: ElementModQ,
    k: ElementModP,
    q: ElementModQ,
    seed: ElementModQ,
) -> DisjunctiveChaumPedersenProof:
    alpha, beta = ciphertext.pad, ciphertext.data
    nonces = Nonces(seed, DISJUNCTIVE_HEADER)
    w, v, u1 = nonces[0], nonces[1], nonces[2]

    # simulated branch 0, real branch 1
    a0 = g_pow_p(v)
    b0 = mult_p(pow_p(k, v), g_pow_p(w))
    a1 = g_pow_p(u1)
    b1 = pow_p(k, u1)

    c = hash_elems(q, alpha, beta, a0, b0, a1, b1)
    c0 = negate_q(w)
    c1 = add_q(c, w)
    v0 = a_plus_bc_q(v, c0, r)
    v1 = a_plus_bc_q(u1, c1, r)
    return DisjunctiveChaumPedersenProof(
        ExpandedChaumPedersenProof(a0, b0, c0, v0),
        ExpandedChaumPedersenProof(a1, b1, c1, v1),
        c,
    )


## --- constant proof ---------------------------------------------------


def _constant_q(constant: int) -> Optional[ElementModQ]:
    return int_to_q(constant) if 0 <= constant else None


@dataclass(frozen=True)
class ConstantChaumPedersenProof:
    """Proof that a ciphertext encrypts the integer ``constant``.

    Attributes
    - proof: generic proof with a = g^u, b = K^u, c = H(Q-bar, A, B, a, b)
      and v = u + c * r, r being the aggregate nonce
    - constant: L, the selection limit of the contest
    """

    proof: GenericChaumPedersenProof
    constant: int
    usage: ProofUsage = ProofUsage.SelectionLimit

    @property
    def challenge(self) -> ElementModQ:
        return self.proof.challenge

    @property
    def response(self) -> ElementModQ:
        return self.proof.response

    def expand(
        self, ciphertext: ElGamalCiphertext, k: ElementModP
    ) -> "ConstantChaumPedersenProof":
        constant_q = _constant_q(self.constant) or ZERO_MOD_Q
        g = g_mod_p()
        hx = div_p(ciphertext.data, g_pow_p(constant_q))
        return replace(self, proof=self.proof.expand(g, ciphertext.pad, k, hx))

    def compact(self) -> "ConstantChaumPedersenProof":
        return replace(self, proof=self.proof.compact())

    def is_valid(
        self, ciphertext: ElGamalCiphertext, k: ElementModP, q: ElementModQ
    ) -> ProofValidation:
        alpha, beta = ciphertext.pad, ciphertext.data
        expanded = self.expand(ciphertext, k).proof
        a, b, c, v = expanded.pad, expanded.data, expanded.challenge, expanded.response
        constant_q = _constant_q(self.constant)
        in_bounds_constant = constant_q is not None
        if constant_q is None:
            constant_q = ZERO_MOD_Q

        checks = {
            "in_bounds_alpha": alpha.is_valid_residue(),
            "in_bounds_beta": beta.is_valid_residue(),
            "in_bounds_a": a.is_valid_residue(),
            "in_bounds_b": b.is_valid_residue(),
            "in_bounds_c": c.is_in_bounds(),
            "in_bounds_v": v.is_in_bounds(),
            "in_bounds_constant": in_bounds_constant,
            "sane_constant": 0 <= self.constant < MAX_CONSTANT,
            "same_c": c == hash_elems(q, alpha, beta, a, b),
            "consistent_gv": g_pow_p(v) == mult_p(a, pow_p(alpha, c)),
            "consistent_kv": in_bounds_constant
            and mult_p(g_pow_p(mult_q(c, constant_q)), pow_p(k, v))
            == mult_p(b, pow_p(beta, c)),
        }
        return report(ProofValidation("ConstantChaumPedersenProof", checks))


def make_constant_chaum_pedersen(
    ciphertext: ElGamalCiphertext,
    constant: int,
    r: ElementModQ,
    k: ElementModP,
    seed: ElementModQ,
    q: ElementModQ,
) -> ConstantChaumPedersenProof:
    """Prove that ``ciphertext`` encrypts ``constant``.

    Args
    - ciphertext: accumulated encryption (A, B)
    - constant: the plaintext L
    - r: aggregate nonce of the ciphertext
    - k: election public key
    - seed: seeds the commitment nonce
    - q: value bound into the challenge, usually the extended base hash
    """
    u = Nonces(seed, CONSTANT_HEADER)[0]
    alpha, beta = ciphertext.pad, ciphertext.data
    proof = make_generic_chaum_pedersen(g_mod_p(), k, r, u, (q, alpha, beta))
    return ConstantChaumPedersenProof(proof, constant)
