"""Shamir secret-sharing polynomials for the guardian key ceremony."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .elgamal import ElGamalKeyPair
from .errors import InvalidInputError
from .group import (
    ONE_MOD_P,
    ZERO_MOD_Q,
    ElementModP,
    ElementModQ,
    add_q,
    div_q,
    g_pow_p,
    mult_p,
    mult_q,
    pow_p,
    pow_q,
    rand_q,
)
from .nonces import Nonces
from .schnorr import SchnorrProof, make_schnorr_proof

COEFFICIENT_PROOF_HEADER = "coefficient-proof"


@dataclass(frozen=True)
class ElectionPolynomial:
    """A guardian's secret polynomial and its public commitments.

    Attributes
    - coefficients: secret a_0 .. a_{k-1}; a_0 is the guardian's secret key
    - coefficient_commitments: g^{a_j}
    - coefficient_proofs: Schnorr proof of possession for each a_j
    """

    coefficients: List[ElementModQ]
    coefficient_commitments: List[ElementModP]
    coefficient_proofs: List[SchnorrProof]

    def __post_init__(self) -> None:
        n = len(self.coefficients)
        if len(self.coefficient_commitments) != n or len(self.coefficient_proofs) != n:
            raise InvalidInputError(
                "coefficients, commitments and proofs must have the same length"
            )

    @property
    def quorum(self) -> int:
        return len(self.coefficients)

    def value_at(self, x: int) -> ElementModQ:
        return compute_polynomial_coordinate(x, self)


def generate_polynomial(
    quorum: int, nonce: Optional[ElementModQ] = None
) -> ElectionPolynomial:
    """Build a random polynomial of degree quorum - 1.

    Args
    - quorum: number of coefficients, the k of k-of-n
    - nonce: when given, coefficient j is nonce + j and the proof nonces are
      derived from it; only meant for reproducible tests

    Returns: ElectionPolynomial
    """
    if quorum < 1:
        raise InvalidInputError(f"quorum must be at least 1, got {quorum}")
    proof_nonces = Nonces(nonce, COEFFICIENT_PROOF_HEADER) if nonce is not None else None
    coefficients: List[ElementModQ] = []
    commitments: List[ElementModP] = []
    proofs: List[SchnorrProof] = []
    for j in range(quorum):
        coefficient = rand_q() if nonce is None else add_q(nonce, j)
        commitment = g_pow_p(coefficient)
        w = rand_q() if proof_nonces is None else proof_nonces[j]
        proofs.append(make_schnorr_proof(ElGamalKeyPair(coefficient, commitment), w))
        coefficients.append(coefficient)
        commitments.append(commitment)
    return ElectionPolynomial(coefficients, commitments, proofs)


def compute_polynomial_coordinate(x: int, polynomial: ElectionPolynomial) -> ElementModQ:
    """Sum of a_j * x^j mod q."""
    total = add_q(0)
    for j, coefficient in enumerate(polynomial.coefficients):
        total = add_q(total, mult_q(coefficient, pow_q(x, j)))
    return total


def compute_lagrange_coefficient(coordinate: int, *degrees: int) -> ElementModQ:
    """Weight of ``coordinate`` when interpolating at 0 from ``degrees``.

    Args
    - coordinate: the point being weighted, usually a guardian sequence order
    - degrees: the other points taking part

    Returns: prod(d) / prod(d - coordinate) mod q

    Raises InvalidInputError when ``coordinate`` is one of ``degrees`` (mod q).
    """
    numerator = mult_q(*degrees)
    denominator = mult_q(*[d - coordinate for d in degrees])
    if denominator == ZERO_MOD_Q:
        raise InvalidInputError(f"coordinate {coordinate} repeated in {list(degrees)}")
    return div_q(numerator, denominator)


def calculate_g_exp_p_at(x: int, commitments: Sequence[ElementModP]) -> ElementModP:
    """g^{P(x)} from public data: prod over j of K_j^{x^j}."""
    result = ONE_MOD_P
    for j, commitment in enumerate(commitments):
        result = mult_p(result, pow_p(commitment, pow_q(x, j)))
    return result


def verify_polynomial_coordinate(
    expected: ElementModQ, x: int, commitments: Sequence[ElementModP]
) -> bool:
    """True when ``expected`` is the value at x of the committed polynomial."""
    return g_pow_p(expected) == calculate_g_exp_p_at(x, commitments)
