"""Plaintext and encrypted ballots.

An encrypted ballot mirrors its plaintext: ballot -> contests -> selections.
Every node carries a crypto hash over its children and a seed hash (the
manifest hash of the matching description), never over its own proof, so
proofs can be dropped or recomputed without changing any hash.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from typing import List, Optional, Sequence

from .chaum_pedersen import (
    ConstantChaumPedersenProof,
    DisjunctiveChaumPedersenProof,
    make_constant_chaum_pedersen,
    make_disjunctive_chaum_pedersen,
)
from .elgamal import ElGamalCiphertext, ElGamalPublicKey, elgamal_add
from .group import ZERO_MOD_Q, ElementModQ, add_q
from .hash import hash_elems
from .tracker import get_rotating_tracker_hash, utc_timestamp

log = logging.getLogger(__name__)


## --- plaintext --------------------------------------------------------


@dataclass(frozen=True)
class PlaintextBallotSelection:
    """Attributes
    - object_id: matches a SelectionDescription object_id
    - vote: 0 or 1
    - is_placeholder_selection: set only for synthesized placeholders
    """

    object_id: str
    vote: int
    is_placeholder_selection: bool = False

    def is_valid(self, expected_object_id: str) -> bool:
        if self.object_id != expected_object_id:
            log.info(
                "invalid object_id: expected %s actual %s",
                expected_object_id,
                self.object_id,
            )
            return False
        if self.vote not in (0, 1):
            log.info("selection %s has invalid vote %s", self.object_id, self.vote)
            return False
        return True


@dataclass(frozen=True)
class PlaintextBallotContest:
    object_id: str
    ballot_selections: List[PlaintextBallotSelection] = field(default_factory=list)

    def is_valid(
        self,
        expected_object_id: str,
        expected_number_selections: int,
        expected_number_elected: int,
        votes_allowed: Optional[int] = None,
    ) -> bool:
        """Check ids, the number of selections and the number of votes cast.

        Args
        - expected_object_id: contest id from the manifest
        - expected_number_selections: upper bound on the selections present
        - expected_number_elected: most votes a contest may carry
        - votes_allowed: optional tighter bound on votes
        """
        if self.object_id != expected_object_id:
            log.info("invalid contest object_id %s", self.object_id)
            return False
        if len(self.ballot_selections) > expected_number_selections:
            log.info("too many selections in contest %s", self.object_id)
            return False
        votes = sum(s.vote for s in self.ballot_selections)
        if votes > expected_number_elected:
            log.info("overvote in contest %s", self.object_id)
            return False
        if votes_allowed is not None and votes > votes_allowed:
            log.info("too many votes in contest %s", self.object_id)
            return False
        return True


@dataclass(frozen=True)
class PlaintextBallot:
    """Attributes
    - object_id: external ballot id
    - style_id: BallotStyle object_id
    - contests: the voter's choices, in any order
    """

    object_id: str
    style_id: str
    contests: List[PlaintextBallotContest] = field(default_factory=list)


## --- ciphertext -------------------------------------------------------


@dataclass(frozen=True)
class CiphertextBallotSelection:
    """An encrypted selection.

    Attributes
    - object_id: matches the SelectionDescription
    - sequence_order: from the description
    - description_hash: crypto hash of the SelectionDescription
    - ciphertext: encryption of the vote
    - crypto_hash: H(object_id, description_hash, H(ciphertext))
    - is_placeholder_selection: whether this selection is synthetic
    - nonce: encryption nonce; None once stripped
    - proof: disjunctive 0/1 proof
    """

    object_id: str
    sequence_order: int
    description_hash: ElementModQ
    ciphertext: ElGamalCiphertext
    crypto_hash: ElementModQ
    is_placeholder_selection: bool = False
    nonce: Optional[ElementModQ] = None
    proof: Optional[DisjunctiveChaumPedersenProof] = None

    def crypto_hash_with(self, seed_hash: ElementModQ) -> ElementModQ:
        return _selection_crypto_hash(self.object_id, seed_hash, self.ciphertext)

    def without_nonce(self) -> "CiphertextBallotSelection":
        return replace(self, nonce=None)

    def is_valid_encryption(
        self,
        seed_hash: ElementModQ,
        elgamal_public_key: ElGamalPublicKey,
        crypto_extended_base_hash: ElementModQ,
    ) -> bool:
        if seed_hash != self.description_hash:
            log.info("mismatching selection hash: %s", self.object_id)
            return False
        if self.crypto_hash_with(seed_hash) != self.crypto_hash:
            log.info("mismatching crypto hash: %s", self.object_id)
            return False
        if self.proof is None:
            log.info("no proof exists for: %s", self.object_id)
            return False
        return bool(
            self.proof.is_valid(
                self.ciphertext, elgamal_public_key, crypto_extended_base_hash
            )
        )


def _selection_crypto_hash(
    object_id: str, seed_hash: ElementModQ, ciphertext: ElGamalCiphertext
) -> ElementModQ:
    return hash_elems(object_id, seed_hash, ciphertext.crypto_hash())


def make_ciphertext_ballot_selection(
    object_id: str,
    sequence_order: int,
    description_hash: ElementModQ,
    ciphertext: ElGamalCiphertext,
    elgamal_public_key: ElGamalPublicKey,
    crypto_extended_base_hash: ElementModQ,
    proof_seed: ElementModQ,
    selection_representation: int,
    is_placeholder_selection: bool = False,
    nonce: Optional[ElementModQ] = None,
    proof: Optional[DisjunctiveChaumPedersenProof] = None,
) -> CiphertextBallotSelection:
    """Assemble an encrypted selection, proving it unless a proof is supplied.

    A proof is generated only when the nonce is known.
    """
    crypto_hash = _selection_crypto_hash(object_id, description_hash, ciphertext)
    if proof is None and nonce is not None:
        proof = make_disjunctive_chaum_pedersen(
            ciphertext,
            nonce,
            elgamal_public_key,
            crypto_extended_base_hash,
            proof_seed,
            selection_representation,
        )
    return CiphertextBallotSelection(
        object_id,
        sequence_order,
        description_hash,
        ciphertext,
        crypto_hash,
        is_placeholder_selection,
        nonce,
        proof,
    )


def _sorted_selections(
    selections: Sequence[CiphertextBallotSelection],
) -> List[CiphertextBallotSelection]:
    return sorted(selections, key=lambda s: s.sequence_order)


def _contest_crypto_hash(
    object_id: str,
    selections: Sequence[CiphertextBallotSelection],
    seed_hash: ElementModQ,
) -> ElementModQ:
    if not selections:
        log.warning("contest %s has no selections to hash", object_id)
        return ZERO_MOD_Q
    selection_hashes = [s.crypto_hash for s in _sorted_selections(selections)]
    return hash_elems(object_id, seed_hash, selection_hashes)


def _aggregate_nonce(
    object_id: str, selections: Sequence[CiphertextBallotSelection]
) -> Optional[ElementModQ]:
    nonces = []
    for selection in selections:
        if selection.nonce is None:
            log.info("missing nonce for contest %s; no aggregate nonce", object_id)
            return None
        nonces.append(selection.nonce)
    return add_q(*nonces)


@dataclass(frozen=True)
class CiphertextBallotContest:
    """An encrypted contest.

    Attributes
    - object_id: matches the ContestDescription
    - sequence_order: from the description
    - description_hash: crypto hash of the ContestDescription
    - ballot_selections: real and placeholder selections
    - encrypted_total: homomorphic sum of the selection ciphertexts
    - crypto_hash: H(object_id, description_hash, [selection hashes])
    - nonce: contest nonce; None once stripped
    - proof: constant proof that encrypted_total holds number_elected
    """

    object_id: str
    sequence_order: int
    description_hash: ElementModQ
    ballot_selections: List[CiphertextBallotSelection]
    encrypted_total: ElGamalCiphertext
    crypto_hash: ElementModQ
    nonce: Optional[ElementModQ] = None
    proof: Optional[ConstantChaumPedersenProof] = None

    def aggregate_nonce(self) -> Optional[ElementModQ]:
        return _aggregate_nonce(self.object_id, self.ballot_selections)

    def elgamal_accumulate(self) -> ElGamalCiphertext:
        return elgamal_add(*[s.ciphertext for s in self.ballot_selections])

    def crypto_hash_with(self, seed_hash: ElementModQ) -> ElementModQ:
        return _contest_crypto_hash(self.object_id, self.ballot_selections, seed_hash)

    def without_nonce(self) -> "CiphertextBallotContest":
        return replace(
            self,
            nonce=None,
            ballot_selections=[s.without_nonce() for s in self.ballot_selections],
        )

    def is_valid_encryption(
        self,
        seed_hash: ElementModQ,
        elgamal_public_key: ElGamalPublicKey,
        crypto_extended_base_hash: ElementModQ,
    ) -> bool:
        """Check the hashes, the total and the constant proof.

        Selection proofs are not checked here; CiphertextBallot does that.
        """
        if seed_hash != self.description_hash:
            log.info("mismatching contest hash: %s", self.object_id)
            return False
        if self.crypto_hash_with(seed_hash) != self.crypto_hash:
            log.info("mismatching crypto hash: %s", self.object_id)
            return False
        if self.proof is None:
            log.info("no proof exists for: %s", self.object_id)
            return False
        accumulation = self.elgamal_accumulate()
        if accumulation != self.encrypted_total:
            log.info("encrypted total does not match selections for: %s", self.object_id)
            return False
        return bool(
            self.proof.is_valid(accumulation, elgamal_public_key, crypto_extended_base_hash)
        )


def make_ciphertext_ballot_contest(
    object_id: str,
    sequence_order: int,
    description_hash: ElementModQ,
    ballot_selections: List[CiphertextBallotSelection],
    elgamal_public_key: ElGamalPublicKey,
    crypto_extended_base_hash: ElementModQ,
    proof_seed: ElementModQ,
    number_elected: int,
    nonce: Optional[ElementModQ] = None,
) -> CiphertextBallotContest:
    """Accumulate the selections and prove the total equals ``number_elected``.

    The proof is only generated when every selection still has its nonce.
    """
    crypto_hash = _contest_crypto_hash(object_id, ballot_selections, description_hash)
    encrypted_total = elgamal_add(*[s.ciphertext for s in ballot_selections])
    aggregate = _aggregate_nonce(object_id, ballot_selections)
    proof = None
    if aggregate is not None:
        proof = make_constant_chaum_pedersen(
            encrypted_total,
            number_elected,
            aggregate,
            elgamal_public_key,
            proof_seed,
            crypto_extended_base_hash,
        )
    return CiphertextBallotContest(
        object_id,
        sequence_order,
        description_hash,
        ballot_selections,
        encrypted_total,
        crypto_hash,
        nonce,
        proof,
    )


def nonce_seed(
    manifest_hash: ElementModQ, object_id: str, nonce: ElementModQ
) -> ElementModQ:
    """Seed for every nonce on a ballot: H(manifest hash, ballot id, master nonce)."""
    return hash_elems(manifest_hash, object_id, nonce)


def _ballot_crypto_hash(
    object_id: str,
    contests: Sequence[CiphertextBallotContest],
    seed_hash: ElementModQ,
) -> ElementModQ:
    if not contests:
        log.warning("ballot %s has no contests to hash", object_id)
        return ZERO_MOD_Q
    contest_hashes = [
        c.crypto_hash for c in sorted(contests, key=lambda c: c.sequence_order)
    ]
    return hash_elems(object_id, seed_hash, contest_hashes)


@dataclass(frozen=True)
class CiphertextBallot:
    """An encrypted ballot.

    Attributes
    - object_id: external ballot id
    - style_id: BallotStyle object_id
    - manifest_hash: hash of the manifest the ballot was encrypted against
    - code_seed: previous tracking code, or the device hash for a first ballot
    - contests: encrypted contests in manifest order
    - code: tracking code H(code_seed, timestamp, crypto_hash)
    - timestamp: seconds since the epoch at encryption time
    - crypto_hash: H(object_id, manifest_hash, [contest hashes])
    - nonce: master nonce; None once stripped
    """

    object_id: str
    style_id: str
    manifest_hash: ElementModQ
    code_seed: ElementModQ
    contests: List[CiphertextBallotContest]
    code: ElementModQ
    timestamp: int
    crypto_hash: ElementModQ
    nonce: Optional[ElementModQ] = None

    def hashed_ballot_nonce(self) -> Optional[ElementModQ]:
        if self.nonce is None:
            log.info("no nonce on ballot %s", self.object_id)
            return None
        return nonce_seed(self.manifest_hash, self.object_id, self.nonce)

    def crypto_hash_with(self, seed_hash: ElementModQ) -> ElementModQ:
        return _ballot_crypto_hash(self.object_id, self.contests, seed_hash)

    def without_nonce(self) -> "CiphertextBallot":
        """Copy safe for storage: every nonce removed, proofs kept."""
        return replace(
            self, nonce=None, contests=[c.without_nonce() for c in self.contests]
        )

    def is_valid_encryption(
        self,
        seed_hash: ElementModQ,
        elgamal_public_key: ElGamalPublicKey,
        crypto_extended_base_hash: ElementModQ,
    ) -> bool:
        """Check the ballot hash and every selection and contest proof."""
        if seed_hash != self.manifest_hash:
            log.info("mismatching ballot hash: %s", self.object_id)
            return False
        if self.crypto_hash_with(seed_hash) != self.crypto_hash:
            log.info("mismatching crypto hash: %s", self.object_id)
            return False
        valid = True
        for contest in self.contests:
            for selection in contest.ballot_selections:
                valid &= selection.is_valid_encryption(
                    selection.description_hash,
                    elgamal_public_key,
                    crypto_extended_base_hash,
                )
            valid &= contest.is_valid_encryption(
                contest.description_hash, elgamal_public_key, crypto_extended_base_hash
            )
        return valid


def make_ciphertext_ballot(
    object_id: str,
    style_id: str,
    manifest_hash: ElementModQ,
    code_seed: ElementModQ,
    contests: List[CiphertextBallotContest],
    nonce: Optional[ElementModQ] = None,
    timestamp: Optional[int] = None,
) -> CiphertextBallot:
    """Hash the contests and chain the tracking code onto ``code_seed``."""
    crypto_hash = _ballot_crypto_hash(object_id, contests, manifest_hash)
    if timestamp is None:
        timestamp = utc_timestamp()
    code = get_rotating_tracker_hash(code_seed, timestamp, crypto_hash)
    return CiphertextBallot(
        object_id,
        style_id,
        manifest_hash,
        code_seed,
        contests,
        code,
        timestamp,
        crypto_hash,
        nonce,
    )
