"""Ballot encryption.

Every nonce on an encrypted ballot derives from one master nonce:

    ballot seed     = H(manifest hash, ballot id, master nonce)
    contest nonces  = Nonces(contest description hash, ballot seed)
        [sequence_order] -> contest nonce, [0] -> constant proof seed
    selection nonces = Nonces(selection description hash, contest nonce)
        [sequence_order] -> encryption nonce, [0] -> disjunctive proof seed

so the whole ballot, proofs included, can be regenerated from the master
nonce alone.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .ballot import (
    CiphertextBallot,
    CiphertextBallotContest,
    CiphertextBallotSelection,
    PlaintextBallot,
    PlaintextBallotContest,
    PlaintextBallotSelection,
    make_ciphertext_ballot,
    make_ciphertext_ballot_contest,
    make_ciphertext_ballot_selection,
    nonce_seed,
)
from .election import CiphertextElectionContext
from .elgamal import ElGamalPublicKey, elgamal_encrypt
from .errors import EncryptionError
from .group import ElementModQ, rand_q
from .manifest import (
    ContestDescription,
    ContestDescriptionWithPlaceholders,
    InternalManifest,
    SelectionDescription,
)
from .nonces import Nonces
from .tracker import get_hash_for_device

log = logging.getLogger(__name__)


class EncryptionDevice:
    """Metadata for the device encrypting ballots.

    Args
    - device_id: unique identifier of the device
    - session_id: identifies the session, protects the timestamp
    - launch_code: election initialization value
    - location: free-form location of the device
    """

    def __init__(self, device_id: int, session_id: int, launch_code: int, location: str):
        self.device_id = device_id
        self.session_id = session_id
        self.launch_code = launch_code
        self.location = location

    def get_hash(self) -> ElementModQ:
        return get_hash_for_device(
            self.device_id, self.session_id, self.launch_code, self.location
        )


class EncryptionMediator:
    """Encrypts ballots for one device, chaining their tracking codes."""

    def __init__(
        self,
        internal_manifest: InternalManifest,
        context: CiphertextElectionContext,
        encryption_device: EncryptionDevice,
    ):
        self._internal_manifest = internal_manifest
        self._context = context
        self._encryption_seed = encryption_device.get_hash()

    @property
    def previous_code(self) -> ElementModQ:
        return self._encryption_seed

    def encrypt(
        self, ballot: PlaintextBallot, timestamp: Optional[int] = None
    ) -> CiphertextBallot:
        log.debug("encrypting ballot %s", ballot.object_id)
        encrypted = encrypt_ballot(
            ballot,
            self._internal_manifest,
            self._context,
            self._encryption_seed,
            timestamp=timestamp,
        )
        self._encryption_seed = encrypted.code
        return encrypted


def selection_from(
    description: SelectionDescription,
    is_placeholder: bool = False,
    is_affirmative: bool = False,
) -> PlaintextBallotSelection:
    """A plaintext selection for ``description``, used for undervotes and placeholders."""
    return PlaintextBallotSelection(
        description.object_id, 1 if is_affirmative else 0, is_placeholder
    )


def contest_from(description: ContestDescription) -> PlaintextBallotContest:
    """A contest with every selection false."""
    return PlaintextBallotContest(
        description.object_id,
        [selection_from(s) for s in description.ballot_selections],
    )


def encrypt_selection(
    selection: PlaintextBallotSelection,
    selection_description: SelectionDescription,
    elgamal_public_key: ElGamalPublicKey,
    crypto_extended_base_hash: ElementModQ,
    nonce_seed: ElementModQ,
    is_placeholder: bool = False,
    should_verify_proofs: bool = True,
) -> CiphertextBallotSelection:
    """Encrypt one selection and prove it is 0 or 1.

    Args
    - selection: plaintext selection
    - selection_description: its manifest description
    - elgamal_public_key: joint key K
    - crypto_extended_base_hash: Q-bar
    - nonce_seed: usually the contest nonce
    - is_placeholder: mark the selection as a placeholder
    - should_verify_proofs: check the proof before returning

    Raises EncryptionError on invalid input or a proof that does not verify.
    """
    if not selection.is_valid(selection_description.object_id):
        raise EncryptionError(f"invalid input selection: {selection.object_id}")

    description_hash = selection_description.crypto_hash()
    nonce_sequence = Nonces(description_hash, nonce_seed)
    selection_nonce = nonce_sequence[selection_description.sequence_order]
    proof_seed = nonce_sequence[0]

    ciphertext = elgamal_encrypt(selection.vote, selection_nonce, elgamal_public_key)
    if ciphertext is None:
        raise EncryptionError(f"could not encrypt selection {selection.object_id}")

    encrypted = make_ciphertext_ballot_selection(
        selection.object_id,
        selection_description.sequence_order,
        description_hash,
        ciphertext,
        elgamal_public_key,
        crypto_extended_base_hash,
        proof_seed,
        selection.vote,
        is_placeholder_selection=is_placeholder,
        nonce=selection_nonce,
    )
    if should_verify_proofs and not encrypted.is_valid_encryption(
        description_hash, elgamal_public_key, crypto_extended_base_hash
    ):
        log.warning("failed selection proof for selection %s", encrypted.object_id)
        raise EncryptionError(f"selection proof failed for {encrypted.object_id}")
    return encrypted


def encrypt_contest(
    contest: PlaintextBallotContest,
    contest_description: ContestDescriptionWithPlaceholders,
    elgamal_public_key: ElGamalPublicKey,
    crypto_extended_base_hash: ElementModQ,
    nonce_seed: ElementModQ,
    should_verify_proofs: bool = True,
) -> CiphertextBallotContest:
    """Encrypt a contest, filling in missing selections and placeholders.

    Selections on the ballot that the manifest does not list are ignored.
    Placeholders are set true until the contest carries ``number_elected``
    votes, so the accumulated total always equals ``number_elected``.
    """
    description = contest_description.contest
    matched: List[PlaintextBallotSelection] = []
    for selection in contest.ballot_selections:
        if contest_description.selection_for(selection.object_id) is None:
            log.info(
                "ignoring selection %s not in contest %s",
                selection.object_id,
                contest.object_id,
            )
        else:
            matched.append(selection)
    if not PlaintextBallotContest(contest.object_id, matched).is_valid(
        description.object_id,
        len(description.ballot_selections),
        description.number_elected,
        description.votes_allowed,
    ):
        raise EncryptionError(f"invalid input contest: {contest.object_id}")
    if not contest_description.is_valid():
        raise EncryptionError(f"invalid contest description: {description.object_id}")

    contest_hash = description.crypto_hash()
    nonce_sequence = Nonces(contest_hash, nonce_seed)
    contest_nonce = nonce_sequence[description.sequence_order]
    proof_seed = nonce_sequence[0]

    plaintext_selections: Dict[str, PlaintextBallotSelection] = {
        s.object_id: s for s in matched
    }

    selection_count = 0
    encrypted_selections: List[CiphertextBallotSelection] = []
    for selection_description in description.ballot_selections:
        plaintext = plaintext_selections.get(selection_description.object_id)
        if plaintext is None:
            plaintext = selection_from(selection_description)
        selection_count += plaintext.vote
        encrypted_selections.append(
            encrypt_selection(
                plaintext,
                selection_description,
                elgamal_public_key,
                crypto_extended_base_hash,
                contest_nonce,
                should_verify_proofs=should_verify_proofs,
            )
        )

    for placeholder in contest_description.placeholder_selections:
        select_placeholder = selection_count < description.number_elected
        if select_placeholder:
            selection_count += 1
        encrypted_selections.append(
            encrypt_selection(
                selection_from(placeholder, True, select_placeholder),
                placeholder,
                elgamal_public_key,
                crypto_extended_base_hash,
                contest_nonce,
                is_placeholder=True,
                should_verify_proofs=should_verify_proofs,
            )
        )

    # TODO: cumulative voting needs selections that encrypt values above 1
    votes_allowed = description.votes_allowed
    if votes_allowed is not None and selection_count < votes_allowed:
        log.warning(
            "mismatching selection count in contest %s: only n-of-m contests are supported",
            description.object_id,
        )

    encrypted_contest = make_ciphertext_ballot_contest(
        contest.object_id,
        description.sequence_order,
        contest_hash,
        encrypted_selections,
        elgamal_public_key,
        crypto_extended_base_hash,
        proof_seed,
        description.number_elected,
        nonce=contest_nonce,
    )
    if encrypted_contest.proof is None:
        raise EncryptionError(f"no proof generated for contest {contest.object_id}")
    if should_verify_proofs and not encrypted_contest.is_valid_encryption(
        contest_hash, elgamal_public_key, crypto_extended_base_hash
    ):
        log.warning("mismatching contest proof for contest %s", contest.object_id)
        raise EncryptionError(f"contest proof failed for {contest.object_id}")
    return encrypted_contest


def encrypt_ballot_contests(
    ballot: PlaintextBallot,
    internal_manifest: InternalManifest,
    context: CiphertextElectionContext,
    nonce_seed: ElementModQ,
    should_verify_proofs: bool = True,
) -> List[CiphertextBallotContest]:
    """Encrypt the contests of the ballot's style, in manifest order."""
    plaintext_contests: Dict[str, PlaintextBallotContest] = {
        c.object_id: c for c in ballot.contests
    }
    style_contests = internal_manifest.get_contests_for_style(ballot.style_id)
    known = {c.object_id for c in style_contests}
    for contest_id in plaintext_contests:
        if contest_id not in known:
            log.info("ignoring contest %s not on style %s", contest_id, ballot.style_id)

    encrypted_contests = []
    for contest_description in style_contests:
        contest = plaintext_contests.get(contest_description.object_id)
        if contest is None:
            contest = contest_from(contest_description.contest)
        encrypted_contests.append(
            encrypt_contest(
                contest,
                contest_description,
                context.elgamal_public_key,
                context.crypto_extended_base_hash,
                nonce_seed,
                should_verify_proofs=should_verify_proofs,
            )
        )
    return encrypted_contests


def encrypt_ballot(
    ballot: PlaintextBallot,
    internal_manifest: InternalManifest,
    context: CiphertextElectionContext,
    encryption_seed: ElementModQ,
    nonce: Optional[ElementModQ] = None,
    should_verify_proofs: bool = True,
    timestamp: Optional[int] = None,
) -> CiphertextBallot:
    """Encrypt a plaintext ballot.

    Args
    - ballot: the voter's choices; missing contests and selections count as no vote
    - internal_manifest: manifest with placeholders
    - context: the election's crypto context
    - encryption_seed: previous tracking code, or the device hash
    - nonce: master nonce; random when omitted
    - should_verify_proofs: re-verify every proof before returning
    - timestamp: encryption time; now when omitted

    Returns: CiphertextBallot, still carrying its nonces
    """
    style = internal_manifest.get_ballot_style(ballot.style_id)
    if style is None:
        log.warning("ballot style %s does not exist in election", ballot.style_id)
        raise EncryptionError(f"unknown ballot style {ballot.style_id}")

    master_nonce = nonce if nonce is not None else rand_q()
    seed = nonce_seed(internal_manifest.manifest_hash, ballot.object_id, master_nonce)

    encrypted_contests = encrypt_ballot_contests(
        ballot, internal_manifest, context, seed, should_verify_proofs
    )
    encrypted_ballot = make_ciphertext_ballot(
        ballot.object_id,
        ballot.style_id,
        internal_manifest.manifest_hash,
        encryption_seed,
        encrypted_contests,
        nonce=master_nonce,
        timestamp=timestamp,
    )
    if should_verify_proofs and not encrypted_ballot.is_valid_encryption(
        internal_manifest.manifest_hash,
        context.elgamal_public_key,
        context.crypto_extended_base_hash,
    ):
        raise EncryptionError(f"ballot {ballot.object_id} failed verification")
    return encrypted_ballot
