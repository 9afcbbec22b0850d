"""eg_core: the cryptographic core of an ElectionGuard-style election.

Group arithmetic, hashing and nonces, exponential ElGamal, the zero-knowledge
proofs, the guardian key ceremony and threshold decryption, and the ballot
encryption pipeline.
"""

from .ballot import (
    CiphertextBallot,
    CiphertextBallotContest,
    CiphertextBallotSelection,
    PlaintextBallot,
    PlaintextBallotContest,
    PlaintextBallotSelection,
)
from .config import Settings, get_settings, load_settings, override_settings
from .constants import GroupParameters, get_parameters, initialize_parameters
from .decrypt import (
    compute_compensated_decryption_share,
    compute_decryption_share,
    compute_lagrange_coefficients_for_guardians,
    decrypt_with_shares,
    reconstruct_decryption_share,
)
from .dlog import DiscreteLog
from .election import CiphertextElectionContext, make_ciphertext_election_context
from .elgamal import (
    ElGamalCiphertext,
    ElGamalKeyPair,
    elgamal_add,
    elgamal_encrypt,
    elgamal_keypair_from_secret,
    elgamal_keypair_random,
)
from .encrypt import EncryptionDevice, EncryptionMediator, encrypt_ballot
from .errors import (
    ConfigurationError,
    DiscreteLogError,
    ElectionGuardError,
    EncryptionError,
    InvalidInputError,
    ProofVerificationError,
)
from .group import ElementModP, ElementModQ
from .guardian import (
    ElectionKeys,
    ElectionPublicKey,
    combine_election_public_keys,
    compute_commitment_hash,
    generate_election_keys,
)
from .hash import hash_elems
from .logs import configure_logging
from .manifest import InternalManifest, Manifest
from .nonces import Nonces

__version__ = "0.1.0"
