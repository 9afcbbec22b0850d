import pytest

from eg_core.decrypt import (
    compute_compensated_decryption_share,
    compute_decryption_share,
    compute_lagrange_coefficients_for_guardians,
    compute_recovery_public_key,
    decrypt_with_keys,
    decrypt_with_shares,
    reconstruct_decryption_share,
)
from eg_core.elgamal import elgamal_add, elgamal_encrypt
from eg_core.constants import get_parameters
from eg_core.dlog import DiscreteLog
from eg_core.elgamal import ElGamalCiphertext
from eg_core.errors import InvalidInputError, ProofVerificationError
from eg_core.group import ElementModP, ElementModQ, g_pow_p
from eg_core.guardian import (
    combine_election_public_keys,
    generate_election_keys,
    generate_election_partial_key_backup,
)
from eg_core.hash import hash_elems


QBAR = hash_elems("extended-base-hash")


@pytest.fixture
def guardians():
    return [
        generate_election_keys(f"guardian-{i}", i, 2, ElementModQ(1000 * i))
        for i in range(1, 4)
    ]


@pytest.fixture
def ciphertext(guardians):
    joint = combine_election_public_keys(g.share() for g in guardians)
    ballots = [elgamal_encrypt(v, ElementModQ(50 + i), joint) for i, v in enumerate([1, 0, 1, 1])]
    return elgamal_add(*ballots)


def test_all_guardians_present(guardians, ciphertext):
    assert decrypt_with_keys(ciphertext, guardians, QBAR) == 3


def test_decryption_share_proof(guardians, ciphertext):
    share = compute_decryption_share(guardians[0], ciphertext, QBAR, ElementModQ(9))
    assert share.guardian_id == "guardian-1"
    assert share.share == ciphertext.partial_decrypt(guardians[0].key_pair.secret_key)
    assert share.is_valid(ciphertext, QBAR)
    assert not share.is_valid(ciphertext, hash_elems("other"))


def test_missing_guardian(guardians, ciphertext):
    present = guardians[:2]
    missing = guardians[2]
    lagrange = compute_lagrange_coefficients_for_guardians(
        {g.owner_id: g.sequence_order for g in present}
    )

    compensated = []
    for holder in present:
        backup = generate_election_partial_key_backup(
            missing, holder.owner_id, holder.sequence_order
        )
        share = compute_compensated_decryption_share(backup, ciphertext, QBAR)
        assert share.missing_guardian_id == missing.owner_id
        assert share.guardian_id == holder.owner_id
        assert share.recovery_public_key == g_pow_p(backup.value)
        assert share.recovery_public_key == compute_recovery_public_key(backup)
        assert share.is_valid(ciphertext, QBAR)
        compensated.append(share)

    reconstructed = reconstruct_decryption_share(compensated, lagrange)
    assert reconstructed == ciphertext.partial_decrypt(missing.key_pair.secret_key)

    shares = [compute_decryption_share(g, ciphertext, QBAR).share for g in present]
    assert decrypt_with_shares(ciphertext, shares + [reconstructed]) == 3


def test_any_quorum_subset_works(guardians, ciphertext):
    present = [guardians[0], guardians[2]]
    missing = guardians[1]
    lagrange = compute_lagrange_coefficients_for_guardians(
        {g.owner_id: g.sequence_order for g in present}
    )
    compensated = [
        compute_compensated_decryption_share(
            generate_election_partial_key_backup(missing, g.owner_id, g.sequence_order),
            ciphertext,
            QBAR,
        )
        for g in present
    ]
    shares = [ciphertext.partial_decrypt(g.key_pair.secret_key) for g in present]
    shares.append(reconstruct_decryption_share(compensated, lagrange))
    assert decrypt_with_shares(ciphertext, shares) == 3


def test_lagrange_coefficients_for_guardians():
    coefficients = compute_lagrange_coefficients_for_guardians({"a": 1, "b": 2})
    assert coefficients["a"] == ElementModQ(2)
    assert set(coefficients) == {"a", "b"}


def test_lagrange_coefficients_duplicate_sequence_order():
    with pytest.raises(InvalidInputError):
        compute_lagrange_coefficients_for_guardians({"a": 1, "b": 1})


def test_reconstruct_errors(guardians, ciphertext):
    backup = generate_election_partial_key_backup(guardians[2], "guardian-1", 1)
    share = compute_compensated_decryption_share(backup, ciphertext, QBAR)
    with pytest.raises(InvalidInputError):
        reconstruct_decryption_share([share], {"guardian-2": ElementModQ(1)})
    with pytest.raises(InvalidInputError):
        reconstruct_decryption_share([], {})
    with pytest.raises(InvalidInputError):
        decrypt_with_shares(ciphertext, [])


def test_decrypt_with_keys_rejects_bad_share_proof(guardians, ciphertext):
    # a pad outside the order-q subgroup fails every share proof
    tampered = ElGamalCiphertext(
        ElementModP(get_parameters().large_prime - 1), ciphertext.data
    )
    with pytest.raises(ProofVerificationError) as exc_info:
        decrypt_with_keys(tampered, guardians, QBAR)
    assert not exc_info.value.validation
    assert not exc_info.value.validation.checks["in_bounds_alpha"]


def test_decrypt_with_shares_uses_given_table(guardians, ciphertext):
    dlog = DiscreteLog(5)
    shares = [ciphertext.partial_decrypt(g.key_pair.secret_key) for g in guardians]
    assert decrypt_with_shares(ciphertext, shares, dlog) == 3
    assert len(dlog) == 4
