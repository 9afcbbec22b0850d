from dataclasses import replace

import pytest

from eg_core.errors import InvalidInputError
from eg_core.group import ElementModQ, add_q, mult_p
from eg_core.guardian import (
    combine_election_public_keys,
    compute_commitment_hash,
    generate_election_keys,
    generate_election_partial_key_backup,
    verify_election_partial_key_backup,
)
from eg_core.hash import hash_elems


def _guardians(n, quorum):
    return [generate_election_keys(f"guardian-{i}", i, quorum) for i in range(1, n + 1)]


def test_generate_keys():
    keys = generate_election_keys("g1", 1, 3)
    assert keys.key_pair.secret_key == keys.polynomial.coefficients[0]
    assert keys.key_pair.public_key == keys.polynomial.coefficient_commitments[0]
    public = keys.share()
    assert public.owner_id == "g1"
    assert public.sequence_order == 1
    assert public.is_valid()


def test_invalid_sequence_order():
    with pytest.raises(InvalidInputError):
        generate_election_keys("g0", 0, 2)


def test_public_key_with_wrong_key_is_invalid():
    public = generate_election_keys("g1", 1, 2).share()
    other = generate_election_keys("g2", 2, 2).share()
    assert not replace(public, key=other.key).is_valid()
    assert not replace(public, coefficient_proofs=other.coefficient_proofs).is_valid()
    assert not replace(public, coefficient_proofs=public.coefficient_proofs[:1]).is_valid()


def test_backups_verify():
    guardians = _guardians(3, 2)
    for owner in guardians:
        for other in guardians:
            if owner is other:
                continue
            backup = generate_election_partial_key_backup(
                owner, other.owner_id, other.sequence_order
            )
            assert backup.owner_id == owner.owner_id
            assert backup.designated_id == other.owner_id
            assert verify_election_partial_key_backup(backup)


def test_tampered_backup_fails():
    owner, other = _guardians(2, 2)
    backup = generate_election_partial_key_backup(owner, other.owner_id, 2)
    assert not verify_election_partial_key_backup(
        replace(backup, value=add_q(backup.value, 1))
    )
    assert not verify_election_partial_key_backup(
        replace(backup, designated_sequence_order=3)
    )


def test_joint_key_and_commitment_hash():
    guardians = _guardians(3, 2)
    public_keys = [g.share() for g in guardians]
    joint = combine_election_public_keys(public_keys)
    assert joint == mult_p(*[k.key for k in public_keys])

    expected = hash_elems(
        [c for k in public_keys for c in k.coefficient_commitments]
    )
    assert compute_commitment_hash(public_keys) == expected
    assert compute_commitment_hash(reversed(public_keys)) == expected


def test_seeded_keys_are_reproducible():
    first = generate_election_keys("g1", 1, 2, ElementModQ(77))
    second = generate_election_keys("g1", 1, 2, ElementModQ(77))
    assert first == second


def test_commitment_hash_is_hash_of_nested_list():
    guardians = [
        generate_election_keys(f"guardian-{i}", i, 2, ElementModQ(100 * i))
        for i in (1, 2)
    ]
    public_keys = [g.share() for g in guardians]
    commitments = [c for k in public_keys for c in k.coefficient_commitments]
    # the list is one element: |H(K_10, K_11, K_20, K_21)|
    assert compute_commitment_hash(public_keys) == hash_elems(hash_elems(*commitments))
    assert compute_commitment_hash(public_keys) != hash_elems(*commitments)
