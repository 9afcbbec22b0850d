import pytest

from eg_core.constants import get_parameters
from eg_core.errors import InvalidInputError
from eg_core.elgamal import (
    elgamal_accumulate,
    elgamal_add,
    elgamal_combine_public_keys,
    elgamal_encrypt,
    elgamal_keypair_from_secret,
    elgamal_keypair_random,
)
from eg_core.group import (
    ONE_MOD_Q,
    ZERO_MOD_Q,
    ElementModQ,
    add_q,
    g_pow_p,
    int_to_q,
    pow_p,
)


def test_keypair_from_secret():
    assert elgamal_keypair_from_secret(ZERO_MOD_Q) is None
    assert elgamal_keypair_from_secret(ONE_MOD_Q) is None
    kp = elgamal_keypair_from_secret(ElementModQ(2))
    assert kp.public_key == g_pow_p(2)
    random_kp = elgamal_keypair_random()
    assert random_kp.secret_key.elem >= 2
    assert random_kp.public_key.is_valid_residue()


def test_encrypt_decrypt(keypair):
    for m, nonce in ((0, 5), (1, 6), (42, 7)):
        ct = elgamal_encrypt(m, ElementModQ(nonce), keypair.public_key)
        assert ct.is_valid_residue()
        assert ct.decrypt(keypair.secret_key) == m
        assert ct.decrypt_known_nonce(keypair.public_key, ElementModQ(nonce)) == m


def test_encryption_is_deterministic_in_nonce(keypair):
    a = elgamal_encrypt(1, ElementModQ(9), keypair.public_key)
    b = elgamal_encrypt(1, ElementModQ(9), keypair.public_key)
    c = elgamal_encrypt(1, ElementModQ(10), keypair.public_key)
    assert a == b
    assert a != c
    assert a.crypto_hash() == b.crypto_hash()


def test_encrypt_rejects_bad_input(keypair):
    with pytest.raises(InvalidInputError):
        elgamal_encrypt(-1, ElementModQ(3), keypair.public_key)
    with pytest.raises(InvalidInputError):
        elgamal_encrypt(1, ZERO_MOD_Q, keypair.public_key)
    too_big = get_parameters().small_prime
    assert elgamal_encrypt(too_big, ElementModQ(3), keypair.public_key) is None


def test_homomorphic_addition(keypair):
    cts = [
        elgamal_encrypt(m, ElementModQ(100 + m), keypair.public_key) for m in (3, 4, 0, 1)
    ]
    total = elgamal_add(*cts)
    assert total.decrypt(keypair.secret_key) == 8
    assert elgamal_accumulate(iter(cts)) == total
    # the nonces add as well
    nonce_sum = add_q(103, 104, 100, 101)
    assert total.decrypt_known_nonce(keypair.public_key, nonce_sum) == 8
    with pytest.raises(InvalidInputError):
        elgamal_add()


def test_combined_keys_decrypt_with_summed_secrets():
    first = elgamal_keypair_from_secret(int_to_q(1111))
    second = elgamal_keypair_from_secret(int_to_q(2222))
    joint = elgamal_combine_public_keys([first.public_key, second.public_key])
    ct = elgamal_encrypt(5, ElementModQ(77), joint)
    assert ct.decrypt(add_q(first.secret_key, second.secret_key)) == 5
    partials = [ct.partial_decrypt(k.secret_key) for k in (first, second)]
    assert partials[0] == pow_p(ct.pad, first.secret_key)
