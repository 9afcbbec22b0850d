from dataclasses import replace

from eg_core.elgamal import elgamal_keypair_from_secret
from eg_core.group import ElementModQ, add_q, g_pow_p, int_to_q
from eg_core.proof import ProofUsage
from eg_core.schnorr import make_schnorr_proof


def test_valid_proof(keypair):
    proof = make_schnorr_proof(keypair, ElementModQ(999))
    assert proof.usage == ProofUsage.SecretValue
    result = proof.is_valid()
    assert result
    assert result.failures == []


def test_commitment_can_be_derived(keypair):
    proof = make_schnorr_proof(keypair, ElementModQ(999))
    compact = proof.without_commitment()
    assert compact.commitment is None
    assert compact.get_commitment() == proof.commitment
    assert compact.is_valid()


def test_tampered_response_fails(keypair):
    proof = make_schnorr_proof(keypair, ElementModQ(999))
    bad = replace(proof, response=add_q(proof.response, 1))
    result = bad.is_valid()
    assert not result
    assert "valid_response" in result.failures


def test_wrong_public_key_fails(keypair):
    proof = make_schnorr_proof(keypair, ElementModQ(999))
    other = elgamal_keypair_from_secret(int_to_q(31337))
    bad = replace(proof, public_key=other.public_key)
    assert not bad.is_valid()


def test_wrong_commitment_fails(keypair):
    proof = make_schnorr_proof(keypair, ElementModQ(999))
    bad = replace(proof, commitment=g_pow_p(1000))
    result = bad.is_valid()
    assert "valid_challenge" in result.failures
