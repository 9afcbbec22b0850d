"""Demo runner walking one small election end to end.

Run this script from the repository root (with the package installed, or
with ``src`` on PYTHONPATH):

    python run_election.py --guardians 3 --quorum 2 --missing 1
"""

import argparse
import logging
from collections import Counter

from eg_core import configure_logging, initialize_parameters
from eg_core.ballot import PlaintextBallot, PlaintextBallotContest, PlaintextBallotSelection
from eg_core.dlog import DiscreteLog
from eg_core.decrypt import (
    compute_compensated_decryption_share,
    compute_decryption_share,
    compute_lagrange_coefficients_for_guardians,
    decrypt_with_shares,
    reconstruct_decryption_share,
)
from eg_core.election import make_ciphertext_election_context
from eg_core.elgamal import elgamal_accumulate
from eg_core.encrypt import EncryptionDevice, EncryptionMediator
from eg_core.guardian import (
    combine_election_public_keys,
    compute_commitment_hash,
    generate_election_keys,
    generate_election_partial_key_backup,
    verify_election_partial_key_backup,
)
from eg_core.manifest import (
    BallotStyle,
    ContestDescription,
    GeopoliticalUnit,
    InternalManifest,
    Manifest,
    SelectionDescription,
    VoteVariationType,
)

log = logging.getLogger("eg_core.demo")

CANDIDATES = ["alice", "bob", "carol"]


def _print_heading(msg: str):
    print()
    print(msg)


def _print_kv(key: str, value: str):
    print(f"  {key}: {value}")


def _short(element) -> str:
    return element.to_hex()[:8] + ".."


def build_manifest() -> Manifest:
    selections = [
        SelectionDescription(f"{name}-selection", name, i + 1)
        for i, name in enumerate(CANDIDATES)
    ]
    contest = ContestDescription(
        "mayor",
        "district-1",
        1,
        VoteVariationType.one_of_m,
        1,
        1,
        "Mayor",
        selections,
    )
    return Manifest(
        "demo-election",
        "general",
        "2026-11-03T00:00:00",
        "2026-11-03T23:59:59",
        contests=[contest],
        ballot_styles=[BallotStyle("style-1", ["district-1"])],
        geopolitical_units=[GeopoliticalUnit("district-1", "District 1", "city")],
    )


def make_ballot(ballot_id: str, choice: str) -> PlaintextBallot:
    return PlaintextBallot(
        ballot_id,
        "style-1",
        [
            PlaintextBallotContest(
                "mayor", [PlaintextBallotSelection(f"{choice}-selection", 1)]
            )
        ],
    )


def decrypt_selection(ciphertext, present, missing, backups, lagrange, qbar, dlog):
    """Threshold-decrypt one tally ciphertext.

    Every share, direct or compensated, must pass its proof; returns None
    as soon as one does not.
    """
    shares = []
    for keys in present:
        share = compute_decryption_share(keys, ciphertext, qbar)
        if not share.is_valid(ciphertext, qbar):
            log.error("bad share from %s", keys.owner_id)
            return None
        shares.append(share.share)
    for absent in missing:
        compensated = []
        for keys in present:
            share = compute_compensated_decryption_share(
                backups[(absent.owner_id, keys.owner_id)], ciphertext, qbar
            )
            if not share.is_valid(ciphertext, qbar):
                log.error(
                    "bad share from %s for %s", keys.owner_id, absent.owner_id
                )
                return None
            compensated.append(share)
        shares.append(reconstruct_decryption_share(compensated, lagrange))
    return decrypt_with_shares(ciphertext, shares, dlog)


def main():
    parser = argparse.ArgumentParser(description="Run a small verifiable election")
    parser.add_argument("--guardians", type=int, default=3)
    parser.add_argument("--quorum", type=int, default=2)
    parser.add_argument(
        "--missing", type=int, default=1, help="guardians absent at decryption"
    )
    parser.add_argument("--prime-option", default="rfc2409_1024")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    if args.guardians - args.missing < args.quorum:
        parser.error("not enough guardians present to reach the quorum")

    configure_logging(args.log_level)
    params = initialize_parameters(args.prime_option)

    _print_heading(f"[Step 1] Group parameters ({params.name})")
    _print_kv("p bits", str(params.large_prime.bit_length()))
    _print_kv("q bits", str(params.small_prime.bit_length()))

    _print_heading("[Step 2] Key ceremony")
    all_keys = [
        generate_election_keys(f"guardian-{i}", i, args.quorum)
        for i in range(1, args.guardians + 1)
    ]
    public_keys = [k.share() for k in all_keys]
    for public_key in public_keys:
        _print_kv(
            public_key.owner_id,
            f"{_short(public_key.key)} valid={public_key.is_valid()}",
        )
    backups = {
        (keys.owner_id, other.owner_id): generate_election_partial_key_backup(
            keys, other.owner_id, other.sequence_order
        )
        for keys in all_keys
        for other in all_keys
        if keys is not other
    }
    verified = sum(verify_election_partial_key_backup(b) for b in backups.values())
    _print_kv("backups verified", f"{verified}/{len(backups)}")

    joint_key = combine_election_public_keys(public_keys)
    manifest = build_manifest()
    internal_manifest = InternalManifest(manifest)
    context = make_ciphertext_election_context(
        args.guardians,
        args.quorum,
        joint_key,
        compute_commitment_hash(public_keys),
        internal_manifest.manifest_hash,
    )
    _print_kv("joint key", _short(joint_key))
    _print_kv("extended base hash", _short(context.crypto_extended_base_hash))

    _print_heading("[Step 3] Ballot encryption")
    device = EncryptionDevice(1, 1, 1234, "polling-place-1")
    mediator = EncryptionMediator(internal_manifest, context, device)
    choices = ["alice", "bob", "alice", "carol", "alice"]
    ballots = []
    for n, choice in enumerate(choices):
        encrypted = mediator.encrypt(make_ballot(f"ballot-{n}", choice))
        ballots.append(encrypted.without_nonce())
        _print_kv(encrypted.object_id, f"code={_short(encrypted.code)}")

    _print_heading("[Step 4] Homomorphic tally")
    totals = {}
    for selection in ballots[0].contests[0].ballot_selections:
        if selection.is_placeholder_selection:
            continue
        totals[selection.object_id] = elgamal_accumulate(
            s.ciphertext
            for b in ballots
            for s in b.contests[0].ballot_selections
            if s.object_id == selection.object_id
        )
    _print_kv("selections tallied", str(len(totals)))

    _print_heading("[Step 5] Threshold decryption")
    present = all_keys[: args.guardians - args.missing]
    missing = all_keys[args.guardians - args.missing :]
    _print_kv("present", ", ".join(k.owner_id for k in present))
    _print_kv("missing", ", ".join(k.owner_id for k in missing) or "none")
    lagrange = compute_lagrange_coefficients_for_guardians(
        {k.owner_id: k.sequence_order for k in present}
    )
    qbar = context.crypto_extended_base_hash

    dlog = DiscreteLog(len(choices))
    results = {}
    for selection_id, ciphertext in totals.items():
        count = decrypt_selection(
            ciphertext, present, missing, backups, lagrange, qbar, dlog
        )
        if count is None:
            print(f"Decryption proof failed for {selection_id}")
            # skip this selection
            continue
        results[selection_id] = count

    _print_heading("[Step 6] Verification")
    expected = Counter(f"{c}-selection" for c in choices)
    for selection_id, count in sorted(results.items()):
        _print_kv(selection_id, str(count))
    ok = len(results) == len(totals) and all(
        results[s] == expected.get(s, 0) for s in results
    )
    print("\n[Step 6] Verification result:", "OK" if ok else "MISMATCH")


if __name__ == "__main__":
    main()
