from eg_core.group import ElementModQ
from eg_core.hash import hash_elems
from eg_core.tracker import get_hash_for_device, get_rotating_tracker_hash, utc_timestamp


def test_device_hash():
    assert get_hash_for_device(1, 2, 3, "here") == hash_elems(1, 2, 3, "here")
    assert get_hash_for_device(1, 2, 3, "here") != get_hash_for_device(1, 2, 3, "there")


def test_three_ballot_chain():
    device = get_hash_for_device(7, 1, 99, "precinct-12")
    ballot_hashes = [hash_elems("ballot", i) for i in range(3)]
    codes = []
    previous = device
    for i, ballot_hash in enumerate(ballot_hashes):
        code = get_rotating_tracker_hash(previous, 1000 + i, ballot_hash)
        assert code == hash_elems(previous, 1000 + i, ballot_hash)
        codes.append(code)
        previous = code
    assert len(set(codes)) == 3

    # changing the first ballot changes every later code
    altered = get_rotating_tracker_hash(device, 1000, hash_elems("other"))
    assert get_rotating_tracker_hash(altered, 1001, ballot_hashes[1]) != codes[1]


def test_timestamp_is_part_of_the_code():
    seed = ElementModQ(1)
    ballot_hash = ElementModQ(2)
    assert get_rotating_tracker_hash(seed, 1, ballot_hash) != get_rotating_tracker_hash(
        seed, 2, ballot_hash
    )
    assert utc_timestamp() > 1_600_000_000
