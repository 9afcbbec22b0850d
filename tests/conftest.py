import os
import sys

import pytest


# Ensure repository src directory and root scripts are on sys.path for tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


from eg_core.config import override_settings  # noqa: E402
from eg_core.elgamal import elgamal_keypair_from_secret  # noqa: E402
from eg_core.group import int_to_q  # noqa: E402
from eg_core.manifest import (  # noqa: E402
    BallotStyle,
    ContestDescription,
    GeopoliticalUnit,
    InternalManifest,
    Manifest,
    SelectionDescription,
    VoteVariationType,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    override_settings(None)
    yield
    override_settings(None)


@pytest.fixture
def keypair():
    return elgamal_keypair_from_secret(int_to_q(424242))


def make_manifest():
    mayor = ContestDescription(
        "mayor",
        "district-1",
        1,
        VoteVariationType.one_of_m,
        1,
        1,
        "Mayor",
        [
            SelectionDescription("alice-selection", "alice", 1),
            SelectionDescription("bob-selection", "bob", 2),
            SelectionDescription("carol-selection", "carol", 3),
        ],
    )
    council = ContestDescription(
        "council",
        "district-1",
        2,
        VoteVariationType.n_of_m,
        2,
        2,
        "City Council",
        [
            SelectionDescription("dan-selection", "dan", 1),
            SelectionDescription("erin-selection", "erin", 2),
            SelectionDescription("frank-selection", "frank", 3),
        ],
    )
    schools = ContestDescription(
        "schools",
        "district-2",
        3,
        VoteVariationType.one_of_m,
        1,
        1,
        "School Board",
        [
            SelectionDescription("gina-selection", "gina", 1),
            SelectionDescription("hal-selection", "hal", 2),
        ],
    )
    return Manifest(
        "test-election",
        "general",
        "2026-11-03T00:00:00",
        "2026-11-03T23:59:59",
        contests=[mayor, council, schools],
        ballot_styles=[
            BallotStyle("style-1", ["district-1"]),
            BallotStyle("style-2", ["district-1", "district-2"]),
        ],
        geopolitical_units=[
            GeopoliticalUnit("district-1", "District 1", "city"),
            GeopoliticalUnit("district-2", "District 2", "school"),
        ],
    )


@pytest.fixture
def manifest():
    return make_manifest()


@pytest.fixture
def internal_manifest(manifest):
    return InternalManifest(manifest)
