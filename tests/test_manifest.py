from dataclasses import replace

from eg_core.hash import hash_elems
from eg_core.manifest import (
    ContestDescriptionWithPlaceholders,
    InternalManifest,
    SelectionDescription,
    contest_description_with_placeholders_from,
    generate_placeholder_selection_from,
    generate_placeholder_selections_from,
)


def test_selection_hash():
    selection = SelectionDescription("s1", "c1", 4)
    assert selection.crypto_hash() == hash_elems("s1", 4, "c1")


def test_contest_hash_covers_selections(manifest):
    contest = manifest.contests[0]
    changed = replace(
        contest, ballot_selections=contest.ballot_selections[:2]
    )
    assert contest.crypto_hash() != changed.crypto_hash()
    assert contest.crypto_hash() == replace(contest).crypto_hash()


def test_placeholders(manifest):
    council = manifest.contests[1]
    placeholders = generate_placeholder_selections_from(council, 2)
    assert [p.sequence_order for p in placeholders] == [4, 5]
    assert placeholders[0].object_id == "council-4-placeholder"
    assert placeholders[0].candidate_id == "council-4-candidate"

    with_placeholders = contest_description_with_placeholders_from(council)
    assert with_placeholders.is_valid()
    assert with_placeholders.number_elected == 2
    assert with_placeholders.object_id == "council"
    assert with_placeholders.crypto_hash() == council.crypto_hash()
    assert not ContestDescriptionWithPlaceholders(council, placeholders[:1]).is_valid()


def test_placeholder_collision(manifest):
    mayor = manifest.contests[0]
    assert generate_placeholder_selection_from(mayor, 2) is None
    assert generate_placeholder_selection_from(mayor).sequence_order == 4


def test_placeholders_skip_past_gaps(manifest):
    mayor = manifest.contests[0]
    gapped = replace(
        mayor,
        ballot_selections=mayor.ballot_selections
        + [SelectionDescription("late-selection", "late", 7)],
    )
    placeholders = generate_placeholder_selections_from(gapped, 1)
    assert placeholders[0].sequence_order == 8
    assert generate_placeholder_selections_from(mayor, 0) == []


def test_selection_for(internal_manifest):
    mayor = internal_manifest.get_contest("mayor")
    assert mayor.selection_for("bob-selection").candidate_id == "bob"
    assert mayor.selection_for("mayor-4-placeholder") is None
    assert internal_manifest.get_contest("nope") is None


def test_internal_manifest(manifest, internal_manifest):
    assert internal_manifest.manifest_hash == manifest.crypto_hash()
    assert all(c.is_valid() for c in internal_manifest.contests.values())
    style_1 = [c.object_id for c in internal_manifest.get_contests_for_style("style-1")]
    style_2 = [c.object_id for c in internal_manifest.get_contests_for_style("style-2")]
    assert style_1 == ["mayor", "council"]
    assert style_2 == ["mayor", "council", "schools"]
    assert internal_manifest.get_contests_for_style("missing") == []
    assert internal_manifest.get_ballot_style("missing") is None


def test_manifest_hash_changes_with_contests(manifest):
    assert manifest.crypto_hash() != replace(manifest, contests=manifest.contests[:1]).crypto_hash()
    assert InternalManifest(manifest).manifest_hash == InternalManifest(manifest).manifest_hash
