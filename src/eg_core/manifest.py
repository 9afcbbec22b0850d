"""Election manifest: the structure ballots are encrypted against.

The manifest arrives already validated; this module only models the parts
encryption needs and their crypto hashes, and pads each contest with
placeholder selections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Dict, List, Optional

from .errors import InvalidInputError
from .group import ElementModQ
from .hash import hash_elems

log = logging.getLogger(__name__)


class VoteVariationType(Enum):
    one_of_m = "one_of_m"
    approval = "approval"
    borda = "borda"
    cumulative = "cumulative"
    majority = "majority"
    n_of_m = "n_of_m"
    plurality = "plurality"
    proportional = "proportional"
    range = "range"
    rcv = "rcv"
    super_majority = "super_majority"
    other = "other"


@dataclass(frozen=True)
class SelectionDescription:
    """One choice within a contest.

    Attributes
    - object_id: unique within the manifest
    - candidate_id: the candidate this selection votes for
    - sequence_order: position within the contest; also a nonce index
    """

    object_id: str
    candidate_id: str
    sequence_order: int

    def crypto_hash(self) -> ElementModQ:
        return hash_elems(self.object_id, self.sequence_order, self.candidate_id)


@dataclass(frozen=True)
class ContestDescription:
    """Attributes
    - object_id: unique within the manifest
    - electoral_district_id: geopolitical unit the contest belongs to
    - sequence_order: position on the ballot
    - vote_variation: counting method
    - number_elected: how many selections a full vote makes
    - votes_allowed: votes a voter may cast; None means number_elected
    - name: display name
    - ballot_selections: the real selections
    - ballot_title, ballot_subtitle: optional display text
    """

    object_id: str
    electoral_district_id: str
    sequence_order: int
    vote_variation: VoteVariationType
    number_elected: int
    votes_allowed: Optional[int]
    name: str
    ballot_selections: List[SelectionDescription] = field(default_factory=list)
    ballot_title: Optional[str] = None
    ballot_subtitle: Optional[str] = None

    def crypto_hash(self) -> ElementModQ:
        return hash_elems(
            self.object_id,
            self.sequence_order,
            self.electoral_district_id,
            self.vote_variation.name,
            self.ballot_title,
            self.ballot_subtitle,
            self.name,
            self.number_elected,
            self.votes_allowed,
            self.ballot_selections,
        )


@dataclass(frozen=True)
class ContestDescriptionWithPlaceholders:
    """A contest plus exactly ``number_elected`` placeholder selections."""

    contest: ContestDescription
    placeholder_selections: List[SelectionDescription] = field(default_factory=list)

    @property
    def object_id(self) -> str:
        return self.contest.object_id

    @property
    def sequence_order(self) -> int:
        return self.contest.sequence_order

    @property
    def number_elected(self) -> int:
        return self.contest.number_elected

    @property
    def votes_allowed(self) -> Optional[int]:
        return self.contest.votes_allowed

    @property
    def ballot_selections(self) -> List[SelectionDescription]:
        return self.contest.ballot_selections

    def crypto_hash(self) -> ElementModQ:
        return self.contest.crypto_hash()

    def is_valid(self) -> bool:
        return len(self.placeholder_selections) == self.contest.number_elected

    def selection_for(self, selection_id: str) -> Optional[SelectionDescription]:
        for selection in self.contest.ballot_selections:
            if selection.object_id == selection_id:
                return selection
        return None


def generate_placeholder_selection_from(
    contest: ContestDescription, use_sequence_id: Optional[int] = None
) -> Optional[SelectionDescription]:
    """A placeholder with a sequence order unused by the contest.

    Returns None when ``use_sequence_id`` collides with a real selection.
    """
    sequence_ids = [s.sequence_order for s in contest.ballot_selections]
    if use_sequence_id is None:
        use_sequence_id = max(sequence_ids, default=0) + 1
    elif use_sequence_id in sequence_ids:
        log.warning(
            "placeholder sequence %d already used in contest %s",
            use_sequence_id,
            contest.object_id,
        )
        return None
    placeholder_id = f"{contest.object_id}-{use_sequence_id}"
    return SelectionDescription(
        f"{placeholder_id}-placeholder", f"{placeholder_id}-candidate", use_sequence_id
    )


def generate_placeholder_selections_from(
    contest: ContestDescription, count: int
) -> List[SelectionDescription]:
    """``count`` placeholders numbered upward from the highest sequence order."""
    max_sequence_order = max(
        (s.sequence_order for s in contest.ballot_selections), default=0
    )
    placeholders = []
    for i in range(count):
        placeholder = generate_placeholder_selection_from(
            contest, max_sequence_order + 1 + i
        )
        if placeholder is None:
            raise InvalidInputError(f"cannot generate placeholder for {contest.object_id}")
        placeholders.append(placeholder)
    return placeholders


def contest_description_with_placeholders_from(
    contest: ContestDescription,
) -> ContestDescriptionWithPlaceholders:
    return ContestDescriptionWithPlaceholders(
        contest, generate_placeholder_selections_from(contest, contest.number_elected)
    )


@dataclass(frozen=True)
class BallotStyle:
    object_id: str
    geopolitical_unit_ids: List[str] = field(default_factory=list)
    party_ids: List[str] = field(default_factory=list)
    image_uri: Optional[str] = None

    def crypto_hash(self) -> ElementModQ:
        return hash_elems(
            self.object_id, self.geopolitical_unit_ids, self.party_ids, self.image_uri
        )


@dataclass(frozen=True)
class GeopoliticalUnit:
    object_id: str
    name: str
    type: str = "unknown"

    def crypto_hash(self) -> ElementModQ:
        return hash_elems(self.object_id, self.name, self.type, None)


@dataclass(frozen=True)
class Manifest:
    """Attributes
    - election_scope_id: identifies the election
    - election_type: e.g. "general" or "primary"
    - start_date, end_date: ISO-8601 strings
    - contests: ordered contest descriptions
    - ballot_styles: which contests appear on which ballots
    - geopolitical_units: districts referenced by contests and styles
    - name: optional display name
    """

    election_scope_id: str
    election_type: str
    start_date: str
    end_date: str
    contests: List[ContestDescription] = field(default_factory=list)
    ballot_styles: List[BallotStyle] = field(default_factory=list)
    geopolitical_units: List[GeopoliticalUnit] = field(default_factory=list)
    name: Optional[str] = None

    def crypto_hash(self) -> ElementModQ:
        return hash_elems(
            self.election_scope_id,
            self.election_type,
            self.start_date,
            self.end_date,
            self.name,
            None,
            self.geopolitical_units,
            [],
            self.contests,
            self.ballot_styles,
        )


class InternalManifest:
    """A manifest whose contests carry their placeholder selections."""

    def __init__(self, manifest: Manifest):
        self.manifest = manifest
        self.manifest_hash = manifest.crypto_hash()
        self.contests: Dict[str, ContestDescriptionWithPlaceholders] = {
            contest.object_id: contest_description_with_placeholders_from(contest)
            for contest in manifest.contests
        }

    def get_contest(self, contest_id: str) -> Optional[ContestDescriptionWithPlaceholders]:
        return self.contests.get(contest_id)

    def get_ballot_style(self, style_id: str) -> Optional[BallotStyle]:
        for style in self.manifest.ballot_styles:
            if style.object_id == style_id:
                return style
        return None

    def get_contests_for_style(
        self, style_id: str
    ) -> List[ContestDescriptionWithPlaceholders]:
        """Contests whose district is one of the style's geopolitical units."""
        style = self.get_ballot_style(style_id)
        if style is None or not style.geopolitical_unit_ids:
            return []
        wanted = set(style.geopolitical_unit_ids)
        return [
            c
            for c in self.contests.values()
            if c.contest.electoral_district_id in wanted
        ]
