"""
Groups With Divisions Scheduler

Teams are split into groups, each group plays its own round robin, and group
finishing positions feed two parallel knockout brackets:
    Division 1: group winners and runners-up
    Division 2: 3rd and 4th placed teams (only with at least 4 slots)

Round numbering is shared across groups: round 0 of every group is global round
0, so "Round 1" on the fixture calendar means each group's first fixture. Group
rounds are never offset against each other. Playoff rounds start after the
latest group round.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from fixture_engine.models.bracket import (
    GroupPlacing,
    PlayoffBracket,
    Resolved,
    SeedSlot,
)
from fixture_engine.models.match import Match
from fixture_engine.models.standing import TeamStanding
from fixture_engine.services.bracket_generator import create_playoff_matches, generate_playoff_brackets
from fixture_engine.services.round_robin import generate_round_robin_schedule
from fixture_engine.services.standings import build_league_table

logger = logging.getLogger(__name__)

DIVISION_1_POSITIONS = (1, 2)
DIVISION_2_POSITIONS = (3, 4)
MIN_DIVISION_2_SLOTS = 4
MIN_BRACKET_SLOTS = 2


@dataclass
class GroupsWithDivisionsSchedule:
    groups: List[List[str]] = field(default_factory=list)
    group_matches: List[Match] = field(default_factory=list)
    playoff_round_offset: int = 0
    division_brackets: Dict[int, List[PlayoffBracket]] = field(default_factory=dict)
    division_matches: List[Match] = field(default_factory=list)

    @property
    def matches(self) -> List[Match]:
        return [*self.group_matches, *self.division_matches]


def partition_groups(
    team_ids: Sequence[str],
    number_of_groups: int,
    teams_per_group: int,
    rng: Optional[random.Random] = None,
) -> List[List[str]]:
    """
    Shuffle teams and slice them into groups of teams_per_group.

    Short rosters leave trailing groups undersized (empty groups are dropped);
    teams beyond number_of_groups * teams_per_group are left out.
    """
    rng = rng or random.Random()
    slots = number_of_groups * teams_per_group
    if len(team_ids) < slots:
        logger.warning(
            "Only %d teams for %d groups of %d; trailing groups will be undersized",
            len(team_ids),
            number_of_groups,
            teams_per_group,
        )
    elif len(team_ids) > slots:
        logger.warning(
            "%d teams for %d group slots; %d teams left out",
            len(team_ids),
            slots,
            len(team_ids) - slots,
        )

    shuffled = list(team_ids)
    rng.shuffle(shuffled)

    groups: List[List[str]] = []
    for i in range(number_of_groups):
        group = shuffled[i * teams_per_group:(i + 1) * teams_per_group]
        if group:
            groups.append(group)
    return groups


def _group_matches(groups: Sequence[Sequence[str]], group_rounds: int) -> List[Match]:
    legs = max(1, min(2, group_rounds))
    matches: List[Match] = []
    for index, group in enumerate(groups, start=1):
        for match in generate_round_robin_schedule(group, legs):
            # No round offset: all groups share the same round timeline
            match.id = f"group-{index}-{match.id}"
            match.group_index = index
            match.is_playoff = False
            matches.append(match)
    return matches


def division_qualifiers(group_count: int, teams_per_group: int, positions: Sequence[int]) -> List[GroupPlacing]:
    """
    Qualifier slots in seeding order: every group's first listed position, then
    every group's next one. With 2 groups the Division 1 semis become
    group-1-1st v group-2-2nd and group-2-1st v group-1-2nd.
    """
    return [
        GroupPlacing(group_index, position)
        for position in positions
        if position <= teams_per_group
        for group_index in range(1, group_count + 1)
    ]


def _placing_ref(ref, qualifiers: Sequence[GroupPlacing]):
    if isinstance(ref, SeedSlot) and 1 <= ref.seed <= len(qualifiers):
        return qualifiers[ref.seed - 1]
    return ref


def build_division_bracket(qualifiers: Sequence[GroupPlacing]) -> List[PlayoffBracket]:
    """Seeded bracket whose seed slots are group placings."""
    brackets = generate_playoff_brackets([q.token for q in qualifiers])
    for bracket in brackets:
        for entry in bracket.matches:
            bye = entry.is_bye
            entry.home = _placing_ref(entry.home, qualifiers)
            entry.away = entry.home if bye else _placing_ref(entry.away, qualifiers)
            if bye:
                entry.winner = entry.home.token
    return brackets


def generate_groups_with_divisions_schedule(
    team_ids: Sequence[str],
    number_of_groups: int,
    teams_per_group: int,
    group_rounds: int = 1,
    existing_groups: Optional[Sequence[Sequence[str]]] = None,
    rng: Optional[random.Random] = None,
) -> GroupsWithDivisionsSchedule:
    """
    Group stage plus Division 1 / Division 2 knockout brackets.

    Args:
        team_ids: All teams (ignored for grouping when existing_groups is given)
        number_of_groups: Groups to create
        teams_per_group: Target group size
        group_rounds: Legs per group round robin (1 or 2)
        existing_groups: Organizer-edited groups, used as-is
        rng: Shuffle source for grouping

    Returns:
        GroupsWithDivisionsSchedule. Division matches have round shifted past the
        group stage and a zero-based playoff_round within their division.
    """
    if existing_groups:
        groups = [list(group) for group in existing_groups if group]
    else:
        groups = partition_groups(team_ids, number_of_groups, teams_per_group, rng)

    group_matches = _group_matches(groups, group_rounds)
    offset = max((m.round for m in group_matches), default=-1) + 1

    group_size = max((len(g) for g in groups), default=0)
    schedule = GroupsWithDivisionsSchedule(
        groups=groups,
        group_matches=group_matches,
        playoff_round_offset=offset,
    )

    for division, positions, minimum in (
        (1, DIVISION_1_POSITIONS, MIN_BRACKET_SLOTS),
        (2, DIVISION_2_POSITIONS, MIN_DIVISION_2_SLOTS),
    ):
        qualifiers = division_qualifiers(len(groups), group_size, positions)
        if len(qualifiers) < minimum:
            logger.info(
                "Division %d skipped: %d qualifier slots (need %d)", division, len(qualifiers), minimum
            )
            continue
        brackets = build_division_bracket(qualifiers)
        schedule.division_brackets[division] = brackets
        for match in create_playoff_matches(brackets, round_offset=offset, id_prefix=f"div{division}-"):
            match.division = division
            schedule.division_matches.append(match)

    logger.info(
        "Groups with divisions: %d groups, %d group matches, divisions %s from round %d",
        len(groups),
        len(group_matches),
        sorted(schedule.division_brackets),
        offset,
    )
    return schedule


def reconstruct_groups(
    matches: Sequence[Match],
    number_of_groups: int,
    teams_per_group: int,
    team_ids: Sequence[str],
) -> List[List[str]]:
    """
    Rebuild group membership from group_index tags on group matches.

    A group with no tagged matches takes the next teams_per_group teams from
    team_ids that no tagged group already holds.
    """
    tagged: Dict[int, List[str]] = {}
    for match in matches:
        if match.is_playoff or not match.group_index:
            continue
        members = tagged.setdefault(match.group_index, [])
        for team_id in (match.home_team_id, match.away_team_id):
            if team_id not in members:
                members.append(team_id)

    placed = {team_id for members in tagged.values() for team_id in members}
    unplaced = [team_id for team_id in team_ids if team_id not in placed]

    groups: List[List[str]] = []
    for index in range(1, number_of_groups + 1):
        if index in tagged:
            groups.append(tagged[index])
        else:
            groups.append(unplaced[:teams_per_group])
            unplaced = unplaced[teams_per_group:]
    return groups


def calculate_group_tables(
    matches: Sequence[Match],
    groups: Sequence[Sequence[str]],
) -> Dict[int, List[TeamStanding]]:
    """Standings per 1-based group index, from that group's own matches."""
    tables: Dict[int, List[TeamStanding]] = {}
    for index, group in enumerate(groups, start=1):
        members = set(group)
        group_matches = [
            m
            for m in matches
            if not m.is_playoff
            and m.group_index == index
            and m.home_team_id in members
            and m.away_team_id in members
        ]
        tables[index] = build_league_table(group_matches, list(group))
    return tables


def resolve_group_qualifiers(
    brackets: Sequence[PlayoffBracket],
    group_tables: Dict[int, List[TeamStanding]],
) -> int:
    """
    Rewrite group placings in place with the teams holding those positions.
    Returns the number of slots resolved.
    """

    def resolve(ref):
        if not isinstance(ref, GroupPlacing):
            return ref
        table = group_tables.get(ref.group_index, [])
        for standing in table:
            if standing.position == ref.position:
                return Resolved(standing.team_id)
        return ref

    resolved = 0
    for bracket in brackets:
        for entry in bracket.matches:
            bye = entry.is_bye
            home, away = resolve(entry.home), resolve(entry.away)
            resolved += (home != entry.home) + (away != entry.away and not bye)
            entry.home, entry.away = home, away
            if bye and isinstance(home, Resolved):
                entry.winner = home.team_id
    return resolved

