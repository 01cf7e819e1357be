"""
Standings Calculator

Per-team aggregation from match results plus the table sort.

Only complete matches count: both home_goals and away_goals present. A match
with one score entered is treated as not yet played.

Tie-break chain (first difference wins):
    points desc, goal difference desc, goals for desc,
    head-to-head points desc (a team with a value ranks above one without),
    head-to-head goal difference desc (same),
    disciplinary points asc,
    coin toss

The coin toss draws one lot per team from an injected random.Random, so the
comparison stays consistent within a sort and reproducible for a seeded rng.
Without an rng the last resort is team id order.
"""

import logging
import random
from functools import cmp_to_key
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from fixture_engine.models.match import Match
from fixture_engine.models.standing import TeamStanding

logger = logging.getLogger(__name__)

POINTS_WIN = 3
POINTS_DRAW = 1


def calculate_team_standings(
    matches: Iterable[Match],
    team_id: str,
    disciplinary_points: int = 0,
) -> TeamStanding:
    """Aggregate one team's record from the complete matches it played in."""
    standing = TeamStanding(team_id=team_id, disciplinary_points=disciplinary_points)

    for match in matches:
        if not match.involves(team_id) or not match.is_complete:
            continue
        if match.home_team_id == team_id:
            goals_for, goals_against = match.home_goals, match.away_goals
        else:
            goals_for, goals_against = match.away_goals, match.home_goals

        standing.played += 1
        standing.goals_for += goals_for
        standing.goals_against += goals_against
        if goals_for > goals_against:
            standing.won += 1
        elif goals_for < goals_against:
            standing.lost += 1
        else:
            standing.drawn += 1

    standing.goal_difference = standing.goals_for - standing.goals_against
    standing.points = POINTS_WIN * standing.won + POINTS_DRAW * standing.drawn
    return standing


def _compare_desc(a: Optional[int], b: Optional[int]) -> int:
    # A missing value ranks below any present one
    if a == b:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    return -1 if a > b else 1


def _comparator(lots: Mapping[str, float]):
    def compare(a: TeamStanding, b: TeamStanding) -> int:
        for x, y in (
            (a.points, b.points),
            (a.goal_difference, b.goal_difference),
            (a.goals_for, b.goals_for),
            (a.head_to_head_points, b.head_to_head_points),
            (a.head_to_head_goal_difference, b.head_to_head_goal_difference),
            # Fewer disciplinary points ranks higher
            (-a.disciplinary_points, -b.disciplinary_points),
        ):
            result = _compare_desc(x, y)
            if result:
                return result
        if lots:
            if lots[a.team_id] != lots[b.team_id]:
                logger.info("Coin toss separates %s and %s", a.team_id, b.team_id)
                return -1 if lots[a.team_id] < lots[b.team_id] else 1
        if a.team_id == b.team_id:
            return 0
        return -1 if a.team_id < b.team_id else 1

    return compare


def sort_teams_by_standings(
    standings: Sequence[TeamStanding],
    rng: Optional[random.Random] = None,
) -> List[TeamStanding]:
    """
    Sort standings by the tie-break chain and assign 1-based positions.

    Args:
        standings: Unsorted standings (position is overwritten)
        rng: Source for the coin toss; None falls back to team id order

    Returns:
        New list in table order
    """
    lots: Dict[str, float] = {}
    if rng is not None:
        # Draw in team id order so the draw does not depend on input order
        for team_id in sorted({s.team_id for s in standings}):
            lots[team_id] = rng.random()

    ordered = sorted(standings, key=cmp_to_key(_comparator(lots)))
    for position, standing in enumerate(ordered, start=1):
        standing.position = position
    return ordered


def calculate_head_to_head(matches: Iterable[Match], team_ids: Sequence[str]) -> Dict[str, TeamStanding]:
    """Mini-table over matches played only among team_ids."""
    members = set(team_ids)
    mini = [m for m in matches if m.home_team_id in members and m.away_team_id in members]
    return {team_id: calculate_team_standings(mini, team_id) for team_id in team_ids}


def build_league_table(
    matches: Sequence[Match],
    team_ids: Sequence[str],
    disciplinary: Optional[Mapping[str, int]] = None,
    rng: Optional[random.Random] = None,
    include_playoffs: bool = False,
) -> List[TeamStanding]:
    """
    Full table for team_ids.

    Playoff matches are left out unless include_playoffs is set. Head-to-head
    values are filled for every set of two or more teams level on points.
    """
    disciplinary = disciplinary or {}
    counted = [m for m in matches if include_playoffs or not m.is_playoff]

    standings = [
        calculate_team_standings(counted, team_id, disciplinary.get(team_id, 0)) for team_id in team_ids
    ]

    by_points: Dict[int, List[TeamStanding]] = {}
    for standing in standings:
        by_points.setdefault(standing.points, []).append(standing)
    for level in by_points.values():
        if len(level) < 2:
            continue
        mini = calculate_head_to_head(counted, [s.team_id for s in level])
        for standing in level:
            standing.head_to_head_points = mini[standing.team_id].points
            standing.head_to_head_goal_difference = mini[standing.team_id].goal_difference

    return sort_teams_by_standings(standings, rng=rng)


def table_order(standings: Sequence[TeamStanding]) -> List[str]:
    """Team ids in position order, the input populate_playoff_brackets expects."""
    return [s.team_id for s in sorted(standings, key=lambda s: s.position)]


def eliminated_teams(matches: Iterable[Match]) -> Set[str]:
    """Losers of complete, decisive playoff matches."""
    eliminated: Set[str] = set()
    for match in matches:
        if not match.is_playoff or not match.is_complete:
            continue
        if match.home_team_id == match.away_team_id:
            continue
        if match.home_goals > match.away_goals:
            eliminated.add(match.away_team_id)
        elif match.home_goals < match.away_goals:
            eliminated.add(match.home_team_id)
    return eliminated
