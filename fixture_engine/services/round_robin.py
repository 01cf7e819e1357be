"""
Round Robin Scheduler

Circle method with a fixed pivot. The roster is split into a left half and a
reversed right half; each round pairs left[i] with right[i], then the first right
team moves to left[1] and the last left team moves to the end of right.

Odd rosters get a BYE entry; pairings against BYE are skipped, never emitted.
"""

import logging
from typing import List, Sequence, Tuple

from fixture_engine.config import MAX_LEGS, MIN_LEGS
from fixture_engine.models.match import BYE_TEAM_ID, Match

logger = logging.getLogger(__name__)


def clamp_legs(legs: int) -> int:
    """Clamp a legs setting into MIN_LEGS..MAX_LEGS."""
    return max(MIN_LEGS, min(MAX_LEGS, int(legs)))


def round_robin_round_count(team_count: int) -> int:
    """
    Return number of RR rounds per leg for n teams.
    Even n: n-1 rounds. Odd n: n rounds (with BYE).
    """
    if team_count < 2:
        return 0
    if team_count % 2 == 0:
        return team_count - 1
    return team_count


def round_robin_match_count(team_count: int, legs: int = 1) -> int:
    """Total fixtures: legs * C(n, 2)."""
    if team_count < 2:
        return 0
    return clamp_legs(legs) * (team_count * (team_count - 1)) // 2


def circle_pairings(team_ids: Sequence[str]) -> List[List[Tuple[str, str]]]:
    """
    Per-round (left, right) pairs for one leg. BYE pairs are included.
    """
    teams = list(team_ids)
    if len(teams) % 2 == 1:
        teams.append(BYE_TEAM_ID)

    count = len(teams)
    half = count // 2
    left = teams[:half]
    right = list(reversed(teams[half:]))

    rounds: List[List[Tuple[str, str]]] = []
    for _ in range(count - 1):
        rounds.append(list(zip(left, right)))
        # Rotate: left[0] stays, first of right -> left[1], last of left -> end of right
        move_from_left = left.pop()
        move_from_right = right.pop(0)
        left.insert(1, move_from_right)
        right.append(move_from_left)

    return rounds


def generate_round_robin_schedule(team_ids: Sequence[str], legs: int = 1) -> List[Match]:
    """
    Generate a round-robin fixture list.

    Args:
        team_ids: Team IDs in any order (fewer than 2 returns [])
        legs: Number of full passes, clamped to 1..4

    Returns:
        Matches ordered by round. Leg L of round r gets round index
        r + L * rounds_per_leg. The home side is the left team on even round
        indices and the right team on odd ones; rounds_per_leg is always odd,
        so every second leg reverses the home side of each pairing.
    """
    if len(team_ids) < 2:
        return []

    legs = clamp_legs(legs)
    rounds = circle_pairings(team_ids)
    rounds_per_leg = len(rounds)

    matches: List[Match] = []
    for leg in range(legs):
        for round_index, pairs in enumerate(rounds):
            global_round = round_index + leg * rounds_per_leg
            for left_team, right_team in pairs:
                if left_team == BYE_TEAM_ID or right_team == BYE_TEAM_ID:
                    continue
                if global_round % 2 == 0:
                    home, away = left_team, right_team
                else:
                    home, away = right_team, left_team
                matches.append(
                    Match(
                        id=f"{global_round}-{home}-{away}",
                        home_team_id=home,
                        away_team_id=away,
                        round=global_round,
                    )
                )

    logger.debug(
        "Round robin: %d teams, %d legs, %d rounds, %d matches",
        len(team_ids),
        legs,
        rounds_per_leg * legs,
        len(matches),
    )
    return matches
