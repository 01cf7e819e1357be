"""
Tests for the circle-method round-robin scheduler.
"""

from collections import Counter

import pytest

from fixture_engine.models.match import BYE_TEAM_ID
from fixture_engine.services.round_robin import (
    circle_pairings,
    clamp_legs,
    generate_round_robin_schedule,
    round_robin_match_count,
    round_robin_round_count,
)
from tests.conftest import make_teams


def test_four_teams_single_leg():
    matches = generate_round_robin_schedule(["T1", "T2", "T3", "T4"], 1)

    assert len(matches) == 6
    assert sorted({m.round for m in matches}) == [0, 1, 2]
    appearances = Counter()
    for m in matches:
        appearances[m.home_team_id] += 1
        appearances[m.away_team_id] += 1
    assert appearances == {"T1": 3, "T2": 3, "T3": 3, "T4": 3}


def test_four_teams_exact_fixtures():
    """Rotation keeps T1 fixed; home side flips on odd rounds."""
    matches = generate_round_robin_schedule(["T1", "T2", "T3", "T4"], 1)
    fixtures = [(m.round, m.home_team_id, m.away_team_id) for m in matches]
    assert fixtures == [
        (0, "T1", "T4"),
        (0, "T2", "T3"),
        (1, "T3", "T1"),
        (1, "T2", "T4"),
        (2, "T1", "T2"),
        (2, "T3", "T4"),
    ]
    assert matches[0].id == "0-T1-T4"


@pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7, 8, 9, 10])
@pytest.mark.parametrize("legs", [1, 2, 3])
def test_every_pair_meets_legs_times(n, legs):
    teams = make_teams(n)
    matches = generate_round_robin_schedule(teams, legs)

    pairs = Counter(frozenset((m.home_team_id, m.away_team_id)) for m in matches)
    assert len(pairs) == n * (n - 1) // 2
    assert set(pairs.values()) == {legs}
    assert len(matches) == round_robin_match_count(n, legs)


@pytest.mark.parametrize("n", [4, 5, 6, 7, 8])
@pytest.mark.parametrize("legs", [2, 4])
def test_home_away_balanced_over_leg_pairs(n, legs):
    matches = generate_round_robin_schedule(make_teams(n), legs)
    home = Counter(m.home_team_id for m in matches)
    away = Counter(m.away_team_id for m in matches)
    for team in make_teams(n):
        assert home[team] == away[team]


def test_no_team_plays_twice_in_a_round():
    matches = generate_round_robin_schedule(make_teams(8), 2)
    for round_index in {m.round for m in matches}:
        teams = [t for m in matches if m.round == round_index for t in (m.home_team_id, m.away_team_id)]
        assert len(teams) == len(set(teams))


def test_rounds_increase_across_legs():
    matches = generate_round_robin_schedule(make_teams(6), 3)
    rounds = [m.round for m in matches]
    assert rounds == sorted(rounds)
    assert rounds[0] == 0
    assert rounds[-1] == 3 * 5 - 1


def test_odd_roster_skips_bye():
    matches = generate_round_robin_schedule(make_teams(5), 1)
    assert len(matches) == 10
    assert sorted({m.round for m in matches}) == [0, 1, 2, 3, 4]
    assert all(BYE_TEAM_ID not in (m.home_team_id, m.away_team_id) for m in matches)
    # Each round one team sits out
    for round_index in range(5):
        assert len([m for m in matches if m.round == round_index]) == 2


def test_fewer_than_two_teams():
    assert generate_round_robin_schedule([], 1) == []
    assert generate_round_robin_schedule(["T1"], 2) == []


def test_legs_clamped():
    teams = make_teams(4)
    assert len(generate_round_robin_schedule(teams, 0)) == 6
    assert len(generate_round_robin_schedule(teams, -3)) == 6
    assert len(generate_round_robin_schedule(teams, 9)) == 24
    assert clamp_legs(7) == 4
    assert clamp_legs(0) == 1


def test_round_count_helper():
    assert round_robin_round_count(4) == 3
    assert round_robin_round_count(5) == 5
    assert round_robin_round_count(1) == 0


def test_circle_pairings_keeps_pivot():
    rounds = circle_pairings(make_teams(6))
    assert len(rounds) == 5
    assert all(pairs[0][0] == "T1" for pairs in rounds)


def test_no_self_matches():
    for n in range(2, 11):
        for m in generate_round_robin_schedule(make_teams(n), 2):
            assert m.home_team_id != m.away_team_id


def test_deterministic():
    teams = make_teams(7)
    first = [m.model_dump() for m in generate_round_robin_schedule(teams, 2)]
    second = [m.model_dump() for m in generate_round_robin_schedule(teams, 2)]
    assert first == second
