"""
Tests for team standings aggregation and the tie-break sort.
"""

import itertools
import random

from fixture_engine.models.match import Match
from fixture_engine.models.standing import TeamStanding
from fixture_engine.services.standings import (
    build_league_table,
    calculate_head_to_head,
    calculate_team_standings,
    eliminated_teams,
    sort_teams_by_standings,
    table_order,
)


def _match(home, away, home_goals=None, away_goals=None, **kwargs):
    return Match(
        id=f"{home}-{away}",
        home_team_id=home,
        away_team_id=away,
        home_goals=home_goals,
        away_goals=away_goals,
        **kwargs,
    )


def _standing(team_id, **kwargs):
    return TeamStanding(team_id=team_id, **kwargs)


class TestCalculateTeamStandings:
    def test_win_and_draw(self):
        matches = [_match("T1", "T2", 2, 0), _match("T1", "T3", 1, 1)]

        s = calculate_team_standings(matches, "T1")

        assert (s.played, s.won, s.drawn, s.lost) == (2, 1, 1, 0)
        assert (s.goals_for, s.goals_against, s.goal_difference) == (3, 1, 2)
        assert s.points == 4

    def test_away_perspective(self):
        s = calculate_team_standings([_match("T1", "T2", 2, 0)], "T2")
        assert (s.played, s.lost, s.goals_for, s.goals_against, s.points) == (1, 1, 0, 2, 0)

    def test_incomplete_matches_ignored(self):
        matches = [
            _match("T1", "T2", 2, None),
            _match("T1", "T3", None, 1),
            _match("T1", "T4"),
        ]
        s = calculate_team_standings(matches, "T1")
        assert (s.played, s.points, s.goals_for) == (0, 0, 0)

    def test_other_teams_ignored(self):
        s = calculate_team_standings([_match("T2", "T3", 5, 0)], "T1")
        assert s.played == 0

    def test_disciplinary_carried(self):
        assert calculate_team_standings([], "T1", disciplinary_points=7).disciplinary_points == 7


class TestSortTeamsByStandings:
    def test_points_then_goal_difference_then_goals_for(self):
        standings = [
            _standing("A", points=6, goal_difference=1, goals_for=4),
            _standing("B", points=9, goal_difference=0, goals_for=2),
            _standing("C", points=6, goal_difference=3, goals_for=3),
            _standing("D", points=6, goal_difference=1, goals_for=6),
        ]

        ordered = sort_teams_by_standings(standings)

        assert [s.team_id for s in ordered] == ["B", "C", "D", "A"]
        assert [s.position for s in ordered] == [1, 2, 3, 4]

    def test_head_to_head_used_when_both_have_it(self):
        standings = [
            _standing("A", points=4, head_to_head_points=0, head_to_head_goal_difference=-1),
            _standing("B", points=4, head_to_head_points=3, head_to_head_goal_difference=1),
        ]
        assert [s.team_id for s in sort_teams_by_standings(standings)] == ["B", "A"]

    def test_head_to_head_value_beats_missing(self):
        standings = [
            _standing("A", points=4),
            _standing("B", points=4, head_to_head_points=0),
        ]
        assert [s.team_id for s in sort_teams_by_standings(standings)] == ["B", "A"]

    def test_mixed_head_to_head_order_is_stable(self):
        # Teams with head-to-head values rank above b regardless of disciplinary points
        base = [
            _standing("a", head_to_head_points=3, disciplinary_points=5),
            _standing("b", disciplinary_points=0),
            _standing("c", head_to_head_points=0, disciplinary_points=2),
        ]
        for ordering in itertools.permutations(base):
            assert [s.team_id for s in sort_teams_by_standings(list(ordering))] == ["a", "c", "b"]

    def test_fewer_disciplinary_points_ranks_higher(self):
        standings = [_standing("A", disciplinary_points=5), _standing("B", disciplinary_points=2)]
        assert [s.team_id for s in sort_teams_by_standings(standings)] == ["B", "A"]

    def test_without_rng_falls_back_to_team_id(self):
        standings = [_standing("C"), _standing("A"), _standing("B")]
        assert [s.team_id for s in sort_teams_by_standings(standings)] == ["A", "B", "C"]

    def test_coin_toss_reproducible_for_seed(self):
        first = sort_teams_by_standings([_standing(t) for t in "ABCDEF"], rng=random.Random(7))
        second = sort_teams_by_standings([_standing(t) for t in "FEDCBA"], rng=random.Random(7))
        assert [s.team_id for s in first] == [s.team_id for s in second]

    def test_order_independent_of_input_order(self):
        base = [
            _standing("A", points=3, goal_difference=1, goals_for=2),
            _standing("B", points=3, goal_difference=1, goals_for=2),
            _standing("C", points=1),
            _standing("D", points=3, goal_difference=2),
        ]
        expected = [s.team_id for s in sort_teams_by_standings(base)]
        shuffler = random.Random(0)
        for _ in range(10):
            shuffled = list(base)
            shuffler.shuffle(shuffled)
            assert [s.team_id for s in sort_teams_by_standings(shuffled)] == expected


def test_head_to_head_mini_table():
    matches = [_match("A", "B", 2, 1), _match("A", "C", 0, 3), _match("B", "C", 1, 1)]
    mini = calculate_head_to_head(matches, ["A", "B"])
    assert mini["A"].points == 3
    assert mini["B"].goal_difference == -1


class TestBuildLeagueTable:
    def test_head_to_head_breaks_level_teams(self):
        # A and B level on points, GD and GF; B won their meeting
        matches = [
            _match("B", "A", 1, 0),
            _match("B", "D", 0, 0),
            _match("C", "B", 1, 0),
            _match("A", "C", 1, 0),
            _match("A", "D", 0, 0),
        ]

        table = build_league_table(matches, ["A", "B", "C", "D"])

        assert table_order(table) == ["B", "A", "C", "D"]
        a = next(s for s in table if s.team_id == "A")
        assert (a.points, a.goal_difference, a.goals_for) == (4, 0, 1)
        assert a.head_to_head_points == 0

    def test_playoffs_excluded_by_default(self):
        matches = [
            _match("A", "B", 1, 0),
            _match("B", "A", 5, 0, is_playoff=True),
        ]
        league_only = build_league_table(matches, ["A", "B"])
        with_playoffs = build_league_table(matches, ["A", "B"], include_playoffs=True)

        assert table_order(league_only) == ["A", "B"]
        assert table_order(with_playoffs) == ["B", "A"]

    def test_disciplinary_mapping(self):
        table = build_league_table([], ["A", "B"], disciplinary={"A": 3})
        assert table_order(table) == ["B", "A"]

    def test_teams_without_matches_listed(self):
        table = build_league_table([_match("A", "B", 1, 0)], ["A", "B", "C"])
        assert len(table) == 3
        assert table_order(table)[-1] == "B"


def test_eliminated_teams():
    matches = [
        _match("A", "B", 2, 1, is_playoff=True),
        _match("C", "D", 0, 3, is_playoff=True),
        _match("A", "D", 1, 1, is_playoff=True),
        _match("E", "F", 4, 0),
        _match("A", "D", is_playoff=True),
    ]
    assert eliminated_teams(matches) == {"B", "C"}
