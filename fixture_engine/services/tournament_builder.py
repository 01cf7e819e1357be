"""
Tournament Builder - one call from team IDs + format to the initial schedule.

Dispatches on TournamentFormat.mode:
    league                  round robin over fmt.rounds legs
    league_playoff          league + seeded bracket of the top playoff_qualifiers
    swiss_elimination       league + pairwise elimination to a final four
    league_custom_playoff   league + Homebush rounds (seed slots)
    groups_with_divisions   group round robins + Division 1/2 brackets

Playoff stages continue the league's round numbering. Seed slots are filled
later with populate_playoff_brackets() once the league table is final.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from fixture_engine.models.bracket import PlayoffBracket
from fixture_engine.models.custom_playoff import CustomPlayoffRound
from fixture_engine.models.format import CustomPlayoffConfig, TournamentFormat
from fixture_engine.models.match import Match
from fixture_engine.services.bracket_generator import create_playoff_matches, generate_playoff_brackets
from fixture_engine.services.custom_playoff import custom_playoff_matches, generate_homebush_playoff
from fixture_engine.services.groups_divisions import generate_groups_with_divisions_schedule
from fixture_engine.services.round_robin import generate_round_robin_schedule
from fixture_engine.services.swiss_elimination import generate_swiss_elimination_schedule

logger = logging.getLogger(__name__)

DEFAULT_PLAYOFF_QUALIFIERS = 4


@dataclass
class TournamentSchedule:
    mode: str
    matches: List[Match] = field(default_factory=list)
    playoff_brackets: List[PlayoffBracket] = field(default_factory=list)
    division_brackets: Dict[int, List[PlayoffBracket]] = field(default_factory=dict)
    custom_playoff_rounds: List[CustomPlayoffRound] = field(default_factory=list)
    groups: List[List[str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "matches": [m.model_dump() for m in self.matches],
            "playoff_brackets": [b.to_dict() for b in self.playoff_brackets],
            "division_brackets": {
                str(division): [b.to_dict() for b in brackets]
                for division, brackets in self.division_brackets.items()
            },
            "custom_playoff_rounds": [r.to_dict() for r in self.custom_playoff_rounds],
            "groups": self.groups,
        }


def _next_round(matches: Sequence[Match]) -> int:
    return max((m.round for m in matches), default=-1) + 1


def build_tournament_schedule(
    team_ids: Sequence[str],
    fmt: TournamentFormat,
    rng: Optional[random.Random] = None,
) -> TournamentSchedule:
    """
    Generate the initial matches (and bracket structures) for a format.

    Raises:
        ValueError: unknown mode
    """
    schedule = TournamentSchedule(mode=fmt.mode)

    if fmt.mode == "league":
        schedule.matches = generate_round_robin_schedule(team_ids, fmt.rounds)

    elif fmt.mode == "league_playoff":
        league = generate_round_robin_schedule(team_ids, fmt.rounds)
        qualifiers = min(fmt.playoff_qualifiers or DEFAULT_PLAYOFF_QUALIFIERS, len(team_ids))
        brackets = generate_playoff_brackets(list(team_ids[:qualifiers]))
        schedule.playoff_brackets = brackets
        schedule.matches = league + create_playoff_matches(brackets, round_offset=_next_round(league))

    elif fmt.mode == "swiss_elimination":
        swiss = generate_swiss_elimination_schedule(team_ids, fmt.rounds)
        schedule.matches = swiss.matches
        schedule.playoff_brackets = swiss.final_four

    elif fmt.mode == "league_custom_playoff":
        config = fmt.custom_playoff_config or CustomPlayoffConfig()
        league = generate_round_robin_schedule(team_ids, fmt.rounds)
        rounds = generate_homebush_playoff(team_count=config.team_count, re_seed_round5=config.re_seed_round5)
        schedule.custom_playoff_rounds = rounds
        schedule.matches = league + custom_playoff_matches(rounds, round_offset=_next_round(league))

    elif fmt.mode == "groups_with_divisions":
        config = fmt.groups_with_divisions_config
        groups = generate_groups_with_divisions_schedule(
            team_ids,
            number_of_groups=config.number_of_groups,
            teams_per_group=config.teams_per_group,
            group_rounds=config.group_rounds,
            existing_groups=config.groups,
            rng=rng,
        )
        schedule.matches = groups.matches
        schedule.division_brackets = groups.division_brackets
        schedule.groups = groups.groups

    else:
        raise ValueError(f"Unknown tournament mode: {fmt.mode}")

    logger.info("Built %s schedule: %d teams, %d matches", fmt.mode, len(team_ids), len(schedule.matches))
    return schedule
