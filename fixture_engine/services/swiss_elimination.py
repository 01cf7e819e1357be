"""
Swiss Elimination Scheduler

A short round-robin league followed by pairwise elimination rounds down to a
final four, then semifinals and a final.

Elimination pairing works on the team list in the order given; callers pass it
sorted by the league table. Each round pairs positions (0,1), (2,3), ... and
plays only as many matches as needed to land on four teams; anyone left unpaired
gets a self-paired bye.

Advancement between elimination rounds is a placeholder: the first team of each
pair is carried forward as if it had won. It keeps the structure complete for
display, but it is not a result. Once a round has been played the caller should
call generate_elimination_round() again with the confirmed winners.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from fixture_engine.models.bracket import BracketMatch, PlayoffBracket, Resolved, WinnerOf
from fixture_engine.models.match import Match
from fixture_engine.services.bracket_generator import create_playoff_matches, parse_match_index
from fixture_engine.services.round_robin import generate_round_robin_schedule

logger = logging.getLogger(__name__)

MIN_TEAMS = 4
FINAL_FOUR = 4


@dataclass
class EliminationRound:
    round_index: int  # zero-based within the elimination stage
    round: int  # global round number
    matches: List[BracketMatch] = field(default_factory=list)
    advancing: List[str] = field(default_factory=list)
    placeholder_advancement: bool = True

    def to_dict(self):
        return {
            "round_index": self.round_index,
            "round": self.round,
            "matches": [m.to_dict() for m in self.matches],
            "advancing": list(self.advancing),
            "placeholder_advancement": self.placeholder_advancement,
        }


@dataclass
class SwissEliminationSchedule:
    league_matches: List[Match] = field(default_factory=list)
    elimination_matches: List[Match] = field(default_factory=list)
    elimination_rounds: List[EliminationRound] = field(default_factory=list)
    final_four: List[PlayoffBracket] = field(default_factory=list)

    @property
    def matches(self) -> List[Match]:
        return [*self.league_matches, *self.elimination_matches]


def generate_elimination_round(
    confirmed_teams: Sequence[str],
    round_index: int,
    round_offset: int = 0,
) -> EliminationRound:
    """
    One elimination round from the teams still alive, in table order.

    Plays min(n // 2, n - 4) matches so the round never cuts below a final four.
    """
    teams = list(confirmed_teams)
    match_count = max(0, min(len(teams) // 2, len(teams) - FINAL_FOUR))
    global_round = round_offset + round_index

    matches: List[BracketMatch] = []
    advancing: List[str] = []
    for i in range(match_count):
        home, away = teams[2 * i], teams[2 * i + 1]
        matches.append(
            BracketMatch(
                match_id=f"elim-{round_index}-{i}",
                home=Resolved(home),
                away=Resolved(away),
                is_elimination=True,
            )
        )
        advancing.append(home)

    for team_id in teams[2 * match_count:]:
        ref = Resolved(team_id)
        matches.append(
            BracketMatch(
                match_id=f"elim-{round_index}-{len(matches)}",
                home=ref,
                away=ref,
                winner=team_id,
            )
        )
        advancing.append(team_id)

    logger.debug(
        "Elimination round %d: %d matches, %d byes, placeholder advancers %s",
        round_index,
        match_count,
        len(teams) - 2 * match_count,
        advancing,
    )
    return EliminationRound(
        round_index=round_index,
        round=global_round,
        matches=matches,
        advancing=advancing,
    )


def final_four_bracket(teams: Sequence[str]) -> List[PlayoffBracket]:
    """Semifinals [0] v [1], [2] v [3]; final winner-1 v winner-2."""
    semi_1 = BracketMatch(match_id="semi-0", home=Resolved(teams[0]), away=Resolved(teams[1]))
    semi_2 = BracketMatch(match_id="semi-1", home=Resolved(teams[2]), away=Resolved(teams[3]))
    final = BracketMatch(
        match_id="final-0",
        home=WinnerOf(semi_1.match_id, 1),
        away=WinnerOf(semi_2.match_id, 2),
    )
    return [
        PlayoffBracket(round=0, matches=[semi_1, semi_2]),
        PlayoffBracket(round=1, matches=[final]),
    ]


def _round_matches(elimination_round: EliminationRound) -> List[Match]:
    return [
        Match(
            id=m.match_id,
            home_team_id=m.home_team_id,
            away_team_id=m.away_team_id,
            round=elimination_round.round,
            is_playoff=True,
            playoff_round=elimination_round.round_index,
            playoff_match=parse_match_index(m.match_id),
        )
        for m in elimination_round.matches
        if not m.is_bye
    ]


def generate_swiss_elimination_schedule(
    team_ids: Sequence[str],
    league_rounds: int = 2,
) -> SwissEliminationSchedule:
    """
    League stage plus elimination stage.

    Args:
        team_ids: Teams in table order (at least 4, otherwise an empty schedule)
        league_rounds: Legs of the league stage

    Returns:
        SwissEliminationSchedule; elimination rounds continue the league's round
        numbering, the final four follows the last elimination round.
    """
    if len(team_ids) < MIN_TEAMS:
        return SwissEliminationSchedule()

    league_matches = generate_round_robin_schedule(team_ids, league_rounds)
    offset = max((m.round for m in league_matches), default=-1) + 1

    elimination_rounds: List[EliminationRound] = []
    elimination_matches: List[Match] = []
    remaining = list(team_ids)
    while len(remaining) > FINAL_FOUR:
        elimination_round = generate_elimination_round(remaining, len(elimination_rounds), offset)
        elimination_rounds.append(elimination_round)
        elimination_matches.extend(_round_matches(elimination_round))
        remaining = elimination_round.advancing

    if elimination_rounds:
        logger.warning(
            "Swiss elimination: %d rounds use placeholder advancement; regenerate each round "
            "from confirmed winners once results are in",
            len(elimination_rounds),
        )

    final_four = final_four_bracket(remaining)
    final_offset = offset + len(elimination_rounds)
    for match in create_playoff_matches(final_four, round_offset=final_offset):
        match.playoff_round = len(elimination_rounds) + match.playoff_round
        elimination_matches.append(match)

    return SwissEliminationSchedule(
        league_matches=league_matches,
        elimination_matches=elimination_matches,
        elimination_rounds=elimination_rounds,
        final_four=final_four,
    )
