"""
Bracket Generator & Populator

Single-elimination brackets built from seed slots:
- Round 0 pairs seed-(i+1) vs seed-(P-i) for i = 0, 2, 4, ... (P = even part of N),
  so every seed appears once and seeds 1 and 2 can only meet in the final.
- Each later round pairs the previous round's winners by position
  (winner-(i+1) vs winner-(i+2)) until one match remains.
- An odd entry out gets a self-paired bye whose winner is itself. Byes stay in the
  bracket structure but are never materialized as matches.
"""

import logging
from typing import Dict, List, Optional, Sequence

from fixture_engine.models.bracket import (
    BracketMatch,
    PlayoffBracket,
    Resolved,
    SeedSlot,
    Tbd,
    WinnerOf,
)
from fixture_engine.models.match import Match

logger = logging.getLogger(__name__)

MATCH_ID_PREFIX = "playoff"


def bracket_match_id(round_index: int, match_index: int) -> str:
    return f"{MATCH_ID_PREFIX}-{round_index}-{match_index}"


def parse_match_index(match_id: str) -> Optional[int]:
    """Trailing "-<n>" of a bracket match id, or None."""
    suffix = match_id.rsplit("-", 1)[-1]
    return int(suffix) if suffix.isdigit() else None


def _bye(match_id: str, ref) -> BracketMatch:
    return BracketMatch(match_id=match_id, home=ref, away=ref, winner=ref.token)


def _first_round(team_count: int) -> List[BracketMatch]:
    paired = team_count - team_count % 2
    matches: List[BracketMatch] = []
    for match_index, i in enumerate(range(0, paired, 2)):
        matches.append(
            BracketMatch(
                match_id=bracket_match_id(0, match_index),
                home=SeedSlot(i + 1),
                away=SeedSlot(paired - i),
            )
        )
    if team_count % 2 == 1:
        matches.append(_bye(bracket_match_id(0, len(matches)), SeedSlot(team_count)))
    return matches


def _next_round(previous: PlayoffBracket) -> List[BracketMatch]:
    entries = [WinnerOf(m.match_id, idx + 1) for idx, m in enumerate(previous.matches)]
    round_index = previous.round + 1
    matches: List[BracketMatch] = []
    for match_index, i in enumerate(range(0, len(entries), 2)):
        match_id = bracket_match_id(round_index, match_index)
        if i + 1 < len(entries):
            matches.append(BracketMatch(match_id=match_id, home=entries[i], away=entries[i + 1]))
        else:
            matches.append(_bye(match_id, entries[i]))
    return matches


def generate_playoff_brackets(teams: Sequence[str]) -> List[PlayoffBracket]:
    """
    Build a seeded single-elimination bracket for len(teams) entrants.

    Only the count matters: slots are seed-N refs, filled later by
    populate_playoff_brackets() from the final table.

    Four entrants get the literal semis/final shape:
        round 0: seed-1 v seed-4, seed-2 v seed-3
        round 1: winner-1 v winner-2
    """
    team_count = len(teams)
    if team_count < 2:
        return []

    if team_count == 4:
        semi_1 = BracketMatch(match_id=bracket_match_id(0, 0), home=SeedSlot(1), away=SeedSlot(4))
        semi_2 = BracketMatch(match_id=bracket_match_id(0, 1), home=SeedSlot(2), away=SeedSlot(3))
        final = BracketMatch(
            match_id=bracket_match_id(1, 0),
            home=WinnerOf(semi_1.match_id, 1),
            away=WinnerOf(semi_2.match_id, 2),
        )
        return [
            PlayoffBracket(round=0, matches=[semi_1, semi_2]),
            PlayoffBracket(round=1, matches=[final]),
        ]

    brackets = [PlayoffBracket(round=0, matches=_first_round(team_count))]
    while len(brackets[-1].matches) > 1:
        previous = brackets[-1]
        brackets.append(PlayoffBracket(round=previous.round + 1, matches=_next_round(previous)))

    logger.debug("Playoff bracket: %d entrants, %d rounds", team_count, len(brackets))
    return brackets


def create_playoff_matches(
    brackets: Sequence[PlayoffBracket],
    round_offset: int = 0,
    id_prefix: str = "",
) -> List[Match]:
    """
    Flatten bracket rounds into Match records.

    Entries whose two sides render the same (byes) are dropped. playoff_round is
    the bracket round; round is shifted by round_offset so playoffs can follow a
    league or group stage on the same calendar.
    """
    matches: List[Match] = []
    for bracket in brackets:
        for entry in bracket.matches:
            if entry.home_team_id == entry.away_team_id:
                continue
            matches.append(
                Match(
                    id=f"{id_prefix}{entry.match_id}",
                    home_team_id=entry.home_team_id,
                    away_team_id=entry.away_team_id,
                    round=bracket.round + round_offset,
                    home_goals=entry.home_goals,
                    away_goals=entry.away_goals,
                    date_iso=entry.date_iso,
                    is_playoff=True,
                    playoff_round=bracket.round,
                    playoff_match=parse_match_index(entry.match_id),
                )
            )
    return matches


def _populate_ref(ref, final_standings: Sequence[str]):
    if isinstance(ref, SeedSlot):
        if 1 <= ref.seed <= len(final_standings):
            return Resolved(final_standings[ref.seed - 1])
        logger.warning(
            "seed-%d has no table position (%d teams in standings)", ref.seed, len(final_standings)
        )
        return ref
    if isinstance(ref, WinnerOf):
        return Tbd(source=ref)
    return ref


def populate_playoff_brackets(
    brackets: Sequence[PlayoffBracket],
    final_standings: Sequence[str],
) -> List[PlayoffBracket]:
    """
    Return a copy of brackets with seed-N slots replaced by final_standings[N-1].

    winner-N slots become TBD: they are only known once the upstream match is
    played (see services.advancement). The TBD keeps its source so the
    advancement pass can still fill it.
    """
    populated: List[PlayoffBracket] = []
    for bracket in brackets:
        matches: List[BracketMatch] = []
        for entry in bracket.matches:
            home = _populate_ref(entry.home, final_standings)
            away = _populate_ref(entry.away, final_standings)
            winner = entry.winner
            if entry.is_bye:
                # A bye fed by an undecided match has no winner yet
                winner = None if isinstance(home, Tbd) else home.token
            matches.append(
                BracketMatch(
                    match_id=entry.match_id,
                    home=home,
                    away=away,
                    home_goals=entry.home_goals,
                    away_goals=entry.away_goals,
                    date_iso=entry.date_iso,
                    winner=winner,
                    name=entry.name,
                    is_elimination=entry.is_elimination,
                )
            )
        populated.append(PlayoffBracket(round=bracket.round, matches=matches))
    return populated


def apply_results_to_brackets(
    brackets: Sequence[PlayoffBracket],
    matches: Sequence[Match],
    id_prefix: str = "",
) -> int:
    """
    Copy scores and dates from persisted matches onto bracket entries (by id).
    Returns the number of bracket entries updated.
    """
    by_id: Dict[str, Match] = {m.id: m for m in matches}
    updated = 0
    for bracket in brackets:
        for entry in bracket.matches:
            match = by_id.get(f"{id_prefix}{entry.match_id}")
            if match is None:
                continue
            entry.home_goals = match.home_goals
            entry.away_goals = match.away_goals
            entry.date_iso = match.date_iso
            updated += 1
    return updated
