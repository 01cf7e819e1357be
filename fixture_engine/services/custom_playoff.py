"""
Custom Playoff Scheduler - "Homebush" format

A fixed six-round template for 8 or 9 team playoff fields; a 9 team field adds
a play-in round for the bottom two seeds ahead of round 1. Losers of the
qualifiers and of the upper semi get a second path back (repechage), so the
dependency graph is not a binary tree and the generic bracket generator cannot
express it.

    R0  Play-in      s8 v s9                 (9 teams only)
    R1  Qualifier A  s1 v s2            (no elimination)
        Qualifier B  s3 v s4            (no elimination)
        Elim A       s5 v s8   (s5 v W(Play-in) with 9 teams)
        Elim B       s6 v s7
    R2  Elim C       W(Elim A) v W(Elim B)
    R3  Semi Upper   L(Qual A) v W(Qual B)   (no elimination)
    R4  Knockout     L(Semi Upper) v W(Elim C)
    R5  PF A         W(Qual A) v W(Knockout)
        PF B         W(Semi Upper) v L(Qual B)
    R6  Grand Final  W(PF A) v W(PF B)

Slots fed by another match are TBD until that match is decided. With
re_seed_round5 the preliminary finals are re-paired by original table position
once all four survivors are known (highest v lowest, then the middle pair).
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Set

from fixture_engine.models.bracket import (
    BracketMatch,
    LoserOf,
    ParticipantRef,
    Resolved,
    SeedSlot,
    Tbd,
    WinnerOf,
    parse_participant,
)
from fixture_engine.models.custom_playoff import CustomPlayoffRound
from fixture_engine.models.format import HOMEBUSH_TEAM_COUNTS
from fixture_engine.models.match import Match
from fixture_engine.services.advancement import AdvancementSummary, match_outcome, resolve_participants

logger = logging.getLogger(__name__)

QUALIFIER_A = "qualifier-a"
QUALIFIER_B = "qualifier-b"
ELIM_A = "elim-a"
ELIM_B = "elim-b"
PLAY_IN = "elim-play-in"
ELIM_C = "elim-c"
SEMI_UPPER = "semi-upper"
KNOCKOUT = "knockout"
PRELIM_FINAL_A = "prelim-final-a"
PRELIM_FINAL_B = "prelim-final-b"
GRAND_FINAL = "grand-final"

RE_SEED_ROUND = 5


def _winner(match_id: str, label: int = 1) -> Tbd:
    return Tbd(source=WinnerOf(match_id, label))


def _loser(match_id: str, label: int = 1) -> Tbd:
    return Tbd(source=LoserOf(match_id, label))


def _seed_refs(seeded_team_ids: Optional[Sequence[str]], team_count: int) -> List[ParticipantRef]:
    if seeded_team_ids:
        return [Resolved(team_id) for team_id in seeded_team_ids[:team_count]]
    return [SeedSlot(n) for n in range(1, team_count + 1)]


def generate_homebush_playoff(
    seeded_team_ids: Optional[Sequence[str]] = None,
    team_count: int = 8,
    re_seed_round5: bool = False,
) -> List[CustomPlayoffRound]:
    """
    Build the six Homebush rounds.

    Args:
        seeded_team_ids: Qualified teams in table order; None leaves seed-N slots
        team_count: 8 or 9 (ignored when seeded_team_ids is given)
        re_seed_round5: Pair the preliminary finals by original table position

    Returns:
        Rounds 1..6, or [] for an unsupported field size. A 9 team field also
        gets round 0, a play-in between seeds 8 and 9 whose winner takes the
        Elim A away slot.
    """
    if seeded_team_ids is not None:
        team_count = len(seeded_team_ids)
    if team_count not in HOMEBUSH_TEAM_COUNTS:
        logger.warning("Homebush playoff needs 8 or 9 teams, got %d", team_count)
        return []

    s = _seed_refs(seeded_team_ids, team_count)

    elim_a_away = _winner(PLAY_IN) if team_count == 9 else s[7]
    round_1 = [
        BracketMatch(match_id=QUALIFIER_A, name="Qualifier A", home=s[0], away=s[1], is_elimination=False),
        BracketMatch(match_id=QUALIFIER_B, name="Qualifier B", home=s[2], away=s[3], is_elimination=False),
        BracketMatch(match_id=ELIM_A, name="Elimination A", home=s[4], away=elim_a_away, is_elimination=True),
        BracketMatch(match_id=ELIM_B, name="Elimination B", home=s[5], away=s[6], is_elimination=True),
    ]

    rounds = [
        CustomPlayoffRound(
            id="round-1",
            name="Qualifying & Elimination Finals",
            round=1,
            matches=round_1,
            is_elimination=False,
            description="Top four play qualifiers (losers continue); 5th-8th play elimination matches",
        ),
        CustomPlayoffRound(
            id="round-2",
            name="Elimination Final",
            round=2,
            matches=[
                BracketMatch(match_id=ELIM_C, name="Elimination C", home=_winner(ELIM_A), away=_winner(ELIM_B, 2)),
            ],
            description="Winners of the two elimination matches; loser is out",
        ),
        CustomPlayoffRound(
            id="round-3",
            name="Upper Semi Final",
            round=3,
            matches=[
                BracketMatch(
                    match_id=SEMI_UPPER, name="Semi (Upper)", home=_loser(QUALIFIER_A), away=_winner(QUALIFIER_B, 2)
                ),
            ],
            is_elimination=False,
            description="Loser of Qualifier A v winner of Qualifier B; loser drops to the knockout",
        ),
        CustomPlayoffRound(
            id="round-4",
            name="Knockout",
            round=4,
            matches=[
                BracketMatch(match_id=KNOCKOUT, name="Knockout", home=_loser(SEMI_UPPER), away=_winner(ELIM_C)),
            ],
            description="Loser of the upper semi v winner of Elimination C",
        ),
        CustomPlayoffRound(
            id="round-5",
            name="Preliminary Finals",
            round=5,
            matches=[
                BracketMatch(
                    match_id=PRELIM_FINAL_A,
                    name="Preliminary Final A",
                    home=_winner(QUALIFIER_A),
                    away=_winner(KNOCKOUT),
                ),
                BracketMatch(
                    match_id=PRELIM_FINAL_B,
                    name="Preliminary Final B",
                    home=_winner(SEMI_UPPER),
                    away=_loser(QUALIFIER_B, 2),
                ),
            ],
            description=(
                "Re-seeded by original table position: highest v lowest, middle pair"
                if re_seed_round5
                else "Bracket progression"
            ),
            re_seed=re_seed_round5,
        ),
        CustomPlayoffRound(
            id="round-6",
            name="Grand Final",
            round=6,
            matches=[
                BracketMatch(
                    match_id=GRAND_FINAL,
                    name="Grand Final",
                    home=_winner(PRELIM_FINAL_A),
                    away=_winner(PRELIM_FINAL_B, 2),
                ),
            ],
            description="Winners of the preliminary finals",
        ),
    ]
    if team_count == 9:
        rounds.insert(
            0,
            CustomPlayoffRound(
                id="round-0",
                name="Elimination Play-in",
                round=0,
                matches=[
                    BracketMatch(match_id=PLAY_IN, name="Play-in", home=s[7], away=s[8], is_elimination=True),
                ],
                description="8th v 9th; winner takes the Elimination A away slot",
            ),
        )
    return rounds


def custom_playoff_matches(rounds: Sequence[CustomPlayoffRound], round_offset: int = 0) -> List[Match]:
    """
    Materialize rounds as Match records; bye entries are dropped.

    Rounds are numbered by position, so a 9 team play-in takes the first playoff
    round and the template rounds follow it.
    """
    matches: List[Match] = []
    for position, playoff_round in enumerate(sorted(rounds, key=lambda r: r.round)):
        for index, entry in enumerate(playoff_round.matches):
            if entry.is_bye:
                continue
            matches.append(
                Match(
                    id=entry.match_id,
                    home_team_id=entry.home_team_id,
                    away_team_id=entry.away_team_id,
                    round=round_offset + position,
                    home_goals=entry.home_goals,
                    away_goals=entry.away_goals,
                    date_iso=entry.date_iso,
                    is_playoff=True,
                    playoff_round=position,
                    playoff_match=index,
                )
            )
    return matches


def restore_homebush_playoff(
    data: Sequence[Dict[str, Any]],
    seeded_team_ids: Sequence[str],
) -> List[CustomPlayoffRound]:
    """
    Rebuild Homebush rounds from their to_dict() shape.

    TBD slots do not say which match feeds them, so the template is regenerated
    for the field size and the saved entries are laid over it by match id:
    scores, dates, explicit winners and any side that names a team. Returns []
    for an unsupported field size.
    """
    re_seed = any(r.get("re_seed") for r in data if r.get("round") == RE_SEED_ROUND)
    rounds = generate_homebush_playoff(team_count=len(seeded_team_ids), re_seed_round5=re_seed)

    saved = {m["match_id"]: m for r in data for m in r.get("matches", [])}
    for entry in (m for r in rounds for m in r.matches):
        match = saved.get(entry.match_id)
        if match is None:
            continue
        for side in ("home", "away"):
            ref = parse_participant(match[f"{side}_team_id"])
            if isinstance(ref, Resolved):
                setattr(entry, side, ref)
        entry.home_goals = match.get("home_goals")
        entry.away_goals = match.get("away_goals")
        entry.date_iso = match.get("date_iso")
        entry.winner = match.get("winner")
    return rounds


def _re_seed_preliminary_finals(playoff_round: CustomPlayoffRound, table_order: Sequence[str]) -> bool:
    entries = playoff_round.matches
    sides = [ref for entry in entries for ref in (entry.home, entry.away)]
    if not all(isinstance(ref, Resolved) for ref in sides):
        return False
    if any(entry.is_complete or entry.winner for entry in entries):
        return False

    positions = {team_id: i for i, team_id in enumerate(table_order)}
    ranked = sorted(sides, key=lambda ref: positions.get(ref.team_id, len(positions)))
    entries[0].home, entries[0].away = ranked[0], ranked[3]
    entries[1].home, entries[1].away = ranked[1], ranked[2]
    logger.info(
        "Preliminary finals re-seeded: %s v %s, %s v %s",
        ranked[0].team_id,
        ranked[3].team_id,
        ranked[1].team_id,
        ranked[2].team_id,
    )
    return True


def resolve_homebush_playoff(
    rounds: Sequence[CustomPlayoffRound],
    seeded_team_ids: Sequence[str],
) -> AdvancementSummary:
    """
    Fill TBD slots from decided matches, in place.

    seeded_team_ids is the original table order; it replaces seed-N slots and
    drives the round 5 re-seed.
    """
    ordered = sorted(rounds, key=lambda r: r.round)
    for playoff_round in ordered:
        for entry in playoff_round.matches:
            for side in ("home", "away"):
                ref = getattr(entry, side)
                if isinstance(ref, SeedSlot) and ref.seed <= len(seeded_team_ids):
                    setattr(entry, side, Resolved(seeded_team_ids[ref.seed - 1]))

    all_matches = [m for r in ordered for m in r.matches]
    summary = resolve_participants(all_matches)

    re_seeded = [
        r for r in ordered
        if r.round == RE_SEED_ROUND and r.re_seed and _re_seed_preliminary_finals(r, seeded_team_ids)
    ]
    if re_seeded:
        # Second pass so anything downstream of the re-paired round sees it
        second = resolve_participants(all_matches)
        summary.slots_filled += second.slots_filled
        summary.matches_processed = second.matches_processed
        summary.unresolved_after = second.unresolved_after
    return summary


def homebush_eliminated_teams(rounds: Sequence[CustomPlayoffRound]) -> Set[str]:
    """Losers of decided matches that carry elimination."""
    eliminated: Set[str] = set()
    for playoff_round in rounds:
        for entry in playoff_round.matches:
            if not playoff_round.match_is_elimination(entry):
                continue
            outcome = match_outcome(entry)
            if outcome is not None and outcome[1] is not None:
                eliminated.add(outcome[1].team_id)
    return eliminated
