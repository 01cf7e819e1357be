"""
Advancement: once a bracket match has a result, fill the downstream slots that
wait on it.

A slot waits on an upstream result when it is WinnerOf/LoserOf, or a TBD that
remembers its source. Matches are walked in the order given (round order), so a
result resolved early in the walk can feed a later match in the same pass.

Guarantees:
    - Idempotent (safe to call multiple times)
    - Only participant slots and bye winners are rewritten; scores are untouched
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from fixture_engine.models.bracket import (
    BracketMatch,
    ParticipantRef,
    PlayoffBracket,
    Resolved,
    WinnerOf,
    result_source,
)

logger = logging.getLogger(__name__)

Outcome = Tuple[Resolved, Optional[Resolved]]  # (winner, loser); loser is None for a bye


@dataclass
class AdvancementSummary:
    matches_processed: int = 0
    slots_filled: int = 0
    unresolved_before: int = 0
    unresolved_after: int = 0

    def to_dict(self):
        return {
            "matches_processed": self.matches_processed,
            "slots_filled": self.slots_filled,
            "unresolved_before": self.unresolved_before,
            "unresolved_after": self.unresolved_after,
        }


def match_outcome(match: BracketMatch) -> Optional[Outcome]:
    """
    Winner and loser of a bracket match, or None while undecided.

    An explicit winner (e.g. decided on penalties) takes precedence over the score.
    A drawn score with no explicit winner stays undecided.
    """
    home, away = match.home, match.away
    if match.is_bye:
        return (home, None) if isinstance(home, Resolved) else None
    if not (isinstance(home, Resolved) and isinstance(away, Resolved)):
        return None

    if match.winner is not None:
        if match.winner == home.team_id:
            return home, away
        if match.winner == away.team_id:
            return away, home
        logger.warning("Match %s winner %r is not one of its participants", match.match_id, match.winner)
        return None

    if not match.is_complete:
        return None
    if match.home_goals > match.away_goals:
        return home, away
    if match.home_goals < match.away_goals:
        return away, home
    logger.debug(
        "Match %s drawn %d-%d; knockout winner undetermined",
        match.match_id,
        match.home_goals,
        match.away_goals,
    )
    return None


def _resolve_ref(ref: ParticipantRef, outcomes: Dict[str, Outcome]) -> ParticipantRef:
    source = result_source(ref)
    if source is None:
        return ref
    outcome = outcomes.get(source.match_id)
    if outcome is None:
        return ref
    winner, loser = outcome
    if isinstance(source, WinnerOf):
        return winner
    return loser if loser is not None else ref


def count_unresolved(matches: Sequence[BracketMatch]) -> int:
    return sum(
        (not isinstance(m.home, Resolved)) + (not isinstance(m.away, Resolved)) for m in matches
    )


def resolve_participants(matches: Sequence[BracketMatch]) -> AdvancementSummary:
    """
    Walk matches in order and rewrite every slot whose upstream match is decided.

    Returns:
        AdvancementSummary with:
        - matches_processed: matches with a decided outcome
        - slots_filled: participant slots rewritten in this pass
        - unresolved_before / unresolved_after: slots not yet naming a team
    """
    summary = AdvancementSummary(unresolved_before=count_unresolved(matches))
    outcomes: Dict[str, Outcome] = {}

    for match in matches:
        home = _resolve_ref(match.home, outcomes)
        away = _resolve_ref(match.away, outcomes)
        if home != match.home:
            match.home = home
            summary.slots_filled += 1
        if away != match.away:
            match.away = away
            summary.slots_filled += 1

        if match.is_bye and isinstance(match.home, Resolved):
            match.winner = match.home.team_id

        outcome = match_outcome(match)
        if outcome is not None:
            outcomes[match.match_id] = outcome
            summary.matches_processed += 1

    summary.unresolved_after = count_unresolved(matches)
    logger.debug(
        "Advancement: %d decided, %d slots filled, %d -> %d unresolved",
        summary.matches_processed,
        summary.slots_filled,
        summary.unresolved_before,
        summary.unresolved_after,
    )
    return summary


def flatten_brackets(brackets: Sequence[PlayoffBracket]) -> List[BracketMatch]:
    return [m for bracket in sorted(brackets, key=lambda b: b.round) for m in bracket.matches]


def advance_playoff_brackets(brackets: Sequence[PlayoffBracket]) -> AdvancementSummary:
    """Resolve winner slots across a bracket list in place."""
    return resolve_participants(flatten_brackets(brackets))
