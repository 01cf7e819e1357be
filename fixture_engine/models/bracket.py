"""
Bracket participant references and bracket structures.

A bracket slot is a ParticipantRef instead of a bare string, so "who plays here"
is explicit until a resolver pass rewrites it:

    Resolved(team_id)           concrete team
    SeedSlot(n)                 "seed-N", filled from final league standings
    WinnerOf(match_id, label)   "winner-N", filled when match_id completes
    LoserOf(match_id, label)    "loser-N", repechage paths
    GroupPlacing(group, pos)    "group-2-1st", filled from a group table
    Tbd(source)                 "TBD", optionally remembering what fills it

Each ref renders back to its string token so persisted matches and wire payloads
keep the flat string shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

TBD_TOKEN = "TBD"

_SEED_RE = re.compile(r"^seed-(\d+)$")
_WINNER_RE = re.compile(r"^winner-(\d+)$")
_LOSER_RE = re.compile(r"^loser-(\d+)$")
_GROUP_RE = re.compile(r"^group-(\d+)-(\d+)(?:st|nd|rd|th)$")


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


@dataclass(frozen=True)
class Resolved:
    team_id: str

    @property
    def token(self) -> str:
        return self.team_id


@dataclass(frozen=True)
class SeedSlot:
    seed: int  # 1-based table position

    @property
    def token(self) -> str:
        return f"seed-{self.seed}"


@dataclass(frozen=True)
class WinnerOf:
    match_id: str
    label: int  # 1-based index of match_id within its round

    @property
    def token(self) -> str:
        return f"winner-{self.label}"


@dataclass(frozen=True)
class LoserOf:
    match_id: str
    label: int

    @property
    def token(self) -> str:
        return f"loser-{self.label}"


@dataclass(frozen=True)
class GroupPlacing:
    group_index: int  # 1-based
    position: int  # 1-based finishing position in the group

    @property
    def token(self) -> str:
        return f"group-{self.group_index}-{ordinal(self.position)}"


@dataclass(frozen=True)
class Tbd:
    source: Optional[Union[WinnerOf, LoserOf]] = None

    @property
    def token(self) -> str:
        return TBD_TOKEN


ParticipantRef = Union[Resolved, SeedSlot, WinnerOf, LoserOf, GroupPlacing, Tbd]


def result_source(ref: ParticipantRef) -> Optional[Union[WinnerOf, LoserOf]]:
    """The upstream result a ref waits on, if any."""
    if isinstance(ref, (WinnerOf, LoserOf)):
        return ref
    if isinstance(ref, Tbd):
        return ref.source
    return None


def parse_participant(token: str, previous_round_ids: Optional[List[str]] = None) -> ParticipantRef:
    """
    Turn a string token back into a ParticipantRef.

    winner-N / loser-N need the previous round's match ids to know which match
    N points at; without them the ref keeps an empty match_id.
    Anything that is not a known token is a team id.
    """
    if token == TBD_TOKEN:
        return Tbd()
    m = _SEED_RE.match(token)
    if m:
        return SeedSlot(int(m.group(1)))
    m = _GROUP_RE.match(token)
    if m:
        return GroupPlacing(int(m.group(1)), int(m.group(2)))
    for pattern, cls in ((_WINNER_RE, WinnerOf), (_LOSER_RE, LoserOf)):
        m = pattern.match(token)
        if m:
            label = int(m.group(1))
            match_id = ""
            if previous_round_ids and 0 < label <= len(previous_round_ids):
                match_id = previous_round_ids[label - 1]
            return cls(match_id, label)
    return Resolved(token)


@dataclass
class BracketMatch:
    match_id: str
    home: ParticipantRef
    away: ParticipantRef
    home_goals: Optional[int] = None
    away_goals: Optional[int] = None
    date_iso: Optional[str] = None
    winner: Optional[str] = None
    name: Optional[str] = None
    is_elimination: Optional[bool] = None  # overrides the round flag when set

    @property
    def home_team_id(self) -> str:
        return self.home.token

    @property
    def away_team_id(self) -> str:
        return self.away.token

    @property
    def is_bye(self) -> bool:
        return self.home == self.away

    @property
    def is_complete(self) -> bool:
        return self.home_goals is not None and self.away_goals is not None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "match_id": self.match_id,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "home_goals": self.home_goals,
            "away_goals": self.away_goals,
            "date_iso": self.date_iso,
            "winner": self.winner,
        }
        if self.name is not None:
            result["name"] = self.name
        if self.is_elimination is not None:
            result["is_elimination"] = self.is_elimination
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any], previous_round_ids: Optional[List[str]] = None) -> "BracketMatch":
        return cls(
            match_id=data["match_id"],
            home=parse_participant(data["home_team_id"], previous_round_ids),
            away=parse_participant(data["away_team_id"], previous_round_ids),
            home_goals=data.get("home_goals"),
            away_goals=data.get("away_goals"),
            date_iso=data.get("date_iso"),
            winner=data.get("winner"),
            name=data.get("name"),
            is_elimination=data.get("is_elimination"),
        )


@dataclass
class PlayoffBracket:
    round: int
    matches: List[BracketMatch] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"round": self.round, "matches": [m.to_dict() for m in self.matches]}


def _positional_source(previous_ids: List[str], index: int) -> Optional[WinnerOf]:
    if 0 <= index < len(previous_ids):
        return WinnerOf(previous_ids[index], index + 1)
    return None


def _restore_tbd_sources(match: BracketMatch, match_index: int, previous_ids: List[str]) -> None:
    # Slot j of a later round is fed by previous matches 2j and 2j+1; a trailing
    # bye takes 2j on both sides
    home_source = _positional_source(previous_ids, 2 * match_index)
    away_source = _positional_source(previous_ids, 2 * match_index + 1) or home_source
    if match.home == Tbd() and home_source is not None:
        match.home = Tbd(source=home_source)
    if match.away == Tbd() and away_source is not None:
        match.away = Tbd(source=away_source)


def brackets_from_dicts(data: List[Dict[str, Any]]) -> List[PlayoffBracket]:
    """
    Rehydrate a bracket list; winner-N tokens point into the previous round.

    A populated bracket renders its winner slots as TBD. Those get their
    upstream match back from their position, so a populated bracket can still
    be advanced after a round trip through the wire shape.
    """
    brackets: List[PlayoffBracket] = []
    previous_ids: Optional[List[str]] = None
    for entry in sorted(data, key=lambda b: b["round"]):
        matches = [BracketMatch.from_dict(m, previous_ids) for m in entry.get("matches", [])]
        if previous_ids:
            for match_index, match in enumerate(matches):
                _restore_tbd_sources(match, match_index, previous_ids)
        brackets.append(PlayoffBracket(round=entry["round"], matches=matches))
        previous_ids = [m.match_id for m in matches]
    return brackets
