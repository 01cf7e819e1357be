from fixture_engine.models.bracket import (
    BracketMatch,
    GroupPlacing,
    LoserOf,
    ParticipantRef,
    PlayoffBracket,
    Resolved,
    SeedSlot,
    Tbd,
    WinnerOf,
)
from fixture_engine.models.custom_playoff import CustomPlayoffRound
from fixture_engine.models.format import (
    CustomPlayoffConfig,
    GroupsWithDivisionsConfig,
    TournamentFormat,
)
from fixture_engine.models.match import BYE_TEAM_ID, Match
from fixture_engine.models.standing import TeamStanding

__all__ = [
    "BYE_TEAM_ID",
    "Match",
    "TeamStanding",
    "ParticipantRef",
    "Resolved",
    "SeedSlot",
    "WinnerOf",
    "LoserOf",
    "GroupPlacing",
    "Tbd",
    "BracketMatch",
    "PlayoffBracket",
    "CustomPlayoffRound",
    "TournamentFormat",
    "GroupsWithDivisionsConfig",
    "CustomPlayoffConfig",
]
