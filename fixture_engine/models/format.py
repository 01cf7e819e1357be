from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from fixture_engine.config import DEFAULT_LEGS

TournamentMode = Literal[
    "league",
    "league_playoff",
    "swiss_elimination",
    "league_custom_playoff",
    "groups_with_divisions",
]

HOMEBUSH_TEAM_COUNTS = (8, 9)


class GroupsWithDivisionsConfig(BaseModel):
    number_of_groups: int = 4
    teams_per_group: int = 4
    group_rounds: int = 1
    # Organizer-edited membership; when present it is used verbatim
    groups: Optional[List[List[str]]] = None

    @field_validator("number_of_groups")
    @classmethod
    def validate_number_of_groups(cls, v):
        if v < 1:
            raise ValueError("number_of_groups must be >= 1")
        return v

    @field_validator("teams_per_group")
    @classmethod
    def validate_teams_per_group(cls, v):
        if v < 2:
            raise ValueError("teams_per_group must be >= 2")
        return v

    @field_validator("group_rounds")
    @classmethod
    def validate_group_rounds(cls, v):
        if v not in (1, 2):
            raise ValueError("group_rounds must be 1 or 2")
        return v


class CustomPlayoffConfig(BaseModel):
    team_count: int = 8
    re_seed_round5: bool = False

    @field_validator("team_count")
    @classmethod
    def validate_team_count(cls, v):
        if v not in HOMEBUSH_TEAM_COUNTS:
            raise ValueError(f"team_count must be one of {list(HOMEBUSH_TEAM_COUNTS)}")
        return v


class TournamentFormat(BaseModel):
    mode: TournamentMode = "league"
    rounds: int = DEFAULT_LEGS  # legs of the league stage
    playoff_qualifiers: Optional[int] = None
    groups_with_divisions_config: Optional[GroupsWithDivisionsConfig] = None
    custom_playoff_config: Optional[CustomPlayoffConfig] = None

    @field_validator("playoff_qualifiers")
    @classmethod
    def validate_playoff_qualifiers(cls, v):
        if v is not None and v < 2:
            raise ValueError("playoff_qualifiers must be >= 2")
        return v

    @model_validator(mode="after")
    def validate_mode_config(self):
        if self.mode == "groups_with_divisions" and self.groups_with_divisions_config is None:
            raise ValueError("groups_with_divisions mode requires groups_with_divisions_config")
        return self
