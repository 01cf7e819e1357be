from typing import Optional

from sqlmodel import Field, SQLModel

BYE_TEAM_ID = "BYE"


class Match(SQLModel):
    id: str
    home_team_id: str
    away_team_id: str
    round: int = Field(default=0)
    home_goals: Optional[int] = Field(default=None)
    away_goals: Optional[int] = Field(default=None)
    date_iso: Optional[str] = Field(default=None)

    # Playoff metadata (None for league/group fixtures)
    is_playoff: bool = Field(default=False)
    playoff_round: Optional[int] = Field(default=None)  # zero-based within its bracket
    playoff_match: Optional[int] = Field(default=None)  # index within playoff_round

    group_index: Optional[int] = Field(default=None)  # 1-based group number
    division: Optional[int] = Field(default=None)  # 1 | 2

    @property
    def is_complete(self) -> bool:
        """Both scores present. A single score does not count as played."""
        return self.home_goals is not None and self.away_goals is not None

    def involves(self, team_id: str) -> bool:
        return self.home_team_id == team_id or self.away_team_id == team_id
