from typing import Optional

from sqlmodel import Field, SQLModel


class TeamStanding(SQLModel):
    team_id: str
    position: int = Field(default=0)  # 1-based once sorted, 0 before
    points: int = Field(default=0)
    played: int = Field(default=0)
    won: int = Field(default=0)
    drawn: int = Field(default=0)
    lost: int = Field(default=0)
    goals_for: int = Field(default=0)
    goals_against: int = Field(default=0)
    goal_difference: int = Field(default=0)
    disciplinary_points: int = Field(default=0)

    # Only filled among teams level on points
    head_to_head_points: Optional[int] = Field(default=None)
    head_to_head_goal_difference: Optional[int] = Field(default=None)
