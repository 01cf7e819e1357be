"""
Request/response models shared by the fixture and standings routes.
"""

import random
from typing import List, Optional

from pydantic import BaseModel

from fixture_engine.config import FIXTURE_RNG_SEED
from fixture_engine.models.bracket import PlayoffBracket, brackets_from_dicts


class BracketMatchPayload(BaseModel):
    match_id: str
    home_team_id: str
    away_team_id: str
    home_goals: Optional[int] = None
    away_goals: Optional[int] = None
    date_iso: Optional[str] = None
    winner: Optional[str] = None
    name: Optional[str] = None
    is_elimination: Optional[bool] = None


class BracketPayload(BaseModel):
    round: int
    matches: List[BracketMatchPayload]


class CustomPlayoffRoundPayload(BaseModel):
    id: str
    name: str
    round: int
    matches: List[BracketMatchPayload]
    is_elimination: bool = True
    description: str = ""
    re_seed: bool = False


def to_brackets(payload: List[BracketPayload]) -> List[PlayoffBracket]:
    return brackets_from_dicts([b.model_dump() for b in payload])


def make_rng(seed: Optional[int]) -> random.Random:
    """Request seed first, then FIXTURE_RNG_SEED, else an unseeded generator."""
    return random.Random(seed if seed is not None else FIXTURE_RNG_SEED)
