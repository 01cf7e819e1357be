"""
API Routes for fixture generation.

Stateless: every endpoint computes from the request body and returns the result.
Nothing is stored; callers persist what they keep.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from fixture_engine.config import DEFAULT_LEGS
from fixture_engine.models.format import CustomPlayoffConfig, GroupsWithDivisionsConfig, TournamentFormat
from fixture_engine.models.match import Match
from fixture_engine.routes.schemas import make_rng
from fixture_engine.services.bracket_generator import create_playoff_matches, generate_playoff_brackets
from fixture_engine.services.custom_playoff import custom_playoff_matches, generate_homebush_playoff
from fixture_engine.services.groups_divisions import generate_groups_with_divisions_schedule
from fixture_engine.services.round_robin import generate_round_robin_schedule
from fixture_engine.services.swiss_elimination import generate_swiss_elimination_schedule
from fixture_engine.services.tournament_builder import build_tournament_schedule

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================


class RoundRobinRequest(BaseModel):
    team_ids: List[str]
    legs: int = DEFAULT_LEGS


class PlayoffBracketsRequest(BaseModel):
    team_ids: List[str]


class SwissEliminationRequest(BaseModel):
    team_ids: List[str]
    league_rounds: int = 2


class GroupsWithDivisionsRequest(BaseModel):
    team_ids: List[str]
    config: GroupsWithDivisionsConfig
    shuffle_seed: Optional[int] = None


class CustomPlayoffRequest(BaseModel):
    seeded_team_ids: Optional[List[str]] = None
    config: CustomPlayoffConfig = CustomPlayoffConfig()


class TournamentScheduleRequest(BaseModel):
    team_ids: List[str]
    format: TournamentFormat
    shuffle_seed: Optional[int] = None


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/fixtures/round-robin", response_model=List[Match])
def round_robin(body: RoundRobinRequest):
    """Round-robin fixtures; legs are clamped to 1..4, fewer than 2 teams gives []."""
    return generate_round_robin_schedule(body.team_ids, body.legs)


@router.post("/fixtures/playoff-brackets")
def playoff_brackets(body: PlayoffBracketsRequest) -> Dict[str, Any]:
    brackets = generate_playoff_brackets(body.team_ids)
    return {
        "brackets": [b.to_dict() for b in brackets],
        "matches": [m.model_dump() for m in create_playoff_matches(brackets)],
    }


@router.post("/fixtures/swiss-elimination")
def swiss_elimination(body: SwissEliminationRequest) -> Dict[str, Any]:
    schedule = generate_swiss_elimination_schedule(body.team_ids, body.league_rounds)
    return {
        "league_matches": [m.model_dump() for m in schedule.league_matches],
        "elimination_matches": [m.model_dump() for m in schedule.elimination_matches],
        "elimination_rounds": [r.to_dict() for r in schedule.elimination_rounds],
        "final_four": [b.to_dict() for b in schedule.final_four],
    }


@router.post("/fixtures/groups-with-divisions")
def groups_with_divisions(body: GroupsWithDivisionsRequest) -> Dict[str, Any]:
    config = body.config
    schedule = generate_groups_with_divisions_schedule(
        body.team_ids,
        number_of_groups=config.number_of_groups,
        teams_per_group=config.teams_per_group,
        group_rounds=config.group_rounds,
        existing_groups=config.groups,
        rng=make_rng(body.shuffle_seed),
    )
    return {
        "groups": schedule.groups,
        "playoff_round_offset": schedule.playoff_round_offset,
        "group_matches": [m.model_dump() for m in schedule.group_matches],
        "division_matches": [m.model_dump() for m in schedule.division_matches],
        "division_brackets": {
            str(division): [b.to_dict() for b in brackets]
            for division, brackets in schedule.division_brackets.items()
        },
    }


@router.post("/fixtures/custom-playoff")
def custom_playoff(body: CustomPlayoffRequest) -> Dict[str, Any]:
    rounds = generate_homebush_playoff(
        seeded_team_ids=body.seeded_team_ids,
        team_count=body.config.team_count,
        re_seed_round5=body.config.re_seed_round5,
    )
    if not rounds:
        raise HTTPException(status_code=400, detail="Homebush playoff needs 8 or 9 seeded teams")
    return {
        "rounds": [r.to_dict() for r in rounds],
        "matches": [m.model_dump() for m in custom_playoff_matches(rounds)],
    }


@router.post("/tournaments/schedule")
def tournament_schedule(body: TournamentScheduleRequest) -> Dict[str, Any]:
    try:
        schedule = build_tournament_schedule(body.team_ids, body.format, rng=make_rng(body.shuffle_seed))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return schedule.to_dict()
