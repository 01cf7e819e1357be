"""
API Routes for standings and bracket resolution (stateless).
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from fixture_engine.models.match import Match
from fixture_engine.models.standing import TeamStanding
from fixture_engine.routes.schemas import BracketPayload, CustomPlayoffRoundPayload, make_rng, to_brackets
from fixture_engine.services.advancement import advance_playoff_brackets
from fixture_engine.services.bracket_generator import apply_results_to_brackets, populate_playoff_brackets
from fixture_engine.services.custom_playoff import (
    custom_playoff_matches,
    homebush_eliminated_teams,
    resolve_homebush_playoff,
    restore_homebush_playoff,
)
from fixture_engine.services.groups_divisions import calculate_group_tables
from fixture_engine.services.standings import build_league_table, eliminated_teams

router = APIRouter()


class LeagueTableRequest(BaseModel):
    team_ids: List[str]
    matches: List[Match]
    disciplinary: Dict[str, int] = {}
    include_playoffs: bool = False
    # Seeds the coin toss; omitted falls back to team id order
    coin_toss_seed: Optional[int] = None


class LeagueTableResponse(BaseModel):
    table: List[TeamStanding]
    eliminated: List[str]


class GroupTablesRequest(BaseModel):
    matches: List[Match]
    groups: List[List[str]]


class PopulateRequest(BaseModel):
    brackets: List[BracketPayload]
    final_standings: List[str]


class AdvanceRequest(BaseModel):
    brackets: List[BracketPayload]
    # Persisted results to copy onto the bracket before advancing
    matches: List[Match] = []
    id_prefix: str = ""


class CustomPlayoffResolveRequest(BaseModel):
    rounds: List[CustomPlayoffRoundPayload]
    # Original table order; fills seed slots and drives the round 5 re-seed
    seeded_team_ids: List[str]


@router.post("/standings/table", response_model=LeagueTableResponse)
def league_table(body: LeagueTableRequest):
    rng = make_rng(body.coin_toss_seed) if body.coin_toss_seed is not None else None
    table = build_league_table(
        body.matches,
        body.team_ids,
        disciplinary=body.disciplinary,
        rng=rng,
        include_playoffs=body.include_playoffs,
    )
    return LeagueTableResponse(table=table, eliminated=sorted(eliminated_teams(body.matches)))


@router.post("/standings/groups", response_model=Dict[int, List[TeamStanding]])
def group_tables(body: GroupTablesRequest):
    return calculate_group_tables(body.matches, body.groups)


@router.post("/brackets/populate", response_model=List[BracketPayload])
def populate_brackets(body: PopulateRequest):
    populated = populate_playoff_brackets(to_brackets(body.brackets), body.final_standings)
    return [b.to_dict() for b in populated]


@router.post("/brackets/advance")
def advance_brackets(body: AdvanceRequest):
    brackets = to_brackets(body.brackets)
    if body.matches:
        apply_results_to_brackets(brackets, body.matches, id_prefix=body.id_prefix)
    summary = advance_playoff_brackets(brackets)
    return {
        "brackets": [b.to_dict() for b in brackets],
        "summary": summary.to_dict(),
    }


@router.post("/custom-playoff/resolve")
def resolve_custom_playoff(body: CustomPlayoffResolveRequest):
    """Fill Homebush TBD slots from entered results and report who is out."""
    rounds = restore_homebush_playoff([r.model_dump() for r in body.rounds], body.seeded_team_ids)
    if not rounds:
        raise HTTPException(status_code=400, detail="Homebush playoff needs 8 or 9 seeded teams")
    summary = resolve_homebush_playoff(rounds, body.seeded_team_ids)
    return {
        "rounds": [r.to_dict() for r in rounds],
        "matches": [m.model_dump() for m in custom_playoff_matches(rounds)],
        "eliminated": sorted(homebush_eliminated_teams(rounds)),
        "summary": summary.to_dict(),
    }
