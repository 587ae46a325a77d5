"""
Planning Builder API Routes
Runs the rotation scheduler on a team list and returns the agenda (JSON or CSV).
Nothing is persisted here; clients save the returned data via /plannings.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, Response
from pydantic import BaseModel, Field

from plateau_planner.routes.schemas import PlanningData
from plateau_planner.services.planning_builder import PlanningSettings, build_planning, planning_to_csv
from plateau_planner.services.seeded_rng import fresh_seed

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class PlanningGenerateRequest(BaseModel):
    teams: List[str] = Field(default_factory=list)
    teams_text: str = ""  # One team per line
    start: str = "10:00"
    pitches: int = 3
    match_min: int = 10
    break_min: int = 2
    matches_per_team: int = 3
    rest_every_x: int = 1
    forbid_intra_club: bool = True
    allow_rematches: bool = False
    seed: int = 1

    def to_settings(self, seed: Optional[int] = None) -> PlanningSettings:
        return PlanningSettings(
            teams=list(self.teams),
            teams_text=self.teams_text,
            start=self.start,
            pitches=self.pitches,
            match_min=self.match_min,
            break_min=self.break_min,
            matches_per_team=self.matches_per_team,
            rest_every_x=self.rest_every_x,
            forbid_intra_club=self.forbid_intra_club,
            allow_rematches=self.allow_rematches,
            seed=self.seed if seed is None else seed,
        )


class BuildWarningResponse(BaseModel):
    code: str
    message: str


class TeamSummaryResponse(BaseModel):
    id: int
    label: str
    club: str
    team_number: Optional[int] = None
    color: str
    matches: int


class PlanningBuildResponse(BaseModel):
    data: PlanningData
    warnings: List[BuildWarningResponse]
    seed: int
    teams: List[TeamSummaryResponse]


def _settings(request: PlanningGenerateRequest, regenerate: bool) -> PlanningSettings:
    if regenerate:
        seed = fresh_seed()
        logger.info("Regenerating planning with fresh seed %d", seed)
        return request.to_settings(seed=seed)
    return request.to_settings()


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/plannings/generate", response_model=PlanningBuildResponse)
def generate_planning(
    request: PlanningGenerateRequest,
    regenerate: bool = Query(False, description="Ignore the request seed and draw a fresh one"),
):
    """
    Build a plateau agenda from a team list.

    Pipeline: parse teams -> candidate pairings -> per-team quota ->
    seeded shuffle -> slot packing -> slot times.

    Never fails on degenerate input: too few teams or over-constrained
    settings yield an empty/partial agenda with warnings.
    """
    build = build_planning(_settings(request, regenerate))
    return PlanningBuildResponse(
        data=PlanningData.model_validate(build.data),
        warnings=[BuildWarningResponse(**w.to_dict()) for w in build.warnings],
        seed=build.seed,
        teams=[TeamSummaryResponse(**vars(t)) for t in build.teams],
    )


@router.post("/plannings/generate.csv")
def generate_planning_csv(
    request: PlanningGenerateRequest,
    regenerate: bool = Query(False, description="Ignore the request seed and draw a fresh one"),
):
    """Build a plateau agenda and return it as CSV (Heure, Terrain, Équipe A, Équipe B)."""
    build = build_planning(_settings(request, regenerate))
    return Response(
        content=planning_to_csv(build.data),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="planning.csv"'},
    )
