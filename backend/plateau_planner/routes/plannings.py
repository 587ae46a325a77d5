"""
Planning Resource API Routes
Stores plateau plannings: a date plus the JSON agenda produced by the editor.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlmodel import Session, select

from plateau_planner.database import get_session
from plateau_planner.models.planning import Planning, as_utc, utcnow
from plateau_planner.routes.schemas import PlanningData
from plateau_planner.services.planning_builder import planning_to_csv
from plateau_planner.services.team_parser import teams_from_planning

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class PlanningCreateRequest(BaseModel):
    date: datetime
    data: PlanningData

    @field_validator("date")
    @classmethod
    def date_to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class PlanningUpdateRequest(BaseModel):
    data: PlanningData
    date: Optional[datetime] = None

    @field_validator("date")
    @classmethod
    def date_to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v


class PlanningResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    date: datetime
    data: Dict[str, Any]
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class PlanningTeamsResponse(BaseModel):
    planning_id: int
    teams: List[str]


def _get_planning_or_404(session: Session, planning_id: int) -> Planning:
    planning = session.get(Planning, planning_id)
    if not planning:
        raise HTTPException(status_code=404, detail="Planning not found")
    return planning


# ============================================================================
# Planning CRUD Endpoints
# ============================================================================


@router.get("/plannings", response_model=List[PlanningResponse])
def list_plannings(session: Session = Depends(get_session)):
    """List plannings, most recent plateau day first."""
    plannings = session.exec(select(Planning)).all()
    return sorted(plannings, key=lambda p: (as_utc(p.date), p.id), reverse=True)


@router.post("/plannings", response_model=PlanningResponse, status_code=201)
def create_planning(request: PlanningCreateRequest, session: Session = Depends(get_session)):
    """Store a new planning."""
    planning = Planning(date=request.date, data=request.data.to_wire())
    try:
        session.add(planning)
        session.commit()
        session.refresh(planning)
    except Exception as e:
        session.rollback()
        logger.error(f"Failed to create planning: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("Created planning %d (%d slots)", planning.id, len(planning.data.get("slots", [])))
    return planning


@router.get("/plannings/{planning_id}", response_model=PlanningResponse)
def get_planning(planning_id: int, session: Session = Depends(get_session)):
    """Get a planning by ID"""
    return _get_planning_or_404(session, planning_id)


@router.put("/plannings/{planning_id}", response_model=PlanningResponse)
def update_planning(planning_id: int, request: PlanningUpdateRequest, session: Session = Depends(get_session)):
    """Replace a planning's agenda (and date, when given)."""
    planning = _get_planning_or_404(session, planning_id)

    planning.data = request.data.to_wire()
    if request.date is not None:
        planning.date = request.date
    planning.updated_at = utcnow()

    try:
        session.add(planning)
        session.commit()
        session.refresh(planning)
    except Exception as e:
        session.rollback()
        logger.error(f"Failed to update planning {planning_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return planning


@router.delete("/plannings/{planning_id}")
def delete_planning(planning_id: int, session: Session = Depends(get_session)):
    """Delete a planning."""
    planning = _get_planning_or_404(session, planning_id)
    session.delete(planning)
    session.commit()
    return {"ok": True}


# ============================================================================
# Derived views
# ============================================================================


@router.get("/plannings/{planning_id}/teams", response_model=PlanningTeamsResponse)
def get_planning_teams(planning_id: int, session: Session = Depends(get_session)):
    """
    Team labels appearing in a stored planning, in first-appearance order.

    Feed them back to /plannings/generate to rebuild the agenda with new
    settings or a new seed.
    """
    planning = _get_planning_or_404(session, planning_id)
    return PlanningTeamsResponse(planning_id=planning.id, teams=teams_from_planning(planning.data))


@router.get("/plannings/{planning_id}/export.csv")
def export_planning_csv(planning_id: int, session: Session = Depends(get_session)):
    """Stored planning as CSV (Heure, Terrain, Équipe A, Équipe B)."""
    planning = _get_planning_or_404(session, planning_id)
    return Response(
        content=planning_to_csv(planning.data),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="planning-{planning.id}.csv"'},
    )
