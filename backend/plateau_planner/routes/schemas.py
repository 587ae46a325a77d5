"""
Wire shapes shared by the planning routes.

PlanningData is the JSON document the planning editor saves:
  {start, pitches, matchMin, breakMin, slots: [{time, games: [{pitch, A, B}]}]}
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from plateau_planner.utils.clock import fmt_time, parse_hhmm


class GameData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pitch: int = Field(ge=1)
    team_a: str = Field(alias="A")
    team_b: str = Field(alias="B")


class SlotData(BaseModel):
    time: str
    games: List[GameData] = Field(default_factory=list)


class PlanningData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: str = "10:00"
    pitches: int = Field(default=3, ge=1)
    match_min: int = Field(default=10, ge=0, alias="matchMin")
    break_min: int = Field(default=2, ge=0, alias="breakMin")
    slots: List[SlotData] = Field(default_factory=list)

    @field_validator("start")
    @classmethod
    def validate_start(cls, v):
        parsed = parse_hhmm(v)
        if parsed is None:
            raise ValueError("start must be HH:MM")
        return fmt_time(parsed)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
