"""
Planning Builder Service - team list + settings to a plateau agenda

Runs the rotation pipeline end to end:
1. Parse the team list
2. Generate candidate pairings (intra-club rule)
3. Cap matches per team (optional rematches)
4. Shuffle with the seed
5. Pack into slots across the pitches (rest rule)
6. Format slot times and build the planning payload

Recomputed from scratch on every call; deterministic for a given seed.
Degenerate input never raises: the caller gets an empty or partial agenda
plus advisory warnings.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from plateau_planner.services.match_generator import generate_all_matches
from plateau_planner.services.quota_limiter import limit_matches_per_team
from plateau_planner.services.seeded_rng import normalize_seed, seeded_shuffle
from plateau_planner.services.slot_packer import Slot, pack_schedule
from plateau_planner.services.team_parser import Team, merge_unique_labels, parse_teams
from plateau_planner.utils.clock import DEFAULT_START, fmt_time, parse_hhmm, slot_time

logger = logging.getLogger(__name__)

CSV_HEADER = ["Heure", "Terrain", "Équipe A", "Équipe B"]

TEAM_COLORS = [
    "#e11d48", "#2563eb", "#16a34a", "#d97706", "#7c3aed",
    "#0891b2", "#dc2626", "#4f46e5", "#65a30d", "#c2410c",
    "#9333ea", "#0f766e", "#be123c", "#1d4ed8", "#15803d",
    "#b45309", "#6d28d9", "#0e7490", "#b91c1c", "#4338ca",
]

WARN_NOT_ENOUGH_TEAMS = "NOT_ENOUGH_TEAMS"
WARN_NO_MATCH_POSSIBLE = "NO_MATCH_POSSIBLE"
WARN_QUOTA_TOO_HIGH = "QUOTA_TOO_HIGH"


@dataclass
class PlanningSettings:
    teams: List[str] = field(default_factory=list)
    teams_text: str = ""
    start: str = "10:00"
    pitches: int = 3
    match_min: int = 10
    break_min: int = 2
    matches_per_team: int = 3
    rest_every_x: int = 1
    forbid_intra_club: bool = True
    allow_rematches: bool = False
    seed: int = 1


class BuildWarning:
    """Advisory message attached to a build"""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message

    def to_dict(self):
        return {"code": self.code, "message": self.message}


@dataclass
class TeamSummary:
    id: int
    label: str
    club: str
    team_number: Optional[int]
    color: str
    matches: int


@dataclass
class PlanningBuild:
    data: Dict[str, Any]
    warnings: List[BuildWarning]
    seed: int
    teams: List[TeamSummary]
    agenda: List[Slot]


def team_color(index: int) -> str:
    return TEAM_COLORS[index % len(TEAM_COLORS)]


def collect_warnings(teams: List[Team], candidate_count: int, matches_per_team: int) -> List[BuildWarning]:
    warnings: List[BuildWarning] = []
    if len(teams) < 2:
        warnings.append(BuildWarning(WARN_NOT_ENOUGH_TEAMS, "Add at least 2 teams."))
    if candidate_count == 0 and len(teams) >= 2:
        warnings.append(
            BuildWarning(
                WARN_NO_MATCH_POSSIBLE,
                "No match possible with these constraints (too many teams from the same club?).",
            )
        )
    if matches_per_team >= len(teams):
        warnings.append(
            BuildWarning(WARN_QUOTA_TOO_HIGH, "Matches per team should be lower than the number of teams.")
        )
    return warnings


def agenda_to_planning_data(
    agenda: List[Slot], start_hhmm: str, pitches: int, match_min: int, break_min: int
) -> Dict[str, Any]:
    """Serialize an agenda to the stored planning shape."""
    start = parse_hhmm(start_hhmm) or DEFAULT_START
    slot_minutes = match_min + break_min
    return {
        "start": fmt_time(start),
        "pitches": pitches,
        "matchMin": match_min,
        "breakMin": break_min,
        "slots": [
            {
                "time": slot_time(start, slot.time_index, slot_minutes),
                "games": [
                    {"pitch": g.pitch, "A": g.match.a.label, "B": g.match.b.label} for g in slot.games
                ],
            }
            for slot in agenda
        ],
    }


def build_planning(settings: PlanningSettings) -> PlanningBuild:
    pitches = max(1, settings.pitches)
    per_team = max(1, settings.matches_per_team)
    rest_every_x = max(1, settings.rest_every_x)
    match_min = max(0, settings.match_min)
    break_min = max(0, settings.break_min)
    seed = normalize_seed(settings.seed)

    labels = merge_unique_labels(settings.teams, settings.teams_text.splitlines())
    teams = parse_teams("\n".join(labels))

    candidates = generate_all_matches(teams, settings.forbid_intra_club)
    limited = limit_matches_per_team(candidates, teams, per_team, settings.allow_rematches, seed)
    shuffled = seeded_shuffle(limited, seed)
    agenda = pack_schedule(shuffled, pitches, rest_every_x)

    data = agenda_to_planning_data(agenda, settings.start, pitches, match_min, break_min)

    played: Dict[int, int] = {team.id: 0 for team in teams}
    for slot in agenda:
        for game in slot.games:
            played[game.match.a.id] += 1
            played[game.match.b.id] += 1
    summaries = [
        TeamSummary(
            id=team.id,
            label=team.label,
            club=team.club,
            team_number=team.team_number,
            color=team_color(index),
            matches=played[team.id],
        )
        for index, team in enumerate(teams)
    ]

    warnings = collect_warnings(teams, len(candidates), settings.matches_per_team)

    logger.info(
        "Built planning: teams=%d candidates=%d picked=%d slots=%d pitches=%d seed=%d",
        len(teams),
        len(candidates),
        len(limited),
        len(agenda),
        pitches,
        seed,
    )
    for warning in warnings:
        logger.debug("Planning warning %s: %s", warning.code, warning.message)

    return PlanningBuild(data=data, warnings=warnings, seed=seed, teams=summaries, agenda=agenda)


def planning_to_csv(data: Dict[str, Any]) -> str:
    """One row per game: time, pitch, side A, side B."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for slot in data.get("slots") or []:
        for game in slot.get("games") or []:
            writer.writerow([slot.get("time", ""), game.get("pitch", ""), game.get("A", ""), game.get("B", "")])
    return buffer.getvalue()
