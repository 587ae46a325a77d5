"""
Team list parsing for plateau planning.

Turns the freeform team list (one team per line, as typed by a coach) into
Team records. Club and team number are inferred from the trailing digit
group, optionally preceded by an age category ("U9") or the word "équipe":

  "RC Lens 1"          -> club "RC Lens", team 1
  "Lille U9 - 2"       -> club "Lille", team 2
  "Arras équipe 3"     -> club "Arras", team 3
  "US Orchies"         -> club "US Orchies", no team number

Parsing never fails: an unrecognised line keeps its full label as club.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

_WHITESPACE_RE = re.compile(r"\s+")
_LINE_BREAK_RE = re.compile(r"\r?\n")

# Tried in order; the first one that matches wins.
_CLUB_TEAM_PATTERNS = [
    re.compile(r"(.*?)[\s-]*(?:U[0-9]+[-\s]*)?(?:équipe\s*)?([0-9]+)$", re.IGNORECASE),
    re.compile(r"(.*?)[\s-]*([0-9]+)$", re.IGNORECASE),
]


@dataclass(frozen=True)
class Team:
    id: int  # 1-based position in the parsed list
    label: str
    club: str
    team_number: Optional[int] = None


def normalize_name(name: str) -> str:
    """Collapse internal whitespace and trim."""
    return _WHITESPACE_RE.sub(" ", name).strip()


def extract_club_and_team(line: str) -> Tuple[str, Optional[int]]:
    """Infer (club, team_number) from a team label."""
    original = normalize_name(line)
    if not original:
        return "", None
    for pattern in _CLUB_TEAM_PATTERNS:
        m = pattern.search(original)
        if m:
            return normalize_name(m.group(1)), int(m.group(2))
    return original, None


def parse_teams(text: Optional[str]) -> List[Team]:
    labels = [normalize_name(line) for line in _LINE_BREAK_RE.split(text or "")]
    teams: List[Team] = []
    for label in labels:
        if not label:
            continue
        club, team_number = extract_club_and_team(label)
        teams.append(Team(id=len(teams) + 1, label=label, club=club, team_number=team_number))
    return teams


def merge_unique_labels(*lists: Iterable[str]) -> List[str]:
    """Order-preserving union of label lists, normalized, blanks and repeats dropped."""
    seen = set()
    merged: List[str] = []
    for labels in lists:
        for item in labels:
            normalized = normalize_name(item)
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            merged.append(normalized)
    return merged


def teams_from_planning(data: Optional[Dict[str, Any]]) -> List[str]:
    """
    Recover the team labels of a stored planning from its slots.

    Labels come back in first-appearance order (side A before side B), which
    lets an existing planning be regenerated with the same team list.
    """
    if not data:
        return []
    seen = set()
    labels: List[str] = []
    for slot in data.get("slots") or []:
        for game in slot.get("games") or []:
            for side in ("A", "B"):
                label = game.get(side)
                if label and label not in seen:
                    seen.add(label)
                    labels.append(label)
    return labels
