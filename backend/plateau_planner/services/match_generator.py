"""
Candidate pairings for a plateau.

Every unordered pair of teams is considered once, in i-major / j-minor order
over the parsed team list. With the intra-club rule on, two teams of the same
club (case-insensitive, both clubs non-empty) never meet.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from plateau_planner.services.team_parser import Team


@dataclass(frozen=True)
class Match:
    id: str  # "<a.id>-<b.id>", rematches get a "#<n>" suffix
    a: Team
    b: Team

    def team_ids(self):
        return self.a.id, self.b.id


def pair_key(a_id: int, b_id: int) -> str:
    """Order-independent key for a pairing."""
    return f"{a_id}-{b_id}" if a_id < b_id else f"{b_id}-{a_id}"


def same_club(a: Team, b: Team) -> bool:
    return bool(a.club) and bool(b.club) and a.club.lower() == b.club.lower()


def generate_all_matches(teams: List[Team], forbid_intra_club: bool = True) -> List[Match]:
    matches: List[Match] = []
    for i in range(len(teams)):
        for j in range(i + 1, len(teams)):
            a, b = teams[i], teams[j]
            if forbid_intra_club and same_club(a, b):
                continue
            matches.append(Match(id=f"{a.id}-{b.id}", a=a, b=b))
    return matches
