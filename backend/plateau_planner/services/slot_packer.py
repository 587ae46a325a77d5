"""
Slot packing - assigns matches to sequential time slots across the pitches.

Rules per slot:
- A team plays at most once in a slot.
- At most `pitches` games; pitch numbers follow acceptance order.
- A team that already played `rest_every_x` consecutive slots up to the
  previous one sits this slot out.

Teams that rested longest are served first. The rest rule is best-effort:
when nothing can be placed, the slot is emitted empty and the clock moves
on, which also guarantees termination.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set

from plateau_planner.services.match_generator import Match

logger = logging.getLogger(__name__)

NEVER_PLAYED = -999


@dataclass
class ScheduledGame:
    pitch: int  # 1-based
    match: Match


@dataclass
class Slot:
    time_index: int  # 0-based
    games: List[ScheduledGame] = field(default_factory=list)


class StreakTracker:
    """Last slot played and current consecutive-slot streak, per team."""

    def __init__(self):
        self.last_played_at: Dict[int, int] = {}
        self.consec: Dict[int, int] = {}

    def rested_since(self, team_id: int) -> int:
        return self.last_played_at.get(team_id, NEVER_PLAYED)

    def streak_entering(self, team_id: int, time_index: int) -> int:
        """Streak carried into time_index (0 if the team sat out the previous slot)."""
        if self.last_played_at.get(team_id) == time_index - 1:
            return self.consec.get(team_id, 1)
        return 0

    def record(self, team_id: int, time_index: int):
        previous = self.last_played_at.get(team_id)
        if previous == time_index - 1:
            self.consec[team_id] = self.consec.get(team_id, 1) + 1
        else:
            self.consec[team_id] = 1
        self.last_played_at[team_id] = time_index


def pack_schedule(matches: List[Match], pitches: int, rest_every_x: int) -> List[Slot]:
    pitches = max(1, pitches)
    remaining = list(matches)
    agenda: List[Slot] = []
    tracker = StreakTracker()
    time_index = 0

    while remaining:
        # Stable sort: ties keep the incoming (shuffled) order
        remaining.sort(key=lambda m: min(tracker.rested_since(m.a.id), tracker.rested_since(m.b.id)))

        used: Set[int] = set()
        accepted: List[Match] = []
        accepted_at: Set[int] = set()
        for position, match in enumerate(remaining):
            if len(accepted) >= pitches:
                break
            if match.a.id in used or match.b.id in used:
                continue
            if rest_every_x > 0 and (
                tracker.streak_entering(match.a.id, time_index) >= rest_every_x
                or tracker.streak_entering(match.b.id, time_index) >= rest_every_x
            ):
                continue
            accepted.append(match)
            accepted_at.add(position)
            used.add(match.a.id)
            used.add(match.b.id)

        if not accepted:
            logger.debug("Slot %d left empty: every remaining match needs rest", time_index)
            agenda.append(Slot(time_index=time_index))
            time_index += 1
            continue

        agenda.append(
            Slot(
                time_index=time_index,
                games=[ScheduledGame(pitch=idx + 1, match=m) for idx, m in enumerate(accepted)],
            )
        )
        remaining = [m for position, m in enumerate(remaining) if position not in accepted_at]
        for match in accepted:
            tracker.record(match.a.id, time_index)
            tracker.record(match.b.id, time_index)
        time_index += 1

    return agenda
