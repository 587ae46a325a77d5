"""
Matches-per-team quota.

Picks a subset of the candidate pairings so that every team plays at most
`per_team` matches. This is a greedy heuristic, not an optimal matching:

Phase 1 (fixed point)
    Shuffle the remaining candidates with the seeded stream, order them by
    (sum of both teams' current counts, count difference, random draw) and
    accept every candidate whose two teams are still under quota. Repeat
    until a full pass accepts nothing.

Phase 2 (rematches, optional)
    While some team is under quota and the scan budget lasts, take a random
    least-loaded team, pair it with a random least-loaded under-quota
    opponent it was allowed to meet in the original candidate pool, and add
    that match again under a suffixed id.

The same inputs and seed always produce the same list.
"""

import logging
from typing import Dict, List, Optional, Set

from plateau_planner.services.match_generator import Match, pair_key
from plateau_planner.services.seeded_rng import RandomStream
from plateau_planner.services.team_parser import Team

logger = logging.getLogger(__name__)

REMATCH_BUDGET_FACTOR = 3


def limit_matches_per_team(
    all_matches: List[Match],
    teams: List[Team],
    per_team: int,
    allow_rematches: bool,
    seed: int,
) -> List[Match]:
    if per_team <= 0:
        return []

    rng = RandomStream(seed)
    counts: Dict[int, int] = {team.id: 0 for team in teams}
    picked = _fill_to_quota(all_matches, counts, per_team, rng)

    if allow_rematches:
        picked.extend(_inject_rematches(all_matches, teams, picked, counts, per_team, rng))

    logger.debug(
        "Quota fill: %d candidates -> %d picked (per_team=%d, rematches=%s)",
        len(all_matches),
        len(picked),
        per_team,
        allow_rematches,
    )
    return picked


def _fill_to_quota(
    all_matches: List[Match], counts: Dict[int, int], per_team: int, rng: RandomStream
) -> List[Match]:
    remaining = list(all_matches)
    picked: List[Match] = []

    progress = True
    while progress:
        progress = False
        rng.shuffle(remaining)

        keyed = []
        for match in remaining:
            ca = counts.get(match.a.id, 0)
            cb = counts.get(match.b.id, 0)
            keyed.append(((ca + cb, abs(ca - cb), rng.random()), match))
        keyed.sort(key=lambda item: item[0])

        still_open: List[Match] = []
        for _, match in keyed:
            ca = counts.get(match.a.id, 0)
            cb = counts.get(match.b.id, 0)
            if ca < per_team and cb < per_team:
                picked.append(match)
                counts[match.a.id] = ca + 1
                counts[match.b.id] = cb + 1
                progress = True
            else:
                still_open.append(match)
        remaining = still_open

    return picked


def _least_loaded(team_ids: List[int], counts: Dict[int, int]) -> List[int]:
    """Ids sharing the minimum count, in input order."""
    best: List[int] = []
    best_count: Optional[int] = None
    for team_id in team_ids:
        c = counts.get(team_id, 0)
        if best_count is None or c < best_count:
            best_count = c
            best = [team_id]
        elif c == best_count:
            best.append(team_id)
    return best


def _inject_rematches(
    all_matches: List[Match],
    teams: List[Team],
    picked: List[Match],
    counts: Dict[int, int],
    per_team: int,
    rng: RandomStream,
) -> List[Match]:
    allowed_pairs: Set[str] = {pair_key(m.a.id, m.b.id) for m in all_matches}
    team_by_id = {team.id: team for team in teams}

    pair_used: Dict[str, int] = {}
    for m in picked:
        key = pair_key(m.a.id, m.b.id)
        pair_used[key] = pair_used.get(key, 0) + 1

    added: List[Match] = []
    budget = len(teams) * per_team * REMATCH_BUDGET_FACTOR
    while budget > 0:
        budget -= 1

        under_quota = [t.id for t in teams if counts.get(t.id, 0) < per_team]
        candidates = _least_loaded(under_quota, counts)
        if not candidates:
            break
        team_a = rng.choice(candidates)

        opponents = [
            t.id
            for t in teams
            if t.id != team_a
            and pair_key(team_a, t.id) in allowed_pairs
            and counts.get(t.id, 0) < per_team
        ]
        best_opponents = _least_loaded(opponents, counts)
        if not best_opponents:
            break
        team_b = rng.choice(best_opponents)

        key = pair_key(team_a, team_b)
        n = pair_used.get(key, 0) + 1
        pair_used[key] = n
        added.append(Match(id=f"{key}#{n}", a=team_by_id[team_a], b=team_by_id[team_b]))
        counts[team_a] = counts.get(team_a, 0) + 1
        counts[team_b] = counts.get(team_b, 0) + 1

    if added:
        logger.debug("Injected %d rematch(es) to balance quotas", len(added))
    return added
