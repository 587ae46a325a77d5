"""
Planning builder: full pipeline, payload shape, warnings, CSV export.
"""

import csv
import io

from plateau_planner.services.planning_builder import (
    CSV_HEADER,
    TEAM_COLORS,
    WARN_NO_MATCH_POSSIBLE,
    WARN_NOT_ENOUGH_TEAMS,
    WARN_QUOTA_TOO_HIGH,
    PlanningSettings,
    build_planning,
    planning_to_csv,
)

EIGHT_TEAMS = ["Lens 1", "Lens 2", "Arras 1", "Arras 2", "Douai 1", "Lille 1", "Orchies", "Cambrai 3"]


def _codes(build):
    return [w.code for w in build.warnings]


class TestPipeline:
    def test_same_inputs_same_planning(self):
        settings = PlanningSettings(teams=EIGHT_TEAMS, pitches=3, matches_per_team=3, seed=4242)
        assert build_planning(settings).data == build_planning(settings).data

    def test_payload_shape(self):
        build = build_planning(PlanningSettings(teams=EIGHT_TEAMS, start="9:30", match_min=10, break_min=2))
        data = build.data
        assert data["start"] == "09:30"
        assert data["pitches"] == 3
        assert data["matchMin"] == 10
        assert data["breakMin"] == 2
        assert data["slots"]
        for i, slot in enumerate(data["slots"]):
            minutes = 9 * 60 + 30 + 12 * i
            assert slot["time"] == f"{minutes // 60 % 24:02d}:{minutes % 60:02d}"
            assert len(slot["games"]) <= 3
            labels = [label for g in slot["games"] for label in (g["A"], g["B"])]
            assert len(labels) == len(set(labels))
            assert set(labels) <= set(EIGHT_TEAMS)

    def test_intra_club_games_never_scheduled(self):
        build = build_planning(PlanningSettings(teams=EIGHT_TEAMS, forbid_intra_club=True))
        for slot in build.data["slots"]:
            for g in slot["games"]:
                assert {g["A"], g["B"]} != {"Lens 1", "Lens 2"}
                assert {g["A"], g["B"]} != {"Arras 1", "Arras 2"}

    def test_quota_respected(self):
        build = build_planning(PlanningSettings(teams=EIGHT_TEAMS, matches_per_team=2))
        assert all(t.matches <= 2 for t in build.teams)

    def test_team_summaries(self):
        build = build_planning(PlanningSettings(teams=EIGHT_TEAMS))
        assert [t.label for t in build.teams] == EIGHT_TEAMS
        assert build.teams[0].color == TEAM_COLORS[0]
        assert build.teams[0].club == "Lens"
        assert build.teams[6].team_number is None
        games = sum(len(s["games"]) for s in build.data["slots"])
        assert sum(t.matches for t in build.teams) == 2 * games

    def test_invalid_start_falls_back_to_ten(self):
        build = build_planning(PlanningSettings(teams=EIGHT_TEAMS, start="later"))
        assert build.data["start"] == "10:00"
        assert build.data["slots"][0]["time"] == "10:00"

    def test_numeric_settings_clamped(self):
        build = build_planning(PlanningSettings(teams=EIGHT_TEAMS, pitches=0, rest_every_x=0, matches_per_team=0))
        assert build.data["pitches"] == 1
        assert all(len(s["games"]) <= 1 for s in build.data["slots"])
        assert all(t.matches <= 1 for t in build.teams)

    def test_seed_zero_is_seed_one(self):
        assert build_planning(PlanningSettings(teams=EIGHT_TEAMS, seed=0)).seed == 1

    def test_seed_wrapping_to_zero_is_seed_one(self):
        assert build_planning(PlanningSettings(teams=EIGHT_TEAMS, seed=2**32)).seed == 1

    def test_team_list_and_text_are_merged(self):
        build = build_planning(PlanningSettings(teams=["A 1"], teams_text="A 1\n\nB 1\n"))
        assert [t.label for t in build.teams] == ["A 1", "B 1"]


class TestWarnings:
    def test_not_enough_teams(self):
        build = build_planning(PlanningSettings(teams=["Solo 1"]))
        assert WARN_NOT_ENOUGH_TEAMS in _codes(build)
        assert build.data["slots"] == []

    def test_no_team_at_all(self):
        build = build_planning(PlanningSettings())
        assert WARN_NOT_ENOUGH_TEAMS in _codes(build)
        assert build.data["slots"] == []

    def test_no_match_possible(self):
        build = build_planning(PlanningSettings(teams=["Lens 1", "Lens 2"], matches_per_team=1))
        assert _codes(build) == [WARN_NO_MATCH_POSSIBLE]
        assert build.data["slots"] == []

    def test_quota_too_high(self):
        build = build_planning(PlanningSettings(teams=["A 1", "B 1", "C 1"], matches_per_team=3))
        assert WARN_QUOTA_TOO_HIGH in _codes(build)
        assert build.data["slots"]

    def test_clean_build_has_no_warnings(self):
        assert build_planning(PlanningSettings(teams=EIGHT_TEAMS)).warnings == []


class TestCsvExport:
    def test_header_and_rows(self):
        build = build_planning(PlanningSettings(teams=EIGHT_TEAMS))
        rows = list(csv.reader(io.StringIO(planning_to_csv(build.data))))
        assert rows[0] == CSV_HEADER
        games = [(s["time"], g) for s in build.data["slots"] for g in s["games"]]
        assert len(rows) == len(games) + 1
        time_, game = games[0]
        assert rows[1] == [time_, str(game["pitch"]), game["A"], game["B"]]

    def test_empty_planning(self):
        rows = list(csv.reader(io.StringIO(planning_to_csv({"slots": []}))))
        assert rows == [CSV_HEADER]
