"""Tests for post-pass corrections."""

from kolviz.core.log_data import LogData
from kolviz.core.models import (
    CharacterClass,
    DayChange,
    EquipmentChange,
    FamiliarChange,
    HeaderFooterComment,
    Statgain,
    Turn,
)
from kolviz.core.post_pass import (
    add_mp_regen,
    build_turn_intervals,
    finalize,
    rebuild_day_changes,
    rebuild_equipment_changes,
    rebuild_familiar_changes,
)


def turns_on_days(day_numbers):
    return [Turn(i, "A", "a", day_number=day) for i, day in enumerate(day_numbers, start=1)]


class TestRebuildDayChanges:
    """Tests for day boundary reconstruction."""

    def test_days_start_after_last_turn_of_previous_day(self):
        days, _ = rebuild_day_changes(turns_on_days([1, 1, 1, 2, 2, 3]), {})

        assert days == {1: DayChange(1, 0), 2: DayChange(2, 3), 3: DayChange(3, 5)}

    def test_comments_stay_with_their_day(self):
        comment = HeaderFooterComment(header="second day")
        _, comments = rebuild_day_changes(turns_on_days([1, 2]), {2: comment})

        assert comments[2].header == "second day"
        assert comments[1].header == ""

    def test_stale_provisional_days_are_dropped(self, reference):
        log_data = LogData()
        log_data.add_day_change(DayChange(4, 0))
        for turn in turns_on_days([1, 1, 2]):
            log_data.add_turn_spent(turn)

        finalize(log_data, reference)

        assert sorted(log_data.day_changes) == [1, 2]
        assert log_data.day_changes[2] == DayChange(2, 2)


class TestRebuildHistories:
    """Tests for familiar and equipment history reconstruction."""

    def test_familiar_history(self):
        mosquito = FamiliarChange("Mosquito", 2)
        turns = [
            Turn(0, "A", "a"),
            Turn(2, "A", "a", familiar=mosquito),
            Turn(3, "A", "a", familiar=mosquito),
            Turn(5, "A", "a", familiar=FamiliarChange("Frumious Bandersnatch", 5)),
        ]

        assert rebuild_familiar_changes(turns) == [
            FamiliarChange("none", 0),
            mosquito,
            FamiliarChange("Frumious Bandersnatch", 5),
        ]

    def test_equipment_history_drops_repeats(self):
        turtle = EquipmentChange(1, hat="helmet turtle")
        turns = [
            Turn(0, "A", "a"),
            Turn(1, "A", "a", equipment=turtle),
            Turn(2, "A", "a", equipment=turtle),
            Turn(3, "A", "a", equipment=EquipmentChange(3, hat="helmet turtle")),
        ]

        assert rebuild_equipment_changes(turns) == [EquipmentChange(0), turtle]


class TestBuildTurnIntervals:
    """Tests for interval grouping."""

    def test_groups_consecutive_turns_by_area(self):
        turns = [
            Turn(0, "Ascension Start", "Ascension Start"),
            Turn(1, "A", "a", stat_gain=Statgain(mus=1)),
            Turn(2, "A", "a", stat_gain=Statgain(mus=2)),
            Turn(3, "B", "b"),
            Turn(4, "A", "a"),
        ]

        intervals = build_turn_intervals(turns)

        assert [(i.area_name, i.start_turn, i.end_turn) for i in intervals] == [
            ("Ascension Start", 0, 0),
            ("A", 0, 2),
            ("B", 2, 3),
            ("A", 3, 4),
        ]
        assert intervals[1].stat_gain == Statgain(mus=3)
        assert len(intervals[1].turns) == 2


class TestAddMPRegen:
    """Tests for equipment MP regeneration."""

    def test_adds_regen_of_worn_items(self, reference):
        turn = Turn(1, "A", "a", equipment=EquipmentChange(1, acc1="plexiglass pocketwatch"))
        add_mp_regen([turn], reference)

        assert turn.mp_gain.encounter == 4

    def test_regen_goes_to_leading_encounter(self, reference):
        turn = Turn(1, "A", "a", equipment=EquipmentChange(1, acc1="plexiglass pocketwatch"))
        turn.add_encounter(Turn(1, "A", "b").to_encounter())
        add_mp_regen([turn], reference)

        assert turn.encounters[0].mp_gain.encounter == 4
        assert turn.encounters[1].mp_gain.encounter == 0


class TestFinalize:
    """Tests for the whole post-pass."""

    def test_runs_only_once(self, reference):
        log_data = LogData()
        log_data.add_turn_spent(
            Turn(1, "A", "a", equipment=EquipmentChange(1, acc1="plexiglass pocketwatch"))
        )

        finalize(log_data, reference)
        finalize(log_data, reference)

        assert log_data.finalized
        assert log_data.turns[1].mp_gain.encounter == 4

    def test_guesses_class_and_computes_levels(self, reference):
        log_data = LogData()
        log_data.add_turn_spent(Turn(1, "A", "a", stat_gain=Statgain(mox=100)))

        finalize(log_data, reference)

        assert log_data.character_class == CharacterClass.DISCO_BANDIT
        assert sorted(log_data.levels) == [1, 2, 3]
        assert log_data.levels[3].level_reached_on_turn == 1

    def test_builds_intervals_of_detailed_log(self, reference):
        log_data = LogData()
        log_data.add_turn_spent(Turn(1, "A", "a"))
        log_data.add_turn_spent(Turn(2, "A", "a"))

        finalize(log_data, reference)

        assert [(i.area_name, i.total_turns) for i in log_data.turn_intervals] == [
            ("Ascension Start", 0),
            ("A", 2),
        ]
