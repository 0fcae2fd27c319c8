"""Tests for the pre-parsed turn rundown parser."""

from pathlib import Path

import pytest

from kolviz.core.models import (
    CharacterClass,
    ConsumableVersion,
    DayChange,
    FamiliarChange,
    NumberedName,
    ParsedLogClass,
    Pull,
    Statgain,
)
from kolviz.parser.preparsed_parser import (
    PreparsedLogParser,
    log_name_from_rundown_path,
    parse_preparsed_log,
)


@pytest.fixture
def log_data(sample_preparsed_log, reference):
    return parse_preparsed_log(sample_preparsed_log, reference=reference)


class TestPreparsedLogParser:
    """Tests for reading the sample rundown."""

    def test_intervals(self, log_data):
        spans = [(i.area_name, i.start_turn, i.end_turn) for i in log_data.turn_intervals]

        assert spans == [
            ("Ascension Start", 0, 0),
            ("The Spooky Forest", 0, 1),
            ("The Haunted Pantry", 1, 4),
            ("Lunchboxing", 4, 5),
            ("The Sleazy Back Alley", 5, 7),
        ]
        assert log_data.turn_intervals[2].stat_gain == Statgain(1, 20, 3)
        assert log_data.last_turn_number == 7

    def test_log_creator_and_class(self, log_data):
        assert not log_data.is_detailed
        assert log_data.parsed_log_creator == ParsedLogClass.LOG_VISUALIZER
        assert log_data.character_class == CharacterClass.PASTAMANCER
        assert sorted(log_data.levels) == [1]

    def test_days(self, log_data):
        assert log_data.day_changes == {1: DayChange(1, 0), 2: DayChange(2, 5)}

    def test_consumable_is_placed_inside_its_interval(self, log_data):
        consumable = log_data.turn_intervals[2].consumables_used[0]

        assert consumable.name == "fortune cookie"
        assert consumable.version == ConsumableVersion.FOOD
        assert consumable.turn_number == 2
        assert consumable.adventure_gain == 1
        assert consumable.stat_gain == Statgain(myst=5)
        assert consumable.day_number == 1

    def test_dropped_items(self, log_data):
        items = log_data.turn_intervals[1].dropped_items

        assert [(i.name, i.turn_number) for i in items] == [("spooky sapling", 1)]

    def test_familiars_pulls_and_runaways(self, log_data):
        assert FamiliarChange("Mosquito", 3) in log_data.familiar_changes
        assert log_data.pulls == [
            Pull("stuffed shoulder parrot", 1, 6, 2),
            Pull("wet stew", 2, 6, 2),
        ]
        alley = log_data.turn_intervals[-1]
        assert alley.free_runaways == 1
        assert alley.attempted_free_runaways == 2

    def test_semirare_list(self, log_data):
        assert log_data.semirares == [NumberedName("Lunchboxing", 5)]

    def test_stops_at_end_of_rundown(self, log_data):
        assert all(i.area_name != "Should Not Be Read" for i in log_data.turn_intervals)

    def test_log_name(self, log_data):
        assert log_data.log_name == "sample_preparsed"


class TestAFHParserLogs:
    """Tests for rundowns without stat columns."""

    def test_familiar_change_is_moved_back_one_turn(self, reference):
        parser = PreparsedLogParser(reference=reference)
        log_data = parser.parse_lines([
            "[1] The Spooky Forest",
            "[2-4] The Haunted Pantry",
            "     -> Turn [3] Mosquito (Buzz)",
        ])

        assert log_data.parsed_log_creator == ParsedLogClass.AFH_PARSER
        assert FamiliarChange("Mosquito", 2) in log_data.familiar_changes

    def test_drop_line_with_several_items(self, reference):
        log_data = PreparsedLogParser(reference=reference).parse_lines([
            "[1] The Spooky Forest",
            "[2-4] The Haunted Pantry",
            "     +> [3] Got spooky sapling, Spooky-Gro fertilizer, Spooky Temple map",
        ])

        items = log_data.turn_intervals[-1].dropped_items
        assert [i.name for i in items] == ["spooky sapling", "Spooky-Gro fertilizer", "Spooky Temple map"]
        assert all(i.amount == 1 for i in items)
        assert all(i.turn_number == 3 for i in items)

    def test_parse_without_path_raises(self):
        with pytest.raises(ValueError):
            PreparsedLogParser().parse()


class TestLogNameFromRundownPath:
    """Tests for rundown file names."""

    def test_ascension_log_name(self):
        assert log_name_from_rundown_path(Path("Hero_ascend12_20110105_20110110.txt")) == "Hero-12"

    def test_plain_name(self):
        assert log_name_from_rundown_path(Path("my_run.txt")) == "my_run"
