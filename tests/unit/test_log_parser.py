"""Tests for the session log parser."""

import pytest

from kolviz.config.settings import Settings
from kolviz.core.models import (
    AscensionPath,
    CharacterClass,
    DayChange,
    FamiliarChange,
    GameMode,
    Statgain,
    TurnVersion,
)
from kolviz.parser.log_parser import MafiaLogParser, is_run_finished, parse_session_log
from kolviz.parser.session_reader import Block, BlockType


class TestMafiaLogParser:
    """End-to-end tests over the sample session log."""

    @pytest.fixture
    def log_data(self, sample_session_log, reference):
        return parse_session_log(sample_session_log, reference=reference)

    def test_ascension_data(self, log_data):
        assert log_data.log_name == "sample_session"
        assert log_data.character_class == CharacterClass.SAUCEROR
        assert log_data.game_mode == GameMode.HARDCORE
        assert log_data.ascension_path == AscensionPath.NONE

    def test_turns(self, log_data):
        turns = log_data.turns

        assert [t.turn_number for t in turns] == [0, 1, 2, 3, 4, 5]
        assert turns[1].area_name == "The Spooky Forest"
        assert turns[1].turn_version == TurnVersion.COMBAT
        assert turns[1].stat_gain == Statgain(myst=12)
        assert turns[1].meat_gain.encounter == 25
        assert turns[2].turn_version == TurnVersion.NONCOMBAT

    def test_consumable_goes_to_last_turn(self, log_data):
        cookie = log_data.turns[2].consumables_used["fortune cookie"]

        assert cookie.adventure_gain == 1
        assert cookie.stat_gain == Statgain(myst=5)

    def test_days_and_notes(self, log_data):
        assert log_data.day_changes == {1: DayChange(1, 0), 2: DayChange(2, 3)}
        assert log_data.turns[4].day_number == 2
        assert log_data.turns[4].notes == "pantry done"

    def test_familiar_and_equipment(self, log_data):
        assert log_data.familiar_changes == [FamiliarChange("Mosquito", 0)]
        assert all(t.mp_gain.encounter == 4 for t in log_data.turns[1:])

    def test_intervals(self, log_data):
        spans = [(i.area_name, i.start_turn, i.end_turn) for i in log_data.turn_intervals]

        assert spans == [
            ("Ascension Start", 0, 0),
            ("The Spooky Forest", 0, 2),
            ("The Haunted Pantry", 2, 4),
            ("The Spooky Forest", 4, 5),
        ]

    def test_levels(self, log_data):
        assert sorted(log_data.levels) == [1, 2]
        assert log_data.levels[2].level_reached_on_turn == 2
        assert log_data.levels[1].stat_gain_per_turn == pytest.approx(12.5)

    def test_notes_can_be_switched_off(self, sample_session_log, reference):
        log_data = parse_session_log(sample_session_log, Settings(include_notes=False), reference)

        assert log_data.turns[4].notes == ""

    def test_parse_without_path_raises(self):
        with pytest.raises(ValueError):
            MafiaLogParser().parse()

    def test_missing_file_raises(self, tmp_path, reference):
        with pytest.raises(OSError):
            parse_session_log(tmp_path / "missing.txt", reference=reference)

    def test_rain_man_cast_between_turns(self, reference):
        lines = [
            "[1] The Spooky Forest",
            "Encounter: spooky vampire",
            "",
            "cast 1 Rain Man",
            "",
            "[2] The Haunted Pantry",
            "Encounter: Trick or Treat!",
        ]

        log_data = MafiaLogParser(reference=reference).parse_lines(lines)

        assert [t.turn_number for t in log_data.turns] == [0, 1, 2]
        assert "rain man" in log_data.turns[1].skills_cast

    def test_overlong_line_after_turn_line(self, reference):
        lines = [
            "[1] The Spooky Forest",
            "Encounter: spooky vampire",
            "",
            "[2] The Haunted Pantry",
            "y" * 9000,
            "Encounter: Trick or Treat!",
            "You gain 5 Strongness",
            "",
            "[3] The Haunted Pantry",
            "Encounter: Trick or Treat!",
        ]

        log_data = MafiaLogParser(reference=reference).parse_lines(lines)

        assert [t.turn_number for t in log_data.turns] == [0, 1, 2, 3]
        assert log_data.turns[2].area_name == "The Haunted Pantry"
        assert log_data.turns[2].stat_gain == Statgain(mus=5)


class TestRunEnd:
    """Tests for detecting the end of an ascension."""

    FINISHED_SERVICE = Block(
        ("Took choice 1089/30: Donate Body to Science", "choice.php?whichchoice=1089&option=30"),
        BlockType.SERVICE,
    )

    def test_last_community_service_ends_run(self):
        assert is_run_finished(self.FINISHED_SERVICE)

    def test_other_community_service_does_not(self):
        block = Block(("Took choice 1089/1: Donate Blood",), BlockType.SERVICE)

        assert not is_run_finished(block)

    def test_freeing_king_ralph_ends_run(self):
        block = Block(("place.php?whichplace=nstower", "Tower: Freeing King Ralph"), BlockType.OTHER)

        assert is_run_finished(block)

    def test_final_boss_must_be_beaten(self):
        lines = (
            "[600] The Naughty Sorceress' Chamber",
            "Encounter: Naughty Sorceress (3)",
            "Round 0: Hero wins initiative!",
        )

        assert not is_run_finished(Block(lines, BlockType.ENCOUNTER))
        assert is_run_finished(Block(lines + ("Round 3: Hero wins the fight!",), BlockType.ENCOUNTER))

    def test_parsing_stops_after_run_end(self, reference):
        lines = [
            "[1] The Spooky Forest",
            "Encounter: spooky vampire",
            "",
            "Took choice 1089/30: Donate Body to Science",
            "choice.php?whichchoice=1089&option=30",
            "You acquire an item: thank you note",
            "Congratulations on finishing your service!",
            "",
            "[2] The Spooky Forest",
            "Encounter: Arboreal Respite",
        ]

        log_data = MafiaLogParser(reference=reference).parse_lines(lines)

        assert log_data.last_turn_number == 1

    def test_old_counting_keeps_parsing(self, reference):
        lines = [
            "Took choice 1089/30: Donate Body to Science",
            "choice.php?whichchoice=1089&option=30",
            "You acquire an item: thank you note",
            "Congratulations on finishing your service!",
            "",
            "[2] The Spooky Forest",
            "Encounter: Arboreal Respite",
        ]

        parser = MafiaLogParser(settings=Settings(old_ascension_counting=True), reference=reference)
        log_data = parser.parse_lines(lines)

        assert log_data.last_turn_number == 2
