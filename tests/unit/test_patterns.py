"""Tests for regex patterns."""

from kolviz.parser.patterns import (
    ASCEND_LOG_NAME_CAPTURE,
    CONSUMABLE_PATTERN,
    CONSUMED_CAPTURE,
    DAY_CHANGE_PATTERN,
    FAMILIAR_CHANGE_CAPTURE,
    GAIN_LOSE_PATTERN,
    SERVICE_CAPTURE,
    TURN_INTERVAL_CAPTURE,
    TURN_NUMBER_PATTERN,
)


class TestGainLosePattern:
    """Tests for gain and loss lines."""

    def test_matches_after_battle_gain(self):
        assert GAIN_LOSE_PATTERN.match("After Battle: You gain 12 Wizardliness")

    def test_matches_thousands(self):
        assert GAIN_LOSE_PATTERN.match("You gain 1,234 Meat")

    def test_no_match_without_amount(self):
        assert GAIN_LOSE_PATTERN.match("You gain a level!") is None


class TestTurnPatterns:
    """Tests for turn numbers and rundown intervals."""

    def test_single_turn_number(self):
        match = TURN_NUMBER_PATTERN.match("[123] The Spooky Forest")
        assert match.groups() == ("123", None)

    def test_turn_range(self):
        match = TURN_NUMBER_PATTERN.match("[123-125] Cook 3 painful penne pasta")
        assert match.groups() == ("123", "125")

    def test_interval_with_stats(self):
        match = TURN_INTERVAL_CAPTURE.match("[13-17] The Haunted Pantry [12,-3,4]")
        assert match.groups() == ("13", "17", "The Haunted Pantry", "12", "-3", "4")

    def test_interval_without_stats(self):
        match = TURN_INTERVAL_CAPTURE.match("[13] The Haunted Pantry")
        assert match.group(3) == "The Haunted Pantry"
        assert match.group(4) is None


class TestLinePatterns:
    """Tests for single-line event patterns."""

    def test_day_change_starts_at_day_two(self):
        assert DAY_CHANGE_PATTERN.fullmatch("===========Day 2===========")
        assert DAY_CHANGE_PATTERN.fullmatch("===Day 1===") is None

    def test_familiar_change(self):
        match = FAMILIAR_CHANGE_CAPTURE.search("familiar Frumious Bandersnatch (20 lbs)")
        assert match.groups() == ("Frumious Bandersnatch", "20")

    def test_consumable_usage(self):
        assert CONSUMABLE_PATTERN.fullmatch("eat 2 hot hi mein")
        assert CONSUMABLE_PATTERN.fullmatch("Buy and drink 1 shot of rotgut for 56 Meat")
        assert CONSUMABLE_PATTERN.fullmatch("equip acc1 plexiglass pocketwatch") is None

    def test_community_service_choice(self):
        assert SERVICE_CAPTURE.search("Took choice 1089/30: Donate Body to Science").group(1) == "30"

    def test_consumed_rundown_line(self):
        match = CONSUMED_CAPTURE.match("     o> Ate 2 hot hi mein (26 adventures gained) [0,12,0]")
        assert match.groups() == ("Ate", "2", "hot hi mein")

    def test_ascension_log_name(self):
        match = ASCEND_LOG_NAME_CAPTURE.match("Hero_ascend12_20110105_20110110.txt")
        assert match.groups() == ("Hero", "12")
