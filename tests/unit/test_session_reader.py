"""Tests for the session log block reader."""

import pytest

from kolviz.parser.patterns import PLAYER_SNAPSHOT_DELIMITER
from kolviz.parser.session_reader import BlockType, LineSource, SessionLogReader


def read_blocks(text):
    return list(SessionLogReader(text.splitlines()))


class TestLineSource:
    """Tests for mark/reset lookahead."""

    def test_reset_returns_to_mark(self):
        src = LineSource(["a\n", "b\n", "c\n"])
        src.mark()
        assert src.read_line() == "a"
        assert src.read_line() == "b"
        src.reset()

        assert src.read_line() == "a"

    def test_line_past_limit_is_dropped(self):
        src = LineSource(["aaaa", "bbbb", "cccc"])
        src.mark(read_ahead_limit=6)
        src.read_line()
        src.read_line()
        src.reset()

        assert src.read_line() == "aaaa"
        assert src.read_line() == "cccc"

    def test_long_line_does_not_lose_the_mark(self):
        src = LineSource(["[2] The Haunted Pantry", "y" * 9000, "Encounter: z"])
        src.mark()
        assert src.read_line() == "[2] The Haunted Pantry"
        assert len(src.read_line()) == 9000
        src.reset()

        assert src.read_line() == "[2] The Haunted Pantry"
        assert src.read_line() == "Encounter: z"

    def test_returns_none_at_end(self):
        src = LineSource([])
        assert src.read_line() is None


class TestSessionLogReader:
    """Tests for block classification and extents."""

    def test_classifies_sample_log(self, sample_session_log):
        with open(sample_session_log, encoding="utf-8") as f:
            types = [block.block_type for block in SessionLogReader(f)]

        assert types == [
            BlockType.ASCENSION_DATA,
            BlockType.OTHER,
            BlockType.OTHER,
            BlockType.ENCOUNTER,
            BlockType.ENCOUNTER,
            BlockType.CONSUMABLE,
            BlockType.ENCOUNTER,
            BlockType.OTHER,
            BlockType.ENCOUNTER,
            BlockType.OTHER,
            BlockType.ENCOUNTER,
        ]

    def test_empty_log_has_no_blocks(self):
        reader = SessionLogReader([])

        assert not reader.has_next()
        assert list(reader) == []

    def test_reading_past_the_end_raises(self):
        reader = SessionLogReader(["[1] The Spooky Forest", "Encounter: spooky vampire"])
        reader.next_block()

        assert not reader.has_next()
        with pytest.raises(EOFError):
            reader.next_block()

    def test_combat_continues_past_blank_line(self):
        blocks = read_blocks(
            "[10] The Haunted Kitchen\n"
            "Encounter: paper towelgeist\n"
            "Round 0: Hero wins initiative!\n"
            "\n"
            "Round 1: Hero attacks!\n"
            "Round 1: Hero wins the fight!\n"
            "\n"
            "[11] The Haunted Kitchen\n"
            "Encounter: zombie chef\n"
        )

        assert len(blocks) == 2
        assert blocks[0].lines[-1] == "Round 1: Hero wins the fight!"
        assert len(blocks[0].lines) == 5

    def test_skips_noise_and_overlong_lines(self):
        blocks = read_blocks(
            "mall.php?whichstore=123\n"
            + "x" * 500 + "\n"
            "\n"
            "familiar Mosquito (1 lbs)\n"
        )

        assert len(blocks) == 1
        assert blocks[0].lines == ("familiar Mosquito (1 lbs)",)

    def test_consumable_block(self):
        blocks = read_blocks("Buy and eat 1 fortune cookie for 40 Meat\nYou gain 1 Adventure\n")

        assert blocks[0].block_type == BlockType.CONSUMABLE
        assert len(blocks[0].lines) == 2

    def test_service_block_has_four_lines(self):
        blocks = read_blocks(
            "Took choice 1089/1: Donate Blood\n"
            "choice.php?whichchoice=1089&option=1\n"
            "You lose 60 Adventures\n"
            "You acquire an item: blood-drive sticker\n"
            "familiar Mosquito (1 lbs)\n"
        )

        assert blocks[0].block_type == BlockType.SERVICE
        assert len(blocks[0].lines) == 4
        assert blocks[1].block_type == BlockType.OTHER

    def test_player_snapshot_block(self):
        blocks = read_blocks(
            f"{PLAYER_SNAPSHOT_DELIMITER}\n"
            "\tPlayer Snapshot\n"
            f"{PLAYER_SNAPSHOT_DELIMITER}\n"
            "\n"
            "Class: Sauceror\n"
            "\n"
            "Mys: 25 (20), tnp = 8\n"
            f"{PLAYER_SNAPSHOT_DELIMITER}\n"
            "\n"
            "familiar Mosquito (1 lbs)\n"
        )

        assert [b.block_type for b in blocks] == [BlockType.PLAYER_SNAPSHOT, BlockType.OTHER]
        assert "Class: Sauceror" in blocks[0].lines

    def test_combing_block(self):
        blocks = read_blocks("Combing the Beach Head\nYou acquire an item: driftwood\n")

        assert blocks[0].block_type == BlockType.COMBING
