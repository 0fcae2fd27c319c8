"""Session log parser - drives block reading, block parsing and the post-pass."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from kolviz.config.settings import Settings
from kolviz.core.log_data import LogData
from kolviz.core.post_pass import finalize
from kolviz.data.reference import ReferenceData, load_reference_data
from kolviz.parser.block_parsers import (
    AscensionDataBlockParser,
    ConsumableBlockParser,
    EncounterBlockParser,
    HybridBlockParser,
    PlayerSnapshotBlockParser,
    ServiceBlockParser,
)
from kolviz.parser.context import ParseContext
from kolviz.parser.line_parsers import (
    DayChangeParser,
    EquipmentParser,
    FamiliarChangeParser,
    ItemAcquisitionParser,
    LearnedSkillParser,
    LineParser,
    MeatGainType,
    MeatParser,
    MeatSpentParser,
    MPGainParser,
    MPGainType,
    NotesParser,
    PoolMPBuffParser,
    PullParser,
    SkillCastParser,
    StatParser,
    parse_first,
)
from kolviz.parser.patterns import (
    ENCOUNTER_NAME_CAPTURE,
    FINAL_BOSS_ENDINGS,
    KING_RALPH_FREED,
    MACGUFFIN_CHOICE,
    MACGUFFIN_ENCOUNTER,
    ROUND_ZERO_INITIATIVE_PATTERN,
    SERVICE_END_PREFIX,
    SORCERESS_CHAMBER,
    WON_FIGHT_SUFFIX,
)
from kolviz.parser.session_reader import Block, BlockType, SessionLogReader

logger = logging.getLogger(__name__)

LOG_FILE_SUFFIX = ".txt"

# The final boss of Dark Gyffte is named as the character reversed
DARK_GYFFTE_BOSS_PREFIX = "Encounter: Wa"


def _won_fight(lines: Iterable[str]) -> bool:
    return any(line.endswith(WON_FIGHT_SUFFIX) for line in lines)


def _is_dark_gyffte_boss(lines: tuple[str, ...]) -> bool:
    if len(lines) < 3:
        return False
    player = ROUND_ZERO_INITIATIVE_PATTERN.search(lines[2])
    boss = ENCOUNTER_NAME_CAPTURE.search(lines[1])
    if player is None or boss is None:
        return False
    return player.group(1).strip().lower()[::-1] == boss.group(1).strip().lower()


def is_run_finished(block: Block) -> bool:
    """
    Check whether a block ends the ascension.

    A run ends with a won fight against the final boss, the last Community
    Service choice, Ed handing back the MacGuffin or King Ralph being freed.
    """
    lines = block.lines
    if block.block_type == BlockType.ENCOUNTER:
        if len(lines) < 2:
            return False
        if lines[1].endswith(FINAL_BOSS_ENDINGS):
            return _won_fight(lines)
        if SORCERESS_CHAMBER in lines[0]:
            if _is_dark_gyffte_boss(lines) or DARK_GYFFTE_BOSS_PREFIX in lines[1]:
                return _won_fight(lines)
        return False

    if block.block_type == BlockType.SERVICE:
        return bool(lines) and lines[0].startswith(SERVICE_END_PREFIX)

    if block.block_type == BlockType.OTHER:
        if len(lines) > 2 and MACGUFFIN_ENCOUNTER in lines[1]:
            return MACGUFFIN_CHOICE in lines
        return len(lines) > 1 and KING_RALPH_FREED in lines[1]

    return False


def log_name_from_path(path: Path) -> str:
    name = path.name
    if name.endswith(LOG_FILE_SUFFIX):
        name = name[: -len(LOG_FILE_SUFFIX)]
    return name


class MafiaLogParser:
    """
    Parser for raw KoLmafia session logs.

    Blocks are read one at a time and handed to the block parser for their
    type; blocks of no special type go through the loose line parsers.
    After the last block the log data is finalized.

    Example:
        parser = MafiaLogParser(Path("Hero_20110101.txt"))
        log_data = parser.parse()
    """

    def __init__(
        self,
        log_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
        reference: Optional[ReferenceData] = None,
    ) -> None:
        """
        Initialize parser.

        Args:
            log_path: Session log to read; only needed by parse()
            settings: Parsing flags, defaults to Settings()
            reference: Lookup tables, defaults to the bundled tables
        """
        self.log_path = Path(log_path) if log_path is not None else None
        self.settings = settings or Settings()
        self.reference = reference or load_reference_data()
        self._ctx = ParseContext(
            log_data=LogData(is_detailed=True),
            reference=self.reference,
            settings=self.settings,
        )
        if self.log_path is not None:
            self._ctx.log_data.log_name = log_name_from_path(self.log_path)

        include_notes = self.settings.include_notes
        self._encounter_parser = EncounterBlockParser(include_notes)
        self._consumable_parser = ConsumableBlockParser(include_notes)
        self._block_parsers = {
            BlockType.PLAYER_SNAPSHOT: PlayerSnapshotBlockParser(),
            BlockType.ASCENSION_DATA: AscensionDataBlockParser(),
            BlockType.HYBRID_DATA: HybridBlockParser(),
            BlockType.SERVICE: ServiceBlockParser(),
            BlockType.ENCOUNTER: self._encounter_parser,
            BlockType.CONSUMABLE: self._consumable_parser,
        }
        self._line_parsers: list[LineParser] = [
            ItemAcquisitionParser(),
            SkillCastParser(),
            FamiliarChangeParser(),
            MeatParser(MeatGainType.OTHER),
            MeatSpentParser(),
            StatParser(),
            MPGainParser(MPGainType.NOT_ENCOUNTER),
            EquipmentParser(),
            PullParser(),
            PoolMPBuffParser(),
            DayChangeParser(),
            LearnedSkillParser(),
        ]
        if include_notes:
            self._line_parsers.append(NotesParser())

    @property
    def log_data(self) -> LogData:
        return self._ctx.log_data

    @property
    def context(self) -> ParseContext:
        return self._ctx

    def parse(self) -> LogData:
        """
        Read and parse the whole session log.

        Returns:
            Finalized log data

        Raises:
            ValueError: If no log path was given
            OSError: If the log cannot be opened or read
        """
        if self.log_path is None:
            raise ValueError("No log path given")

        logger.info("Parsing session log %s", self.log_path)
        with open(self.log_path, encoding="utf-8", errors="replace") as f:
            return self.parse_lines(f)

    def parse_lines(self, lines: Iterable[str]) -> LogData:
        """
        Parse session log lines and finalize the result.

        Args:
            lines: Raw log lines, with or without line endings

        Returns:
            Finalized log data
        """
        blocks = 0
        for block in SessionLogReader(lines):
            if block.block_type == BlockType.COMBING:
                continue
            blocks += 1
            self.parse_block(block)
            if not self.settings.old_ascension_counting and is_run_finished(block):
                logger.info("Run finished on turn %d", self.log_data.last_turn_number)
                break

        finalize(self.log_data, self.reference)
        logger.info(
            "Parsed %d blocks into %d turns over %d days",
            blocks,
            len(self.log_data.turns),
            len(self.log_data.day_changes),
        )
        return self.log_data

    def parse_block(self, block: Block) -> None:
        """Hand a block to the parser for its type."""
        block_parser = self._block_parsers.get(block.block_type)
        if block_parser is not None:
            block_parser.parse(block.lines, self._ctx)
            return
        for line in block.lines:
            parse_first(self._line_parsers, line, self._ctx)


def parse_session_log(
    log_path: Path,
    settings: Optional[Settings] = None,
    reference: Optional[ReferenceData] = None,
) -> LogData:
    """
    Parse a raw session log file.

    Args:
        log_path: Session log to read
        settings: Parsing flags
        reference: Lookup tables

    Returns:
        Finalized log data

    Raises:
        OSError: If the log cannot be read
    """
    return MafiaLogParser(log_path, settings, reference).parse()
