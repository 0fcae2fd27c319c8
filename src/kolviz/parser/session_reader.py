"""Session log reader - splits a raw session log into classified blocks."""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Iterator, Optional

from kolviz.parser.patterns import (
    BROKEN_AREAS_ENCOUNTER_SET,
    COMBAT_ROUND_PREFIX,
    COMBING_MARKERS,
    CONSUMABLE_PATTERN,
    CONSUMABLE_PREFIXES,
    ASCENSION_DATA_PREFIX,
    ED_RETURN_CHOICES,
    ED_UNDERWORLD_CHOICE,
    ENCOUNTER_PREFIX,
    FAMILIAR_POUND_STRING,
    HYBRID_PREFIXES,
    MAX_LINE_LENGTH,
    PLAYER_SNAPSHOT_DELIMITER,
    PLAYER_SNAPSHOT_HEADER,
    RAIN_MAN_CAST,
    SERVICE_PREFIX,
    SKIPPED_LINE_PREFIXES,
    TURN_LINE_PATTERN,
)

logger = logging.getLogger(__name__)

# Characters that may be read between mark() and reset()
MARK_LIMIT = 8192

# Lines checked after a blank line for a combat that goes on
COMBAT_LOOKAHEAD_LINES = 3

LEVEL_12_BOSSFIGHT_PREFIX = "bigisland.php?"

SERVICE_BLOCK_LINES = 4


class BlockType(Enum):
    """What a block of log lines was recognised as."""

    COMBING = auto()
    ENCOUNTER = auto()
    CONSUMABLE = auto()
    PLAYER_SNAPSHOT = auto()
    ASCENSION_DATA = auto()
    HYBRID_DATA = auto()
    SERVICE = auto()
    OTHER = auto()


@dataclass(frozen=True)
class Block:
    lines: tuple[str, ...]
    block_type: BlockType


class LineSource:
    """
    Line reader with bounded mark/reset lookahead.

    Lines read after mark() are kept until reset() pushes them back. A line
    that would take the kept lines past the mark limit is not kept, so reset()
    rewinds to the mark without it and the line is lost.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = iter(lines)
        self._pushback: deque[str] = deque()
        self._marked: Optional[list[str]] = None
        self._marked_chars = 0
        self._mark_limit = MARK_LIMIT
        self._dropped = 0

    def mark(self, read_ahead_limit: int = MARK_LIMIT) -> None:
        self._marked = []
        self._marked_chars = 0
        self._mark_limit = read_ahead_limit
        self._dropped = 0

    def read_line(self) -> Optional[str]:
        """
        Read the next line without its line ending.

        Returns:
            The line, or None at the end of the input
        """
        if self._pushback:
            line = self._pushback.popleft()
        else:
            raw = next(self._lines, None)
            if raw is None:
                return None
            line = raw.rstrip("\r\n")

        if self._marked is not None:
            size = len(line) + 1
            if self._marked_chars + size > self._mark_limit:
                self._dropped += 1
            else:
                self._marked_chars += size
                self._marked.append(line)
        return line

    def reset(self) -> None:
        """Go back to the last mark."""
        if self._marked is None:
            return
        if self._dropped:
            logger.debug("Dropped %d line(s) past the read-ahead limit", self._dropped)
            self._dropped = 0
        self._pushback.extendleft(reversed(self._marked))
        self._marked = None


def is_skipped_line(line: str) -> bool:
    """Blank, overlong (corrupted) and unrelated UI lines between blocks."""
    return (
        len(line) == 0
        or len(line) >= MAX_LINE_LENGTH
        or line.startswith(SKIPPED_LINE_PREFIXES)
    )


def is_hybrid_block_start(line: str) -> bool:
    return line.startswith(HYBRID_PREFIXES)


class SessionLogReader:
    """
    Lazily splits a session log into blocks.

    The first one or two lines of a block decide its type, which in turn
    decides where the block ends. Encounter blocks run to a blank line, except
    when the blank line sits inside a combat or inside Ed's trip to the
    underworld.

    Example:
        with open(path, encoding="utf-8", errors="replace") as f:
            for block in SessionLogReader(f):
                ...
    """

    def __init__(self, lines: Iterable[str]) -> None:
        """
        Initialize reader.

        Args:
            lines: Raw log lines, e.g. an open text file
        """
        self._source = lines if isinstance(lines, LineSource) else LineSource(lines)
        self._has_next = True
        self._skip_to_next_block()

    def __iter__(self) -> Iterator[Block]:
        while self.has_next():
            yield self.next_block()

    def has_next(self) -> bool:
        return self._has_next

    def next_block(self) -> Block:
        """
        Read the next block.

        Raises:
            EOFError: If the log has no more blocks
        """
        src = self._source
        src.mark()
        line = src.read_line()
        line2 = src.read_line()
        src.reset()

        if line is None:
            self._has_next = False
            raise EOFError("There are no more blocks to be read")
        if line2 is None:
            line2 = ""

        if all(marker in line for marker in COMBING_MARKERS):
            block = Block(self._read_lines(2), BlockType.COMBING)
        elif self._is_encounter_start(line, line2):
            block = Block(self._read_encounter_block(), BlockType.ENCOUNTER)
        elif self._is_consumable_start(line):
            block = Block(self._read_normal_block(), BlockType.CONSUMABLE)
        elif line == PLAYER_SNAPSHOT_DELIMITER and PLAYER_SNAPSHOT_HEADER in line2:
            block = Block(self._read_snapshot_block(), BlockType.PLAYER_SNAPSHOT)
        elif line.startswith(ASCENSION_DATA_PREFIX):
            block = Block(self._read_normal_block(), BlockType.ASCENSION_DATA)
        elif is_hybrid_block_start(line):
            block = Block(self._read_normal_block(), BlockType.HYBRID_DATA)
        elif line.startswith(SERVICE_PREFIX):
            block = Block(self._read_lines(SERVICE_BLOCK_LINES), BlockType.SERVICE)
        else:
            block = Block(self._read_normal_block(), BlockType.OTHER)

        self._skip_to_next_block()
        return block

    # --- classification ---------------------------------------------------

    @staticmethod
    def _is_encounter_start(line: str, line2: str) -> bool:
        is_adventure = TURN_LINE_PATTERN.match(line) is not None or (
            line2.startswith(ENCOUNTER_PREFIX) and line2 in BROKEN_AREAS_ENCOUNTER_SET
        )
        return is_adventure or RAIN_MAN_CAST in line

    @staticmethod
    def _is_consumable_start(line: str) -> bool:
        return line.startswith(CONSUMABLE_PREFIXES) and CONSUMABLE_PATTERN.fullmatch(line) is not None

    # --- block extents ----------------------------------------------------

    def _skip_to_next_block(self) -> None:
        src = self._source
        while True:
            src.mark()
            line = src.read_line()
            if line is None or not is_skipped_line(line):
                break
        if line is None:
            self._has_next = False
        else:
            src.reset()

    def _read_lines(self, count: int) -> tuple[str, ...]:
        lines = []
        for _ in range(count):
            line = self._source.read_line()
            if line is None:
                self._has_next = False
                break
            lines.append(line)
        return tuple(lines)

    def _read_normal_block(self) -> tuple[str, ...]:
        src = self._source
        result = []
        while True:
            src.mark()
            line = src.read_line()
            if not line:
                break
            if line.startswith(SERVICE_PREFIX):
                src.reset()
                break
            result.append(line)
        if line is None:
            self._has_next = False
        return tuple(result)

    def _read_snapshot_block(self) -> tuple[str, ...]:
        # The opening delimiter and header must not end the block
        result = list(self._read_lines(3))
        line = None
        while self._has_next:
            line = self._source.read_line()
            if line is None or line == PLAYER_SNAPSHOT_DELIMITER:
                break
            result.append(line)
        if line is None:
            self._has_next = False
        return tuple(result)

    def _read_encounter_block(self) -> tuple[str, ...]:
        src = self._source
        result: list[str] = []
        line = src.read_line()
        while line is not None:
            if line.endswith(FAMILIAR_POUND_STRING):
                # Pound gains are sometimes logged with a stray blank line and
                # two noise lines after them
                src.mark()
                following = src.read_line()
                if following is not None and len(following) == 0:
                    src.read_line()
                    src.read_line()
                    line = src.read_line()
                    if line is None:
                        break
                else:
                    src.reset()

            if not line.strip():
                if result and "choice.php?" in result[-1] and ED_UNDERWORLD_CHOICE in result[-1]:
                    continuation = self._read_underworld(result)
                else:
                    continuation = self._find_combat_continuation()
                if continuation is None:
                    break
                line = continuation

            result.append(line)
            line = src.read_line()

        if line is None:
            self._has_next = False
        return tuple(result)

    def _find_combat_continuation(self) -> Optional[str]:
        """Look past a blank line for the next round of the same combat."""
        src = self._source
        src.mark()
        for _ in range(COMBAT_LOOKAHEAD_LINES):
            candidate = src.read_line()
            if candidate is None or candidate.startswith(("[", LEVEL_12_BOSSFIGHT_PREFIX)):
                break
            if candidate.startswith(COMBAT_ROUND_PREFIX):
                return candidate
        src.reset()
        return None

    def _read_underworld(self, result: list[str]) -> Optional[str]:
        """
        Collect the lines of Ed's stay in the underworld into the block.

        Returns:
            The choice line that leaves the underworld, or None if it was not
            found before the next turn
        """
        src = self._source
        src.mark()
        underworld = []
        while True:
            candidate = src.read_line()
            if candidate is None or candidate.startswith("["):
                break
            if "choice.php" in candidate and any(c in candidate for c in ED_RETURN_CHOICES):
                result.extend(underworld)
                return candidate
            if candidate:
                underworld.append(candidate)
        src.reset()
        return None
