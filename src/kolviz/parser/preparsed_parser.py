"""Parser for pre-parsed turn rundowns (AFH parser and log visualizer output)."""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from kolviz.config.settings import Settings
from kolviz.core.log_data import ASCENSION_START, LogData
from kolviz.core.models import (
    NO_STATS,
    Consumable,
    ConsumableVersion,
    FamiliarChange,
    Item,
    NumberedName,
    ParsedLogClass,
    Pull,
    Statgain,
    TurnInterval,
)
from kolviz.core.post_pass import finalize
from kolviz.data.reference import ReferenceData, load_reference_data
from kolviz.parser.context import ParseContext
from kolviz.parser.line_parsers import DayChangeParser, LineParser, parse_amount, parse_first
from kolviz.parser.patterns import (
    ADVENTURE_GAIN_CAPTURE,
    ASCEND_LOG_NAME_CAPTURE,
    BADMOON_PATTERN,
    CONSUMED_CAPTURE,
    CONSUMED_PATTERN,
    DISINTEGRATED_COMBAT_PATTERN,
    FAMILIAR_CHANGED_CAPTURE,
    FAMILIAR_CHANGED_PATTERN,
    FREE_RUNAWAYS_USAGE_PATTERN,
    HUNTED_COMBAT_PATTERN,
    ITEM_FOUND_CAPTURE,
    ITEM_FOUND_PATTERN,
    NUMBER_PATTERN,
    PREPARSED_PULL_CAPTURE,
    PREPARSED_PULL_PATTERN,
    RUNDOWN_END_PREFIXES,
    SEMIRARE_PATTERN,
    STATS_TRIPLE_END_CAPTURE,
    TURN_INTERVAL_CAPTURE,
    TURN_LINE_PATTERN,
)

logger = logging.getLogger(__name__)


def _first_number(line: str) -> int:
    match = NUMBER_PATTERN.search(line)
    if match is None:
        raise ValueError(f"No number in {line!r}")
    return parse_amount(match.group())


def _stats(groups: tuple) -> Statgain:
    mus, myst, mox = (int(g) for g in groups)
    return Statgain(mus, myst, mox)


class TurnsSpentParser:
    """
    Turn interval lines. A single turn "[n]" covers (n-1, n], a range
    "[a-b]" covers (a-1, b]. The first interval decides which tool wrote
    the log.

    Example:
        [13-17] The Haunted Pantry [12,3,4]
    """

    def is_compatible(self, line: str) -> bool:
        return TURN_LINE_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        match = TURN_INTERVAL_CAPTURE.match(line)
        if match is None:
            return
        first = parse_amount(match.group(1))
        area_name = match.group(3)
        has_stats = match.group(4) is not None

        if match.group(2) is not None:
            interval = TurnInterval(area_name, max(0, first - 1), parse_amount(match.group(2)))
        elif first == 0 and area_name == ASCENSION_START:
            interval = TurnInterval(area_name, 0, 0)
        else:
            interval = TurnInterval(area_name, max(0, first - 1), first)

        if has_stats:
            interval.stat_gain = _stats(match.group(4, 5, 6))

        log_data = ctx.log_data
        intervals = log_data.turn_intervals
        if (
            area_name == ASCENSION_START
            and len(intervals) == 1
            and intervals[0].area_name == ASCENSION_START
        ):
            intervals[0] = interval
        else:
            log_data.add_turn_interval(interval)

        if log_data.parsed_log_creator == ParsedLogClass.NOT_DEFINED:
            if interval.end_turn != 0 and not has_stats:
                log_data.parsed_log_creator = ParsedLogClass.AFH_PARSER
            else:
                log_data.parsed_log_creator = ParsedLogClass.LOG_VISUALIZER


class DroppedItemsParser:
    """
    Example:
        +> [12] Got spooky sapling, Spooky-Gro fertilizer
    """

    def is_compatible(self, line: str) -> bool:
        return ITEM_FOUND_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        match = ITEM_FOUND_CAPTURE.search(line)
        if match is None:
            return
        found_on = parse_amount(match.group(1))
        interval = ctx.log_data.last_turn_interval()
        for name in match.group(2).split(","):
            name = name.strip()
            if name:
                interval.add_dropped_item(Item(name, 1, found_on))


class ConsumableLineParser:
    """
    Consumables, placed in the middle of the current interval since the
    rundown does not say on which turn they were used.

    Example:
        o> Ate 2 hot hi mein (26 adventures gained) [0,12,0]
    """

    def is_compatible(self, line: str) -> bool:
        return CONSUMED_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        match = CONSUMED_CAPTURE.match(line)
        if match is None:
            return
        verb, amount_text, name = match.groups()
        amount = parse_amount(amount_text) if amount_text else 1

        adventure_match = ADVENTURE_GAIN_CAPTURE.search(line)
        adventure_gain = parse_amount(adventure_match.group(1)) if adventure_match else 0

        stats_match = STATS_TRIPLE_END_CAPTURE.search(line)
        stat_gain = _stats(stats_match.groups()) if stats_match else NO_STATS

        log_data = ctx.log_data
        interval = log_data.last_turn_interval()
        if verb == "Ate":
            version = ConsumableVersion.FOOD
        elif verb == "Drank":
            version = ConsumableVersion.BOOZE
        elif ctx.reference.get_spleen_hit(name) > 0 and adventure_gain > 0:
            version = ConsumableVersion.SPLEEN
        else:
            version = ConsumableVersion.OTHER

        interval.add_consumable_used(Consumable(
            name,
            version,
            adventure_gain,
            amount,
            interval.start_turn + interval.total_turns // 2,
            day_number=log_data.last_day_change().day_number,
            stat_gain=stat_gain,
        ))


class PreparsedFamiliarChangeParser:
    """
    Example:
        -> Turn [15] Hovering Sombrero (Juan)

    The AFH parser logs the first turn a familiar was used on, which is one
    turn after the change itself.
    """

    def is_compatible(self, line: str) -> bool:
        return FAMILIAR_CHANGED_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        match = FAMILIAR_CHANGED_CAPTURE.search(line)
        if match is None:
            return
        log_data = ctx.log_data
        turn_number = parse_amount(match.group(1))
        if log_data.parsed_log_creator == ParsedLogClass.AFH_PARSER:
            turn_number = max(0, turn_number - 1)
        log_data.add_familiar_change(FamiliarChange(match.group(2), turn_number))


class PreparsedPullParser:
    """
    Example:
        #> Turn [40] pulled 1 stuffed shoulder parrot, 2 wet stew
    """

    def is_compatible(self, line: str) -> bool:
        return PREPARSED_PULL_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        match = PREPARSED_PULL_CAPTURE.search(line)
        if match is None:
            return
        log_data = ctx.log_data
        turn_number = parse_amount(match.group(1))
        day_number = log_data.last_day_change().day_number
        for pull in match.group(2).split(","):
            amount_text, _, name = pull.strip().partition(" ")
            if not name:
                continue
            log_data.add_pull(Pull(name.strip(), parse_amount(amount_text), turn_number, day_number))


class PreparsedFreeRunawaysParser:
    """
    Example:
        &> 3 \\ 4 free retreats
    """

    def is_compatible(self, line: str) -> bool:
        return FREE_RUNAWAYS_USAGE_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        match = FREE_RUNAWAYS_USAGE_PATTERN.fullmatch(line)
        interval = ctx.log_data.last_turn_interval()
        interval.free_runaways = parse_amount(match.group(1))
        interval.attempted_free_runaways = parse_amount(match.group(2))


class NumberedListParser:
    """
    Summary list lines such as "#> [45] Semirare: Lunchboxing".

    The name is what follows the marker text, or the last colon when no
    marker is given.
    """

    def __init__(self, pattern: re.Pattern, target: str, marker: Optional[str] = None) -> None:
        self._pattern = pattern
        self._target = target
        self._marker = marker

    def is_compatible(self, line: str) -> bool:
        return self._pattern.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        turn_number = _first_number(line)
        if self._marker is not None:
            name = line.partition(self._marker)[2].strip()
        else:
            name = line.rpartition(":")[2].strip()
        if not name:
            return
        getattr(ctx.log_data, self._target).append(NumberedName(name, turn_number))


def log_name_from_rundown_path(path: Path) -> str:
    """
    Name of a rundown log.

    "Hero_ascend12_20110105_20110110.txt" is shown as "Hero-12".
    """
    match = ASCEND_LOG_NAME_CAPTURE.match(path.name)
    if match:
        return f"{match.group(1)}-{match.group(2)}"
    return path.name.replace(".txt", "")


class PreparsedLogParser:
    """
    Parser for turn rundowns written by the AFH parser or the log visualizer.

    Only the rundown part of the log is read; it ends at "Ascended!" or
    "Turn rundown finished!". The summaries that follow are rebuilt from the
    rundown instead.
    """

    def __init__(
        self,
        log_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
        reference: Optional[ReferenceData] = None,
    ) -> None:
        self.log_path = Path(log_path) if log_path is not None else None
        self.settings = settings or Settings()
        self.reference = reference or load_reference_data()
        self._ctx = ParseContext(
            log_data=LogData(is_detailed=False),
            reference=self.reference,
            settings=self.settings,
        )
        if self.log_path is not None:
            self._ctx.log_data.log_name = log_name_from_rundown_path(self.log_path)

        self._line_parsers: list[LineParser] = [
            TurnsSpentParser(),
            DroppedItemsParser(),
            ConsumableLineParser(),
            PreparsedFamiliarChangeParser(),
            PreparsedPullParser(),
            PreparsedFreeRunawaysParser(),
            DayChangeParser(),
            NumberedListParser(SEMIRARE_PATTERN, "semirares"),
            NumberedListParser(BADMOON_PATTERN, "badmoon_adventures"),
            NumberedListParser(HUNTED_COMBAT_PATTERN, "hunted_combats", "Started hunting"),
            NumberedListParser(DISINTEGRATED_COMBAT_PATTERN, "disintegrated_combats", "Disintegrated"),
        ]

    @property
    def log_data(self) -> LogData:
        return self._ctx.log_data

    def parse(self) -> LogData:
        """
        Read and parse the whole rundown.

        Raises:
            ValueError: If no log path was given
            OSError: If the log cannot be opened or read
        """
        if self.log_path is None:
            raise ValueError("No log path given")

        logger.info("Parsing turn rundown %s", self.log_path)
        with open(self.log_path, encoding="utf-8", errors="replace") as f:
            return self.parse_lines(f)

    def parse_lines(self, lines: Iterable[str]) -> LogData:
        for raw in lines:
            line = raw.rstrip("\r\n")
            if not line:
                continue
            if line.startswith(RUNDOWN_END_PREFIXES):
                break
            parse_first(self._line_parsers, line, self._ctx)

        finalize(self.log_data, self.reference)
        logger.info("Parsed %d turn intervals", len(self.log_data.turn_intervals))
        return self.log_data


def parse_preparsed_log(
    log_path: Path,
    settings: Optional[Settings] = None,
    reference: Optional[ReferenceData] = None,
) -> LogData:
    """
    Parse a pre-parsed turn rundown file.

    Raises:
        OSError: If the log cannot be read
    """
    return PreparsedLogParser(log_path, settings, reference).parse()
