"""Block parsers - turn a classified block of log lines into turns and state changes."""

import html
import logging
from typing import Optional, Sequence

from kolviz.core.models import (
    NO_STATS,
    AscensionPath,
    CharacterClass,
    Consumable,
    ConsumableVersion,
    DayChange,
    EquipmentChange,
    FamiliarChange,
    GameMode,
    PlayerSnapshot,
    Statgain,
    Turn,
    TurnVersion,
)
from kolviz.parser.context import ParseContext
from kolviz.parser.line_parsers import (
    CombatItemUsedParser,
    CombatRecognizerParser,
    DisintegrateParser,
    EquipmentParser,
    FreeRunawaysParser,
    ItemAcquisitionParser,
    LineParser,
    MeatGainType,
    MeatParser,
    MeatSpentParser,
    MPGainParser,
    MPGainType,
    NotesParser,
    OnTheTrailParser,
    RedRayStatsParser,
    SkillCastParser,
    StarfishMPParser,
    StatParser,
    parse_amount,
    parse_first,
)
from kolviz.parser.patterns import (
    AFTER_BATTLE_PREFIX,
    BROKEN_AREAS_ENCOUNTER_SET,
    CLOWNLORD_ENCOUNTER,
    CLOWNLORD_FIRST_CHOICE,
    CLOWNLORD_NAME,
    CLOWNLORD_SECOND_CHOICE,
    CONSUMABLE_AMOUNT_CAPTURE,
    CONSUMABLE_BUY_CAPTURE,
    CONSUMABLE_SINGLE_CAPTURE,
    COMMUNITY_SERVICES,
    CRAFTING_PREFIXES,
    ENCOUNTER_PREFIX,
    GAIN_LOSE_CAPTURE_PATTERN,
    GAIN_LOSE_PATTERN,
    GAME_GRID_EXTRA_TURNS,
    GAME_GRID_GAMES,
    HYBRID_INTRINSIC_PATTERN,
    LLAMA_ENCOUNTER,
    LLAMA_ENCOUNTER_LINE,
    LLAMA_TURNS,
    LOSE_PREFIX,
    LOST_COMBAT_HP_PATTERN,
    MOXIE_SUBSTAT_NAMES,
    MUSCLE_SUBSTAT_NAMES,
    MYST_SUBSTAT_NAMES,
    OTHER_ENCOUNTER_AREAS,
    RAINY_FAX_ENCOUNTER,
    SERVICE_ADVENTURES_CAPTURE,
    SERVICE_CAPTURE,
    SHORE_MEAT_COST,
    SHORE_SUFFIX,
    SHORE_TURNS,
    SHORE_TURNS_FIST,
    SNAPSHOT_BUFFED_STAT_PATTERN,
    SNAPSHOT_FAMILIAR_SPLIT,
    SNAPSHOT_UNBUFFED_STAT_PATTERN,
    SPECIAL_CONSUMABLES,
    TURN_NUMBER_PATTERN,
    WON_FIGHT_PATTERN,
)

logger = logging.getLogger(__name__)

HYBRIDIZING_AREA = "Hybridizing yourself"


def new_turn(
    ctx: ParseContext,
    area_name: str,
    encounter_name: str,
    turn_number: int,
    day_number: int,
    turn_version: TurnVersion = TurnVersion.NOT_DEFINED,
) -> Turn:
    """Create a turn wearing the current equipment and familiar."""
    log_data = ctx.log_data
    return Turn(
        max(0, turn_number),
        area_name,
        encounter_name,
        day_number=day_number,
        turn_version=turn_version,
        equipment=log_data.last_equipment_change(),
        familiar=log_data.last_familiar_change(),
    )


class EncounterBlockParser:
    """
    Adventures: a turn line, the encounter and everything that happened in it.

    The turn is added to the log data before the block's lines are parsed,
    so line parsers work on it as the last turn spent.
    """

    def __init__(self, include_notes: bool = True) -> None:
        self.line_parsers: list[LineParser] = [
            ItemAcquisitionParser(),
            SkillCastParser(),
            CombatItemUsedParser(),
            MeatParser(MeatGainType.ENCOUNTER),
            MeatSpentParser(),
            StatParser(),
            MPGainParser(MPGainType.ENCOUNTER),
            CombatRecognizerParser(),
            EquipmentParser(),
            OnTheTrailParser(),
            FreeRunawaysParser(),
            DisintegrateParser(),
            StarfishMPParser(),
            RedRayStatsParser(),
        ]
        if include_notes:
            self.line_parsers.append(NotesParser())

    def parse(self, lines: Sequence[str], ctx: ParseContext) -> None:
        if not lines:
            return
        log_data = ctx.log_data
        day_number = log_data.last_day_change().day_number
        turn_line = lines[0] if lines[0].startswith("[") or len(lines) < 2 else lines[1]

        hybrid = HYBRID_INTRINSIC_PATTERN.fullmatch(turn_line)
        if hybrid:
            # Logged on the following turn so it is folded into it
            log_data.add_turn_spent(new_turn(
                ctx,
                HYBRIDIZING_AREA,
                hybrid.group(1),
                log_data.last_turn_number + 1,
                day_number,
                TurnVersion.OTHER,
            ))
            if len(lines) > 3 and lines[3].startswith("["):
                turn_line = lines[3]
            elif len(lines) > 4:
                turn_line = lines[4]
            else:
                return

        if turn_line.startswith(ENCOUNTER_PREFIX):
            # Broken areas log the encounter without a turn line
            name = turn_line[len(ENCOUNTER_PREFIX):]
            turn = new_turn(ctx, name, name, log_data.last_turn_number + 1, day_number, TurnVersion.OTHER)
        else:
            turn = self._build_turn(turn_line, lines, ctx, day_number)
            if turn is None:
                self._parse_lines(lines, ctx)
                return

        if not self._handle_special_encounter(turn, lines, ctx):
            log_data.add_turn_spent(turn)
        self._parse_lines(lines, ctx)
        self._check_lost_combat(lines, turn, ctx)

    def _parse_lines(self, lines: Sequence[str], ctx: ParseContext) -> None:
        for line in lines:
            parse_first(self.line_parsers, line, ctx)

    def _build_turn(
        self, turn_line: str, lines: Sequence[str], ctx: ParseContext, day_number: int
    ) -> Optional[Turn]:
        """
        Build the turn of a regular adventure.

        Returns:
            The turn, or None for an empty encounter, which does not count
            as a turn
        """
        turn_match = TURN_NUMBER_PATTERN.match(turn_line)
        if turn_match is None:
            logger.debug("Encounter block without a turn line: %r", turn_line)
            return None
        area_name = ctx.reference.map_area_name(turn_line[turn_line.find("]") + 2:])
        # Crafting is logged one turn ahead; empirical offset, only applied here
        is_crafting = area_name.startswith(CRAFTING_PREFIXES)
        turn_number = int(turn_match.group(1))
        if is_crafting:
            turn_number -= 1

        encounter_name = ""
        multiple_combats = False
        for line in lines:
            if not line.startswith(ENCOUNTER_PREFIX):
                continue
            if len(line) == len(ENCOUNTER_PREFIX):
                return None
            encounter_name = line[len(ENCOUNTER_PREFIX):]
            multiple_combats = line in BROKEN_AREAS_ENCOUNTER_SET
            # Rain Man fights log two encounters
            if RAINY_FAX_ENCOUNTER not in encounter_name:
                break

        if multiple_combats:
            # Every combat but the last becomes its own turn; all the data
            # ends up on the last one
            area_name = encounter_name
            extra_combats = sum(1 for line in lines if line.startswith(ENCOUNTER_PREFIX)) - 1
            for _ in range(extra_combats):
                ctx.log_data.add_turn_spent(new_turn(
                    ctx, area_name, encounter_name, turn_number, day_number, TurnVersion.COMBAT
                ))
                turn_number += 1

        if is_crafting or area_name in OTHER_ENCOUNTER_AREAS:
            version = TurnVersion.OTHER
        else:
            version = TurnVersion.NONCOMBAT
        return new_turn(ctx, area_name, encounter_name, turn_number, day_number, version)

    def _handle_special_encounter(self, turn: Turn, lines: Sequence[str], ctx: ParseContext) -> bool:
        """
        Add the turns of encounters that span several turns.

        Returns:
            True if the turns were added here
        """
        log_data = ctx.log_data

        if turn.area_name.endswith(SHORE_SUFFIX):
            is_fist = log_data.ascension_path == AscensionPath.WAY_OF_THE_SURPRISING_FIST
            count = SHORE_TURNS_FIST if is_fist else SHORE_TURNS
            if not is_fist:
                turn.meat_gain.spent += SHORE_MEAT_COST
            self._add_repeated_turns(turn, count, ctx)
            return True

        if turn.encounter_name == CLOWNLORD_ENCOUNTER:
            choices = [
                line.replace("pwd", "").replace("&", "")
                for line in lines
                if "choice.php?" in line
            ]
            if len(choices) >= 2 and choices[0] == CLOWNLORD_FIRST_CHOICE and choices[-1] == CLOWNLORD_SECOND_CHOICE:
                log_data.add_turn_spent(turn)
                log_data.add_turn_spent(new_turn(
                    ctx, turn.area_name, CLOWNLORD_NAME, turn.turn_number + 1, turn.day_number
                ))
                return True
            return False

        if turn.area_name in GAME_GRID_GAMES:
            self._add_repeated_turns(turn, GAME_GRID_EXTRA_TURNS + 1, ctx)
            return True

        return False

    @staticmethod
    def _add_repeated_turns(turn: Turn, count: int, ctx: ParseContext) -> None:
        turn.turn_version = TurnVersion.OTHER
        repeats = [turn] + [
            new_turn(
                ctx,
                turn.area_name,
                turn.encounter_name,
                turn.turn_number + i,
                turn.day_number,
                TurnVersion.OTHER,
            )
            for i in range(1, count)
        ]
        for t in repeats:
            ctx.log_data.add_turn_spent(t)

    @staticmethod
    def _check_lost_combat(lines: Sequence[str], turn: Turn, ctx: ParseContext) -> None:
        """A combat is lost when the block ends on HP loss without a won-fight line."""
        if not turn.is_combat:
            return

        last_line = lines[-1]
        if ("outfit" in last_line or last_line.startswith("mcd")) and len(lines) > 1:
            last_line = lines[-2]
        if not (last_line.startswith("You lose ") and LOST_COMBAT_HP_PATTERN.fullmatch(last_line)):
            return

        # Only the last encounter of the block counts
        start = 0
        if turn.encounter_name:
            for i in range(len(lines) - 1, -1, -1):
                if lines[i].startswith(ENCOUNTER_PREFIX):
                    start = i
                    break
        if any(WON_FIGHT_PATTERN.fullmatch(line) for line in lines[start:]):
            return

        ctx.log_data.add_lost_combat(turn.encounter_name, turn.turn_number)


class ConsumableBlockParser:
    """
    Food, booze, spleen and other item usage.

    Example:
        eat 1 fortune cookie
        Buy and drink 1 shot of rotgut for 56 Meat
    """

    def __init__(self, include_notes: bool = True) -> None:
        self.line_parsers: list[LineParser] = [
            MPGainParser(MPGainType.CONSUMABLE),
            MeatParser(MeatGainType.OTHER),
            MeatSpentParser(),
            EquipmentParser(),
        ]
        self.cockroach_parsers: list[LineParser] = [
            StatParser(),
            MPGainParser(MPGainType.ENCOUNTER),
            EquipmentParser(),
        ]
        if include_notes:
            self.line_parsers.append(NotesParser())
            self.cockroach_parsers.append(NotesParser())

    def parse(self, lines: Sequence[str], ctx: ParseContext) -> None:
        if not lines:
            return
        usage = self._parse_usage(lines[0])
        if usage is None:
            return
        verb, amount, name = usage
        if amount <= 0:
            return

        adventure_gain = 0
        stats = NO_STATS
        for i, line in enumerate(lines[1:], start=1):
            if line == LLAMA_ENCOUNTER_LINE:
                self._parse_cockroach(lines[i:], ctx)
                break
            if parse_first(self.line_parsers, line, ctx):
                continue
            if GAIN_LOSE_PATTERN.fullmatch(line) is None:
                continue

            if line.startswith(AFTER_BATTLE_PREFIX):
                line = line[len(AFTER_BATTLE_PREFIX):]
            match = GAIN_LOSE_CAPTURE_PATTERN.match(line)
            try:
                gain = parse_amount(match.group(1))
            except ValueError as e:
                logger.debug("Dropped malformed line %r: %s", line, e)
                continue
            if line.startswith(LOSE_PREFIX):
                gain = -gain

            what = match.group(2)
            if what.startswith("Adventure"):
                adventure_gain += gain
            elif what in MUSCLE_SUBSTAT_NAMES:
                stats = stats + Statgain(mus=gain)
            elif what in MYST_SUBSTAT_NAMES:
                stats = stats + Statgain(myst=gain)
            elif what in MOXIE_SUBSTAT_NAMES:
                stats = stats + Statgain(mox=gain)

        adventure_gain = max(0, adventure_gain)
        if adventure_gain == 0 and stats.is_zero and name not in SPECIAL_CONSUMABLES:
            return

        turn = ctx.last_turn
        turn.add_consumable_used(Consumable(
            name,
            self._consumable_version(verb, name, ctx),
            adventure_gain,
            amount,
            turn.turn_number,
            day_number=ctx.log_data.last_day_change().day_number,
            stat_gain=stats,
        ))

    @staticmethod
    def _parse_usage(line: str) -> Optional[tuple[str, int, str]]:
        """Split the usage line into verb, amount and (unescaped) item name."""
        match = CONSUMABLE_BUY_CAPTURE.fullmatch(line) or CONSUMABLE_AMOUNT_CAPTURE.fullmatch(line)
        if match:
            verb, amount_text, name = match.groups()
            try:
                amount = parse_amount(amount_text)
            except ValueError as e:
                logger.debug("Dropped malformed line %r: %s", line, e)
                return None
        else:
            match = CONSUMABLE_SINGLE_CAPTURE.match(line)
            if match is None:
                return None
            verb, name = match.groups()
            amount = 1
        return verb, amount, html.unescape(name)

    @staticmethod
    def _consumable_version(verb: str, name: str, ctx: ParseContext) -> ConsumableVersion:
        if "eat" in verb:
            return ConsumableVersion.FOOD
        if "drink" in verb:
            return ConsumableVersion.BOOZE
        # Older logs "use" spleen items instead of chewing them
        if "chew" in verb or ctx.reference.get_spleen_hit(name) > 0:
            return ConsumableVersion.SPLEEN
        return ConsumableVersion.OTHER

    def _parse_cockroach(self, lines: Sequence[str], ctx: ParseContext) -> None:
        """The llama gong cockroach form takes three turns; its data goes on the last."""
        log_data = ctx.log_data
        last_turn_number = log_data.last_turn_number
        day_number = log_data.last_day_change().day_number
        for i in range(1, LLAMA_TURNS + 1):
            log_data.add_turn_spent(new_turn(
                ctx, LLAMA_ENCOUNTER, LLAMA_ENCOUNTER, last_turn_number + i, day_number, TurnVersion.OTHER
            ))
        for line in lines:
            parse_first(self.cockroach_parsers, line, ctx)


# Snapshot line prefix -> equipment slot
SNAPSHOT_SLOT_PREFIXES = (
    ("Hat: ", "hat"),
    ("Weapon: ", "weapon"),
    ("Off-hand: ", "offhand"),
    ("Shirt: ", "shirt"),
    ("Pants: ", "pants"),
    ("Acc. 1: ", "acc1"),
    ("Acc. 2: ", "acc2"),
    ("Acc. 3: ", "acc3"),
)


def snapshot_equipment_name(line: str) -> str:
    """
    Item name of a snapshot equipment line, without trailing annotations.

    Example:
        "Hat: Helmet Turtle (+1)" -> "helmet turtle"
    """
    name = line[line.find(":") + 2:].lower()
    if "(none)" in name:
        return "none"
    if name.endswith(")"):
        if name.startswith("("):
            return name[1:-1]
        return name[:name.rfind("(") - 1]
    return name


class PlayerSnapshotBlockParser:
    """
    Character status dumps: stats, familiar, equipment, adventures and meat.

    A "Day change occurred" line inside the snapshot starts a new day.
    """

    def parse(self, lines: Sequence[str], ctx: ParseContext) -> None:
        log_data = ctx.log_data
        turn_number = log_data.last_turn_number
        slots = {"fam_equip": "none"}
        stats: list[int] = []
        adventures = 0
        meat = 0

        for line in lines:
            if not line:
                continue
            try:
                if SNAPSHOT_BUFFED_STAT_PATTERN.fullmatch(line):
                    if len(stats) < 3:
                        stats.append(int(line[line.find("(") + 1:line.find(")")]))
                elif SNAPSHOT_UNBUFFED_STAT_PATTERN.fullmatch(line):
                    if len(stats) < 3:
                        stats.append(int(line[line.find(" ") + 1:].split(",", 1)[0]))
                elif line.startswith("Pet: "):
                    # Ed has no familiars, his servants must not be cleared
                    if log_data.ascension_path != AscensionPath.ED:
                        name = next((p for p in SNAPSHOT_FAMILIAR_SPLIT.split(line) if p), None)
                        if name:
                            log_data.add_familiar_change(FamiliarChange(name, turn_number))
                elif line.startswith("Advs: "):
                    adventures = parse_amount(line[line.find(":") + 2:])
                elif line.startswith("Meat: ") and "%" not in line:
                    meat = parse_amount(line[line.find(":") + 2:])
                elif line.startswith("Item: ") and "%" not in line:
                    slots["fam_equip"] = snapshot_equipment_name(line)
                elif line.startswith("Day change occurred"):
                    day_number = log_data.last_day_change().day_number + 1
                    log_data.add_day_change(DayChange(day_number, log_data.last_turn_number))
                elif line.startswith("Class: "):
                    if log_data.character_class == CharacterClass.NOT_DEFINED:
                        log_data.character_class = CharacterClass.from_name(line[len("Class: "):])
                else:
                    for prefix, slot in SNAPSHOT_SLOT_PREFIXES:
                        if line.startswith(prefix):
                            slots[slot] = snapshot_equipment_name(line)
                            break
            except ValueError as e:
                logger.debug("Dropped malformed snapshot line %r: %s", line, e)

        familiar = log_data.last_familiar_change().familiar_name
        ctx.familiar_equipment[familiar] = slots["fam_equip"]
        equipment = EquipmentChange(turn_number, **slots)
        if not equipment.is_same_equipment(ctx.current_equipment()):
            ctx.push_equipment(equipment)

        if len(stats) == 3:
            mus, myst, mox = stats
            log_data.add_player_snapshot(PlayerSnapshot(mus, myst, mox, adventures, meat, turn_number))


class AscensionDataBlockParser:
    """Character class, game mode and path from the ascension header."""

    def parse(self, lines: Sequence[str], ctx: ParseContext) -> None:
        log_data = ctx.log_data

        if log_data.character_class == CharacterClass.NOT_DEFINED:
            log_data.character_class = next(
                (c for line in lines for c in CharacterClass if line.endswith(c.display_name)),
                CharacterClass.NOT_DEFINED,
            )
        if log_data.game_mode == GameMode.NOT_DEFINED:
            log_data.game_mode = next(
                (m for line in lines for m in GameMode if line.startswith(m.value)),
                GameMode.NOT_DEFINED,
            )
        if log_data.ascension_path == AscensionPath.NOT_DEFINED:
            log_data.ascension_path = next(
                (p for line in lines for p in AscensionPath if p.value in line),
                AscensionPath.NOT_DEFINED,
            )


class HybridBlockParser:
    """
    DNA lab usage.

    Example:
        Hybridizing yourself
        You acquire an intrinsic: Human-Fish Hybrid
    """

    def parse(self, lines: Sequence[str], ctx: ParseContext) -> None:
        action = None
        result = None
        for line in lines:
            if line.startswith("You acquire an intrinsic: "):
                result = line[len("You acquire an intrinsic: "):]
            elif line.startswith("You acquire an item: ") and "Gene Tonic" in line:
                result = line[len("You acquire an item: "):]
            elif line.startswith("Hybridizing yourself"):
                action = "Hybridizing"
            elif line.startswith("Making a Gene Tonic"):
                action = "Making"

        if action and result:
            ctx.log_data.add_hybrid_content(f"{action} {result}", ctx.log_data.last_turn_number)


class ServiceBlockParser:
    """
    Community Service quests, which take a number of turns in one go.

    Example:
        Took choice 1089/1: Donate Blood
        choice.php?whichchoice=1089&option=1
        You lose 60 Adventures
        You acquire an item: ...
    """

    def __init__(self) -> None:
        self._item_parser = ItemAcquisitionParser()

    def parse(self, lines: Sequence[str], ctx: ParseContext) -> None:
        if not lines:
            return
        log_data = ctx.log_data
        match = SERVICE_CAPTURE.search(lines[0])
        service = COMMUNITY_SERVICES.get(match.group(1), "unknown") if match else "unknown"

        adventures = 0
        if service not in ("Donate Body", "unknown") and len(lines) > 2:
            lost = SERVICE_ADVENTURES_CAPTURE.search(lines[2])
            if lost and lost.group(1):
                adventures = int(lost.group(1))
            else:
                logger.debug("No adventure cost found for service %s", service)

        previous = log_data.last_turn_spent()
        turn_number = previous.turn_number
        if self._probably_spent_turn(previous):
            turn_number += 1
        day_number = log_data.last_day_change().day_number
        for _ in range(adventures):
            log_data.add_turn_spent(new_turn(
                ctx, f"Community Service: {service}", service, turn_number, day_number, TurnVersion.OTHER
            ))
            turn_number += 1

        if len(lines) > 3:
            parse_first([self._item_parser], lines[3], ctx)

    @staticmethod
    def _probably_spent_turn(turn: Turn) -> bool:
        if turn.is_combat:
            return True
        return not turn.area_name.startswith(("Mix", "Cook"))
