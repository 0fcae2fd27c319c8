"""Line parsers - recognise one log notation each and apply it to the parse state."""

import logging
from enum import Enum, auto
from typing import Iterable, Protocol

from kolviz.core.models import (
    CombatItem,
    DayChange,
    EquipmentChange,
    FamiliarChange,
    Item,
    Pull,
    Skill,
    Statgain,
    TurnVersion,
)
from kolviz.parser.context import ParseContext
from kolviz.parser.patterns import (
    ACQUIRE_EFFECT_PREFIX,
    ACQUIRE_ITEM_PREFIX,
    AFTER_BATTLE_PREFIX,
    BANISH_ITEMS,
    BANISH_SKILLS,
    COMBAT_CAST_CAPTURE,
    COMBAT_ITEM_USED_PATTERN,
    COMBAT_ROUND_PREFIX,
    DAY_CHANGE_PATTERN,
    ED_SERVANT_PATTERN,
    ED_SERVANTS,
    EVERYTHING_LOOKS_YELLOW_PATTERN,
    FAMILIAR_CHANGE_CAPTURE,
    FIRST_COMBAT_ROUND_PREFIX,
    FOOTER_PREFIX,
    FREE_RUNAWAY_STRINGS,
    GAIN_LOSE_PATTERN,
    HEADER_PREFIX,
    LEARNED_SKILL_PREFIX,
    LOSE_PREFIX,
    MAJOR_YELLOW_RAY_PATTERN,
    MEAT_GAIN_PATTERN,
    MEAT_SPENT_PATTERN,
    MOXIE_SUBSTAT_NAMES,
    MP_NAMES,
    MULTIPLE_ITEMS_NEW_CAPTURE,
    MULTIPLE_ITEMS_NEW_PATTERN,
    MULTIPLE_ITEMS_OLD_CAPTURE,
    MULTIPLE_ITEMS_OLD_PATTERN,
    MUSCLE_SUBSTAT_NAMES,
    MYST_SUBSTAT_NAMES,
    NONCOMBAT_CAST_CAPTURE,
    NOTE_PREFIX,
    NUMBER_PATTERN,
    ON_THE_TRAIL_PATTERN,
    POOL_MP_BUFF_LINE,
    PULL_ITEM_CAPTURE,
    PULL_PATTERN,
    RED_RAY_SPLIT_STRING,
    RED_RAY_STRING,
    RESTING_AREAS,
    SKILL_CAST_PATTERN,
    STARFISH_ATTACK_PATTERNS,
    SUBSTAT_NAMES,
    TRIVIAL_COMBAT_SKILLS,
)

logger = logging.getLogger(__name__)

# Amounts above a signed 32 bit integer are treated as garbage
MAX_AMOUNT = 2**31 - 1

# Cheapest a skill cast can get through MP cost reducing equipment
MIN_MP_COST_OFFSET = -3

NO_FAMILIAR = "none"

EQUIPMENT_SLOT_NAMES = {
    "hat": "hat",
    "weapon": "weapon",
    "off-hand": "offhand",
    "offhand": "offhand",
    "shirt": "shirt",
    "pants": "pants",
    "acc1": "acc1",
    "acc2": "acc2",
    "acc3": "acc3",
    "familiarequip": "fam_equip",
    "familiar": "fam_equip",
}

PREVIOUS_OUTFIT_LINES = ("custom outfit backup", "custom outfit your previous outfit")


class LineParser(Protocol):
    """Anything that can recognise and apply a single log line."""

    def is_compatible(self, line: str) -> bool: ...

    def parse(self, line: str, ctx: ParseContext) -> None: ...


def parse_amount(text: str) -> int:
    """
    Parse a logged number, ignoring thousands separators.

    Raises:
        ValueError: If the text is not a number or does not fit 32 bits
    """
    amount = int(text.replace(",", ""))
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount out of range: {text}")
    return amount


def parse_first(parsers: Iterable[LineParser], line: str, ctx: ParseContext) -> bool:
    """
    Apply the first compatible parser to a line.

    A malformed number inside a recognised line drops that line's
    contribution; the line still counts as handled.

    Returns:
        True if a parser claimed the line
    """
    for parser in parsers:
        if parser.is_compatible(line):
            try:
                parser.parse(line, ctx)
            except ValueError as e:
                logger.debug("Dropped malformed line %r: %s", line, e)
            return True
    return False


def equipment_mp_cost_offset(equipment: EquipmentChange, ctx: ParseContext) -> int:
    offset = sum(ctx.reference.get_mp_cost_offset(item) for item in equipment.slots)
    return max(MIN_MP_COST_OFFSET, offset)


class MeatGainType(Enum):
    ENCOUNTER = auto()
    OTHER = auto()


class MPGainType(Enum):
    ENCOUNTER = auto()
    NOT_ENCOUNTER = auto()
    CONSUMABLE = auto()


class ItemAcquisitionParser:
    """
    Items found.

    Example:
        You acquire an item: spooky sapling
        You acquire 3 bottles of gin
        You acquire bottle of gin (3)
    """

    def is_compatible(self, line: str) -> bool:
        if line.startswith(ACQUIRE_EFFECT_PREFIX) or not line.startswith("You acquire"):
            return False
        return (
            line.startswith(ACQUIRE_ITEM_PREFIX)
            or MULTIPLE_ITEMS_OLD_PATTERN.fullmatch(line) is not None
            or MULTIPLE_ITEMS_NEW_PATTERN.fullmatch(line) is not None
        )

    def parse(self, line: str, ctx: ParseContext) -> None:
        amount = 1
        if line.startswith(ACQUIRE_ITEM_PREFIX):
            name = line[len(ACQUIRE_ITEM_PREFIX):]
        elif MULTIPLE_ITEMS_OLD_PATTERN.fullmatch(line):
            match = MULTIPLE_ITEMS_OLD_CAPTURE.match(line)
            amount = parse_amount(match.group(1))
            name = match.group(2)
        else:
            match = MULTIPLE_ITEMS_NEW_CAPTURE.match(line)
            name = match.group(1)
            amount = parse_amount(match.group(2))

        turn = ctx.last_turn
        turn.add_dropped_item(Item(name, amount, turn.turn_number))


class SkillCastParser:
    """
    Skills cast in and out of combat, with their MP cost.

    Example:
        cast 2 Saucy Salve
        Round 3: Foo casts STREAM OF SAUCE!
    """

    def is_compatible(self, line: str) -> bool:
        return "cast" in line and SKILL_CAST_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        amount = 1
        if "casts" in line:
            name = COMBAT_CAST_CAPTURE.match(line).group(1).lower()
        else:
            match = NONCOMBAT_CAST_CAPTURE.match(line)
            amount = parse_amount(match.group(1))
            name = match.group(2).lower()

        log_data = ctx.log_data
        cost = ctx.reference.get_skill_mp_cost(name)
        if cost > 0:
            offset = equipment_mp_cost_offset(log_data.last_equipment_change(), ctx)
            cost = max(1, cost + offset)
        if TRIVIAL_COMBAT_SKILLS.get(name) == log_data.character_class:
            cost = 0

        turn = ctx.last_turn
        turn.add_skill_cast(Skill(name, amount, turn.turn_number, mp_cost=cost * amount))
        if name in BANISH_SKILLS:
            turn.set_banished(True, name)


class CombatItemUsedParser:
    """
    Items thrown during a combat.

    Example:
        Round 2: Foo uses the Louder Than Bomb!
    """

    def is_compatible(self, line: str) -> bool:
        return "uses" in line and COMBAT_ITEM_USED_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        name = COMBAT_ITEM_USED_PATTERN.fullmatch(line).group(1).lower()
        if name.startswith("the "):
            name = name[len("the "):]
        turn = ctx.last_turn
        turn.add_combat_item_used(CombatItem(name, 1, turn.turn_number))
        if name in BANISH_ITEMS:
            turn.set_banished(True, name)


class FamiliarChangeParser:
    """
    Familiar switches, including Ed's servants.

    Example:
        familiar Frumious Bandersnatch (20 lbs)
        familiar none
        choice.php?whichchoice=1053&option=3&pwd&sid=2
    """

    def is_compatible(self, line: str) -> bool:
        return line.startswith("familiar ") or ED_SERVANT_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        if line.endswith("lock"):
            return

        turn_number = ctx.last_turn.turn_number
        servant = ED_SERVANT_PATTERN.search(line)
        if servant:
            name = ED_SERVANTS.get(servant.group(1), "Unknown")
        else:
            if line.endswith(NO_FAMILIAR):
                name = NO_FAMILIAR
                fam_equip = NO_FAMILIAR
            else:
                match = FAMILIAR_CHANGE_CAPTURE.search(line)
                if match is None:
                    return
                name = match.group(1)
                fam_equip = ctx.familiar_equipment.get(name, "none")
            change = ctx.current_equipment().with_turn(turn_number).with_slots(fam_equip=fam_equip)
            ctx.push_equipment(change)

        ctx.log_data.add_familiar_change(FamiliarChange(name, turn_number))


class MeatParser:
    """
    Meat gained, either from the encounter or from anything else.

    Example:
        You gain 1,500 Meat
    """

    def __init__(self, gain_type: MeatGainType) -> None:
        self.gain_type = gain_type

    def is_compatible(self, line: str) -> bool:
        return MEAT_GAIN_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        amount = parse_amount(line[len("You gain "):].split(" ", 1)[0])
        meat = ctx.last_turn.meat_gain
        if self.gain_type == MeatGainType.ENCOUNTER:
            meat.encounter += amount
        else:
            meat.other += amount


class MeatSpentParser:
    """
    Example:
        You spent 500 Meat
        You lose 20 Meat
    """

    def is_compatible(self, line: str) -> bool:
        return MEAT_SPENT_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        if line.startswith("You spent "):
            info = line[len("You spent "):]
        else:
            info = line[len("You lose "):]
        ctx.last_turn.meat_gain.spent += parse_amount(info.split(" ", 1)[0])


class StatParser:
    """
    Substat gains and losses.

    Example:
        You gain 1,234 Muscleboundness
        After Battle: You lose 50 Chutzpah
    """

    def is_compatible(self, line: str) -> bool:
        if GAIN_LOSE_PATTERN.fullmatch(line) is None:
            return False
        return line.rsplit(" ", 1)[-1] in SUBSTAT_NAMES

    def parse(self, line: str, ctx: ParseContext) -> None:
        if line.startswith(AFTER_BATTLE_PREFIX):
            line = line[len(AFTER_BATTLE_PREFIX):]
        amount_text, _, substat = line[len("You gain "):].partition(" ")
        amount = parse_amount(amount_text)
        if line.startswith(LOSE_PREFIX):
            amount = -amount

        if substat in MUSCLE_SUBSTAT_NAMES:
            stats = Statgain(mus=amount)
        elif substat in MYST_SUBSTAT_NAMES:
            stats = Statgain(myst=amount)
        elif substat in MOXIE_SUBSTAT_NAMES:
            stats = Statgain(mox=amount)
        else:
            return
        ctx.last_turn.add_stat_gain(stats)


class MPGainParser:
    """
    MP gained, attributed to the source given at construction.

    Example:
        You gain 12 Mana Points
    """

    def __init__(self, gain_type: MPGainType) -> None:
        self.gain_type = gain_type

    def is_compatible(self, line: str) -> bool:
        if GAIN_LOSE_PATTERN.fullmatch(line) is None or line.startswith(LOSE_PREFIX):
            return False
        return line.endswith(MP_NAMES)

    def parse(self, line: str, ctx: ParseContext) -> None:
        if line.startswith(AFTER_BATTLE_PREFIX):
            line = line[len(AFTER_BATTLE_PREFIX):]
        amount = parse_amount(line[len("You gain "):].split(" ", 1)[0])

        turn = ctx.last_turn
        if self.gain_type == MPGainType.ENCOUNTER:
            if turn.area_name in RESTING_AREAS:
                turn.mp_gain.resting += amount
            else:
                turn.mp_gain.encounter += amount
        elif self.gain_type == MPGainType.NOT_ENCOUNTER:
            turn.mp_gain.out_of_encounter += amount
        else:
            turn.mp_gain.consumable += amount


class EquipmentParser:
    """
    Equipment commands. Verbs are matched case-insensitively.

    Example:
        equip hat helmet turtle
        unequip weapon
        outfit frat warrior fatigues
        custom outfit backup
    """

    def is_compatible(self, line: str) -> bool:
        return line.lower().startswith(("equip", "unequip", "outfit", "custom outfit"))

    def parse(self, line: str, ctx: ParseContext) -> None:
        line = line.lower()
        turn_number = ctx.last_turn.turn_number

        if line.startswith("outfit"):
            covered = ctx.reference.get_outfit_slots(line[line.find(" ") + 1:])
            if covered:
                change = ctx.current_equipment().with_turn(turn_number)
                ctx.push_equipment(change.with_slots(**{slot: "none" for slot in covered}))
            return

        if line.startswith("custom outfit"):
            if line in PREVIOUS_OUTFIT_LINES:
                previous = ctx.pop_equipment()
                ctx.log_data.add_equipment_change(previous.with_turn(turn_number))
            else:
                # Nothing is known about the pieces of a custom outfit
                fam_equip = ctx.current_equipment().fam_equip
                ctx.push_equipment(EquipmentChange(turn_number, fam_equip=fam_equip))
            return

        rest = line[line.find(" ") + 1:]
        space = rest.find(" ")
        if line.startswith("unequip") and space == -1:
            self._change_slot(rest, "none", ctx)
            return
        if space < 0:
            return

        slot_name, item_name = rest[:space], rest[space + 1:]
        self._change_slot(slot_name, item_name if line.startswith("equip") else "none", ctx)

    def _change_slot(self, slot_name: str, item_name: str, ctx: ParseContext) -> None:
        slot = EQUIPMENT_SLOT_NAMES.get(slot_name)
        if slot is None:
            return
        if slot == "fam_equip":
            familiar = ctx.log_data.last_familiar_change().familiar_name
            ctx.familiar_equipment[familiar] = item_name
        change = ctx.current_equipment().with_turn(ctx.last_turn.turn_number)
        ctx.push_equipment(change.with_slots(**{slot: item_name}))


class PullParser:
    """
    Hagnk's pulls, possibly several per line.

    Example:
        pull: 1 stuffed shoulder parrot, 2 Boris's key lime pie
    """

    def is_compatible(self, line: str) -> bool:
        return PULL_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        log_data = ctx.log_data
        turn_number = log_data.last_turn_number
        day_number = log_data.last_day_change().day_number
        for match in PULL_ITEM_CAPTURE.finditer(line):
            amount_text, _, name = match.group(1).partition(" ")
            amount = max(1, parse_amount(amount_text))
            log_data.add_pull(Pull(name, amount, turn_number, day_number))


class PoolMPBuffParser:
    """Pool table buff, worth a flat 100 MP."""

    def is_compatible(self, line: str) -> bool:
        return line == POOL_MP_BUFF_LINE

    def parse(self, line: str, ctx: ParseContext) -> None:
        ctx.last_turn.mp_gain.encounter += 100


class DayChangeParser:
    """
    Example:
        ===========Day 2===========
    """

    def is_compatible(self, line: str) -> bool:
        return DAY_CHANGE_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        day_number = parse_amount(NUMBER_PATTERN.search(line).group())
        ctx.log_data.add_day_change(DayChange(day_number, ctx.log_data.last_turn_number))


class LearnedSkillParser:
    def is_compatible(self, line: str) -> bool:
        return line.startswith(LEARNED_SKILL_PREFIX)

    def parse(self, line: str, ctx: ParseContext) -> None:
        name = line[len(LEARNED_SKILL_PREFIX):]
        ctx.log_data.add_learned_skill(name, ctx.log_data.last_turn_number)


class NotesParser:
    """
    User comments. Notes go to the current turn, headers and footers to the
    current day.
    """

    def is_compatible(self, line: str) -> bool:
        return line.startswith((NOTE_PREFIX, HEADER_PREFIX, FOOTER_PREFIX))

    def parse(self, line: str, ctx: ParseContext) -> None:
        if line.startswith(NOTE_PREFIX):
            ctx.last_turn.add_notes(line[len(NOTE_PREFIX):])
            return
        comment = ctx.log_data.last_header_footer_comment()
        if line.startswith(HEADER_PREFIX):
            comment.add_header(line[len(HEADER_PREFIX):])
        else:
            comment.add_footer(line[len(FOOTER_PREFIX):])


class CombatRecognizerParser:
    def is_compatible(self, line: str) -> bool:
        return line.startswith(FIRST_COMBAT_ROUND_PREFIX)

    def parse(self, line: str, ctx: ParseContext) -> None:
        ctx.last_turn.turn_version = TurnVersion.COMBAT


class OnTheTrailParser:
    """Olfaction marks the current monster as hunted."""

    def is_compatible(self, line: str) -> bool:
        return line.startswith(ACQUIRE_EFFECT_PREFIX) and ON_THE_TRAIL_PATTERN.fullmatch(line) is not None

    def parse(self, line: str, ctx: ParseContext) -> None:
        turn = ctx.last_turn
        ctx.log_data.add_hunted_combat(turn.encounter_name, turn.turn_number)


class FreeRunawaysParser:
    def is_compatible(self, line: str) -> bool:
        if not line.startswith(COMBAT_ROUND_PREFIX):
            return False
        return any(s in line for s in FREE_RUNAWAY_STRINGS)

    def parse(self, line: str, ctx: ParseContext) -> None:
        ctx.last_turn.free_runaways += 1


class DisintegrateParser:
    """Yellow rays remove the monster without a fight."""

    def is_compatible(self, line: str) -> bool:
        if line.startswith(ACQUIRE_EFFECT_PREFIX):
            return EVERYTHING_LOOKS_YELLOW_PATTERN.fullmatch(line) is not None
        if line.startswith(COMBAT_ROUND_PREFIX):
            return MAJOR_YELLOW_RAY_PATTERN.fullmatch(line) is not None
        return False

    def parse(self, line: str, ctx: ParseContext) -> None:
        ctx.last_turn.disintegrated = True


class StarfishMPParser:
    """
    MP from familiars that hit the opponent and pass the damage on as MP.

    The same MP also shows up as a regular MP gain line, so it is moved out
    of the encounter MP.
    """

    def is_compatible(self, line: str) -> bool:
        if not line.startswith(COMBAT_ROUND_PREFIX):
            return False
        if not ("opponent" in line or "disc" in line or "tailsmack" in line):
            return False
        return any(p.fullmatch(line) for p in STARFISH_ATTACK_PATTERNS)

    def parse(self, line: str, ctx: ParseContext) -> None:
        if "opponent" in line:
            tail = line[line.rfind("opponent"):]
        elif "tailsmack" in line:
            tail = line[line.rfind("tailsmack"):]
        elif "de-rezzes" in line:
            tail = line[line.rfind("de-rezzes"):]
        else:
            head = line[:line.rfind("damage")]
            tail = head[head.rfind("disc"):]

        damage = parse_amount(NUMBER_PATTERN.search(tail).group())
        mp = ctx.last_turn.mp_gain
        mp.starfish += damage
        mp.encounter -= damage


class RedRayStatsParser:
    """Stat gains packed into the red ray combat message."""

    def __init__(self) -> None:
        self._stat_parser = StatParser()

    def is_compatible(self, line: str) -> bool:
        return (
            line.startswith(COMBAT_ROUND_PREFIX)
            and RED_RAY_STRING in line
            and "You gain " in line
        )

    def parse(self, line: str, ctx: ParseContext) -> None:
        parts = line.split(RED_RAY_SPLIT_STRING)
        if len(parts) < 2:
            return
        for fragment in parts[1].replace("!", ".").split("."):
            parse_first([self._stat_parser], fragment.strip(), ctx)
