"""Core domain models - dataclasses with no I/O dependencies."""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional


class TurnVersion(Enum):
    """Kind of adventure a turn represents."""

    COMBAT = auto()
    NONCOMBAT = auto()
    OTHER = auto()
    NOT_DEFINED = auto()


class ConsumableVersion(Enum):
    """Organ a consumable was used with."""

    FOOD = auto()
    BOOZE = auto()
    SPLEEN = auto()
    OTHER = auto()


class StatClass(Enum):
    MUSCLE = auto()
    MYSTICALITY = auto()
    MOXIE = auto()


class CharacterClass(Enum):
    """Character class with the mainstat it levels on."""

    SEAL_CLUBBER = ("Seal Clubber", StatClass.MUSCLE)
    TURTLE_TAMER = ("Turtle Tamer", StatClass.MUSCLE)
    PASTAMANCER = ("Pastamancer", StatClass.MYSTICALITY)
    SAUCEROR = ("Sauceror", StatClass.MYSTICALITY)
    DISCO_BANDIT = ("Disco Bandit", StatClass.MOXIE)
    ACCORDION_THIEF = ("Accordion Thief", StatClass.MOXIE)
    AVATAR_OF_BORIS = ("Avatar of Boris", StatClass.MUSCLE)
    AVATAR_OF_JARLSBERG = ("Avatar of Jarlsberg", StatClass.MYSTICALITY)
    AVATAR_OF_SNEAKY_PETE = ("Avatar of Sneaky Pete", StatClass.MOXIE)
    ED = ("Ed", StatClass.MYSTICALITY)
    NOT_DEFINED = ("not defined", StatClass.MUSCLE)

    def __init__(self, display_name: str, stat_class: StatClass) -> None:
        self.display_name = display_name
        self.stat_class = stat_class

    @classmethod
    def from_name(cls, name: str) -> "CharacterClass":
        for character_class in cls:
            if character_class.display_name == name:
                return character_class
        return cls.NOT_DEFINED


class GameMode(Enum):
    CASUAL = "Casual"
    SOFTCORE = "Softcore"
    HARDCORE = "Hardcore"
    NOT_DEFINED = "not defined"


class AscensionPath(Enum):
    """Challenge paths, in the order they are checked against log text."""

    NONE = "No-Path"
    TEETOTALER = "Teetotaler"
    BOOZETAFARIAN = "Boozetafarian"
    OXYGENARIAN = "Oxygenarian"
    BEES_HATE_YOU = "Bees Hate You"
    WAY_OF_THE_SURPRISING_FIST = "Way of the Surprising Fist"
    TRENDY = "Trendy"
    AVATAR_OF_BORIS = "Avatar of Boris"
    BUGBEAR_INVASION = "Bugbear Invasion"
    ZOMBIE_SLAYER = "Zombie Slayer"
    AVATAR_OF_JARLSBERG = "Avatar of Jarlsberg"
    BIG = "BIG!"
    KOLHS = "KOLHS"
    CLASS_ACT_II = "Class Act II: A Class For Pigs"
    CLASS_ACT = "Class Act"
    AVATAR_OF_SNEAKY_PETE = "Avatar of Sneaky Pete"
    SLOW_AND_STEADY = "Slow and Steady"
    HEAVY_RAINS = "Heavy Rains"
    PICKY = "Picky"
    STANDARD = "Standard"
    ED = "Actually Ed the Undying"
    NOT_DEFINED = "not defined"


class ParsedLogClass(Enum):
    """Which tool produced a pre-parsed log."""

    AFH_PARSER = auto()
    LOG_VISUALIZER = auto()
    NOT_DEFINED = auto()


@dataclass(frozen=True)
class Statgain:
    """Substat deltas, signed."""

    mus: int = 0
    myst: int = 0
    mox: int = 0

    def __add__(self, other: "Statgain") -> "Statgain":
        return Statgain(self.mus + other.mus, self.myst + other.myst, self.mox + other.mox)

    @property
    def is_zero(self) -> bool:
        return self.mus == 0 and self.myst == 0 and self.mox == 0

    @property
    def total(self) -> int:
        return self.mus + self.myst + self.mox


NO_STATS = Statgain()


@dataclass
class MPGain:
    """MP gained, split by source."""

    encounter: int = 0
    starfish: int = 0
    resting: int = 0
    out_of_encounter: int = 0
    consumable: int = 0

    def add(self, other: "MPGain") -> None:
        self.encounter += other.encounter
        self.starfish += other.starfish
        self.resting += other.resting
        self.out_of_encounter += other.out_of_encounter
        self.consumable += other.consumable

    @property
    def total(self) -> int:
        return self.encounter + self.starfish + self.resting + self.out_of_encounter + self.consumable

    @property
    def is_zero(self) -> bool:
        return self.total == 0


@dataclass
class MeatGain:
    """Meat gained and spent."""

    encounter: int = 0
    other: int = 0
    spent: int = 0

    def add(self, other: "MeatGain") -> None:
        self.encounter += other.encounter
        self.other += other.other
        self.spent += other.spent

    @property
    def is_zero(self) -> bool:
        return self.encounter == 0 and self.other == 0 and self.spent == 0


@dataclass
class Item:
    """A dropped item."""

    name: str
    amount: int
    turn_number: int

    def with_turn(self, turn_number: int) -> "Item":
        return replace(self, turn_number=turn_number)


@dataclass
class Skill:
    """A skill cast, with the total MP spent on it."""

    name: str
    amount: int
    turn_number: int
    mp_cost: int = 0

    def with_turn(self, turn_number: int) -> "Skill":
        return replace(self, turn_number=turn_number)


@dataclass
class CombatItem:
    """An item used inside a combat."""

    name: str
    amount: int
    turn_number: int

    def with_turn(self, turn_number: int) -> "CombatItem":
        return replace(self, turn_number=turn_number)


@dataclass
class Consumable:
    """A food, booze, spleen or other consumable usage."""

    name: str
    version: ConsumableVersion
    adventure_gain: int
    amount: int
    turn_number: int
    day_number: int = 1
    stat_gain: Statgain = NO_STATS

    def with_turn(self, turn_number: int) -> "Consumable":
        return replace(self, turn_number=turn_number)


EQUIPMENT_SLOTS = ("hat", "weapon", "offhand", "shirt", "pants", "acc1", "acc2", "acc3", "fam_equip")


@dataclass(frozen=True)
class EquipmentChange:
    """Snapshot of every equipment slot from a given turn on."""

    turn_number: int
    hat: str = "none"
    weapon: str = "none"
    offhand: str = "none"
    shirt: str = "none"
    pants: str = "none"
    acc1: str = "none"
    acc2: str = "none"
    acc3: str = "none"
    fam_equip: str = "none"

    def with_turn(self, turn_number: int) -> "EquipmentChange":
        return replace(self, turn_number=turn_number)

    def with_slots(self, **slots: str) -> "EquipmentChange":
        return replace(self, **slots)

    def is_same_equipment(self, other: "EquipmentChange") -> bool:
        """Compare slot contents, ignoring the turn number."""
        return self.slots == other.slots

    @property
    def slots(self) -> tuple[str, ...]:
        return tuple(getattr(self, slot) for slot in EQUIPMENT_SLOTS)

    @property
    def worn_items(self) -> tuple[str, ...]:
        """Items in the eight non-familiar slots."""
        return self.slots[:-1]

    def is_equipped(self, item_name: str) -> bool:
        return item_name in self.slots


NO_EQUIPMENT = EquipmentChange(turn_number=0)


@dataclass(frozen=True)
class FamiliarChange:
    familiar_name: str
    turn_number: int


@dataclass(frozen=True)
class DayChange:
    day_number: int
    turn_number: int


@dataclass
class HeaderFooterComment:
    """Free-form commentary attached to a day."""

    header: str = ""
    footer: str = ""

    def add_header(self, text: str) -> None:
        self.header = f"{self.header}\n{text}" if self.header else text

    def add_footer(self, text: str) -> None:
        self.footer = f"{self.footer}\n{text}" if self.footer else text


@dataclass(frozen=True)
class Pull:
    item_name: str
    amount: int
    turn_number: int
    day_number: int


@dataclass(frozen=True)
class PlayerSnapshot:
    """Character state printed by a player snapshot block."""

    mus: int
    myst: int
    mox: int
    adventures: int
    meat: int
    turn_number: int


@dataclass(frozen=True)
class NumberedName:
    """A name tied to a turn number (hunted combats, semirares and the like)."""

    name: str
    turn_number: int


@dataclass
class LevelData:
    """Progress of one character level."""

    level_number: int
    level_reached_on_turn: int
    combat_turns: int = 0
    noncombat_turns: int = 0
    other_turns: int = 0
    stats_at_level_reached: Statgain = NO_STATS
    stat_gain_per_turn: float = 0.0

    @property
    def total_turns(self) -> int:
        return self.combat_turns + self.noncombat_turns + self.other_turns


@dataclass(frozen=True)
class Encounter:
    """Frozen view of one event inside a turn."""

    area_name: str
    encounter_name: str
    turn_number: int
    day_number: int
    turn_version: TurnVersion
    stat_gain: Statgain
    mp_gain: MPGain
    meat_gain: MeatGain
    free_runaways: int
    disintegrated: bool
    banished: bool
    skills_cast: tuple[str, ...] = ()


@dataclass
class Turn:
    """
    A single adventure and everything that happened on it.

    Dropped items, skills, combat items and consumables are re-tagged with
    this turn's number when they are added.
    """

    turn_number: int
    area_name: str
    encounter_name: str
    day_number: int = 1
    turn_version: TurnVersion = TurnVersion.NOT_DEFINED
    equipment: EquipmentChange = NO_EQUIPMENT
    familiar: FamiliarChange = FamiliarChange("none", 0)
    stat_gain: Statgain = NO_STATS
    mp_gain: MPGain = field(default_factory=MPGain)
    meat_gain: MeatGain = field(default_factory=MeatGain)
    free_runaways: int = 0
    notes: str = ""
    dropped_items: dict[str, Item] = field(default_factory=dict)
    skills_cast: dict[str, Skill] = field(default_factory=dict)
    combat_items_used: dict[str, CombatItem] = field(default_factory=dict)
    consumables_used: dict[str, Consumable] = field(default_factory=dict)
    _disintegrated: bool = False
    _banished: bool = False
    _banished_by: Optional[str] = None
    _banished_turns: Optional[int] = None
    _encounters: list[Encounter] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.turn_number < 0:
            raise ValueError(f"Turn number must not be negative: {self.turn_number}")

    @property
    def is_combat(self) -> bool:
        return self.turn_version == TurnVersion.COMBAT

    @property
    def disintegrated(self) -> bool:
        return self._disintegrated and self.is_combat

    @disintegrated.setter
    def disintegrated(self, value: bool) -> None:
        self._disintegrated = value

    @property
    def banished(self) -> bool:
        return self._banished and self.is_combat

    def set_banished(self, banished: bool, banished_by: Optional[str] = None, turns: Optional[int] = None) -> None:
        self._banished = banished
        self._banished_by = banished_by
        self._banished_turns = turns

    @property
    def banished_info(self) -> str:
        if not self.banished:
            return ""
        name = self._banished_by or "unknown"
        turns = self._banished_turns or "???"
        return f"{self.encounter_name} {{{name}  ({turns} turns )}}"

    def add_stat_gain(self, stats: Statgain) -> None:
        self.stat_gain = self.stat_gain + stats

    def add_notes(self, notes: str) -> None:
        if not notes:
            return
        self.notes = f"{self.notes}\n{notes}" if self.notes else notes

    def add_dropped_item(self, item: Item) -> None:
        if item.turn_number != self.turn_number:
            item = item.with_turn(self.turn_number)
        existing = self.dropped_items.get(item.name)
        if existing is None:
            self.dropped_items[item.name] = item
        else:
            existing.amount += item.amount

    def add_skill_cast(self, skill: Skill) -> None:
        if skill.turn_number != self.turn_number:
            skill = skill.with_turn(self.turn_number)
        existing = self.skills_cast.get(skill.name)
        if existing is None:
            self.skills_cast[skill.name] = skill
        else:
            existing.amount += skill.amount
            existing.mp_cost += skill.mp_cost

    def add_combat_item_used(self, combat_item: CombatItem) -> None:
        if combat_item.turn_number != self.turn_number:
            combat_item = combat_item.with_turn(self.turn_number)
        existing = self.combat_items_used.get(combat_item.name)
        if existing is None:
            self.combat_items_used[combat_item.name] = combat_item
        else:
            existing.amount += combat_item.amount

    def add_consumable_used(self, consumable: Consumable) -> None:
        if consumable.turn_number != self.turn_number:
            consumable = consumable.with_turn(self.turn_number)
        existing = self.consumables_used.get(consumable.name)
        if existing is None:
            self.consumables_used[consumable.name] = consumable
        else:
            existing.amount += consumable.amount
            existing.adventure_gain += consumable.adventure_gain
            existing.stat_gain = existing.stat_gain + consumable.stat_gain

    def is_skill_cast(self, skill_name: str) -> bool:
        return skill_name in self.skills_cast

    def add_turn_data(self, other: "Turn") -> None:
        """Merge the deltas and collections of another turn into this one."""
        self.meat_gain.add(other.meat_gain)
        self.stat_gain = self.stat_gain + other.stat_gain
        self.mp_gain.add(other.mp_gain)
        self.free_runaways += other.free_runaways
        self.add_notes(other.notes)
        for item in other.dropped_items.values():
            self.add_dropped_item(replace(item))
        for skill in other.skills_cast.values():
            self.add_skill_cast(replace(skill))
        for consumable in other.consumables_used.values():
            self.add_consumable_used(replace(consumable))
        for combat_item in other.combat_items_used.values():
            self.add_combat_item_used(replace(combat_item))

    def to_encounter(self, turn_number: Optional[int] = None) -> Encounter:
        return Encounter(
            area_name=self.area_name,
            encounter_name=self.encounter_name,
            turn_number=self.turn_number if turn_number is None else turn_number,
            day_number=self.day_number,
            turn_version=self.turn_version,
            stat_gain=self.stat_gain,
            mp_gain=replace(self.mp_gain),
            meat_gain=replace(self.meat_gain),
            free_runaways=self.free_runaways,
            disintegrated=self.disintegrated,
            banished=self.banished,
            skills_cast=tuple(self.skills_cast),
        )

    def add_encounter(self, encounter: Encounter) -> None:
        """
        Record an extra encounter on this turn.

        The first call snapshots the turn itself as the leading encounter, so
        data added to the turn afterwards does not show up in that snapshot.
        """
        if not self._encounters:
            self._encounters.append(self.to_encounter())
        self._encounters.append(encounter)

    @property
    def encounters(self) -> list[Encounter]:
        """Encounters on this turn; the first one spent the adventure."""
        if not self._encounters:
            return [self.to_encounter()]
        return list(self._encounters)

    def add_mp_regen(self, amount: int) -> None:
        """Add equipment MP regeneration to the turn and its leading encounter."""
        if amount == 0:
            return
        self.mp_gain.encounter += amount
        if self._encounters:
            first = self._encounters[0]
            mp = replace(first.mp_gain)
            mp.encounter += amount
            self._encounters[0] = replace(first, mp_gain=mp)


@dataclass
class TurnInterval:
    """Consecutive turns spent in one area, covering (start_turn, end_turn]."""

    area_name: str
    start_turn: int
    end_turn: int
    turns: list[Turn] = field(default_factory=list)
    stat_gain: Statgain = NO_STATS
    mp_gain: MPGain = field(default_factory=MPGain)
    meat_gain: MeatGain = field(default_factory=MeatGain)
    free_runaways: int = 0
    attempted_free_runaways: int = 0
    notes: str = ""
    dropped_items: list[Item] = field(default_factory=list)
    skills_cast: list[Skill] = field(default_factory=list)
    consumables_used: list[Consumable] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.end_turn < self.start_turn:
            raise ValueError(
                f"Interval end {self.end_turn} lies before its start {self.start_turn}"
            )

    @property
    def total_turns(self) -> int:
        return self.end_turn - self.start_turn

    @property
    def turn_number(self) -> int:
        return self.end_turn

    def sort_key(self) -> tuple[int, int]:
        return (self.start_turn, self.end_turn)

    def add_turn(self, turn: Turn) -> None:
        """Extend the interval by a turn and absorb its data."""
        self.turns.append(turn)
        self.end_turn = max(self.end_turn, turn.turn_number)
        self.stat_gain = self.stat_gain + turn.stat_gain
        self.mp_gain.add(turn.mp_gain)
        self.meat_gain.add(turn.meat_gain)
        self.free_runaways += turn.free_runaways
        if turn.notes:
            self.notes = f"{self.notes}\n{turn.notes}" if self.notes else turn.notes
        self.dropped_items.extend(turn.dropped_items.values())
        self.skills_cast.extend(turn.skills_cast.values())
        self.consumables_used.extend(turn.consumables_used.values())

    def add_consumable_used(self, consumable: Consumable) -> None:
        self.consumables_used.append(consumable)

    def add_dropped_item(self, item: Item) -> None:
        self.dropped_items.append(item)
