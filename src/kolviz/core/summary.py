"""Summary calculation - aggregates over a finalized log."""

import math
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from kolviz.core.log_data import LogData
from kolviz.core.models import (
    NO_STATS,
    CharacterClass,
    Consumable,
    ConsumableVersion,
    DayChange,
    LevelData,
    MeatGain,
    MPGain,
    NumberedName,
    PlayerSnapshot,
    StatClass,
    Statgain,
    Turn,
    TurnVersion,
)
from kolviz.data.reference import ReferenceData

# Encounter meat from the nuns is handed over to them
NUNS_AREA = "Themthar Hills"

GUILD_CHALLENGE = "Guild Challenge"
ENCHANTED_BARBELL = "enchanted barbell"
CONCENTRATED_MAGICALNESS_PILL = "concentrated magicalness pill"
GIANT_MOXIE_WEED = "giant moxie weed"
GUILD_ITEMS = frozenset({ENCHANTED_BARBELL, CONCENTRATED_MAGICALNESS_PILL, GIANT_MOXIE_WEED})

# Substats a character starts an ascension with
CLASS_START_STATS = {
    CharacterClass.SEAL_CLUBBER: Statgain(9, 1, 4),
    CharacterClass.TURTLE_TAMER: Statgain(9, 4, 1),
    CharacterClass.PASTAMANCER: Statgain(4, 9, 1),
    CharacterClass.SAUCEROR: Statgain(1, 9, 4),
    CharacterClass.DISCO_BANDIT: Statgain(4, 1, 9),
    CharacterClass.ACCORDION_THIEF: Statgain(1, 4, 9),
}


def level_stat_border(level_number: int) -> int:
    """
    Mainstat needed to reach a level.

    Level 1 needs nothing, level N needs (N-1)^2 + 4. A stat value is the
    square root of its substats.
    """
    if level_number <= 1:
        return 0
    return (level_number - 1) ** 2 + 4


@dataclass
class DayConsumption:
    """Consumption statistics of one day."""

    day_number: int
    turns_from_food: int = 0
    turns_from_booze: int = 0
    turns_from_spleen: int = 0
    turns_from_other: int = 0
    fullness_hit: int = 0
    drunkenness_hit: int = 0
    spleen_hit: int = 0
    food_stats: Statgain = NO_STATS
    booze_stats: Statgain = NO_STATS
    used_stats: Statgain = NO_STATS
    consumables: list[Consumable] = field(default_factory=list)

    @property
    def total_stats(self) -> Statgain:
        return self.food_stats + self.booze_stats + self.used_stats

    def add(self, consumable: Consumable, reference: ReferenceData) -> None:
        self.consumables.append(consumable)
        version = consumable.version
        if version == ConsumableVersion.FOOD:
            self.turns_from_food += consumable.adventure_gain
            self.fullness_hit += reference.get_fullness_hit(consumable.name) * consumable.amount
            self.food_stats = self.food_stats + consumable.stat_gain
        elif version == ConsumableVersion.BOOZE:
            self.turns_from_booze += consumable.adventure_gain
            self.drunkenness_hit += reference.get_drunkenness_hit(consumable.name) * consumable.amount
            self.booze_stats = self.booze_stats + consumable.stat_gain
        elif version == ConsumableVersion.SPLEEN:
            self.turns_from_spleen += consumable.adventure_gain
            self.spleen_hit += reference.get_spleen_hit(consumable.name) * consumable.amount
            self.used_stats = self.used_stats + consumable.stat_gain
        else:
            self.turns_from_other += consumable.adventure_gain
            self.used_stats = self.used_stats + consumable.stat_gain


@dataclass
class LevelTotals:
    """Meat and MP gathered while the character was on one level."""

    level_number: int
    meat: MeatGain = field(default_factory=MeatGain)
    mp: MPGain = field(default_factory=MPGain)


@dataclass
class LogSummary:
    """Aggregate view of a parsed log."""

    turns_per_area: list[tuple[str, int]] = field(default_factory=list)
    combat_turns: int = 0
    noncombat_turns: int = 0
    other_turns: int = 0
    total_stats: Statgain = NO_STATS
    combat_stats: Statgain = NO_STATS
    noncombat_stats: Statgain = NO_STATS
    other_stats: Statgain = NO_STATS
    familiar_usage: list[tuple[str, int]] = field(default_factory=list)
    total_meat_gain: int = 0
    total_meat_spent: int = 0
    total_mp_gain: MPGain = field(default_factory=MPGain)
    total_skill_casts: int = 0
    total_mp_used: int = 0
    skills_cast: dict[str, int] = field(default_factory=dict)
    dropped_items: dict[str, int] = field(default_factory=dict)
    consumables_used: dict[str, int] = field(default_factory=dict)
    consumption_per_day: list[DayConsumption] = field(default_factory=list)
    turns_from_rollover: int = 0
    free_runaways: int = 0
    attempted_free_runaways: int = 0
    disintegrated_combats: list[NumberedName] = field(default_factory=list)
    semirares: list[NumberedName] = field(default_factory=list)
    badmoon_adventures: list[NumberedName] = field(default_factory=list)
    wandering_adventures: list[NumberedName] = field(default_factory=list)
    levels: list[LevelData] = field(default_factory=list)
    level_totals: list[LevelTotals] = field(default_factory=list)

    @property
    def turns_from_food(self) -> int:
        return sum(d.turns_from_food for d in self.consumption_per_day)

    @property
    def turns_from_booze(self) -> int:
        return sum(d.turns_from_booze for d in self.consumption_per_day)

    @property
    def turns_from_other(self) -> int:
        """Turns from spleen items and other consumables."""
        return sum(d.turns_from_spleen + d.turns_from_other for d in self.consumption_per_day)


def _sorted_counts(counter: Counter) -> list[tuple[str, int]]:
    # Highest count first, ties by name
    return sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))


def summarize_consumption(
    consumables: Iterable[Consumable],
    day_changes: Iterable[DayChange],
    reference: ReferenceData,
) -> list[DayConsumption]:
    """
    Group consumables by the day they were used on.

    Consumables of a day that has no day change are left out.
    """
    days = {dc.day_number: DayConsumption(dc.day_number) for dc in day_changes}
    for consumable in consumables:
        day = days.get(consumable.day_number)
        if day is not None:
            day.add(consumable, reference)
    return [days[number] for number in sorted(days)]


def guess_character_class(log_data: LogData) -> CharacterClass:
    """
    Guess the class of a log that never names it.

    The stat gained most points to the class pair; guild challenge items
    pick one class of the pair.
    """
    guild_items = {
        item.name
        for interval in log_data.turn_intervals
        if interval.area_name == GUILD_CHALLENGE
        for item in interval.dropped_items
        if item.name in GUILD_ITEMS
    }
    stats = NO_STATS
    for interval in log_data.turn_intervals:
        stats = stats + interval.stat_gain
        for consumable in interval.consumables_used:
            stats = stats + consumable.stat_gain

    if stats.mus > stats.myst and stats.mus > stats.mox:
        if GIANT_MOXIE_WEED in guild_items:
            return CharacterClass.SEAL_CLUBBER
        return CharacterClass.TURTLE_TAMER
    if stats.myst > stats.mus and stats.myst > stats.mox:
        if GIANT_MOXIE_WEED in guild_items:
            return CharacterClass.SAUCEROR
        return CharacterClass.PASTAMANCER
    if CONCENTRATED_MAGICALNESS_PILL in guild_items:
        return CharacterClass.ACCORDION_THIEF
    return CharacterClass.DISCO_BANDIT


def _mainstat(stats: Statgain, stat_class: StatClass) -> int:
    if stat_class == StatClass.MUSCLE:
        return stats.mus
    if stat_class == StatClass.MYSTICALITY:
        return stats.myst
    return stats.mox


def _apply_snapshot(stats: Statgain, snapshot: PlayerSnapshot) -> Statgain:
    # A snapshot holds exact stat values, which win over the running count
    return Statgain(
        max(stats.mus, snapshot.mus * snapshot.mus),
        max(stats.myst, snapshot.myst * snapshot.myst),
        max(stats.mox, snapshot.mox * snapshot.mox),
    )


def compute_levels(
    turns: Iterable[Turn],
    character_class: CharacterClass,
    player_snapshots: Iterable[PlayerSnapshot] = (),
) -> list[LevelData]:
    """
    Work out on which turns the character levelled up.

    Substats are counted up turn by turn from the class start values.
    Whenever the mainstat reaches the next level border, the current level
    is closed with its turn counts and average substat gain per turn.

    Args:
        turns: Turns in log order
        character_class: Class deciding start stats and mainstat
        player_snapshots: Snapshots in log order, used to correct the count

    Returns:
        Levels in ascending order, starting with level 1 on turn 0
    """
    stat_class = character_class.stat_class
    stats = CLASS_START_STATS.get(character_class, NO_STATS)
    levels = [LevelData(1, 0, stats_at_level_reached=stats)]
    snapshots = iter(player_snapshots)
    snapshot: Optional[PlayerSnapshot] = next(snapshots, None)
    counts = Counter()

    for turn in turns:
        stats = stats + turn.stat_gain
        for consumable in turn.consumables_used.values():
            stats = stats + consumable.stat_gain

        if snapshot is not None and snapshot.turn_number <= turn.turn_number:
            stats = _apply_snapshot(stats, snapshot)
            snapshot = next(snapshots, None)

        counts[turn.turn_version] += 1

        while level_stat_border(levels[-1].level_number + 1) <= math.sqrt(max(0, _mainstat(stats, stat_class))):
            current = levels[-1]
            new_level = LevelData(current.level_number + 1, turn.turn_number, stats_at_level_reached=stats)
            current.combat_turns = counts[TurnVersion.COMBAT]
            current.noncombat_turns = counts[TurnVersion.NONCOMBAT]
            current.other_turns = counts[TurnVersion.OTHER]

            substat_gap = (
                level_stat_border(new_level.level_number) ** 2
                - level_stat_border(current.level_number) ** 2
            )
            turn_difference = turn.turn_number - current.level_reached_on_turn
            if turn_difference > 0:
                current.stat_gain_per_turn = substat_gap / turn_difference
            else:
                current.stat_gain_per_turn = float(substat_gap)

            levels.append(new_level)
            counts.clear()

    return levels


def level_on_turn(levels: list[LevelData], turn_number: int) -> int:
    """Number of the level the character had on a turn."""
    current = levels[0].level_number if levels else 1
    for level in levels:
        if level.level_reached_on_turn > turn_number:
            break
        current = level.level_number
    return current


def compute_summary(log_data: LogData, reference: ReferenceData) -> LogSummary:
    """
    Aggregate a finalized log.

    Works on the turn intervals, so raw session logs and pre-parsed logs are
    summarised the same way. Per-turn figures (turn versions, familiar usage,
    reference-based encounter lists) only exist for raw session logs;
    pre-parsed logs contribute their own semirare, bad moon and
    disintegration lists instead.

    Args:
        log_data: Finalized log data
        reference: Lookup tables for organ hits and encounter sets

    Returns:
        LogSummary of the whole log
    """
    summary = LogSummary()
    turns_per_area = Counter()
    familiar_usage = Counter()
    skills = Counter()
    items = Counter()
    consumables_by_name = Counter()
    consumables: list[Consumable] = []
    total_stats = NO_STATS
    combat_stats = NO_STATS
    noncombat_stats = NO_STATS
    other_stats = NO_STATS
    total_mp = MPGain()

    for interval in log_data.turn_intervals:
        for consumable in interval.consumables_used:
            total_stats = total_stats + consumable.stat_gain
            consumables_by_name[consumable.name] += consumable.amount
        consumables.extend(interval.consumables_used)

        for item in interval.dropped_items:
            items[item.name] += item.amount

        for skill in interval.skills_cast:
            skills[skill.name] += skill.amount
            summary.total_skill_casts += skill.amount
            summary.total_mp_used += skill.mp_cost

        total_stats = total_stats + interval.stat_gain
        total_mp.add(interval.mp_gain)

        if interval.total_turns > 0:
            turns_per_area[interval.area_name] += interval.total_turns

        for turn in interval.turns:
            if turn.turn_version == TurnVersion.COMBAT:
                summary.combat_turns += 1
                combat_stats = combat_stats + turn.stat_gain
                familiar_usage[turn.familiar.familiar_name] += 1
            elif turn.turn_version == TurnVersion.NONCOMBAT:
                summary.noncombat_turns += 1
                noncombat_stats = noncombat_stats + turn.stat_gain
            elif turn.turn_version == TurnVersion.OTHER:
                summary.other_turns += 1
                other_stats = other_stats + turn.stat_gain

            if turn.disintegrated:
                summary.disintegrated_combats.append(NumberedName(turn.encounter_name, turn.turn_number))
            if reference.is_semirare(turn.encounter_name):
                summary.semirares.append(NumberedName(turn.encounter_name, turn.turn_number))
            if reference.is_badmoon(turn.encounter_name):
                summary.badmoon_adventures.append(NumberedName(turn.encounter_name, turn.turn_number))
            for encounter in turn.encounters:
                if reference.is_wandering(encounter.encounter_name):
                    summary.wandering_adventures.append(
                        NumberedName(encounter.encounter_name, encounter.turn_number)
                    )

        if interval.turns:
            runaways = sum(t.free_runaways for t in interval.turns)
            summary.free_runaways += runaways
            summary.attempted_free_runaways += runaways
        else:
            summary.free_runaways += interval.free_runaways
            summary.attempted_free_runaways += interval.attempted_free_runaways

        meat = interval.meat_gain
        if interval.area_name != NUNS_AREA:
            summary.total_meat_gain += meat.encounter
        summary.total_meat_gain += meat.other
        summary.total_meat_spent += meat.spent

    summary.disintegrated_combats.extend(log_data.disintegrated_combats)
    summary.semirares.extend(log_data.semirares)
    summary.badmoon_adventures.extend(log_data.badmoon_adventures)

    summary.turns_per_area = _sorted_counts(turns_per_area)
    summary.familiar_usage = _sorted_counts(familiar_usage)
    summary.skills_cast = dict(_sorted_counts(skills))
    summary.dropped_items = dict(_sorted_counts(items))
    summary.consumables_used = dict(_sorted_counts(consumables_by_name))
    summary.total_stats = total_stats
    summary.combat_stats = combat_stats
    summary.noncombat_stats = noncombat_stats
    summary.other_stats = other_stats
    summary.total_mp_gain = total_mp

    summary.consumption_per_day = summarize_consumption(
        consumables, log_data.day_changes.values(), reference
    )
    rollover = (
        log_data.last_turn_number
        - summary.turns_from_food
        - summary.turns_from_booze
        - summary.turns_from_other
    )
    summary.turns_from_rollover = max(0, rollover)

    summary.levels = [replace(level) for _, level in sorted(log_data.levels.items())]
    summary.level_totals = _level_totals(log_data, summary.levels)
    return summary


def _level_totals(log_data: LogData, levels: list[LevelData]) -> list[LevelTotals]:
    totals: dict[int, LevelTotals] = {}
    for turn in log_data.turns:
        if turn.meat_gain.is_zero and turn.mp_gain.is_zero:
            continue
        number = level_on_turn(levels, turn.turn_number)
        entry = totals.setdefault(number, LevelTotals(number))
        entry.meat.add(turn.meat_gain)
        entry.mp.add(turn.mp_gain)
    return [totals[number] for number in sorted(totals)]
