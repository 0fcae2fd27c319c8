"""Pydantic schemas for API responses."""

from typing import Optional

from pydantic import BaseModel

from kolviz.core.models import (
    Consumable,
    EquipmentChange,
    Item,
    MeatGain,
    MPGain,
    NumberedName,
    Skill,
    Statgain,
    Turn,
    TurnInterval,
)
from kolviz.core.summary import LogSummary


class StatGainResponse(BaseModel):
    """Substat deltas."""

    mus: int = 0
    myst: int = 0
    mox: int = 0


class MPGainResponse(BaseModel):
    """MP gained, split by source."""

    encounter: int = 0
    starfish: int = 0
    resting: int = 0
    out_of_encounter: int = 0
    consumable: int = 0
    total: int = 0


class MeatGainResponse(BaseModel):
    encounter: int = 0
    other: int = 0
    spent: int = 0


class ItemResponse(BaseModel):
    """Dropped item or combat item."""

    name: str
    amount: int
    turn_number: int


class SkillResponse(BaseModel):
    name: str
    amount: int
    turn_number: int
    mp_cost: int = 0


class ConsumableResponse(BaseModel):
    name: str
    version: str  # FOOD, BOOZE, SPLEEN or OTHER
    adventure_gain: int
    amount: int
    turn_number: int
    day_number: int
    stat_gain: StatGainResponse


class NamedTurnResponse(BaseModel):
    """A name tied to a turn (semirares, hunted combats and the like)."""

    name: str
    turn_number: int


class EncounterResponse(BaseModel):
    """One event of a turn."""

    area_name: str
    encounter_name: str
    turn_number: int
    turn_version: str
    stat_gain: StatGainResponse
    meat_gain: MeatGainResponse
    mp_gain: MPGainResponse


class TurnResponse(BaseModel):
    """Single turn response."""

    turn_number: int
    area_name: str
    encounter_name: str
    day_number: int
    turn_version: str
    familiar: str
    stat_gain: StatGainResponse
    mp_gain: MPGainResponse
    meat_gain: MeatGainResponse
    free_runaways: int = 0
    disintegrated: bool = False
    banished: bool = False
    banished_info: Optional[str] = None
    notes: Optional[str] = None
    dropped_items: list[ItemResponse] = []
    skills_cast: list[SkillResponse] = []
    combat_items_used: list[ItemResponse] = []
    consumables_used: list[ConsumableResponse] = []
    encounters: list[EncounterResponse] = []


class TurnListResponse(BaseModel):
    """List of turns."""

    turns: list[TurnResponse]
    total: int


class IntervalResponse(BaseModel):
    """Consecutive turns in one area, covering (start_turn, end_turn]."""

    area_name: str
    start_turn: int
    end_turn: int
    total_turns: int
    stat_gain: StatGainResponse
    mp_gain: MPGainResponse
    meat_gain: MeatGainResponse
    free_runaways: int = 0
    dropped_items: list[ItemResponse] = []
    consumables_used: list[ConsumableResponse] = []


class IntervalListResponse(BaseModel):
    intervals: list[IntervalResponse]
    total: int


class DayResponse(BaseModel):
    """Day change with its comments."""

    day_number: int
    turn_number: int
    header: Optional[str] = None
    footer: Optional[str] = None


class EquipmentChangeResponse(BaseModel):
    """Worn equipment from a turn on."""

    turn_number: int
    hat: str
    weapon: str
    offhand: str
    shirt: str
    pants: str
    acc1: str
    acc2: str
    acc3: str
    fam_equip: str


class FamiliarChangeResponse(BaseModel):
    familiar_name: str
    turn_number: int


class AreaTurnsResponse(BaseModel):
    area_name: str
    turns: int


class CountResponse(BaseModel):
    name: str
    count: int


class DayConsumptionResponse(BaseModel):
    """Turns and organ space gained from consumables on one day."""

    day_number: int
    turns_from_food: int
    turns_from_booze: int
    turns_from_spleen: int
    turns_from_other: int
    fullness_hit: int
    drunkenness_hit: int
    spleen_hit: int


class LevelResponse(BaseModel):
    level_number: int
    level_reached_on_turn: int
    combat_turns: int
    noncombat_turns: int
    other_turns: int
    stat_gain_per_turn: float
    stats_at_level_reached: StatGainResponse


class LevelTotalsResponse(BaseModel):
    level_number: int
    meat: MeatGainResponse
    mp: MPGainResponse


class SummaryResponse(BaseModel):
    """Aggregate summary of the log."""

    turns_per_area: list[AreaTurnsResponse]
    combat_turns: int
    noncombat_turns: int
    other_turns: int
    total_stats: StatGainResponse
    combat_stats: StatGainResponse
    noncombat_stats: StatGainResponse
    other_stats: StatGainResponse
    familiar_usage: list[CountResponse]
    total_meat_gain: int
    total_meat_spent: int
    total_mp_gain: MPGainResponse
    total_skill_casts: int
    total_mp_used: int
    skills_cast: list[CountResponse]
    dropped_items: list[CountResponse]
    consumables_used: list[CountResponse]
    consumption_per_day: list[DayConsumptionResponse]
    turns_from_food: int
    turns_from_booze: int
    turns_from_other: int
    turns_from_rollover: int
    free_runaways: int
    attempted_free_runaways: int
    disintegrated_combats: list[NamedTurnResponse]
    semirares: list[NamedTurnResponse]
    badmoon_adventures: list[NamedTurnResponse]
    wandering_adventures: list[NamedTurnResponse]
    levels: list[LevelResponse]
    level_totals: list[LevelTotalsResponse]


class StatusResponse(BaseModel):
    """Server status response."""

    status: str
    version: str
    log_name: str
    log_path: Optional[str] = None
    is_detailed: bool
    parsed_log_creator: str
    character_class: str
    game_mode: str
    ascension_path: str
    last_turn_number: int
    day_count: int


# --- builders ----------------------------------------------------------------


def build_stats(stats: Statgain) -> StatGainResponse:
    return StatGainResponse(mus=stats.mus, myst=stats.myst, mox=stats.mox)


def build_mp(mp: MPGain) -> MPGainResponse:
    return MPGainResponse(
        encounter=mp.encounter,
        starfish=mp.starfish,
        resting=mp.resting,
        out_of_encounter=mp.out_of_encounter,
        consumable=mp.consumable,
        total=mp.total,
    )


def build_meat(meat: MeatGain) -> MeatGainResponse:
    return MeatGainResponse(encounter=meat.encounter, other=meat.other, spent=meat.spent)


def build_item(item: Item) -> ItemResponse:
    return ItemResponse(name=item.name, amount=item.amount, turn_number=item.turn_number)


def build_skill(skill: Skill) -> SkillResponse:
    return SkillResponse(
        name=skill.name,
        amount=skill.amount,
        turn_number=skill.turn_number,
        mp_cost=skill.mp_cost,
    )


def build_consumable(consumable: Consumable) -> ConsumableResponse:
    return ConsumableResponse(
        name=consumable.name,
        version=consumable.version.name,
        adventure_gain=consumable.adventure_gain,
        amount=consumable.amount,
        turn_number=consumable.turn_number,
        day_number=consumable.day_number,
        stat_gain=build_stats(consumable.stat_gain),
    )


def build_named(entries: list[NumberedName]) -> list[NamedTurnResponse]:
    return [NamedTurnResponse(name=e.name, turn_number=e.turn_number) for e in entries]


def build_turn(turn: Turn, include_encounters: bool = False) -> TurnResponse:
    """
    Build the response for a turn.

    Args:
        turn: Turn to convert
        include_encounters: Also list the encounters of the turn
    """
    encounters = []
    if include_encounters:
        encounters = [
            EncounterResponse(
                area_name=e.area_name,
                encounter_name=e.encounter_name,
                turn_number=e.turn_number,
                turn_version=e.turn_version.name,
                stat_gain=build_stats(e.stat_gain),
                meat_gain=build_meat(e.meat_gain),
                mp_gain=build_mp(e.mp_gain),
            )
            for e in turn.encounters
        ]

    return TurnResponse(
        turn_number=turn.turn_number,
        area_name=turn.area_name,
        encounter_name=turn.encounter_name,
        day_number=turn.day_number,
        turn_version=turn.turn_version.name,
        familiar=turn.familiar.familiar_name,
        stat_gain=build_stats(turn.stat_gain),
        mp_gain=build_mp(turn.mp_gain),
        meat_gain=build_meat(turn.meat_gain),
        free_runaways=turn.free_runaways,
        disintegrated=turn.disintegrated,
        banished=turn.banished,
        banished_info=turn.banished_info or None,
        notes=turn.notes or None,
        dropped_items=[build_item(i) for i in turn.dropped_items.values()],
        skills_cast=[build_skill(s) for s in turn.skills_cast.values()],
        combat_items_used=[
            ItemResponse(name=c.name, amount=c.amount, turn_number=c.turn_number)
            for c in turn.combat_items_used.values()
        ],
        consumables_used=[build_consumable(c) for c in turn.consumables_used.values()],
        encounters=encounters,
    )


def build_interval(interval: TurnInterval) -> IntervalResponse:
    return IntervalResponse(
        area_name=interval.area_name,
        start_turn=interval.start_turn,
        end_turn=interval.end_turn,
        total_turns=interval.total_turns,
        stat_gain=build_stats(interval.stat_gain),
        mp_gain=build_mp(interval.mp_gain),
        meat_gain=build_meat(interval.meat_gain),
        free_runaways=interval.free_runaways,
        dropped_items=[build_item(i) for i in interval.dropped_items],
        consumables_used=[build_consumable(c) for c in interval.consumables_used],
    )


def build_equipment(change: EquipmentChange) -> EquipmentChangeResponse:
    return EquipmentChangeResponse(
        turn_number=change.turn_number,
        hat=change.hat,
        weapon=change.weapon,
        offhand=change.offhand,
        shirt=change.shirt,
        pants=change.pants,
        acc1=change.acc1,
        acc2=change.acc2,
        acc3=change.acc3,
        fam_equip=change.fam_equip,
    )


def _counts(counts: dict[str, int]) -> list[CountResponse]:
    return [CountResponse(name=name, count=count) for name, count in counts.items()]


def build_summary(summary: LogSummary) -> SummaryResponse:
    """Build the summary response from a computed summary."""
    return SummaryResponse(
        turns_per_area=[
            AreaTurnsResponse(area_name=area, turns=turns)
            for area, turns in summary.turns_per_area
        ],
        combat_turns=summary.combat_turns,
        noncombat_turns=summary.noncombat_turns,
        other_turns=summary.other_turns,
        total_stats=build_stats(summary.total_stats),
        combat_stats=build_stats(summary.combat_stats),
        noncombat_stats=build_stats(summary.noncombat_stats),
        other_stats=build_stats(summary.other_stats),
        familiar_usage=_counts(dict(summary.familiar_usage)),
        total_meat_gain=summary.total_meat_gain,
        total_meat_spent=summary.total_meat_spent,
        total_mp_gain=build_mp(summary.total_mp_gain),
        total_skill_casts=summary.total_skill_casts,
        total_mp_used=summary.total_mp_used,
        skills_cast=_counts(summary.skills_cast),
        dropped_items=_counts(summary.dropped_items),
        consumables_used=_counts(summary.consumables_used),
        consumption_per_day=[
            DayConsumptionResponse(
                day_number=d.day_number,
                turns_from_food=d.turns_from_food,
                turns_from_booze=d.turns_from_booze,
                turns_from_spleen=d.turns_from_spleen,
                turns_from_other=d.turns_from_other,
                fullness_hit=d.fullness_hit,
                drunkenness_hit=d.drunkenness_hit,
                spleen_hit=d.spleen_hit,
            )
            for d in summary.consumption_per_day
        ],
        turns_from_food=summary.turns_from_food,
        turns_from_booze=summary.turns_from_booze,
        turns_from_other=summary.turns_from_other,
        turns_from_rollover=summary.turns_from_rollover,
        free_runaways=summary.free_runaways,
        attempted_free_runaways=summary.attempted_free_runaways,
        disintegrated_combats=build_named(summary.disintegrated_combats),
        semirares=build_named(summary.semirares),
        badmoon_adventures=build_named(summary.badmoon_adventures),
        wandering_adventures=build_named(summary.wandering_adventures),
        levels=[
            LevelResponse(
                level_number=level.level_number,
                level_reached_on_turn=level.level_reached_on_turn,
                combat_turns=level.combat_turns,
                noncombat_turns=level.noncombat_turns,
                other_turns=level.other_turns,
                stat_gain_per_turn=level.stat_gain_per_turn,
                stats_at_level_reached=build_stats(level.stats_at_level_reached),
            )
            for level in summary.levels
        ],
        level_totals=[
            LevelTotalsResponse(
                level_number=totals.level_number,
                meat=build_meat(totals.meat),
                mp=build_mp(totals.mp),
            )
            for totals in summary.level_totals
        ],
    )
