"""Post-pass correction of a fully streamed log.

Streaming leaves day boundaries, equipment and familiar histories slightly
off around free runaways and other non-turns. The functions here rebuild them
from the per-turn snapshots once the whole log is read. All helpers except
``finalize`` are pure.
"""

import logging
from typing import Iterable, Sequence

from kolviz.core.log_data import LogData
from kolviz.core.models import (
    CharacterClass,
    DayChange,
    EquipmentChange,
    FamiliarChange,
    HeaderFooterComment,
    Turn,
    TurnInterval,
)
from kolviz.core.summary import compute_levels, guess_character_class
from kolviz.data.reference import ReferenceData

logger = logging.getLogger(__name__)


def add_mp_regen(turns: Iterable[Turn], reference: ReferenceData) -> None:
    """Add the MP regenerated by worn equipment to every turn."""
    for turn in turns:
        regen = sum(reference.get_mp_regen(item) for item in turn.equipment.worn_items)
        turn.add_mp_regen(regen)


def rebuild_day_changes(
    turns: Iterable[Turn],
    comments: dict[int, HeaderFooterComment],
) -> tuple[dict[int, DayChange], dict[int, HeaderFooterComment]]:
    """
    Rebuild day boundaries from the day numbers of the turns.

    A day starts after the last turn of the day before it. Header and footer
    comments stay with their day number.

    Args:
        turns: Turns in log order
        comments: Comments of the provisional day changes

    Returns:
        Tuple of (day changes, comments), both keyed by day number
    """
    day_changes = {1: DayChange(1, 0)}
    day_comments = {1: comments.get(1, HeaderFooterComment())}
    current_day = 1
    for turn in turns:
        while current_day < turn.day_number:
            current_day += 1
            day_changes[current_day] = DayChange(current_day, max(0, turn.turn_number - 1))
            day_comments[current_day] = comments.get(current_day, HeaderFooterComment())
    return day_changes, day_comments


def rebuild_familiar_changes(turns: Iterable[Turn]) -> list[FamiliarChange]:
    """Familiar history made of the familiars the turns were spent with."""
    changes: list[FamiliarChange] = []
    for change in sorted((t.familiar for t in turns), key=lambda c: c.turn_number):
        changes = [c for c in changes if c.turn_number != change.turn_number]
        if not changes or changes[-1].familiar_name != change.familiar_name:
            changes.append(change)
    return changes


def rebuild_equipment_changes(turns: Iterable[Turn]) -> list[EquipmentChange]:
    """Equipment history made of the equipment the turns were spent in."""
    changes: list[EquipmentChange] = []
    for change in sorted((t.equipment for t in turns), key=lambda c: c.turn_number):
        changes = [c for c in changes if c.turn_number != change.turn_number]
        if not changes or not changes[-1].is_same_equipment(change):
            changes.append(change)
    return changes


def build_turn_intervals(turns: Sequence[Turn]) -> list[TurnInterval]:
    """
    Group consecutive turns spent in the same area.

    Each interval starts where the one before it ended, so an interval
    covers the turns (start_turn, end_turn].
    """
    intervals: list[TurnInterval] = []
    current = None
    for turn in turns:
        if current is None or turn.area_name != current.area_name:
            start = turn.turn_number if current is None else min(current.end_turn, turn.turn_number)
            current = TurnInterval(turn.area_name, start, start)
            intervals.append(current)
        current.add_turn(turn)
    return intervals


def finalize(log_data: LogData, reference: ReferenceData) -> None:
    """
    Correct a log after its last line was read.

    Runs at most once per log. Raw session logs get equipment MP regen,
    rebuilt day, familiar and equipment histories, and their turn
    intervals. Every log gets a character class (guessed when missing) and
    its level progression.

    Args:
        log_data: Log data filled by a parser
        reference: Lookup tables for equipment MP regen
    """
    if log_data.finalized:
        logger.debug("Log %s is already finalized", log_data.log_name)
        return

    if log_data.is_detailed:
        turns = log_data.turns
        add_mp_regen(turns, reference)
        log_data.day_changes, log_data.header_footer_comments = rebuild_day_changes(
            turns, log_data.header_footer_comments
        )
        log_data.familiar_changes = rebuild_familiar_changes(turns)
        log_data.equipment_changes = rebuild_equipment_changes(turns)
        log_data.turn_intervals = build_turn_intervals(turns)

    if log_data.character_class == CharacterClass.NOT_DEFINED:
        log_data.character_class = guess_character_class(log_data)
        logger.debug("Guessed character class %s", log_data.character_class.display_name)

    levels = compute_levels(log_data.turns, log_data.character_class, log_data.player_snapshots)
    log_data.levels = {level.level_number: level for level in levels}

    log_data.finalized = True
