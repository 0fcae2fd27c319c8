"""Read-only access to a parsed log for the API routes."""

from typing import Optional

from kolviz.core.log_data import LogData
from kolviz.core.models import (
    DayChange,
    EquipmentChange,
    FamiliarChange,
    HeaderFooterComment,
    Turn,
    TurnInterval,
)
from kolviz.core.summary import LogSummary


class LogRepository:
    """
    Query layer over one finalized log and its summary.

    The log is parsed once before the server starts, so every query works
    on in-memory data and nothing is written back.
    """

    def __init__(self, log_data: LogData, summary: LogSummary) -> None:
        self.log_data = log_data
        self.summary = summary

    def get_turns(self, area: Optional[str] = None, limit: Optional[int] = None) -> list[Turn]:
        """
        Get turns in log order.

        Args:
            area: Only turns spent in this area
            limit: Return at most this many turns

        Returns:
            List of turns (empty for pre-parsed logs)
        """
        turns = self.log_data.turns
        if area is not None:
            turns = [t for t in turns if t.area_name == area]
        if limit is not None:
            turns = turns[:limit]
        return list(turns)

    def get_turn(self, turn_number: int) -> Optional[Turn]:
        for turn in self.log_data.turns:
            if turn.turn_number == turn_number:
                return turn
        return None

    def get_intervals(self) -> list[TurnInterval]:
        return sorted(self.log_data.turn_intervals, key=TurnInterval.sort_key)

    def get_day_changes(self) -> list[tuple[DayChange, HeaderFooterComment]]:
        """Day changes in day order, with their header and footer comments."""
        log_data = self.log_data
        return [
            (day, log_data.get_header_footer_comment(number) or HeaderFooterComment())
            for number, day in sorted(log_data.day_changes.items())
        ]

    def get_day_change(self, day_number: int) -> Optional[tuple[DayChange, HeaderFooterComment]]:
        day = self.log_data.day_changes.get(day_number)
        if day is None:
            return None
        comment = self.log_data.get_header_footer_comment(day_number) or HeaderFooterComment()
        return day, comment

    def get_equipment_changes(self) -> list[EquipmentChange]:
        return list(self.log_data.equipment_changes)

    def get_familiar_changes(self) -> list[FamiliarChange]:
        return list(self.log_data.familiar_changes)
