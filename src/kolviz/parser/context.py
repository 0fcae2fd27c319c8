"""Shared parsing state handed to every line and block parser."""

from dataclasses import dataclass, field

from kolviz.config.settings import Settings
from kolviz.core.log_data import LogData
from kolviz.core.models import NO_EQUIPMENT, EquipmentChange, Turn
from kolviz.data.reference import ReferenceData, load_reference_data


@dataclass
class ParseContext:
    """
    Everything a parser may read or change while a log is consumed.

    The equipment stack holds the worn equipment in the order it was put on,
    so "custom outfit backup" can roll back to the previous snapshot. The
    familiar equipment map remembers what each familiar was last wearing.
    """

    log_data: LogData = field(default_factory=LogData)
    reference: ReferenceData = field(default_factory=load_reference_data)
    settings: Settings = field(default_factory=Settings)
    equipment_stack: list[EquipmentChange] = field(default_factory=list)
    familiar_equipment: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.equipment_stack:
            self.equipment_stack.append(self.log_data.last_equipment_change())

    @property
    def last_turn(self) -> Turn:
        return self.log_data.last_turn_spent()

    @property
    def include_notes(self) -> bool:
        return self.settings.include_notes

    def current_equipment(self) -> EquipmentChange:
        """Top of the equipment stack."""
        return self.equipment_stack[-1] if self.equipment_stack else NO_EQUIPMENT

    def push_equipment(self, change: EquipmentChange) -> None:
        """Put on a new equipment snapshot and record it in the log data."""
        self.equipment_stack.append(change)
        self.log_data.add_equipment_change(change)

    def pop_equipment(self) -> EquipmentChange:
        """
        Roll back to the previously worn equipment.

        Returns:
            The snapshot that is worn after the rollback, NO_EQUIPMENT when
            nothing is left on the stack
        """
        if self.equipment_stack:
            self.equipment_stack.pop()
        return self.current_equipment()
