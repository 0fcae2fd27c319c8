"""Turn and state accumulator filled while a log is parsed."""

import logging
from typing import Optional

from kolviz.core.models import (
    NO_EQUIPMENT,
    AscensionPath,
    CharacterClass,
    DayChange,
    EquipmentChange,
    FamiliarChange,
    GameMode,
    HeaderFooterComment,
    LevelData,
    NumberedName,
    ParsedLogClass,
    PlayerSnapshot,
    Pull,
    Turn,
    TurnInterval,
)

logger = logging.getLogger(__name__)

# Gear that turns a combat "return" into a free runaway
RUNAWAY_EQUIPMENT = ("navel ring of navel gazing", "greatest american pants")
RUNAWAY_SKILL = "return"

# Learned skills sharing a turn are joined into one entry, up to this many
MAX_LEARNED_SKILLS_PER_ENTRY = 5

ASCENSION_START = "Ascension Start"


class LogData:
    """
    Session-wide state of one ascension log.

    A detailed log (raw session log) is made of single turns, a pre-parsed
    log of turn intervals. Both start with a dummy "Ascension Start" entry on
    turn 0, day 1, with no equipment and no familiar.
    """

    def __init__(self, is_detailed: bool = True) -> None:
        self.is_detailed = is_detailed
        self.log_name = ""
        self.parsed_log_creator = ParsedLogClass.NOT_DEFINED
        self.character_class = CharacterClass.NOT_DEFINED
        self.game_mode = GameMode.NOT_DEFINED
        self.ascension_path = AscensionPath.NOT_DEFINED
        self.finalized = False

        self.turns: list[Turn] = []
        self.turn_intervals: list[TurnInterval] = []
        self.day_changes: dict[int, DayChange] = {}
        self.header_footer_comments: dict[int, HeaderFooterComment] = {}
        self.equipment_changes: list[EquipmentChange] = []
        self.familiar_changes: list[FamiliarChange] = []
        self.levels: dict[int, LevelData] = {}
        self.player_snapshots: list[PlayerSnapshot] = []
        self.pulls: list[Pull] = []
        self.learned_skills: list[NumberedName] = []
        self.hybrid_content: list[NumberedName] = []
        self.hunted_combats: list[NumberedName] = []
        self.lost_combats: list[NumberedName] = []

        # Only filled from pre-parsed logs, which carry these as summary lines
        self.semirares: list[NumberedName] = []
        self.badmoon_adventures: list[NumberedName] = []
        self.disintegrated_combats: list[NumberedName] = []

        self.add_day_change(DayChange(1, 0))
        self.levels[1] = LevelData(1, 0)
        self.equipment_changes.append(NO_EQUIPMENT)
        self.familiar_changes.append(FamiliarChange("none", 0))

        if is_detailed:
            first = Turn(
                0,
                ASCENSION_START,
                ASCENSION_START,
                day_number=1,
                equipment=self.last_equipment_change(),
                familiar=self.last_familiar_change(),
            )
            self.turns.append(first)
            self._last_turn: Optional[Turn] = first
            self._penultimate_turn: Optional[Turn] = first
        else:
            self.turn_intervals.append(TurnInterval(ASCENSION_START, 0, 0))
            self._last_turn = None
            self._penultimate_turn = None

    # --- turns -----------------------------------------------------------

    def add_turn_spent(self, turn: Turn) -> None:
        """
        Append a turn of a detailed log.

        A turn numbered lower than the last turn is moved up to the last turn
        number. When the new turn shares its number with the last one, the
        last turn was a free action: if it happened in the same area as the
        turn before it, its data is folded into that turn as an extra
        encounter.

        Args:
            turn: Turn to append

        Raises:
            TypeError: If this log is made of turn intervals
        """
        if not self.is_detailed:
            raise TypeError("Pre-parsed logs only take turn intervals")

        last = self._last_turn
        penultimate = self._penultimate_turn

        if turn.turn_number < last.turn_number:
            logger.debug(
                "Turn %d of %s lies before turn %d, moving it up",
                turn.turn_number,
                turn.area_name,
                last.turn_number,
            )
            turn.turn_number = last.turn_number

        if last.turn_number == turn.turn_number:
            if last is not penultimate and last.area_name == penultimate.area_name:
                # The penultimate turn keeps its own turn number
                penultimate.add_encounter(last.to_encounter(penultimate.turn_number))
                penultimate.add_turn_data(last)
                if _ran_away_with_runaway_gear(last):
                    penultimate.free_runaways += 1
                self.turns.pop()
        else:
            self._penultimate_turn = last

        self._last_turn = turn
        self.turns.append(turn)

    def add_turn_interval(self, interval: TurnInterval) -> None:
        if self.is_detailed:
            raise TypeError("Detailed logs only take single turns")
        self.turn_intervals.append(interval)

    def last_turn_spent(self) -> Turn:
        """The most recently added turn of a detailed log."""
        return self.turns[-1]

    def last_turn_interval(self) -> TurnInterval:
        return self.turn_intervals[-1]

    @property
    def last_turn_number(self) -> int:
        if self.is_detailed:
            return self.turns[-1].turn_number
        return self.turn_intervals[-1].end_turn

    # --- days ------------------------------------------------------------

    def add_day_change(self, day_change: DayChange) -> None:
        """Add a day change, replacing any earlier change for the same day."""
        self.day_changes[day_change.day_number] = day_change
        self.day_changes = dict(sorted(self.day_changes.items()))
        self.header_footer_comments[day_change.day_number] = HeaderFooterComment()

    def last_day_change(self) -> DayChange:
        return self.day_changes[max(self.day_changes)]

    def get_header_footer_comment(self, day_number: int) -> Optional[HeaderFooterComment]:
        return self.header_footer_comments.get(day_number)

    def last_header_footer_comment(self) -> HeaderFooterComment:
        return self.header_footer_comments[self.last_day_change().day_number]

    def current_day(self, turn_number: int) -> DayChange:
        """Day change in effect on the given turn."""
        current = self.day_changes[1]
        for day_change in self.day_changes.values():
            if day_change.turn_number > turn_number:
                break
            current = day_change
        return current

    # --- equipment and familiars ------------------------------------------

    def add_equipment_change(self, change: EquipmentChange) -> None:
        """
        Record an equipment change.

        Only the last change of a turn is kept, and a change to the equipment
        that is already worn is dropped.
        """
        self.equipment_changes = [
            c for c in self.equipment_changes if c.turn_number != change.turn_number
        ]
        if not self.equipment_changes or not self.equipment_changes[-1].is_same_equipment(change):
            self.equipment_changes.append(change)

    def last_equipment_change(self) -> EquipmentChange:
        return self.equipment_changes[-1] if self.equipment_changes else NO_EQUIPMENT

    def add_familiar_change(self, change: FamiliarChange) -> None:
        """Record a familiar change, with the same rules as equipment changes."""
        self.familiar_changes = [
            c for c in self.familiar_changes if c.turn_number != change.turn_number
        ]
        if (
            not self.familiar_changes
            or self.familiar_changes[-1].familiar_name != change.familiar_name
        ):
            self.familiar_changes.append(change)

    def last_familiar_change(self) -> FamiliarChange:
        if not self.familiar_changes:
            return FamiliarChange("none", 0)
        return self.familiar_changes[-1]

    # --- snapshots -------------------------------------------------------

    def add_player_snapshot(self, snapshot: PlayerSnapshot) -> None:
        self.player_snapshots.append(snapshot)

    # --- misc collections -------------------------------------------------

    def add_pull(self, pull: Pull) -> None:
        self.pulls.append(pull)

    def add_learned_skill(self, skill_name: str, turn_number: int) -> None:
        """Add a learned skill; skills of the same turn share an entry."""
        for i, entry in enumerate(self.learned_skills):
            if entry.turn_number != turn_number:
                continue
            if len(entry.name.split("; ")) < MAX_LEARNED_SKILLS_PER_ENTRY:
                self.learned_skills[i] = NumberedName(f"{entry.name}; {skill_name}", turn_number)
                return
        self.learned_skills.append(NumberedName(skill_name, turn_number))

    def add_hybrid_content(self, description: str, turn_number: int) -> None:
        """
        Add a DNA hybridizing or gene tonic entry.

        Repeating an entry on the same turn turns it into "<entry> (n)".
        """
        for i, entry in enumerate(self.hybrid_content):
            if entry.turn_number == turn_number and entry.name.startswith(description):
                count = 1
                rest = entry.name[len(description):].strip()
                if rest.startswith("(") and rest.endswith(")"):
                    try:
                        count = int(rest[1:-1])
                    except ValueError:
                        logger.debug("Bad hybrid count in %r", entry.name)
                self.hybrid_content[i] = NumberedName(f"{description} ({count + 1})", turn_number)
                return
        self.hybrid_content.append(NumberedName(description, turn_number))

    def add_hunted_combat(self, encounter_name: str, turn_number: int) -> None:
        self.hunted_combats.append(NumberedName(encounter_name, turn_number))

    def add_lost_combat(self, encounter_name: str, turn_number: int) -> None:
        self.lost_combats.append(NumberedName(encounter_name, turn_number))


def _ran_away_with_runaway_gear(turn: Turn) -> bool:
    if not (turn.is_combat and turn.is_skill_cast(RUNAWAY_SKILL)):
        return False
    return any(turn.equipment.is_equipped(item) for item in RUNAWAY_EQUIPMENT)
