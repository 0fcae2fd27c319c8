"""Immutable reference data handed to the parsing pipeline."""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from kolviz.data.areas import (
    AREA_NAME_MAPPINGS,
    BADMOON_ENCOUNTERS,
    SEMIRARE_ENCOUNTERS,
    WANDERING_ENCOUNTERS,
)
from kolviz.data.consumables import DRUNKENNESS_HITS, FULLNESS_HITS, SPLEEN_HITS
from kolviz.data.equipment import EQUIPMENT_MP_REGEN, MP_COST_OFFSETS, OUTFIT_SLOTS
from kolviz.data.skills import SKILL_MP_COSTS

NON_ASCII_PATTERN = re.compile(r"[^\x00-\x7f]")


def normalize_key(name: str) -> str:
    """
    Build a lookup key from an item, skill or outfit name.

    Log text and table entries disagree on accents and capitalisation, so
    keys are lower-cased with non-ASCII characters stripped.
    """
    return NON_ASCII_PATTERN.sub("", name).lower()


def _frozen(table: Mapping[str, object]) -> Mapping[str, object]:
    return MappingProxyType({normalize_key(k): v for k, v in table.items()})


@dataclass(frozen=True)
class ReferenceData:
    """
    Lookup tables used while parsing and summarising a log.

    Every lookup treats a miss as "no effect" and returns 0 (or an empty set)
    instead of raising.
    """

    mp_regen: Mapping[str, int] = field(default_factory=dict)
    mp_cost_offsets: Mapping[str, int] = field(default_factory=dict)
    skill_mp_costs: Mapping[str, int] = field(default_factory=dict)
    outfit_slots: Mapping[str, frozenset] = field(default_factory=dict)
    area_names: Mapping[str, str] = field(default_factory=dict)
    fullness: Mapping[str, int] = field(default_factory=dict)
    drunkenness: Mapping[str, int] = field(default_factory=dict)
    spleen: Mapping[str, int] = field(default_factory=dict)
    semirares: frozenset = frozenset()
    badmoon: frozenset = frozenset()
    wandering: frozenset = frozenset()

    def get_mp_regen(self, item_name: str) -> int:
        return self.mp_regen.get(normalize_key(item_name), 0)

    def get_mp_cost_offset(self, item_name: str) -> int:
        return self.mp_cost_offsets.get(normalize_key(item_name), 0)

    def get_skill_mp_cost(self, skill_name: str) -> int:
        return self.skill_mp_costs.get(normalize_key(skill_name), 0)

    def get_outfit_slots(self, outfit_name: str) -> frozenset:
        return self.outfit_slots.get(normalize_key(outfit_name), frozenset())

    def get_fullness_hit(self, name: str) -> int:
        return self.fullness.get(normalize_key(name), 0)

    def get_drunkenness_hit(self, name: str) -> int:
        return self.drunkenness.get(normalize_key(name), 0)

    def get_spleen_hit(self, name: str) -> int:
        return self.spleen.get(normalize_key(name), 0)

    def map_area_name(self, area_name: str) -> str:
        """Return the canonical name of an area, or the name itself."""
        return self.area_names.get(area_name, area_name)

    def is_semirare(self, encounter_name: str) -> bool:
        return encounter_name in self.semirares

    def is_badmoon(self, encounter_name: str) -> bool:
        return encounter_name in self.badmoon

    def is_wandering(self, encounter_name: str) -> bool:
        return encounter_name in self.wandering


def load_reference_data() -> ReferenceData:
    """
    Build the reference data from the bundled tables.

    Returns:
        ReferenceData with read-only, key-normalised mappings
    """
    return ReferenceData(
        mp_regen=_frozen(EQUIPMENT_MP_REGEN),
        mp_cost_offsets=_frozen(MP_COST_OFFSETS),
        skill_mp_costs=_frozen(SKILL_MP_COSTS),
        outfit_slots=_frozen(OUTFIT_SLOTS),
        area_names=MappingProxyType(dict(AREA_NAME_MAPPINGS)),
        fullness=_frozen(FULLNESS_HITS),
        drunkenness=_frozen(DRUNKENNESS_HITS),
        spleen=_frozen(SPLEEN_HITS),
        semirares=SEMIRARE_ENCOUNTERS,
        badmoon=BADMOON_ENCOUNTERS,
        wandering=WANDERING_ENCOUNTERS,
    )
