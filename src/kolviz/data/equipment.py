"""Equipment effect tables: MP regeneration, skill cost offsets and outfits."""

# Average MP regenerated per adventure while the item is worn
# Keys are lowercase item names as they appear in equip commands and snapshots
EQUIPMENT_MP_REGEN = {
    "plexiglass pocketwatch": 4,
    "jekyllin hide belt": 4,
    "stainless steel solitaire": 4,
    "sugar shield": 0,
    "pilgrim shield": 8,
    "juju mojo mask": 0,
    "mer-kin gladiator mask": 5,
    "bottle-rocket crossbow": 6,
    "tiny plastic fruity wine bottle": 2,
    "brimstone bracelet": 3,
    "tuxedo shirt": 1,
    "frosty halo": 2,
}

# Change to the MP cost of every skill cast while the item is worn
MP_COST_OFFSETS = {
    "jewel-eyed wizard hat": -1,
    "plexiglass pendant": -3,
    "solid shifting time weirdness": -3,
    "idol of ak'gyxoth": -1,
    "wizard hat": -1,
    "baconstone bracelet": -1,
    "stainless steel scarf": -1,
    "hairpiece on fire": 1,
}

# Slots covered by an outfit; an "outfit" command clears these slots since the
# exact pieces are not logged
OUTFIT_SLOTS = {
    "frat warrior fatigues": frozenset({"hat", "pants", "acc1"}),
    "war hippy fatigues": frozenset({"hat", "pants", "acc1"}),
    "knob goblin elite guard uniform": frozenset({"hat", "weapon", "pants"}),
    "knob goblin harem girl disguise": frozenset({"hat", "pants"}),
    "swashbuckling getup": frozenset({"hat", "pants", "acc1"}),
    "mining gear": frozenset({"hat", "weapon", "pants"}),
    "filthy hippy disguise": frozenset({"hat", "pants"}),
    "frat boy ensemble": frozenset({"hat", "weapon", "pants"}),
    "bugbear costume": frozenset({"hat", "pants"}),
    "cloaca-cola uniform": frozenset({"hat", "offhand", "pants"}),
    "dyspepsi-cola uniform": frozenset({"hat", "offhand", "pants"}),
    "mer-kin gladiatorial gear": frozenset({"hat", "weapon", "pants"}),
    "mer-kin scholar's vestments": frozenset({"hat", "offhand", "pants"}),
}
