"""Skill MP cost table."""

# Base MP cost per cast, keyed by lowercase skill name
SKILL_MP_COSTS = {
    # Combat skills
    "clobber": 0,
    "toss": 0,
    "spaghetti spear": 1,
    "salsaball": 1,
    "suckerpunch": 1,
    "sing": 1,
    "lunging thrust-smack": 3,
    "thrust-smack": 3,
    "entangling noodles": 3,
    "stream of sauce": 3,
    "saucestorm": 12,
    "weapon of the pastalord": 35,
    "cannelloni cannon": 7,
    "stuffed mortar shell": 8,
    "wave of sauce": 23,
    "lightning strike": 0,
    "return": 0,
    # Buffs and utility
    "saucy salve": 4,
    "cannelloni cocoon": 20,
    "tongue of the walrus": 10,
    "the magical mojomuscular melody": 3,
    "the moxious madrigal": 2,
    "the polka of plenty": 7,
    "fat leon's phat loot lyric": 11,
    "the sonata of sneakiness": 20,
    "carlweather's cantata of confrontation": 10,
    "leash of linguini": 12,
    "empathy of the newt": 15,
    "astral shell": 10,
    "ghostly shell": 6,
    "springy fusilli": 10,
    "jalapeño saucesphere": 5,
    "elemental saucesphere": 10,
    "musk of the moose": 10,
    "smooth movement": 10,
    "the ode to booze": 50,
    "summon snowcones": 5,
    "advanced saucecrafting": 10,
    "pastamastery": 10,
    "advanced cocktailcrafting": 10,
    # Banishers
    "curse of vacation": 30,
    "talk about politics": 0,
    "creepy grin": 30,
    "banishing shout": 40,
    "howl of the alpha": 30,
    "thunder clap": 40,
    "batter up": 0,
    "peel out": 10,
    "walk away from explosion": 30,
}
