"""Compiled regex patterns and fixed strings of the session log notation."""

import re

from kolviz.core.models import CharacterClass

# ASCII punctuation, for use inside character classes
PUNCT = r"!-/:-@\[-`{-~"

# Characters allowed in item, skill and familiar names
NAME_CHARS = rf"[\w\s{PUNCT}]"

# --- shared prefixes --------------------------------------------------------

COMBAT_ROUND_PREFIX = "Round "
FIRST_COMBAT_ROUND_PREFIX = "Round 0: "
ACQUIRE_EFFECT_PREFIX = "You acquire an effect:"
ACQUIRE_ITEM_PREFIX = "You acquire an item: "
AFTER_BATTLE_PREFIX = "After Battle: "
ENCOUNTER_PREFIX = "Encounter: "
LOSE_PREFIX = "You lose"

# Gain/loss of a numeric amount of something
# Example: You gain 1,234 Muscleboundness
# Example: After Battle: You lose 50 Chutzpah
GAIN_LOSE_PATTERN = re.compile(r"^(?:After Battle: )?You (?:gain|lose) \d*,?\d+ [\w\s]+")

# Same, capturing the amount and what was gained
# Example: You gain 3 Adventures
GAIN_LOSE_CAPTURE_PATTERN = re.compile(r"^You (?:gain|lose) (\d*,?\d+) ([\w\s]+)")

# --- turn lines -------------------------------------------------------------

# Turn line of an adventure
# Example: [123] The Spooky Forest
# Example: [123-125] Cook 3 painful penne pasta
TURN_LINE_PATTERN = re.compile(r"^\[\d+(?:-\d+)?\].+")

# Example: [123] ... / [123-125] ...
TURN_NUMBER_PATTERN = re.compile(r"^\[(\d+)(?:-(\d+))?\]")

# --- item acquisition -------------------------------------------------------

# Example: You acquire 3 bottles of gin
MULTIPLE_ITEMS_OLD_PATTERN = re.compile(rf"You acquire \d+ [\s\w{PUNCT}]+")
MULTIPLE_ITEMS_OLD_CAPTURE = re.compile(r"You acquire (\d*,?\d+) (.+)")

# Example: You acquire bottle of gin (3)
MULTIPLE_ITEMS_NEW_PATTERN = re.compile(rf"You acquire [\s\w{PUNCT}]+ \(\d+\)")
MULTIPLE_ITEMS_NEW_CAPTURE = re.compile(r"You acquire (.+) \((\d*,?\d+)\)")

# --- skills and combat items ------------------------------------------------

# Example: cast 3 Saucy Salve
# Example: Round 2: Foo casts STREAM OF SAUCE!
SKILL_CAST_PATTERN = re.compile(
    rf"cast \d+ {NAME_CHARS}+|.*casts {NAME_CHARS}+!(?: \(auto-attack\))?"
)
COMBAT_CAST_CAPTURE = re.compile(rf".*casts ({NAME_CHARS}+)!(?: \(auto-attack\))?")
NONCOMBAT_CAST_CAPTURE = re.compile(rf"cast (\d+) ({NAME_CHARS}+)")

# Example: Round 1: Foo uses the Louder Than Bomb!
COMBAT_ITEM_USED_PATTERN = re.compile(rf".*uses ({NAME_CHARS}+)!(?: \(auto-attack\))?")

# --- familiars --------------------------------------------------------------

# Example: familiar Frumious Bandersnatch (20 lbs)
FAMILIAR_CHANGE_CAPTURE = re.compile(rf"familiar ({NAME_CHARS}+) \((\d+) lbs\)")

# Ed's servants are chosen through a choice adventure
# Example: choice.php?whichchoice=1053&option=3&pwd&sid=2
ED_SERVANT_PATTERN = re.compile(r"choice\.php\?whichchoice=1053&option=[0-9].*&sid=([0-9])")

ED_SERVANTS = {
    "1": "Cat",
    "2": "Belly-Dancer",
    "3": "Maid",
    "4": "Bodyguard",
    "5": "Scribe",
    "6": "Priest",
    "7": "Assassin",
}

# --- meat, pulls, days ------------------------------------------------------

# Example: You gain 1,500 Meat
MEAT_GAIN_PATTERN = re.compile(r"^You gain \d*,?\d+ Meat")

# Example: You spent 500 Meat
MEAT_SPENT_PATTERN = re.compile(r"^You (?:spent|lose) \d*,?\d+ Meat")

# Example: pull: 1 stuffed shoulder parrot, 2 Boris's key lime pie
PULL_PATTERN = re.compile(r"pull: \d+ .+")
PULL_ITEM_CAPTURE = re.compile(r"([0-9]+ ((?:[^,]+)|(?:, [^0-9]))*)(?:, )?")

# Example: =============Day 2=============
DAY_CHANGE_PATTERN = re.compile(r"^=+Day\s+(?:[2-9]|\d\d+).*")

POOL_MP_BUFF_LINE = "You acquire an effect: Mental A-cue-ity (duration: 10 Adventures)"
LEARNED_SKILL_PREFIX = "You learned a new skill: "

NOTE_PREFIX = " > Note: "
HEADER_PREFIX = " > Header: "
FOOTER_PREFIX = " > Footer: "

# --- combat extras ----------------------------------------------------------

ON_THE_TRAIL_PATTERN = re.compile(r"You acquire an effect:\s*On the Trail.*$")

EVERYTHING_LOOKS_YELLOW_PATTERN = re.compile(r"You acquire an effect:\s*Everything Looks Yellow.*$")
MAJOR_YELLOW_RAY_PATTERN = re.compile(
    r"Round \d+: .+? swings his eyestalk around and unleashes a massive"
    r" ray of yellow energy, completely disintegrating your opponent\."
)

RED_RAY_STRING = (
    " swings his eyestalk toward your opponent, firing a searing ray of heat at it, dealing "
)
RED_RAY_SPLIT_STRING = "That was way more entertaining than fireworks!"

FREE_RUNAWAY_STRINGS = (
    " snatches you up in his jaws, tosses you onto his back, and flooms away,"
    " weaving slightly and hiccelping fire.",
    " kicks you in the butt to speed your escape. ",
    " uses the divine champagne popper",
    " uses the glob of Blank-Out",
    " uses the Louder Than Bomb",
    " uses the green smoke bomb",
)

# Familiars that drain MP from the opponent into the player
STARFISH_ATTACK_PATTERNS = [
    re.compile(
        r"Round \d+: .+ floats behind your opponent, and begins to glow brightly.\s*Starlight"
        r" shines through your opponent, doing \d+ damage, and pours into your body."
    ),
    re.compile(r"Round \d+: .+ leaps on your opponent, sliming \w+ for \d+ damage.\s*It's inspiring!"),
    re.compile(
        r"Round \d+: .+ de-rezzes \w+ for \d+ damage, then offers you a drink out"
        r" of his identity disc.\s*It's a little too intimate for your comfort,"
        r" but it's still refreshing."
    ),
    re.compile(
        r"Round \d+: .+ tosses his identity disc at \w+ for \d+ damage, then invites"
        r" you to drink some glowing blue liquid out of the disc.\s*The whole thing's a"
        r" little more intimate than you're comfortable with, but it's still refreshing."
    ),
    re.compile(
        r"Round \d+: .+ bounces his disc off of \w+ for \d+ damage, and it ricochets"
        r" into you, giving you quite a shock."
    ),
    re.compile(
        r"Round \d+: .+ flops toward \w+, gasping for water, and manages to tailsmack \w+"
        r" for \d+ slimy, clammy damage."
    ),
    re.compile(
        r"Round \d+: .+ quacks loudly, and a bolt of enriched wheat energy tears through"
        r" your opponent for \d+ damage, then arcs toward you, energizing your nervous system."
    ),
    re.compile(
        r"Round \d+: .+ rises into the air and spreads her wings, bathing your opponent in"
        r" cold light and dealing \d+ damage.\s*It's inspiring."
    ),
    re.compile(
        r"Round \d+: .+ fixes an evil glare on your opponent, causing \w+ to suffer \d+ damage"
        r" worth of heebie-jeebies.\s*A plume of oily black smoke emerges from his bark, and"
        r" you accidentally inhale some of it.\s*You realize, to your horror, that it smells... good."
    ),
    re.compile(
        r"Round \d+: .+ holds up an empty bottle of booze and gazes at it sadly."
        r"\s*Starlight filters through the bottle, through the spirit hobo, and"
        r" through the booze inside the spirit hobo, then pierces your opponent"
        r" for \d+ damage, and then shines into you.\s*What the hell\?"
    ),
    re.compile(
        r"Round \d+: .+ slimes your opponent thoroughly, dealing \d+ damage."
        r"\s*The resulting ectoplasmic shock wave gives you a mystical jolt."
    ),
    re.compile(
        r"Round \d+: .+ swoops through your opponent, somehow transferring \d+ points"
        r" of \w+ lifeforce into \w+ Points for you.\s*You feel slightly skeeved out."
    ),
    re.compile(
        r"Round \d+: .+ swoops back and forth through your opponent, scaring the bejeezus"
        r" out of \w+ to the tune of \d+ damage.\s*Then he converts the bejeezus into \w+ Points!"
    ),
]

NUMBER_PATTERN = re.compile(r"\d+")

# --- blocks -----------------------------------------------------------------

# Example: use 2 chocolate covered diamond
# Example: Buy and eat 1 fortune cookie for 40 Meat
CONSUMABLE_PATTERN = re.compile(r"(?:(?:use|eat|drink|chew)|Buy and (?:eat|drink))(?: \d+)? .+")
CONSUMABLE_PREFIXES = ("use", "eat", "drink", "Buy", "chew")
CONSUMABLE_BUY_CAPTURE = re.compile(r"([\w\s]+) (\d+) (.+) for \d+ Meat")
CONSUMABLE_AMOUNT_CAPTURE = re.compile(r"([\w\s]+) (\d+) (.+)")
CONSUMABLE_SINGLE_CAPTURE = re.compile(r"([\w]+) (.+)")

PLAYER_SNAPSHOT_DELIMITER = "=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-="
PLAYER_SNAPSHOT_HEADER = "Player Snapshot"

# Example: Mus: 120 (89), tnp = 23
SNAPSHOT_BUFFED_STAT_PATTERN = re.compile(r"(?:Mus|Mys|Mox)\: \d+ \(\d+\).*")
SNAPSHOT_UNBUFFED_STAT_PATTERN = re.compile(r"(?:Mus|Mys|Mox)\: \d+(?:$|, tnp =.*)")
SNAPSHOT_FAMILIAR_SPLIT = re.compile(r"Pet: | \(\d+ lbs\)\s*")

ASCENSION_DATA_PREFIX = "Ascension #"
HYBRID_PREFIXES = ("Hybridizing yourself", "Making a Gene Tonic")
HYBRID_INTRINSIC_PATTERN = re.compile(r"You acquire an intrinsic: (.+) Hybrid$")

SERVICE_PREFIX = "Took choice 1089"
SERVICE_CAPTURE = re.compile(r"Took choice 1089[/]([0-9]*):")
SERVICE_ADVENTURES_CAPTURE = re.compile(r"You lose ([0-9]*) Adventure")
SERVICE_END_PREFIX = "Took choice 1089/30"

COMMUNITY_SERVICES = {
    "1": "Donate Blood",
    "2": "Feed the Children (But Not Too Much)",
    "3": "Build Playground Mazes",
    "4": "Feed Conspirators",
    "5": "Breed More Collies",
    "6": "Reduce Gazelle Population",
    "7": "Make Sausage",
    "8": "Be a Living Statue",
    "9": "Make Margaritas",
    "10": "Clean Steam Tunnels",
    "11": "Coil Wire",
    "30": "Donate Body",
}

# HP lost at the end of a combat
# Example: You lose 12 hit points
LOST_COMBAT_HP_PATTERN = re.compile(r"You lose \d+ hit points.?")
WON_FIGHT_PATTERN = re.compile(r"Round \d+: .+ wins the fight!")

# --- end of run -------------------------------------------------------------

# Example: Round 0: Foo wins initiative!
ROUND_ZERO_INITIATIVE_PATTERN = re.compile(r"Round 0: (.*) +(wins|loses) initiative!")
ENCOUNTER_NAME_CAPTURE = re.compile(r"Encounter: (.*) *$")

# --- reader -----------------------------------------------------------------

COMBING_MARKERS = ("Combing", "Beach Head")
RAIN_MAN_CAST = "cast 1 Rain Man"

# Noise lines skipped between blocks
SKIPPED_LINE_PREFIXES = ("mall.php", "manageprices.php", "familiarnames.php")
MAX_LINE_LENGTH = 450

# --- name sets --------------------------------------------------------------

MUSCLE_SUBSTAT_NAMES = frozenset({
    "Beefiness", "Fortitude", "Muscleboundness", "Strengthliness", "Strongness",
})
MYST_SUBSTAT_NAMES = frozenset({
    "Enchantedness", "Magicalness", "Mysteriousness", "Wizardliness",
})
MOXIE_SUBSTAT_NAMES = frozenset({
    "Cheek", "Chutzpah", "Roguishness", "Sarcasm", "Smarm",
})
SUBSTAT_NAMES = MUSCLE_SUBSTAT_NAMES | MYST_SUBSTAT_NAMES | MOXIE_SUBSTAT_NAMES

MP_NAMES = ("Muscularity Points", "Mana Points", "Mojo Points")

# Combat skills that are free for their own class
TRIVIAL_COMBAT_SKILLS = {
    "clobber": CharacterClass.SEAL_CLUBBER,
    "toss": CharacterClass.TURTLE_TAMER,
    "spaghetti spear": CharacterClass.PASTAMANCER,
    "salsaball": CharacterClass.SAUCEROR,
    "suckerpunch": CharacterClass.DISCO_BANDIT,
    "sing": CharacterClass.ACCORDION_THIEF,
}

BANISH_SKILLS = frozenset({
    "curse of vacation",
    "batter up",
    "talk about politics",
    "creepy grin",
    "banishing shout",
    "howl of the alpha",
    "peel out",
    "walk away from explosion",
    "thunder clap",
})

BANISH_ITEMS = frozenset({
    "louder than bomb",
    "crystal skull",
    "ice house",
    "divine champagne popper",
    "harold's bell",
    "pulled indigo taffy",
    "classy monkey",
    "dirty stinkbomb",
    "deathchucks",
    "smoke grenade",
    "cocktail napkin",
})

# Consumables recorded even without adventure or stat gains
SPECIAL_CONSUMABLES = frozenset({
    "steel margarita",
    "steel lasagna",
    "steel-scented air freshener",
    "spice melange",
    "synthetic dog hair pill",
    "mojo filter",
})

# Boss fights that may be logged as several combats under one turn line
BROKEN_AREAS_ENCOUNTER_SET = frozenset({
    "Encounter: Big Wisniewski",
    "Encounter: The Big Wisniewski",
    "Encounter: The Man",
    "Encounter: Lord Spookyraven",
    "Encounter: Ed the Undying",
    "Encounter: The Infiltrationist",
    "Encounter: giant sandworm",
    "Encounter: Wu Tang the Betrayer",
})

RAINY_FAX_ENCOUNTER = "Rainy Fax Dreams on your Wedding Day"

CRAFTING_PREFIXES = ("Cook ", "Mix ", "Smith ")

# Areas whose adventures are neither combats nor noncombats
OTHER_ENCOUNTER_AREAS = frozenset({
    "Unlucky Sewer",
    "Sewer With Clovers",
    "Lemon Party",
    "Guild Challenge",
    "Mining (In Disguise)",
    "Itznotyerzitz Mine (in Disguise)",
})

SHORE_SUFFIX = " Vacation"
SHORE_TURNS = 3
SHORE_TURNS_FIST = 5
SHORE_MEAT_COST = 500

CLOWNLORD_ENCOUNTER = "Adventurer, $1.99"
CLOWNLORD_NAME = "Clownlord Beelzebozo"
CLOWNLORD_FIRST_CHOICE = "choice.php?whichchoice=151option=1"
CLOWNLORD_SECOND_CHOICE = "choice.php?whichchoice=152option=1"

# Arcade games that spend five turns at once
GAME_GRID_GAMES = frozenset({
    "DemonStar",
    "Meteoid",
    "The Fighters of Fighting",
    "Dungeon Fist!",
    "Space Trip",
    "Jackass Plumber",
})
GAME_GRID_EXTRA_TURNS = 4

LLAMA_ENCOUNTER_LINE = "Encounter: Form of...Cockroach!"
LLAMA_ENCOUNTER = "Form of...Cockroach!"
LLAMA_TURNS = 3

FAMILIAR_POUND_STRING = "gains a pound!"

ED_UNDERWORLD_CHOICE = "whichchoice=1023&option=1"
ED_RETURN_CHOICES = ("whichchoice=1024&option=2", "whichchoice=1024&option=1")

RESTING_AREAS = frozenset({"Rest in your dwelling", "Rest in your bed in the Chateau"})

FINAL_BOSS_ENDINGS = ("Naughty Sorceress (3)", "The Rain King", "Avatar of Jarlsberg")
SORCERESS_CHAMBER = "The Naughty Sorceress' Chamber"
WON_FIGHT_SUFFIX = "wins the fight!"
MACGUFFIN_ENCOUNTER = "Encounter: Returning the MacGuffin"
MACGUFFIN_CHOICE = "choice.php?pwd&whichchoice=1054&option=1"
KING_RALPH_FREED = "Tower: Freeing King Ralph"

# --- pre-parsed turn rundowns ------------------------------------------------

# [12] The Spooky Forest [3,1,0]   /   [13-17] The Haunted Pantry
TURN_INTERVAL_CAPTURE = re.compile(
    r"^\[(\d+)(?:-(\d+))?\]\s*(.*?)(?:\s*\[(-?\d+),(-?\d+),(-?\d+)\])?\s*$"
)
STATS_TRIPLE_END_CAPTURE = re.compile(r"\[(-?\d+),(-?\d+),(-?\d+)\]\s*$")

ITEM_FOUND_PATTERN = re.compile(r"^\s*\+>.+")
ITEM_FOUND_CAPTURE = re.compile(r"\[(\d+)\]\s*Got\s*(.*)$")

CONSUMED_PATTERN = re.compile(r"^\s*o>\s(?:Ate|Drank|Used|Chew).+")
CONSUMED_CAPTURE = re.compile(
    r"^\s*o>\s*(\w+)\s+(\d*)\s*(.+?)(?:\s*\(.*\))?\s*(?:\[[-?\d,]+\])?$"
)
ADVENTURE_GAIN_CAPTURE = re.compile(r"\((\d+) adventures gained\)")

FAMILIAR_CHANGED_PATTERN = re.compile(r"^\s*->\sTurn.+")
FAMILIAR_CHANGED_CAPTURE = re.compile(r"\[(\d+)\]\s*(.+?)(?:\s*\(.*\))?\s*$")

PREPARSED_PULL_PATTERN = re.compile(r"^\s*#>\sTurn\s\[\d+\]\spulled.+")
PREPARSED_PULL_CAPTURE = re.compile(r"\[(\d+)\]\s*pulled\s*(.*)$")

FREE_RUNAWAYS_USAGE_PATTERN = re.compile(r"^\s*&> (\d+) \\ (\d+) free retreats.*")

SEMIRARE_PATTERN = re.compile(r"^\s*#>\s\[\d+\]\sSemirare:\s.+")
BADMOON_PATTERN = re.compile(r"^\s*%>.+")
HUNTED_COMBAT_PATTERN = re.compile(r"^\s*\*>\s\[\d+\]\sStarted\shunting.*")
DISINTEGRATED_COMBAT_PATTERN = re.compile(r"^\s*\}> \[\d+\] Disintegrated .*")

RUNDOWN_END_PREFIXES = ("Ascended!", "Turn rundown finished!")

# Hero_ascend12_20110105_20110110.txt
ASCEND_LOG_NAME_CAPTURE = re.compile(r"^(.*?)_ascend(.*?)(?:_\d+_\d+)?\..+$")
