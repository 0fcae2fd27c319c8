"""Area and encounter tables."""

# Renamed or inconsistently logged area names mapped to their canonical name
AREA_NAME_MAPPINGS = {
    "Haunted Pantry": "The Haunted Pantry",
    "Sleazy Back Alley": "The Sleazy Back Alley",
    "Outskirts of the Knob": "The Outskirts of Cobb's Knob",
    "Spooky Forest": "The Spooky Forest",
    "Hidden Temple": "The Hidden Temple",
    "Castle in the Clouds in the Sky": "The Castle in the Clouds in the Sky (Basement)",
    "Haunted Billiards Room": "The Haunted Billiards Room",
    "Haunted Library": "The Haunted Library",
    "Haunted Bedroom": "The Haunted Bedroom",
    "Haunted Ballroom": "The Haunted Ballroom",
    "Penultimate Fantasy Airship": "The Penultimate Fantasy Airship",
    "Defiled Nook": "The Defiled Nook",
    "Defiled Cranny": "The Defiled Cranny",
    "Defiled Alcove": "The Defiled Alcove",
    "Defiled Niche": "The Defiled Niche",
    "Goatlet": "The Goatlet",
    "Oasis in the Desert": "The Oasis",
}

# Semi-rare encounters, by encounter name
SEMIRARE_ENCOUNTERS = frozenset({
    "Lunchboxing",
    "Bad ASCII Art",
    "Play Misty For Me",
    "Yo Ho Ho and a Bottle of Whatever This Is",
    "Le Chauffeur Indolent",
    "Knob Goblin Embezzler",
    "Knob Goblin Elite Guard Captain",
    "Natural Selection",
    "Two Sides to Every Story",
    "Sandwich of the Damned",
    "The Latest Sorcerous Developments",
    "Rokay, Raggy!",
    "Flowers for You",
    "Baa'baa'bu'ran",
    "A Menacing Phantom",
    "Not Quite as Cold as Ice",
    "Prior to Always",
    "How Does He Smell?",
    "It's The Only Way To Be Sure",
    "Monty of County Crisco",
    "All The Rave",
    "Hands On",
    "Filth, Filth, and More Filth",
    "A Tight Squeeze",
    "Cold Comfort",
    "Juicy!",
    "Sleeping Near the Enemy",
    "Mr. Alarm",
})

# Bad Moon path adventures
BADMOON_ENCOUNTERS = frozenset({
    "O Cap'm, My Cap'm",
    "Hey, Hey, Hey, Hey, Hey",
    "Gnomes Gnone",
    "Mmm, Cheese",
    "The Oracle Will See You Now",
    "Meat You Somewhere",
    "Drawn Onward",
    "Elite Guard",
    "Hair of the Dog",
    "What Worries You Most?",
    "A Bad Hair Day",
    "The Rusty Toaster",
    "The Bad and the Ugly",
    "Flowers Are All You Need",
    "Gorgon's Gold",
    "Two Paths, One Dark Chamber",
    "Tinker Tinker",
    "Oh No, Hobo",
})

# Encounters that may show up anywhere, independent of the area
WANDERING_ENCOUNTERS = frozenset({
    "Bumpety Bump",
    "Under the Knife",
    "The Ghost of Ash Hamel",
    "Black Crayon Lizard",
    "Lights Out",
    "Poor Little Lamb",
    "The Cheese Wizard",
    "a ghost",
    "The Bloated Zombie",
    "mean-looking mother",
    "Wandering Merchant",
    "Orcish Frat Boy Spy",
    "War Hippy Spy",
    "Mimeograph Machine",
    "Knob Goblin Drunk",
})
