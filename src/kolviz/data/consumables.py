"""Organ hit tables for consumables."""

# Fullness per unit of food
FULLNESS_HITS = {
    "hell ramen": 6,
    "fettucini inconnu": 6,
    "gnocchetti di nietzsche": 6,
    "spaghetti with skullheads": 5,
    "sleazy hi mein": 5,
    "spooky hi mein": 5,
    "hot hi mein": 5,
    "cold hi mein": 5,
    "stinky hi mein": 5,
    "pr0n manicotti": 3,
    "ravioli della hippy": 3,
    "fortune cookie": 1,
    "jumping horseradish": 1,
    "badass pie": 3,
    "insanely spicy bean burrito": 3,
    "tasty tart": 1,
    "knob pasty": 1,
    "spooky sapling": 0,
}

# Drunkenness per unit of booze
DRUNKENNESS_HITS = {
    "wrecked generator": 4,
    "vesper": 4,
    "bloody nora": 4,
    "mae west": 4,
    "tangarita": 4,
    "divine": 3,
    "rockin' wagon": 4,
    "perpendicular hula": 4,
    "slip 'n' slide": 4,
    "pink pony": 4,
    "gimlet": 4,
    "ice island long tea": 4,
    "dusty bottle of marsala": 2,
    "bottle of vodka": 1,
    "shot of tomato schnapps": 1,
    "cup of primitive beer": 1,
    "steel margarita": 5,
}

# Spleen per unit of spleen item
SPLEEN_HITS = {
    "agua de vida": 4,
    "coffee pixie stick": 4,
    "grim fairy tale": 4,
    "groose grease": 4,
    "powdered gold": 4,
    "unconscious collective dream jar": 4,
    "transdermal smoke patch": 4,
    "not-a-pipe": 4,
    "voodoo snuff": 4,
    "prismatic wad": 4,
    "hot wad": 1,
    "cold wad": 1,
    "spooky wad": 1,
    "sleaze wad": 1,
    "stench wad": 1,
    "twinkly wad": 1,
    "steel-scented air freshener": 5,
    "mojo filter": -1,
    "synthetic dog hair pill": -1,
}
