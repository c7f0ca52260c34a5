"""Themes, difficulty levels and their word lists."""

from __future__ import annotations

from enum import Enum
from typing import Any


class Theme(str, Enum):
    """Word-list theme selectable from the settings panel."""

    STANDARD = "standard"
    SIMPSONS = "simpsons"
    STAR_WARS = "star_wars"
    HARRY_POTTER = "harry_potter"
    MARVEL = "marvel"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class Difficulty(str, Enum):
    """Difficulty level, expressed as the number of starting timer tokens."""

    EASY = "easy"
    STANDARD = "standard"
    HARD = "hard"

    @property
    def timer_tokens(self) -> int:
        return DIFFICULTY_TIMER_TOKENS[self]


DIFFICULTY_TIMER_TOKENS: dict[Difficulty, int] = {
    Difficulty.EASY: 11,
    Difficulty.STANDARD: 9,
    Difficulty.HARD: 7,
}

STANDARD_WORDS: tuple[str, ...] = (
    "africa", "agent", "air", "alien", "alps", "amazon", "ambulance", "america", "angel", "antarctica",
    "apple", "arm", "atlantis", "australia", "aztec", "back", "ball", "band", "bank", "bar",
    "bark", "bat", "battery", "beach", "bear", "beat", "bed", "beijing", "bell", "belt",
    "berlin", "bermuda", "berry", "bill", "block", "board", "bolt", "bomb", "bond", "boom",
    "boot", "bottle", "bow", "box", "bridge", "brush", "buck", "buffalo", "bug", "bugle",
    "button", "calf", "canada", "cap", "capital", "car", "card", "carrot", "casino", "cast",
    "cat", "cell", "centaur", "center", "chair", "change", "charge", "check", "chest", "chick",
    "china", "chocolate", "church", "circle", "cliff", "cloak", "club", "code", "cold", "comic",
    "compound", "concert", "conductor", "contract", "cook", "copper", "cotton", "court", "cover", "crane",
    "crash", "cricket", "cross", "crown", "cycle", "czech", "dance", "date", "day", "death",
    "deck", "degree", "diamond", "dice", "dinosaur", "disease", "doctor", "dog", "draft", "dragon",
    "dress", "drill", "drop", "duck", "dwarf", "eagle", "egypt", "embassy", "engine", "england",
    "europe", "eye", "face", "fair", "fall", "fan", "fence", "field", "fighter", "figure",
    "file", "film", "fire", "fish", "flute", "fly", "foot", "force", "forest", "fork",
    "france", "game", "gas", "genius", "germany", "ghost", "giant", "glass", "glove", "gold",
    "grace", "grass", "greece", "green", "ground", "ham", "hand", "hawk", "head", "heart",
    "helicopter", "himalayas", "hole", "hollywood", "honey", "hood", "hook", "horn", "horse", "hospital",
    "hotel", "ice", "india", "iron", "ivory", "jack", "jam", "jet", "jupiter", "kangaroo",
    "ketchup", "key", "kid", "king", "kiwi", "knife", "knight", "lab", "lap", "laser",
    "lawyer", "lead", "lemon", "leprechaun", "life", "light", "limousine", "line", "link", "lion",
    "litter", "lock", "log", "london", "luck", "mail", "mammoth", "maple", "marble", "march",
    "mass", "match", "mercury", "mexico", "microscope", "millionaire", "mine", "mint", "missile", "model",
    "mole", "moon", "moscow", "mount", "mouse", "mouth", "mug", "nail", "needle", "net",
    "night", "ninja", "note", "novel", "nurse", "nut", "octopus", "oil", "olive", "olympus",
    "opera", "orange", "organ", "palm", "pan", "pants", "paper", "parachute", "park", "part",
    "pass", "paste", "penguin", "phoenix", "piano", "pie", "pilot", "pin", "pipe", "pirate",
    "pistol", "pit", "pitch", "plane", "plastic", "plate", "platypus", "play", "plot", "point",
    "poison", "pole", "police", "pool", "port", "post", "pound", "press", "princess", "pumpkin",
    "pupil", "pyramid", "queen", "rabbit", "racket", "ray", "revolution", "ring", "robin", "robot",
    "rock", "rome", "root", "rose", "roulette", "round", "row", "ruler", "satellite", "saturn",
    "scale", "school", "scientist", "scorpion", "screen", "scuba", "seal", "server", "shadow", "shakespeare",
    "shark", "ship", "shoe", "shop", "shot", "sink", "skyscraper", "slip", "slug", "smuggler",
    "snow", "snowman", "sock", "soldier", "soul", "sound", "space", "spell", "spider", "spike",
    "spine", "spot", "spring", "spy", "square", "stadium", "staff", "star", "state", "stick",
    "stock", "straw", "stream", "strike", "string", "sub", "suit", "superhero", "swing", "switch",
    "table", "tablet", "tag", "tail", "tap", "teacher", "telescope", "temple", "theater", "thief",
    "thumb", "tick", "tie", "time", "tokyo", "tooth", "torch", "tower", "track", "train",
    "triangle", "trip", "trunk", "tube", "turkey", "undertaker", "unicorn", "vacuum", "van", "vet",
    "wake", "wall", "war", "washer", "washington", "watch", "water", "wave", "web", "well",
    "whale", "whip", "wind", "witch", "worm", "yard",
)

SIMPSONS_WORDS: tuple[str, ...] = (
    "homer", "marge", "bart", "lisa", "maggie", "springfield", "donut", "duff", "moe", "krusty",
    "burns", "smithers", "flanders", "apu", "milhouse", "nelson", "ralph", "wiggum", "skinner", "barney",
    "itchy", "scratchy", "reactor", "kwik-e-mart", "saxophone", "skateboard", "couch", "treehouse", "monorail", "squishee",
    "lard", "plutonium", "cletus", "frink", "patty", "selma", "otto", "bus", "snowball", "santa",
    "lenny", "carl", "tavern", "church", "school", "krustyburger", "elementary", "blinky", "sideshow", "mayor",
)

STAR_WARS_WORDS: tuple[str, ...] = (
    "jedi", "sith", "force", "lightsaber", "droid", "wookiee", "tatooine", "hoth", "endor", "dagobah",
    "falcon", "vader", "yoda", "leia", "luke", "han", "chewbacca", "empire", "rebel", "stormtrooper",
    "blaster", "hyperdrive", "deathstar", "tie", "x-wing", "cantina", "jawa", "ewok", "hutt", "bounty",
    "clone", "senate", "padawan", "master", "naboo", "coruscant", "kyber", "holocron", "speeder", "sandcrawler",
    "carbonite", "bantha", "sarlacc", "trooper", "admiral", "galaxy", "republic", "order", "mandalore", "beskar",
)

HARRY_POTTER_WORDS: tuple[str, ...] = (
    "wand", "wizard", "owl", "broom", "quidditch", "snitch", "hogwarts", "gryffindor", "slytherin", "hufflepuff",
    "ravenclaw", "potion", "cauldron", "spell", "dragon", "phoenix", "horcrux", "dementor", "patronus", "basilisk",
    "troll", "goblin", "elf", "giant", "centaur", "unicorn", "hippogriff", "sorting", "hat", "cloak",
    "stone", "chamber", "prisoner", "goblet", "prince", "hallows", "muggle", "diagon", "gringotts", "azkaban",
    "ministry", "platform", "express", "scar", "lightning", "marauder", "map", "pensieve", "portkey", "galleon",
)

MARVEL_WORDS: tuple[str, ...] = (
    "avenger", "shield", "hammer", "mjolnir", "gauntlet", "stone", "infinity", "web", "spider", "iron",
    "armor", "arc", "reactor", "hulk", "thor", "loki", "asgard", "wakanda", "vibranium", "panther",
    "widow", "hawkeye", "captain", "falcon", "vision", "wanda", "hex", "strange", "portal", "cloak",
    "thanos", "titan", "groot", "rocket", "raccoon", "guardian", "galaxy", "quantum", "ant", "wasp",
    "mutant", "xavier", "magneto", "claw", "adamantium", "stark", "tower", "hydra", "helicarrier", "bifrost",
)

THEME_WORDS: dict[Theme, tuple[str, ...]] = {
    Theme.STANDARD: STANDARD_WORDS,
    Theme.SIMPSONS: SIMPSONS_WORDS,
    Theme.STAR_WARS: STAR_WARS_WORDS,
    Theme.HARRY_POTTER: HARRY_POTTER_WORDS,
    Theme.MARVEL: MARVEL_WORDS,
}


def words_for_theme(theme: Theme) -> tuple[str, ...]:
    """Return the word list for a theme."""
    return THEME_WORDS[theme]


def parse_theme(raw: Any) -> Theme:
    """Parse a theme tag, defaulting to the standard list."""
    if raw is None:
        return Theme.STANDARD
    if isinstance(raw, Theme):
        return raw
    value = str(raw).strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return Theme(value)
    except ValueError as exc:
        supported = sorted(theme.value for theme in Theme)
        raise ValueError(f"Unsupported theme {raw!r}. Supported themes: {supported}") from exc


def parse_difficulty(raw: Any) -> Difficulty:
    """Parse a difficulty tag, defaulting to standard."""
    if raw is None:
        return Difficulty.STANDARD
    if isinstance(raw, Difficulty):
        return raw
    value = str(raw).strip().lower()
    try:
        return Difficulty(value)
    except ValueError as exc:
        supported = sorted(level.value for level in Difficulty)
        raise ValueError(f"Unsupported difficulty {raw!r}. Supported levels: {supported}") from exc
