from __future__ import annotations

MAX_PLAYERS = 2
SLOTS: tuple[int, int] = (0, 1)

TARGET_MIN = 1
TARGET_MAX = 20
DEFAULT_TARGET = 5
ROUND_SECONDS_MIN = 3
ROUND_SECONDS_MAX = 30
DEFAULT_ROUND_SECONDS = 10

DEFAULT_PLAYER_NAME_PREFIX = "Joueur-"

ROOM_FULL_MESSAGE = "Salon plein (2 max)."
NOT_ENOUGH_PLAYERS_MESSAGE = "Attends le 2e joueur."

ROUND_TIMER_KEY = "round"
NEXT_ROUND_TIMER_KEY = "nextRound"
TIMER_KEYS: tuple[str, str] = (ROUND_TIMER_KEY, NEXT_ROUND_TIMER_KEY)

CHALLENGE_WORDS: tuple[str, ...] = (
    "banane",
    "kebab",
    "sorcière",
    "pigeon",
    "gaufre",
    "paprika",
    "ninja",
    "pamplemousse",
    "tortue",
    "pastèque",
    "saucisson",
    "biscotte",
    "caramel",
    "moustache",
    "chaussette",
    "croissant",
    "baguette",
    "fromage",
    "harissa",
    "taboulé",
    "moutarde",
    "frites",
    "cornichon",
    "gazelle",
)
CHALLENGE_PHRASES: tuple[str, ...] = (
    "je te vois",
    "ok daccord",
    "vive le roi",
    "mdr ptdr",
)
