"""Centralized constants for the tango application.

Storage keys keep the namespaces of the browser build so that an exported
table can be imported verbatim.
"""

# ---------- Card data table ----------
TABLE_KEY = "flashcards:carddata:v1"
MIGRATED_KEY = "flashcards:carddata:migrated:v1"
MIGRATED_MARKER = "true"

# ---------- Legacy namespaces (read-only, pre-migration) ----------
LEGACY_STATS_PREFIX = "flashcards:stats:v1:"
LEGACY_DIFFICULT_PREFIX = "flashcards:difficult:v1:"

# ---------- Decks ----------
DECK_FILE_SUFFIX = ".json"
ID_PAD_WIDTH = 4
ID_SUFFIX_PAD_WIDTH = 2

# ---------- Study runs ----------
DEFAULT_RANDOM_COUNT = 30
FRONT_FIELDS = ("japanese", "english")

# ---------- Server ----------
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4000
