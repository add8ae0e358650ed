# app/config.py
# Fixed configuration for the typing test. Kept as plain constants.

SUPPORTED_MODES = (30, 60, 120)
DEFAULT_MODE = 30

CHARS_PER_WORD = 5
TICK_MS = 1000

# Rendered in place of a space by the text display; typing it counts as a space.
SPACE_STAND_IN = "\u00a0"

# True: an error stays counted after it is undone and retyped.
# False: only characters currently marked incorrect count.
COUNT_CORRECTED_ERRORS = True

DB_PATH = "data/typing.db"
PASSAGES_FILE = "assets/texts/passages.txt"
LOG_FILE = "app.log"
