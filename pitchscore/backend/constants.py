HISTORY_LIMIT = 5
SNIPPET_CHARS = 40
MAX_OUTPUT_TOKENS = 700
MAX_ERROR_CHARS = 1200
DEFAULT_SESSION_ID = "default"
THEME_KEY = "ps_theme"
HISTORY_KEY = "ps_history"
