# Print Page Geometry (inches)
PAGE_WIDTH_IN = 35
PAGE_HEIGHT_IN = 23

# Margin on all sides; content is scaled to fit inside it
MARGIN_IN = 0.5

# Layout units per inch. Geometry is computed in these units so offsets stay
# on a 0.01" grid across renderers.
UNITS_PER_INCH = 100

PAGE_WIDTH_UNITS = PAGE_WIDTH_IN * UNITS_PER_INCH     # 3500
PAGE_HEIGHT_UNITS = PAGE_HEIGHT_IN * UNITS_PER_INCH   # 2300
MARGIN_UNITS = MARGIN_IN * UNITS_PER_INCH             # 50

PRINTABLE_WIDTH_UNITS = PAGE_WIDTH_UNITS - 2 * MARGIN_UNITS    # 3400
PRINTABLE_HEIGHT_UNITS = PAGE_HEIGHT_UNITS - 2 * MARGIN_UNITS  # 2200

# Preflight thresholds
MIN_SAFE_MARGIN_IN = 0.25
MIN_WIDTH_FILL_RATIO = 0.5

# Preview Zoom Defaults (overridable via config)
DEFAULT_ZOOM_MIN = 0.15
DEFAULT_ZOOM_MAX = 1.0
DEFAULT_ZOOM_STEP = 0.1

# Autosave
DEFAULT_AUTOSAVE_DEBOUNCE_MS = 750
DEFAULT_CALENDAR_NAME = "Untitled Calendar"

# Guest session header understood by the session-calendar API
SESSION_HEADER = "X-Session-ID"

# Configuration keys derived from the event list on every save
CONFIG_EVENTS_KEY = "events"
CONFIG_CUSTOM_DATES_KEY = "customDates"
CONFIG_EVENT_TITLES_KEY = "eventTitles"
