import os
import logging

from utils.env import get_env_str, get_env_bool, get_env_float
from constants import (
    DEFAULT_AUTOSAVE_DEBOUNCE_MS,
    DEFAULT_ZOOM_MIN,
    DEFAULT_ZOOM_MAX,
    DEFAULT_ZOOM_STEP,
)

logger = logging.getLogger(__name__)

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

# -----------------------------------------------------------------------------
# Dotenv loading (LOCAL ONLY)
# -----------------------------------------------------------------------------
# Rules:
# - Hosted environments are configured via real environment variables.
# - Tests must be deterministic and must NOT ingest a developer's repo-root .env.
# - Local dev may use .env for convenience.
_RUNNING_ON_RAILWAY = bool(os.getenv("RAILWAY_ENVIRONMENT") or os.getenv("RAILWAY_PROJECT_ID"))
_FLASK_ENV_EARLY = (os.getenv("FLASK_ENV") or "").strip().lower()
_APP_STAGE_EARLY = (os.getenv("APP_STAGE") or "").strip().lower()

if (not _RUNNING_ON_RAILWAY) and ({_FLASK_ENV_EARLY, _APP_STAGE_EARLY}.isdisjoint({"test", "testing"})):
    try:
        from dotenv import load_dotenv
        load_dotenv(dotenv_path=os.path.join(BASE_DIR, ".env"), override=False)
    except Exception as e:
        logger.warning(f"[Config] Could not load .env: {e}")

# -----------------------------------------------------------------------------
# Environment / Stage
# -----------------------------------------------------------------------------
def _normalize_stage(raw: str) -> str:
    raw = (raw or "").strip().lower()
    if raw in {"prod", "production"}:
        return "production"
    if raw in {"stage", "staging"}:
        return "staging"
    if raw in {"test", "testing"}:
        return "test"
    return "dev"


FLASK_ENV = (os.getenv("FLASK_ENV", "development") or "development").strip().lower()
APP_STAGE = _normalize_stage(os.getenv("APP_STAGE", "dev"))

IS_TEST = APP_STAGE == "test" or FLASK_ENV in {"test", "testing"}
IS_STAGING = APP_STAGE == "staging"
IS_PRODUCTION = APP_STAGE == "production"

DEBUG = FLASK_ENV != "production" and not IS_PRODUCTION
TESTING = IS_TEST

# -----------------------------------------------------------------------------
# Session-calendar backend
# -----------------------------------------------------------------------------
def _strip_trailing_slash(url: str) -> str:
    return url[:-1] if url.endswith("/") else url


SESSION_CALENDAR_API_URL = _strip_trailing_slash(
    get_env_str("SESSION_CALENDAR_API_URL", default="http://localhost:8080/api")
)


def _require_https(name: str, value: str) -> None:
    if not value.lower().startswith("https://"):
        raise RuntimeError(f"CRITICAL: {name} must be HTTPS in {APP_STAGE} stage. Got: {value}")


if IS_STAGING or IS_PRODUCTION:
    if not os.getenv("SESSION_CALENDAR_API_URL"):
        raise RuntimeError(f"CRITICAL: SESSION_CALENDAR_API_URL is required in {APP_STAGE} stage.")
    _require_https("SESSION_CALENDAR_API_URL", SESSION_CALENDAR_API_URL)

BACKEND_HTTP_TIMEOUT = get_env_float("BACKEND_HTTP_TIMEOUT", 20.0)

# -----------------------------------------------------------------------------
# Autosave
# -----------------------------------------------------------------------------
AUTOSAVE_DEBOUNCE_MS = get_env_float("AUTOSAVE_DEBOUNCE_MS", DEFAULT_AUTOSAVE_DEBOUNCE_MS)
if AUTOSAVE_DEBOUNCE_MS < 0:
    raise ValueError(f"AUTOSAVE_DEBOUNCE_MS must be >= 0. Got: {AUTOSAVE_DEBOUNCE_MS}")
AUTOSAVE_DEBOUNCE_SECONDS = AUTOSAVE_DEBOUNCE_MS / 1000.0

# -----------------------------------------------------------------------------
# Preview Zoom
# -----------------------------------------------------------------------------
PREVIEW_ZOOM_MIN = get_env_float("PREVIEW_ZOOM_MIN", DEFAULT_ZOOM_MIN)
PREVIEW_ZOOM_MAX = get_env_float("PREVIEW_ZOOM_MAX", DEFAULT_ZOOM_MAX)
PREVIEW_ZOOM_STEP = get_env_float("PREVIEW_ZOOM_STEP", DEFAULT_ZOOM_STEP)

if not (0 < PREVIEW_ZOOM_MIN < PREVIEW_ZOOM_MAX):
    raise ValueError(
        f"CRITICAL: preview zoom bounds invalid (min={PREVIEW_ZOOM_MIN}, max={PREVIEW_ZOOM_MAX})."
    )
if PREVIEW_ZOOM_STEP <= 0:
    raise ValueError(f"PREVIEW_ZOOM_STEP must be positive. Got: {PREVIEW_ZOOM_STEP}")

# -----------------------------------------------------------------------------
# HTTP surface
# -----------------------------------------------------------------------------
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    if IS_STAGING or IS_PRODUCTION:
        raise ValueError(f"SECRET_KEY must be set in {APP_STAGE} environment.")
    SECRET_KEY = "dev-secret-key-change-this"

RATELIMIT_ENABLED = get_env_bool("RATELIMIT_ENABLED", default=True)
PRINT_LAYOUT_RATE_LIMIT = get_env_str("PRINT_LAYOUT_RATE_LIMIT", default="120 per minute")

# Request body cap (rendered calendar SVGs)
MAX_CONTENT_LENGTH = 16 * 1024 * 1024
