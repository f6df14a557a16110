"""Configuration for 1-Click Apply interview automation"""

import os

from dotenv import load_dotenv

from one_click_apply.errors import ConfigurationError

load_dotenv()


def _env_str(name, default):
    value = os.getenv(name, "").strip()
    return value or default


def _env_int(name, default):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"⚠️ {name}={raw!r} is not an integer, using {default}")
        return default


def _env_float(name, default):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        print(f"⚠️ {name}={raw!r} is not a number, using {default}")
        return default


def _env_bool(name, default):
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


# ========================================
# LANGUAGE MODEL
# ========================================
OPENAI_API_KEY = _env_str("OPENAI_API_KEY", "")
LLM_MODEL = _env_str("LLM_MODEL", "gpt-4o-mini")
LLM_TEMPERATURE = _env_float("LLM_TEMPERATURE", 0.5)

# ========================================
# ANSWER RESOLUTION
# ========================================
# Percent; answers at or above this confidence are submitted without review
AUTO_APPROVE_CONFIDENCE = _env_float("AUTO_APPROVE_CONFIDENCE", 65)
# Total resolve attempts per question (first try + regenerations)
MAX_RESOLVE_ATTEMPTS = _env_int("MAX_RESOLVE_ATTEMPTS", 3)

# ========================================
# ANSWER CACHE
# ========================================
CACHE_FILE = _env_str("CACHE_FILE", "./data/answer_cache.json")
# Minimum similarity ratio (0-1) for a cached answer to be reused
CACHE_ACCEPTANCE_THRESHOLD = _env_float("CACHE_ACCEPTANCE_THRESHOLD", 0.7)

# ========================================
# INTERVIEW ENDPOINT
# ========================================
INTERVIEW_BASE_URL = _env_str(
    "INTERVIEW_BASE_URL", "https://www.ziprecruiter.com/apply/api/v2/interview"
)
PLACEMENT_ID = _env_str("PLACEMENT_ID", "44071")  # Constant across all applications
MAX_RETRIES = _env_int("MAX_RETRIES", 3)
RETRY_BASE_DELAY_MS = _env_int("RETRY_BASE_DELAY_MS", 2000)
# Hard cap on group round-trips; exceeding it means the server is not converging
MAX_GROUP_ITERATIONS = _env_int("MAX_GROUP_ITERATIONS", 15)

# ========================================
# BROWSER / FILES
# ========================================
BROWSER_DATA_DIR = _env_str("BROWSER_DATA_DIR", "./browser_data")
HEADLESS = _env_bool("HEADLESS", False)
PROFILE_FILE = _env_str("PROFILE_FILE", "./data/candidate_profile.json")
RESULT_LOG_FILE = _env_str("RESULT_LOG_FILE", "log.jsonl")
DEBUG_UNRESOLVED_FILE = _env_str("DEBUG_UNRESOLVED_FILE", "debug_unresolved.jsonl")
LOG_TIMEZONE = _env_str("LOG_TIMEZONE", "America/Detroit")

# Randomized pause between batch jobs (ms)
JOB_DELAY_MIN = 3000
JOB_DELAY_MAX = 8000

# ========================================
# SAFETY VALIDATIONS
# ========================================
_violations = []

if not 0 <= AUTO_APPROVE_CONFIDENCE <= 100:
    _violations.append(f"AUTO_APPROVE_CONFIDENCE={AUTO_APPROVE_CONFIDENCE} not in 0-100")
    AUTO_APPROVE_CONFIDENCE = 65
if not 0 < CACHE_ACCEPTANCE_THRESHOLD <= 1:
    _violations.append(f"CACHE_ACCEPTANCE_THRESHOLD={CACHE_ACCEPTANCE_THRESHOLD} not in (0, 1]")
    CACHE_ACCEPTANCE_THRESHOLD = 0.7
if MAX_RETRIES < 1:
    _violations.append(f"MAX_RETRIES={MAX_RETRIES} < 1")
    MAX_RETRIES = 3
if RETRY_BASE_DELAY_MS < 0:
    _violations.append(f"RETRY_BASE_DELAY_MS={RETRY_BASE_DELAY_MS} < 0")
    RETRY_BASE_DELAY_MS = 2000
if MAX_GROUP_ITERATIONS < 1:
    _violations.append(f"MAX_GROUP_ITERATIONS={MAX_GROUP_ITERATIONS} < 1")
    MAX_GROUP_ITERATIONS = 15
if MAX_RESOLVE_ATTEMPTS < 1:
    _violations.append(f"MAX_RESOLVE_ATTEMPTS={MAX_RESOLVE_ATTEMPTS} < 1")
    MAX_RESOLVE_ATTEMPTS = 3

if _violations:
    print("⚠️ CONFIG VIOLATIONS - Falling back to defaults:")
    for violation in _violations:
        print(f"  - {violation}")


def auto_approve_threshold():
    """Auto-approve cutoff as a 0-1 confidence"""
    return AUTO_APPROVE_CONFIDENCE / 100


def require_api_key():
    """Return the OpenAI key or fail before any job starts"""
    if not OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY is not set")
    return OPENAI_API_KEY
