import json
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATA_DIR = Path("data")
DATA_DIR.mkdir(exist_ok=True)

DB_URL = os.getenv("DB_URL", "sqlite:///./data/rulesheet.db")
DEBUG = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
APP_TITLE = os.getenv("APP_TITLE", "Old World Builder")

DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")

RULES_BASE_URL = os.getenv("RULES_BASE_URL", "https://tow.whfb.app").rstrip("/")
RULES_UTM_SOURCE = os.getenv("RULES_UTM_SOURCE", "owb")
RULES_UTM_MEDIUM = os.getenv("RULES_UTM_MEDIUM", "referral")


def _load_json_list(env_key: str, default: list) -> list:
    raw_value = os.getenv(env_key)
    if not raw_value:
        return default
    try:
        parsed = json.loads(raw_value)
    except json.JSONDecodeError:
        return default
    return parsed if isinstance(parsed, list) else default


def _load_float(env_key: str, default: float) -> float:
    raw_value = os.getenv(env_key)
    if not raw_value:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


SUPPORTED_LANGUAGES = _load_json_list(
    "SUPPORTED_LANGUAGES", ["en", "de", "fr", "es", "it", "pl", "cn"]
)
RULES_FETCH_TIMEOUT = _load_float("RULES_FETCH_TIMEOUT", 10.0)
