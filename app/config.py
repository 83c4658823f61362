"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DISCOGS_API_BASE = "https://api.discogs.com"
EBAY_SANDBOX_API_BASE = "https://api.sandbox.ebay.com"
EBAY_PRODUCTION_API_BASE = "https://api.ebay.com"
SNAPSHOT_FILENAME = "last-results.json"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for marketplace sources.
    """

    timeout_seconds: float = 15.0
    throttle_cooldown_seconds: float = 60.0
    max_throttle_retries: int = 5
    user_agent: str = "VinylSearchApp/1.0"


@dataclass(frozen=True)
class DiscogsSettings:
    """
    Discogs catalog source settings.
    """

    token: str | None = None
    base_url: str = DISCOGS_API_BASE
    min_request_interval_seconds: float = 1.1
    per_page: int = 15
    max_releases: int = 8


@dataclass(frozen=True)
class EbaySettings:
    """
    eBay Browse API source settings.
    """

    client_id: str | None = None
    client_secret: str | None = None
    sandbox: bool = False
    category_id: str = "176985"
    search_limit: int = 10
    marketplace_id: str = "EBAY_US"
    token_buffer_seconds: float = 300.0

    @property
    def api_base(self) -> str:
        return EBAY_SANDBOX_API_BASE if self.sandbox else EBAY_PRODUCTION_API_BASE

    @property
    def mode(self) -> str:
        return "sandbox" if self.sandbox else "production"

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


@dataclass(frozen=True)
class AggregationSettings:
    """
    Runtime settings for per-artist aggregation.
    """

    artist_delay_seconds: float = 0.5
    run_timeout_seconds: float | None = None


@dataclass(frozen=True)
class SnapshotSettings:
    """
    Location of the persisted result snapshot.
    """

    data_dir: Path = PROJECT_ROOT / "data"

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / SNAPSHOT_FILENAME


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared source HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        throttle_cooldown_seconds=max(0.0, _get_float_env("EXTERNAL_HTTP_THROTTLE_COOLDOWN_SECONDS", 60.0)),
        max_throttle_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_THROTTLE_RETRIES", 5)),
        user_agent=_get_str_env("EXTERNAL_HTTP_USER_AGENT", "VinylSearchApp/1.0"),
    )


@lru_cache(maxsize=1)
def get_discogs_settings() -> DiscogsSettings:
    """
    Return Discogs source settings from environment variables.
    """

    return DiscogsSettings(
        token=_get_optional_str_env("DISCOGS_TOKEN"),
        base_url=_get_str_env("DISCOGS_BASE_URL", DISCOGS_API_BASE),
        min_request_interval_seconds=max(0.0, _get_float_env("DISCOGS_MIN_REQUEST_INTERVAL_SECONDS", 1.1)),
        per_page=max(1, _get_int_env("DISCOGS_PER_PAGE", 15)),
        max_releases=max(0, _get_int_env("DISCOGS_MAX_RELEASES", 8)),
    )


@lru_cache(maxsize=1)
def get_ebay_settings() -> EbaySettings:
    """
    Return eBay source settings from environment variables.
    """

    return EbaySettings(
        client_id=_get_optional_str_env("EBAY_CLIENT_ID"),
        client_secret=_get_optional_str_env("EBAY_CLIENT_SECRET"),
        sandbox=_get_bool_env("EBAY_SANDBOX", False),
        category_id=_get_str_env("EBAY_CATEGORY_ID", "176985"),
        search_limit=max(1, _get_int_env("EBAY_SEARCH_LIMIT", 10)),
        marketplace_id=_get_str_env("EBAY_MARKETPLACE_ID", "EBAY_US"),
        token_buffer_seconds=max(0.0, _get_float_env("EBAY_TOKEN_BUFFER_SECONDS", 300.0)),
    )


@lru_cache(maxsize=1)
def get_aggregation_settings() -> AggregationSettings:
    """
    Return aggregation pacing settings.
    """

    run_timeout = _get_float_env("SEARCH_RUN_TIMEOUT_SECONDS", 0.0)
    return AggregationSettings(
        artist_delay_seconds=max(0.0, _get_float_env("ARTIST_DELAY_SECONDS", 0.5)),
        run_timeout_seconds=run_timeout if run_timeout > 0 else None,
    )


@lru_cache(maxsize=1)
def get_snapshot_settings() -> SnapshotSettings:
    """
    Return snapshot storage settings.
    """

    raw_dir = _get_optional_str_env("DATA_DIR")
    return SnapshotSettings(data_dir=Path(raw_dir) if raw_dir else PROJECT_ROOT / "data")
