import math
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

AIRTABLE_API_URL = "https://api.airtable.com/v0"

# Deployment defaults for the fixed query. Each can be overridden from the environment.
DEFAULT_TABLE_ID = "tblDrUWfwkwMQM9yR"
DEFAULT_FILTER = "NOT({Status}='Done')"
DEFAULT_SORT_FIELD = "Name"
DEFAULT_SORT_DIRECTION = "asc"
DEFAULT_PAGE_SIZE = 50
DEFAULT_TIMEOUT_SECONDS = 10.0

MAX_PAGE_SIZE = 100
SORT_DIRECTIONS = ("asc", "desc")

KEYVAULT_PREFIX = "@Microsoft.KeyVault("


def _env(name: str) -> Optional[str]:
    """Return a stripped env value, or None when blank or an unresolved Key Vault reference."""
    value = os.getenv(name)
    value = value.strip() if value else value
    if not value or value.startswith(KEYVAULT_PREFIX):
        return None
    return value


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(name, f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(name, f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ConfigurationError(name, f"{name} must be a finite number, got {raw!r}")
    return value


@dataclass(frozen=True)
class AirtableConfig:
    """Everything needed to list one Airtable table with a fixed filter and sort."""

    api_key: str
    base_id: str
    table_id: str = DEFAULT_TABLE_ID
    filter_formula: str = DEFAULT_FILTER
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = DEFAULT_SORT_DIRECTION
    page_size: int = DEFAULT_PAGE_SIZE
    # None keeps paging until Airtable stops returning an offset.
    max_pages: Optional[int] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    api_url: str = AIRTABLE_API_URL
    debug_errors: bool = False

    def __post_init__(self):
        if self.sort_direction not in SORT_DIRECTIONS:
            raise ConfigurationError(
                "AIRTABLE_SORT_DIRECTION",
                f"AIRTABLE_SORT_DIRECTION must be 'asc' or 'desc', got {self.sort_direction!r}",
            )
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ConfigurationError(
                "AIRTABLE_PAGE_SIZE",
                f"AIRTABLE_PAGE_SIZE must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}",
            )
        if self.max_pages is not None and self.max_pages < 1:
            raise ConfigurationError("AIRTABLE_MAX_PAGES", "AIRTABLE_MAX_PAGES must be >= 1")
        if not math.isfinite(self.timeout_seconds) or self.timeout_seconds <= 0:
            raise ConfigurationError("AIRTABLE_TIMEOUT_SECONDS", "AIRTABLE_TIMEOUT_SECONDS must be a finite number > 0")

    @property
    def sort(self) -> dict:
        return {"field": self.sort_field, "direction": self.sort_direction}

    @classmethod
    def from_env(cls) -> "AirtableConfig":
        api_key = _env("AIRTABLE_API_KEY")
        if not api_key:
            raise ConfigurationError("AIRTABLE_API_KEY")
        base_id = _env("AIRTABLE_BASE_ID")
        if not base_id:
            raise ConfigurationError("AIRTABLE_BASE_ID")
        return cls(
            api_key=api_key,
            base_id=base_id,
            table_id=_env("AIRTABLE_TABLE_ID") or DEFAULT_TABLE_ID,
            filter_formula=_env("AIRTABLE_FILTER") or DEFAULT_FILTER,
            sort_field=_env("AIRTABLE_SORT_FIELD") or DEFAULT_SORT_FIELD,
            sort_direction=(_env("AIRTABLE_SORT_DIRECTION") or DEFAULT_SORT_DIRECTION).lower(),
            page_size=_env_int("AIRTABLE_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            max_pages=_env_int("AIRTABLE_MAX_PAGES", None),
            timeout_seconds=_env_float("AIRTABLE_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            api_url=(_env("AIRTABLE_API_URL") or AIRTABLE_API_URL).rstrip("/"),
            debug_errors=os.getenv("DEBUG_ERRORS", "false").lower() == "true",
        )
