"""Ticketing settings with defaults, overridable through settings.TICKETING."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "MAX_TICKETS_PER_PURCHASE": 5,
    "LOCK_TIMEOUT": 5.0,
    "ADMIN_STATS_TTL": 30,
    "CATALOG_CACHE_TTL": 300,
    "CREATOR_IS_ADMIN": False,
    "RECENT_CHECK_INS_LIMIT": 10,
}


def ticketing_setting(name: str) -> Any:
    overrides = getattr(settings, "TICKETING", {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
