"""Configuration provider for the business assistant.

The engine never reads the model directly: it receives a frozen
:class:`AssistantSettings` snapshot whose ``version`` is part of every cache
key, so a configuration change can never be served from a stale entry.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, fields

from django.conf import settings
from django.db import transaction

from core.numbers import finite_or_default

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssistantSettings:
    version: str = "defaults"
    horizon_days_default: int = 90
    recent_days_default: int = 30
    cache_enabled: bool = True
    cache_ttl_seconds: int = 300
    days_cover_low_threshold: float = 14
    buy_target_days: float = 30
    low_rotation_units_threshold: float = 1
    high_stock_multiplier: float = 2
    high_stock_min_units: float = 10
    trend_drop_threshold_pct: float = -20
    trend_growth_threshold_pct: float = 20
    min_units_for_growth_strategy: float = 10
    margin_low_threshold_pct: float = 15
    target_margin_pct: float = 25
    min_margin_after_discount_pct: float = 10
    price_high_vs_category_threshold_pct: float = 10
    price_low_vs_category_threshold_pct: float = -10
    decrease_price_pct: float = -5
    promotion_discount_pct: float = -10
    increase_price_pct: float = 5

    @classmethod
    def from_model(cls, obj) -> "AssistantSettings":
        """Build a snapshot, replacing non-finite or missing values by defaults."""
        defaults = cls()
        values = {}
        for field in fields(cls):
            if field.name == "version":
                continue
            default = getattr(defaults, field.name)
            raw = getattr(obj, field.name, default)
            if isinstance(default, bool):
                values[field.name] = bool(raw) if raw is not None else default
            else:
                values[field.name] = finite_or_default(raw, default)

        # Windows and TTL must stay positive.
        for name in ("horizon_days_default", "recent_days_default", "cache_ttl_seconds"):
            if values[name] < 1:
                values[name] = getattr(defaults, name)
            values[name] = int(values[name])

        updated_at = getattr(obj, "updated_at", None)
        values["version"] = updated_at.isoformat() if updated_at else "defaults"
        return cls(**values)

    def as_dict(self) -> dict:
        return {field.name: getattr(self, field.name) for field in fields(self)}


class ConfigProvider:
    """Reads the configuration singleton, memoized for a few seconds."""

    def __init__(self, memo_seconds: float | None = None) -> None:
        self._memo_seconds = memo_seconds
        self._lock = threading.Lock()
        self._snapshot: AssistantSettings | None = None
        self._loaded_at = 0.0

    @property
    def memo_seconds(self) -> float:
        if self._memo_seconds is not None:
            return self._memo_seconds
        return getattr(settings, "ASSISTANT_CONFIG_MEMO_SECONDS", 5)

    def get_snapshot(self) -> AssistantSettings:
        with self._lock:
            now = time.monotonic()
            if self._snapshot is not None and now - self._loaded_at < self.memo_seconds:
                return self._snapshot

        from assistant.models import BusinessAssistantConfig

        snapshot = AssistantSettings.from_model(BusinessAssistantConfig.load())
        with self._lock:
            self._snapshot = snapshot
            self._loaded_at = time.monotonic()
        return snapshot

    def clear(self) -> None:
        with self._lock:
            self._snapshot = None
            self._loaded_at = 0.0


config_provider = ConfigProvider()


def get_config_snapshot() -> AssistantSettings:
    return config_provider.get_snapshot()


@transaction.atomic
def update_config(**changes) -> AssistantSettings:
    """Persist configuration changes and drop every cached recommendation."""
    from assistant.cache import invalidate_recommendations
    from assistant.models import BusinessAssistantConfig

    obj = BusinessAssistantConfig.load()
    for name, value in changes.items():
        if not hasattr(obj, name) or name in ("id", "created_at", "updated_at"):
            raise ValueError(f"Campo de configuracion desconocido: {name}")
        setattr(obj, name, value)
    obj.save()

    config_provider.clear()

    def _after_commit():
        config_provider.clear()
        invalidate_recommendations(reason="config_updated")

    transaction.on_commit(_after_commit)

    logger.info("Business assistant config updated: %s", sorted(changes))
    return AssistantSettings.from_model(obj)
