"""Cache gate for recommendation payloads.

Keys live under a generation counter (``<namespace>:g<generation>:<hash>``).
Invalidating bumps the generation, so old entries simply stop being read
and expire on their own TTL; no key scans are needed.
"""
from __future__ import annotations

import hashlib
import json
import logging
import time

from django.conf import settings
from django.core.cache import cache

from assistant.config import AssistantSettings, get_config_snapshot
from assistant.engine import RecommendationParams, generate_recommendations

logger = logging.getLogger(__name__)

HIT = "HIT"
MISS = "MISS"
BYPASS = "BYPASS"


class CacheNamespace:
    def __init__(self, name: str, backend=None) -> None:
        self.name = name
        self._backend = backend

    @property
    def backend(self):
        return self._backend or cache

    @property
    def generation_key(self) -> str:
        return f"{self.name}:generation"

    def _seed(self) -> int:
        # Milliseconds since the epoch, so a counter recreated after an
        # eviction starts past the generations handed out before it.
        return int(time.time() * 1000)

    def generation(self) -> int:
        value = self.backend.get(self.generation_key)
        if not value:
            self.backend.add(self.generation_key, self._seed(), None)
            value = self.backend.get(self.generation_key)
        return int(value)

    def key(self, digest: str) -> str:
        return f"{self.name}:g{self.generation()}:{digest}"

    def invalidate(self) -> int:
        try:
            return int(self.backend.incr(self.generation_key))
        except ValueError:
            # Missing key: start a fresh counter past the evicted one.
            self.backend.add(self.generation_key, self._seed(), None)
            return int(self.backend.incr(self.generation_key))


def default_namespace() -> CacheNamespace:
    return CacheNamespace(getattr(settings, "ASSISTANT_CACHE_NAMESPACE", "business-assistant"))


def recommendation_cache_digest(params: RecommendationParams, config: AssistantSettings) -> str:
    material = json.dumps(
        {
            "configVersion": config.version,
            **params.as_dict(),
        },
        sort_keys=True,
    )
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def get_recommendations(
    params: RecommendationParams,
    *,
    force: bool = False,
    config: AssistantSettings | None = None,
    namespace: CacheNamespace | None = None,
) -> tuple[dict, str]:
    """Return ``(payload, status)`` where status is HIT, MISS or BYPASS."""
    config = config or get_config_snapshot()
    params = params.resolve(config)

    if force or not config.cache_enabled:
        return generate_recommendations(params, config), BYPASS

    namespace = namespace or default_namespace()
    try:
        key = namespace.key(recommendation_cache_digest(params, config))
        cached = namespace.backend.get(key)
    except Exception:
        logger.warning("Recommendation cache unavailable, computing without cache", exc_info=True)
        return generate_recommendations(params, config), MISS

    if cached is not None:
        logger.debug("Recommendation cache hit %s", key)
        return cached, HIT

    payload = generate_recommendations(params, config)
    try:
        namespace.backend.set(key, payload, config.cache_ttl_seconds)
    except Exception:
        logger.warning("Could not store recommendations in cache", exc_info=True)
    logger.debug("Recommendation cache miss %s", key)
    return payload, MISS


def invalidate_recommendations(reason: str = "", namespace: CacheNamespace | None = None) -> None:
    namespace = namespace or default_namespace()
    try:
        generation = namespace.invalidate()
    except Exception:
        logger.warning("Could not invalidate recommendation cache (%s)", reason, exc_info=True)
        return
    logger.info("Recommendation cache invalidated (%s), generation=%s", reason, generation)
