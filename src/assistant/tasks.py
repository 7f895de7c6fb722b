"""Celery tasks for the business assistant."""
from __future__ import annotations

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=2, default_retry_delay=30)
def generate_recommendations_job(self, params: dict):
    """Compute recommendations in the background, always bypassing the cache."""
    from assistant.config import get_config_snapshot
    from assistant.engine import RecommendationParams, generate_recommendations

    def _progress(value: int):
        if self.request.id and not self.request.called_directly:
            self.update_state(state="PROGRESS", meta={"progress": value})

    try:
        _progress(5)
        payload = generate_recommendations(
            RecommendationParams.from_dict(params or {}),
            get_config_snapshot(),
            on_progress=_progress,
        )
    except Exception as exc:
        logger.exception("generate_recommendations_job failed: %s", exc)
        raise self.retry(exc=exc)

    logger.info("Recommendation job %s finished (%d products)", self.request.id, len(payload["recommendations"]))
    return payload


@shared_task
def warm_recommendations_cache():
    """Prime the cache for the default recommendation window."""
    from assistant.cache import get_recommendations
    from assistant.engine import RecommendationParams

    payload, status = get_recommendations(RecommendationParams())
    logger.info("Recommendation cache warm-up: %s (%d products)", status, len(payload["recommendations"]))
    return status
