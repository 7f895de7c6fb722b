"""Asynchronous recommendation jobs.

The API only depends on :class:`RecommendationJobQueue`; whether an
implementation exists is a deployment decision (``get_job_queue`` returns
``None`` when no broker is configured).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.conf import settings

from assistant.engine import RecommendationParams

logger = logging.getLogger(__name__)


class JobQueueUnavailable(Exception):
    code = "job_queue_not_configured"
    default_detail = "La cola de trabajos en segundo plano no esta configurada."


class JobNotFound(Exception):
    code = "job_not_found"
    default_detail = "No existe un trabajo con ese identificador."


class JobState:
    QUEUED = "queued"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class JobStatus:
    id: str
    state: str
    progress: int
    result: Any = None
    error: str | None = None

    def as_dict(self) -> dict:
        return {
            "jobId": self.id,
            "state": self.state,
            "progress": self.progress,
            "result": self.result,
            "error": self.error,
        }


class RecommendationJobQueue:
    """Capability interface for background recommendation generation."""

    def enqueue(self, params: RecommendationParams) -> str:
        raise NotImplementedError

    def get_status(self, job_id: str) -> JobStatus:
        """Raise :class:`JobNotFound` for an id that was never enqueued."""
        raise NotImplementedError


CELERY_STATE_MAP = {
    "PENDING": JobState.QUEUED,
    "RECEIVED": JobState.QUEUED,
    "STARTED": JobState.ACTIVE,
    "PROGRESS": JobState.ACTIVE,
    "RETRY": JobState.ACTIVE,
    "SUCCESS": JobState.COMPLETED,
    "FAILURE": JobState.FAILED,
    "REVOKED": JobState.FAILED,
}


class CeleryRecommendationJobQueue(RecommendationJobQueue):
    """Jobs run as Celery tasks; results live in django-celery-results.

    A PENDING row is written at enqueue time so that a queued job can be
    told apart from an unknown id.
    """

    def _remember(self, job_id: str, task_name: str) -> None:
        from celery import states
        from django_celery_results.models import TaskResult

        TaskResult.objects.get_or_create(
            task_id=job_id,
            defaults={"status": states.PENDING, "task_name": task_name},
        )

    def _is_known(self, job_id: str) -> bool:
        from django_celery_results.models import TaskResult

        return TaskResult.objects.filter(task_id=job_id).exists()

    def enqueue(self, params: RecommendationParams) -> str:
        from assistant.tasks import generate_recommendations_job

        result = generate_recommendations_job.delay(params.as_dict())
        self._remember(result.id, generate_recommendations_job.name)
        logger.info("Recommendation job %s enqueued with %s", result.id, params.as_dict())
        return result.id

    def get_status(self, job_id: str) -> JobStatus:
        from celery.result import AsyncResult

        result = AsyncResult(job_id)
        if result.state == "PENDING" and not self._is_known(job_id):
            # Celery reports PENDING for ids it has never seen.
            raise JobNotFound(job_id)
        state = CELERY_STATE_MAP.get(result.state, JobState.QUEUED)

        progress = 0
        payload = None
        error = None
        if state == JobState.COMPLETED:
            progress = 100
            payload = result.result
        elif state == JobState.FAILED:
            error = str(result.result) if result.result is not None else "Trabajo fallido."
        elif isinstance(result.info, dict):
            progress = int(result.info.get("progress", 0))

        return JobStatus(id=job_id, state=state, progress=progress, result=payload, error=error)


def get_job_queue() -> RecommendationJobQueue | None:
    if not getattr(settings, "BUSINESS_ASSISTANT_JOBS_ENABLED", False):
        return None
    if not getattr(settings, "CELERY_BROKER_URL", ""):
        return None
    return CeleryRecommendationJobQueue()
