"""API views for the business assistant."""
from __future__ import annotations

import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.permissions import IsAdminRole
from assistant.assistant_serializers import (
    BusinessAssistantConfigSerializer,
    RecommendationQuerySerializer,
)
from assistant.cache import get_recommendations
from assistant.config import update_config
from assistant.engine import RecommendationParams
from assistant.jobs import JobNotFound, JobQueueUnavailable, get_job_queue
from assistant.models import BusinessAssistantConfig

logger = logging.getLogger(__name__)


def _params_from_query(data) -> tuple[RecommendationParams, bool]:
    query = RecommendationQuerySerializer(data=data)
    query.is_valid(raise_exception=True)
    validated = query.validated_data
    params = RecommendationParams(
        horizon_days=validated.get("horizonDays"),
        recent_days=validated.get("recentDays"),
        start_date=validated.get("startDate"),
        end_date=validated.get("endDate"),
    )
    return params, validated.get("force", False)


def _job_queue_unavailable_response():
    return Response(
        {"detail": JobQueueUnavailable.default_detail, "code": JobQueueUnavailable.code},
        status=status.HTTP_400_BAD_REQUEST,
    )


class RecommendationsView(APIView):
    """
    GET /api/v1/business-assistant/recommendations/?horizonDays=90&recentDays=30&force=1
    Per-product recommendations; ``X-Cache`` tells whether the cache served it.
    """
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get(self, request):
        params, force = _params_from_query(request.query_params)
        payload, cache_status = get_recommendations(params, force=force)
        response = Response(payload)
        response["X-Cache"] = cache_status
        return response


class RecommendationJobsView(APIView):
    """POST /api/v1/business-assistant/recommendations/jobs/"""
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def post(self, request):
        queue = get_job_queue()
        if queue is None:
            return _job_queue_unavailable_response()

        data = request.data if hasattr(request.data, "get") else {}
        params, _ = _params_from_query(data)
        job_id = queue.enqueue(params)
        return Response({"jobId": job_id, "state": "queued"}, status=status.HTTP_202_ACCEPTED)


class RecommendationJobStatusView(APIView):
    """GET /api/v1/business-assistant/recommendations/jobs/<job_id>/"""
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get(self, request, job_id):
        queue = get_job_queue()
        if queue is None:
            return _job_queue_unavailable_response()
        try:
            job_status = queue.get_status(str(job_id))
        except JobNotFound:
            return Response(
                {"detail": JobNotFound.default_detail, "code": JobNotFound.code},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(job_status.as_dict())


class BusinessAssistantConfigView(APIView):
    """GET/PUT/PATCH /api/v1/business-assistant/config/"""
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get(self, request):
        return Response(BusinessAssistantConfigSerializer(BusinessAssistantConfig.load()).data)

    def put(self, request):
        return self._update(request, partial=False)

    def patch(self, request):
        return self._update(request, partial=True)

    def _update(self, request, *, partial):
        instance = BusinessAssistantConfig.load()
        serializer = BusinessAssistantConfigSerializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        update_config(**serializer.validated_data)
        logger.info("Business assistant config updated by %s", request.user.pk)
        return Response(BusinessAssistantConfigSerializer(BusinessAssistantConfig.load()).data)
