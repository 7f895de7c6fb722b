"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from assistant import assistant_views
from rankings import ranking_views
from sales import sale_views

router = DefaultRouter()
router.register(r'sales', sale_views.SaleViewSet, basename='sale')

urlpatterns = [
    path('', include(router.urls)),

    # Rankings
    path('rankings/current/', ranking_views.CurrentRankingView.as_view(), name='ranking-current'),
    path('rankings/settings/', ranking_views.RankingSettingsView.as_view(), name='ranking-settings'),

    # Business assistant
    path(
        'business-assistant/recommendations/',
        assistant_views.RecommendationsView.as_view(),
        name='business-assistant-recommendations',
    ),
    path(
        'business-assistant/recommendations/jobs/',
        assistant_views.RecommendationJobsView.as_view(),
        name='business-assistant-jobs',
    ),
    path(
        'business-assistant/recommendations/jobs/<str:job_id>/',
        assistant_views.RecommendationJobStatusView.as_view(),
        name='business-assistant-job-status',
    ),
    path(
        'business-assistant/config/',
        assistant_views.BusinessAssistantConfigView.as_view(),
        name='business-assistant-config',
    ),
]
