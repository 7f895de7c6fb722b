from types import SimpleNamespace
from unittest import mock

import pytest
from django.test import override_settings
from django_celery_results.models import TaskResult

from assistant.engine import RecommendationParams
from assistant.jobs import CeleryRecommendationJobQueue, JobNotFound, JobState, get_job_queue
from assistant.tasks import generate_recommendations_job, warm_recommendations_cache

JOBS_URL = "/api/v1/business-assistant/recommendations/jobs/"

jobs_enabled = override_settings(
    BUSINESS_ASSISTANT_JOBS_ENABLED=True,
    CELERY_BROKER_URL="redis://localhost:6379/1",
)


def fake_result(state, result=None, info=None):
    return SimpleNamespace(state=state, result=result, info=info)


class TestJobQueueSelection:
    @override_settings(BUSINESS_ASSISTANT_JOBS_ENABLED=False)
    def test_disabled_without_flag(self):
        assert get_job_queue() is None

    @override_settings(BUSINESS_ASSISTANT_JOBS_ENABLED=True, CELERY_BROKER_URL="")
    def test_disabled_without_broker(self):
        assert get_job_queue() is None

    @jobs_enabled
    def test_enabled_with_broker(self):
        assert isinstance(get_job_queue(), CeleryRecommendationJobQueue)


class TestCeleryStatus:
    @pytest.mark.parametrize(
        "celery_state,expected",
        [
            ("STARTED", JobState.ACTIVE),
            ("PROGRESS", JobState.ACTIVE),
            ("SUCCESS", JobState.COMPLETED),
            ("FAILURE", JobState.FAILED),
            ("SOMETHING_NEW", JobState.QUEUED),
        ],
    )
    def test_state_mapping(self, celery_state, expected):
        with mock.patch("celery.result.AsyncResult", return_value=fake_result(celery_state)):
            status = CeleryRecommendationJobQueue().get_status("job-1")
        assert status.state == expected

    @pytest.mark.django_db
    def test_pending_known_job_is_queued(self):
        TaskResult.objects.create(task_id="job-1", status="PENDING")
        with mock.patch("celery.result.AsyncResult", return_value=fake_result("PENDING")):
            status = CeleryRecommendationJobQueue().get_status("job-1")
        assert status.state == JobState.QUEUED
        assert status.progress == 0

    @pytest.mark.django_db
    def test_unknown_job_is_not_found(self):
        with mock.patch("celery.result.AsyncResult", return_value=fake_result("PENDING")):
            with pytest.raises(JobNotFound):
                CeleryRecommendationJobQueue().get_status("never-enqueued")

    def test_progress_from_meta(self):
        result = fake_result("PROGRESS", info={"progress": 42})
        with mock.patch("celery.result.AsyncResult", return_value=result):
            status = CeleryRecommendationJobQueue().get_status("job-1")
        assert status.progress == 42
        assert status.result is None

    def test_completed_carries_payload(self):
        result = fake_result("SUCCESS", result={"recommendations": []})
        with mock.patch("celery.result.AsyncResult", return_value=result):
            data = CeleryRecommendationJobQueue().get_status("job-1").as_dict()
        assert data == {
            "jobId": "job-1",
            "state": "completed",
            "progress": 100,
            "result": {"recommendations": []},
            "error": None,
        }

    def test_failed_carries_error(self):
        result = fake_result("FAILURE", result=RuntimeError("boom"))
        with mock.patch("celery.result.AsyncResult", return_value=result):
            status = CeleryRecommendationJobQueue().get_status("job-1")
        assert status.error == "boom"


@pytest.mark.django_db
class TestRecommendationTasks:
    def test_job_computes_without_cache(self, product):
        payload = generate_recommendations_job({"recentDays": 15})
        assert payload["window"]["recentDays"] == 15
        assert len(payload["recommendations"]) == 1

    def test_warm_up_fills_cache(self, product):
        assert warm_recommendations_cache() == "MISS"
        assert warm_recommendations_cache() == "HIT"


@pytest.mark.django_db
class TestRecommendationJobsAPI:
    def test_no_queue_returns_code(self, client, admin_user):
        client.force_login(admin_user)
        with override_settings(BUSINESS_ASSISTANT_JOBS_ENABLED=False):
            resp = client.post(JOBS_URL, {}, content_type="application/json")
        assert resp.status_code == 400
        assert resp.json()["code"] == "job_queue_not_configured"

        with override_settings(BUSINESS_ASSISTANT_JOBS_ENABLED=False):
            resp = client.get(f"{JOBS_URL}abc/")
        assert resp.status_code == 400

    @jobs_enabled
    def test_enqueue_returns_job_id(self, client, admin_user):
        client.force_login(admin_user)
        with mock.patch("assistant.tasks.generate_recommendations_job") as task:
            task.name = "assistant.tasks.generate_recommendations_job"
            task.delay.return_value = SimpleNamespace(id="job-9")
            resp = client.post(JOBS_URL, {"recentDays": 7}, content_type="application/json")
        assert resp.status_code == 202
        assert resp.json() == {"jobId": "job-9", "state": "queued"}
        task.delay.assert_called_once()
        assert RecommendationParams.from_dict(task.delay.call_args.args[0]).recent_days == 7
        assert TaskResult.objects.get(task_id="job-9").status == "PENDING"

        with mock.patch("celery.result.AsyncResult", return_value=fake_result("PENDING")):
            resp = client.get(f"{JOBS_URL}job-9/")
        assert resp.json()["state"] == "queued"

    @jobs_enabled
    def test_unknown_job_returns_404(self, client, admin_user):
        client.force_login(admin_user)
        with mock.patch("celery.result.AsyncResult", return_value=fake_result("PENDING")):
            resp = client.get(f"{JOBS_URL}missing-job/")
        assert resp.status_code == 404
        assert resp.json()["code"] == "job_not_found"

    @jobs_enabled
    def test_job_status(self, client, admin_user):
        client.force_login(admin_user)
        with mock.patch("celery.result.AsyncResult", return_value=fake_result("STARTED")):
            resp = client.get(f"{JOBS_URL}job-9/")
        assert resp.status_code == 200
        assert resp.json()["state"] == "active"

    def test_distributor_forbidden(self, client, distributor):
        client.force_login(distributor)
        resp = client.post(JOBS_URL, {}, content_type="application/json")
        assert resp.status_code == 403
