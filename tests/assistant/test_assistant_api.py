from datetime import timedelta

import pytest
from django.utils import timezone

RECOMMENDATIONS_URL = "/api/v1/business-assistant/recommendations/"
CONFIG_URL = "/api/v1/business-assistant/config/"


@pytest.mark.django_db
class TestRecommendationsAPI:
    def test_payload_shape_and_cache_header(self, client, admin_user, product, make_sale):
        make_sale(product, quantity=3)
        client.force_login(admin_user)

        resp = client.get(RECOMMENDATIONS_URL)
        assert resp.status_code == 200
        assert resp["X-Cache"] == "MISS"
        data = resp.json()
        assert set(data) == {"generatedAt", "window", "configVersion", "recommendations"}
        assert data["window"]["horizonDays"] == 90
        assert data["window"]["recentDays"] == 30

        item = data["recommendations"][0]
        assert item["productName"] == "Perfume Citrico 100ml"
        assert item["metrics"]["recentUnits"] == 3
        assert item["recommendation"]["primary"]["action"]
        assert "impactScore" in item["recommendation"]

        resp = client.get(RECOMMENDATIONS_URL)
        assert resp["X-Cache"] == "HIT"

    def test_force_bypasses_cache(self, client, admin_user, product):
        client.force_login(admin_user)
        client.get(RECOMMENDATIONS_URL)
        resp = client.get(RECOMMENDATIONS_URL, {"force": "true"})
        assert resp["X-Cache"] == "BYPASS"

    def test_explicit_range(self, client, admin_user, product, make_sale):
        make_sale(product, quantity=2, sale_date=timezone.now() - timedelta(days=200))
        client.force_login(admin_user)
        today = timezone.localdate()
        resp = client.get(
            RECOMMENDATIONS_URL,
            {
                "horizonDays": 30,
                "startDate": (today - timedelta(days=210)).isoformat(),
                "endDate": today.isoformat(),
            },
        )
        assert resp.status_code == 200
        window = resp.json()["window"]
        assert window["horizonDays"] is None
        assert window["startDate"] == (today - timedelta(days=210)).isoformat()

    def test_invalid_range(self, client, admin_user):
        client.force_login(admin_user)
        resp = client.get(RECOMMENDATIONS_URL, {"startDate": "2024-02-01", "endDate": "2024-01-01"})
        assert resp.status_code == 400

    def test_invalid_window(self, client, admin_user):
        client.force_login(admin_user)
        resp = client.get(RECOMMENDATIONS_URL, {"recentDays": 0})
        assert resp.status_code == 400

    def test_distributor_forbidden(self, client, distributor):
        client.force_login(distributor)
        resp = client.get(RECOMMENDATIONS_URL)
        assert resp.status_code == 403


@pytest.mark.django_db
class TestBusinessAssistantConfigAPI:
    def test_get_defaults(self, client, admin_user):
        client.force_login(admin_user)
        resp = client.get(CONFIG_URL)
        assert resp.status_code == 200
        data = resp.json()
        assert data["horizon_days_default"] == 90
        assert data["cache_enabled"] is True
        assert data["min_margin_after_discount_pct"] == 10

    def test_patch_invalidates_cache(self, client, admin_user, product, django_capture_on_commit_callbacks):
        client.force_login(admin_user)
        client.get(RECOMMENDATIONS_URL)

        with django_capture_on_commit_callbacks(execute=True):
            resp = client.patch(CONFIG_URL, {"recent_days_default": 14}, content_type="application/json")
        assert resp.status_code == 200
        assert resp.json()["recent_days_default"] == 14

        resp = client.get(RECOMMENDATIONS_URL)
        assert resp["X-Cache"] == "MISS"
        assert resp.json()["window"]["recentDays"] == 14

    def test_rejects_invalid_floor_margin(self, client, admin_user):
        client.force_login(admin_user)
        resp = client.patch(CONFIG_URL, {"min_margin_after_discount_pct": 100}, content_type="application/json")
        assert resp.status_code == 400
        assert "min_margin_after_discount_pct" in resp.json()

    @pytest.mark.parametrize("field,value", [
        ("high_stock_multiplier", 0.5),
        ("buy_target_days", -1),
        ("days_cover_low_threshold", 0),
        ("high_stock_min_units", -3),
        ("target_margin_pct", -5),
    ])
    def test_rejects_values_below_minimum(self, client, admin_user, field, value):
        client.force_login(admin_user)
        resp = client.patch(CONFIG_URL, {field: value}, content_type="application/json")
        assert resp.status_code == 400
        assert field in resp.json()

        resp = client.get(CONFIG_URL)
        assert resp.json()[field] != value

    def test_distributor_cannot_edit(self, client, distributor):
        client.force_login(distributor)
        resp = client.patch(CONFIG_URL, {"recent_days_default": 14}, content_type="application/json")
        assert resp.status_code == 403
