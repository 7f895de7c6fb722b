from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from sales.models import Sale

SALES_URL = "/api/v1/sales/"


@pytest.mark.django_db
class TestSaleCreateAPI:
    def test_distributor_sells_as_themselves(self, client, distributor, distributor_2, product):
        client.force_login(distributor)
        resp = client.post(
            SALES_URL,
            {
                "product_id": str(product.pk),
                "quantity": 1,
                "sale_price": "22000.00",
                "distributor_id": str(distributor_2.pk),
            },
            content_type="application/json",
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["distributor"] == str(distributor.pk)
        assert data["distributor_name"] == "Laura Gomez"
        assert data["payment_status"] == "pending"
        assert data["distributor_profit_pct"] == 20
        assert Decimal(data["distributor_profit"]) == Decimal("4400.00")
        assert Decimal(data["admin_profit"]) == Decimal("7100.00")

    def test_distributor_cannot_back_date_into_a_better_tier(
        self, client, distributor, distributor_2, product, make_sale
    ):
        last_week = timezone.now() - timedelta(days=8)
        make_sale(product, distributor=distributor, quantity=10, sale_date=last_week)
        make_sale(product, distributor=distributor_2, quantity=2)

        client.force_login(distributor)
        resp = client.post(
            SALES_URL,
            {
                "product_id": str(product.pk),
                "quantity": 1,
                "sale_price": "22000.00",
                "sale_date": last_week.isoformat(),
            },
            content_type="application/json",
        )
        assert resp.status_code == 201
        assert resp.json()["distributor_profit_pct"] == 20
        assert Decimal(resp.json()["distributor_profit"]) == Decimal("4400.00")

    def test_admin_house_sale_is_confirmed(self, client, admin_user, product):
        client.force_login(admin_user)
        resp = client.post(
            SALES_URL,
            {"product_id": str(product.pk), "quantity": 2, "sale_price": "22000.00"},
            content_type="application/json",
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["is_house_sale"] is True
        assert data["payment_status"] == "confirmed"
        assert Decimal(data["total_profit"]) == Decimal("23000.00")
        product.refresh_from_db()
        assert product.warehouse_stock == 98

    def test_admin_sale_for_distributor(self, client, admin_user, distributor, product):
        client.force_login(admin_user)
        resp = client.post(
            SALES_URL,
            {
                "product_id": str(product.pk),
                "quantity": 1,
                "sale_price": "22000.00",
                "distributor_id": str(distributor.pk),
            },
            content_type="application/json",
        )
        assert resp.status_code == 201
        assert resp.json()["distributor"] == str(distributor.pk)

    def test_admin_sale_for_unknown_distributor(self, client, admin_user, product):
        client.force_login(admin_user)
        resp = client.post(
            SALES_URL,
            {
                "product_id": str(product.pk),
                "quantity": 1,
                "sale_price": "22000.00",
                "distributor_id": str(admin_user.pk),
            },
            content_type="application/json",
        )
        assert resp.status_code == 400

    def test_insufficient_stock(self, client, admin_user, make_product):
        product = make_product(warehouse_stock=1, total_stock=1)
        client.force_login(admin_user)
        resp = client.post(
            SALES_URL,
            {"product_id": str(product.pk), "quantity": 5, "sale_price": "20000.00"},
            content_type="application/json",
        )
        assert resp.status_code == 400
        assert "detail" in resp.json()

    def test_invalid_payload(self, client, admin_user, product):
        client.force_login(admin_user)
        resp = client.post(
            SALES_URL,
            {"product_id": str(product.pk), "quantity": 0, "sale_price": "0"},
            content_type="application/json",
        )
        assert resp.status_code == 400
        assert "quantity" in resp.json()
        assert "sale_price" in resp.json()

    def test_unknown_product(self, client, admin_user):
        client.force_login(admin_user)
        resp = client.post(
            SALES_URL,
            {"product_id": "00000000-0000-0000-0000-000000000000", "quantity": 1, "sale_price": "100.00"},
            content_type="application/json",
        )
        assert resp.status_code == 404


@pytest.mark.django_db
class TestSaleListAPI:
    def test_distributor_sees_only_own_sales(self, client, distributor, distributor_2, product, make_sale):
        make_sale(product, distributor=distributor)
        make_sale(product, distributor=distributor_2)
        make_sale(product)

        client.force_login(distributor)
        resp = client.get(SALES_URL)
        assert resp.status_code == 200
        results = resp.json()["results"]
        assert len(results) == 1
        assert results[0]["distributor"] == str(distributor.pk)

    def test_admin_sees_everything(self, client, admin_user, distributor, product, make_sale):
        make_sale(product, distributor=distributor)
        make_sale(product)
        client.force_login(admin_user)
        resp = client.get(SALES_URL)
        assert resp.json()["count"] == 2

    def test_distributor_cannot_read_foreign_sale(self, client, distributor, distributor_2, product, make_sale):
        sale = make_sale(product, distributor=distributor_2)
        client.force_login(distributor)
        resp = client.get(f"{SALES_URL}{sale.pk}/")
        assert resp.status_code == 404

    def test_requires_authentication(self, client):
        resp = client.get(SALES_URL)
        assert resp.status_code in (401, 403)


@pytest.mark.django_db
class TestSaleConfirmAndDeleteAPI:
    def test_admin_confirms_payment(self, client, admin_user, distributor, product, make_sale):
        sale = make_sale(product, distributor=distributor, confirmed=False)
        client.force_login(admin_user)
        resp = client.post(f"{SALES_URL}{sale.pk}/confirm/", content_type="application/json")
        assert resp.status_code == 200
        assert resp.json()["payment_status"] == "confirmed"
        assert resp.json()["payment_confirmed_by"] == str(admin_user.pk)

        resp = client.post(f"{SALES_URL}{sale.pk}/confirm/", content_type="application/json")
        assert resp.status_code == 400

    def test_distributor_cannot_confirm(self, client, distributor, product, make_sale):
        sale = make_sale(product, distributor=distributor, confirmed=False)
        client.force_login(distributor)
        resp = client.post(f"{SALES_URL}{sale.pk}/confirm/", content_type="application/json")
        assert resp.status_code == 403

    def test_admin_deletes_sale_and_restores_stock(self, client, admin_user, product):
        from sales.services import register_sale

        sale = register_sale(product=product, quantity=3, sale_price=Decimal("22000.00"))
        product.refresh_from_db()
        assert product.warehouse_stock == 97

        client.force_login(admin_user)
        resp = client.delete(f"{SALES_URL}{sale.pk}/")
        assert resp.status_code == 204
        assert not Sale.objects.filter(pk=sale.pk).exists()
        product.refresh_from_db()
        assert product.warehouse_stock == 100
        assert product.total_stock == 100
