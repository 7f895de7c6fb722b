from decimal import Decimal

import pytest

from accounts.models import User
from catalog.models import Category, Product


@pytest.fixture(autouse=True)
def _clear_cache():
    from django.core.cache import cache
    from assistant.config import config_provider

    cache.clear()
    config_provider.clear()
    yield
    cache.clear()
    config_provider.clear()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def distributor(db):
    return User.objects.create_user(
        email="distri1@test.com",
        password="testpass123",
        first_name="Laura",
        last_name="Gomez",
        role=User.Role.DISTRIBUTOR,
    )


@pytest.fixture
def distributor_2(db):
    return User.objects.create_user(
        email="distri2@test.com",
        password="testpass123",
        first_name="Andres",
        last_name="Rojas",
        role=User.Role.DISTRIBUTOR,
    )


@pytest.fixture
def distributor_3(db):
    return User.objects.create_user(
        email="distri3@test.com",
        password="testpass123",
        first_name="Camila",
        last_name="Diaz",
        role=User.Role.DISTRIBUTOR,
    )


@pytest.fixture
def distributor_4(db):
    return User.objects.create_user(
        email="distri4@test.com",
        password="testpass123",
        first_name="Sofia",
        last_name="Perez",
        role=User.Role.DISTRIBUTOR,
    )


@pytest.fixture
def category(db):
    return Category.objects.create(name="Perfumeria")


@pytest.fixture
def product(db, category):
    return Product.objects.create(
        category=category,
        name="Perfume Citrico 100ml",
        purchase_price=Decimal("10500.00"),
        distributor_price=Decimal("16500.00"),
        client_price=Decimal("22000.00"),
        total_stock=100,
        warehouse_stock=100,
        low_stock_alert=10,
    )


@pytest.fixture
def make_product(db, category):
    def _make(**overrides):
        data = {
            "category": category,
            "name": "Producto",
            "purchase_price": Decimal("10000.00"),
            "distributor_price": Decimal("15000.00"),
            "client_price": Decimal("20000.00"),
            "total_stock": 50,
            "warehouse_stock": 50,
            "low_stock_alert": 10,
        }
        data.update(overrides)
        return Product.objects.create(**data)

    return _make


@pytest.fixture
def make_sale(db):
    """Write a sale directly (bypassing the services) with a consistent split."""
    from django.utils import timezone

    from sales.models import Sale
    from sales.profit import apply_profit_split

    def _make(product, *, quantity=1, sale_price=None, distributor=None, pct=None, sale_date=None, confirmed=True):
        if pct is None:
            pct = 20 if distributor is not None else 0
        sale = Sale(
            product=product,
            distributor=distributor,
            quantity=quantity,
            purchase_price=product.purchase_price,
            sale_price=sale_price if sale_price is not None else product.client_price,
            distributor_profit_pct=pct,
            sale_date=sale_date or timezone.now(),
            payment_status=Sale.PaymentStatus.CONFIRMED if confirmed else Sale.PaymentStatus.PENDING,
        )
        apply_profit_split(sale)
        sale.save()
        return sale

    return _make
