"""Seed database with demo data for development."""
import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone


class Command(BaseCommand):
    help = "Seed database with users, categories, products and a few weeks of sales"

    DEMO_USERS = [
        {"email": "admin@distrinet.co", "first_name": "Admin", "last_name": "Sistema", "role": "ADMIN", "password": "admin123!"},
        {"email": "laura@distrinet.co", "first_name": "Laura", "last_name": "Gomez", "role": "DISTRIBUTOR", "password": "distri123!"},
        {"email": "andres@distrinet.co", "first_name": "Andres", "last_name": "Rojas", "role": "DISTRIBUTOR", "password": "distri123!"},
        {"email": "camila@distrinet.co", "first_name": "Camila", "last_name": "Diaz", "role": "DISTRIBUTOR", "password": "distri123!"},
    ]

    DEMO_PRODUCTS = [
        # (category, name, purchase, distributor, client, stock)
        ("Perfumeria", "Perfume Citrico 100ml", "10500", "16500", "22000", 40),
        ("Perfumeria", "Perfume Amaderado 50ml", "8000", "12500", "17000", 12),
        ("Cuidado personal", "Crema Hidratante", "6000", "9000", "12500", 80),
        ("Cuidado personal", "Protector Solar", "15000", "21000", "28000", 6),
        ("Accesorios", "Cosmetiquera", "4000", "6500", "9000", 150),
    ]

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete existing data first")
        parser.add_argument("--days", type=int, default=60, help="Days of sales history to generate (default: 60).")
        parser.add_argument("--seed", type=int, default=42, help="Random seed.")

    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            self._flush()

        random.seed(options["seed"])
        self.stdout.write("Seeding data...")
        users = self._create_users()
        products = self._create_products()
        sales = self._create_sales(users, products, days=options["days"])

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: {len(users)} users, {len(products)} products, {sales} sales"
        ))

    def _flush(self):
        from accounts.models import User
        from catalog.models import Category, Product
        from sales.models import Sale

        for model in [Sale, Product, Category]:
            model.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def _create_users(self):
        from accounts.models import User

        users = []
        for data in self.DEMO_USERS:
            data = dict(data)
            password = data.pop("password")
            user, created = User.objects.get_or_create(email=data["email"], defaults=data)
            if created:
                user.set_password(password)
                user.save(update_fields=["password"])
            users.append(user)
        return users

    def _create_products(self):
        from catalog.models import Category, Product

        products = []
        for category_name, name, purchase, distributor, client, stock in self.DEMO_PRODUCTS:
            category, _ = Category.objects.get_or_create(name=category_name)
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    "category": category,
                    "purchase_price": Decimal(purchase),
                    "distributor_price": Decimal(distributor),
                    "client_price": Decimal(client),
                    "total_stock": stock * 3,
                    "warehouse_stock": stock * 3,
                },
            )
            products.append(product)
        return products

    def _create_sales(self, users, products, *, days):
        from sales.services import confirm_payment, register_sale

        admin = users[0]
        distributors = users[1:]
        now = timezone.now()
        created = 0
        for offset in range(days, 0, -1):
            sale_date = now - timedelta(days=offset, hours=random.randint(0, 8))
            for _ in range(random.randint(0, 3)):
                product = random.choice(products)
                product.refresh_from_db()
                if product.warehouse_stock < 2:
                    continue
                distributor = random.choice(distributors + [None])
                try:
                    sale = register_sale(
                        product=product,
                        quantity=random.randint(1, 2),
                        sale_price=product.client_price,
                        distributor=distributor,
                        sale_date=sale_date,
                        actor=admin,
                    )
                except ValueError as exc:
                    self.stdout.write(self.style.WARNING(f"Skipped sale: {exc}"))
                    continue
                if distributor is not None and random.random() < 0.8:
                    confirm_payment(sale, actor=admin)
                created += 1
        return created
