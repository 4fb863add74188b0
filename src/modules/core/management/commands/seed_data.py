from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.products.models import Product, ProductType

CATALOG = [
    # name, price, unit, stock, category, description
    ("Tomatoes", "2.50", "kg", "100", "Vegetables", "Fresh red tomatoes"),
    ("Carrots", "1.80", "kg", "80", "Vegetables", "Organic carrots"),
    ("Potatoes", "1.20", "kg", "150", "Vegetables", "White potatoes"),
    ("Onions", "1.50", "kg", "120", "Vegetables", "Yellow onions"),
    ("Lettuce", "1.00", "piece", "50", "Leafy Greens", "Fresh iceberg lettuce"),
    ("Spinach", "2.00", "kg", "60", "Leafy Greens", "Baby spinach leaves"),
    ("Bell Peppers", "3.00", "kg", "40", "Vegetables", "Mixed color bell peppers"),
    ("Cucumbers", "1.75", "kg", "70", "Vegetables", "Fresh cucumbers"),
    ("Broccoli", "2.80", "kg", "30", "Vegetables", "Fresh broccoli crowns"),
    ("Cauliflower", "2.50", "piece", "25", "Vegetables", "White cauliflower heads"),
]


class Command(BaseCommand):
    help = "Seed the database with the vegetable catalog and development users."

    def add_arguments(self, parser):
        parser.add_argument(
            "--no-users",
            action="store_true",
            help="Only seed products.",
        )

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        users_created = 0 if options["no_users"] else self._seed_users()
        products_created = self._seed_products()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={products_created} new of {len(CATALOG)}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="staff").exists():
            User.objects.create_user("staff", password="staff123", is_staff=True)
            created += 1
        return created

    def _seed_products(self) -> int:
        self.stdout.write("Creating products...")
        created_count = 0
        for name, price, unit, stock, category, description in CATALOG:
            _, created = Product.objects.get_or_create(
                name=name,
                defaults={
                    "price": Decimal(price),
                    "unit": unit,
                    "stock": Decimal(stock),
                    "category": category,
                    "description": description,
                    "type": ProductType.KITCHEN,
                    "is_available": True,
                },
            )
            created_count += int(created)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return created_count
