from decimal import Decimal

from django.core.management.base import BaseCommand

from products.models import Product


PRODUCTS = [
    # (name, price, inventory_count, featured, description)
    ("Canvas Tote Bag", "18.00", 40, True, "Heavy cotton canvas, natural colour."),
    ("Ceramic Mug", "12.50", 60, False, "350ml stoneware mug, dishwasher safe."),
    ("Wool Beanie", "24.00", 25, True, "Merino blend, one size."),
    ("Linen Notebook", "9.99", 100, False, "A5, 120 dotted pages."),
    ("Desk Lamp", "64.00", 8, True, "Warm LED, adjustable arm."),
    ("Enamel Pin Set", "7.50", 0, False, "Set of three pins."),
]


class Command(BaseCommand):
    help = "Seed published catalog products with starting inventory"

    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products..."))

        created_count = 0
        for name, price, inventory_count, featured, description in PRODUCTS:
            _, created = Product.objects.get_or_create(
                name=name,
                defaults={
                    "price": Decimal(price),
                    "inventory_count": inventory_count,
                    "featured": featured,
                    "description": description,
                    "is_published": True,
                },
            )
            created_count += int(created)

        self.stdout.write(
            self.style.SUCCESS(f"Products seeded ({created_count} new).")
        )
