from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.accounts.dtos import ActorDTO
from modules.accounts.models import UserRole
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, ShippingAddressDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.constants import Fabric, Occasion, Pattern
from modules.products.models import Category, Product
from modules.products.repositories.django_repository import ProductDjangoRepository

# Status paths walked after checkout, starting from ``pending``.
STATUS_PATHS = [
    [],
    [OrderStatus.CONFIRMED],
    [OrderStatus.CONFIRMED, OrderStatus.PACKED],
    [OrderStatus.CONFIRMED, OrderStatus.PACKED, OrderStatus.SHIPPED],
    [
        OrderStatus.CONFIRMED,
        OrderStatus.PACKED,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    ],
    [OrderStatus.CANCELLED],
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=30)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        admin, vendor, customers = self._seed_users()
        categories = self._seed_categories()
        products = self._seed_products(vendor, categories)
        orders_created = self._seed_orders(admin, customers, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"customers={len(customers)}, "
                f"categories={len(categories)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self):
        User = get_user_model()
        admin = User.objects.filter(email="admin@sareenotsorry.in").first()
        if admin is None:
            admin = User.objects.create_superuser(
                "admin@sareenotsorry.in", password="admin123", name="Store Admin"
            )
        vendor = User.objects.filter(email="vendor@sareenotsorry.in").first()
        if vendor is None:
            vendor = User.objects.create_user(
                "vendor@sareenotsorry.in",
                password="vendor123",
                name="Meera Textiles",
                business_name="Saree Not Sorry",
                role=UserRole.VENDOR,
            )

        customers = []
        for name, email in [
            ("Ananya Iyer", "ananya@example.com"),
            ("Priya Sharma", "priya@example.com"),
            ("Kavya Reddy", "kavya@example.com"),
            ("Nisha Patel", "nisha@example.com"),
        ]:
            customer = User.objects.filter(email=email).first()
            if customer is None:
                customer = User.objects.create_user(email, password="customer123", name=name)
            customers.append(customer)
        return admin, vendor, customers

    def _seed_categories(self) -> list[Category]:
        self.stdout.write("Creating categories...")
        categories = []
        for name, description in [
            ("Silk Sarees", "Pure silk drapes for weddings and festivals"),
            ("Cotton Sarees", "Breathable everyday cotton"),
            ("Designer Sarees", "Embroidered and embellished party wear"),
            ("Handloom", "Woven by artisan clusters across India"),
        ]:
            category, _ = Category.objects.get_or_create(
                name=name, defaults={"description": description}
            )
            categories.append(category)
        self.stdout.write(self.style.SUCCESS("Creating categories... Done!"))
        return categories

    def _seed_products(self, vendor, categories: list[Category]) -> list[Product]:
        self.stdout.write("Creating products...")
        catalog = [
            ("Kanjivaram Temple Border", Fabric.KANJIVARAM, Occasion.WEDDING, Pattern.WOVEN, "Maroon", Decimal("18999.00"), Decimal("16499.00"), 0),
            ("Banarasi Zari Butta", Fabric.BANARASI, Occasion.WEDDING, Pattern.WOVEN, "Red", Decimal("14500.00"), None, 0),
            ("Chanderi Cotton Everyday", Fabric.COTTON, Occasion.CASUAL, Pattern.SOLID, "Mint", Decimal("1899.00"), Decimal("1499.00"), 1),
            ("Block Print Mulmul", Fabric.COTTON, Occasion.OFFICE, Pattern.BLOCK_PRINT, "Indigo", Decimal("2299.00"), None, 1),
            ("Georgette Sequin Drape", Fabric.GEORGETTE, Occasion.PARTY, Pattern.EMBROIDERED, "Black", Decimal("5999.00"), Decimal("4999.00"), 2),
            ("Chiffon Floral Digital", Fabric.CHIFFON, Occasion.PARTY, Pattern.DIGITAL_PRINT, "Peach", Decimal("3499.00"), None, 2),
            ("Tussar Hand Painted", Fabric.TUSSAR, Occasion.FESTIVAL, Pattern.HAND_PAINTED, "Beige", Decimal("7899.00"), None, 3),
            ("Linen Office Classic", Fabric.LINEN, Occasion.FORMAL, Pattern.SOLID, "Grey", Decimal("3199.00"), Decimal("2799.00"), 3),
        ]
        products = []
        for title, fabric, occasion, pattern, color, price, sale_price, category_index in catalog:
            product = Product.objects.filter(title=title).first()
            if product is None:
                product = Product.objects.create(
                    vendor=vendor,
                    title=title,
                    description=f"{title} in {color.lower()} {fabric.lower()}.",
                    price=price,
                    sale_price=sale_price,
                    stock=random.randint(3, 40),
                    fabric=fabric,
                    color=color,
                    pattern=pattern,
                    occasion=occasion,
                    rating=Decimal(random.randint(35, 50)) / 10,
                    reviews_count=random.randint(0, 120),
                )
                product.categories.set([categories[category_index]])
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, admin, customers, products: list[Product], count: int) -> int:
        self.stdout.write("Creating orders...")
        if not customers or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no customers/products)."))
            return 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        admin_actor = ActorDTO.from_user(admin)
        orders_created = 0

        for _ in range(count):
            customer = random.choice(customers)
            in_stock = [p for p in Product.objects.filter(stock__gt=0, is_active=True)]
            if not in_stock:
                break
            picked = random.sample(in_stock, k=min(random.randint(1, 3), len(in_stock)))
            dto = CreateOrderDTO(
                user_id=customer.id,
                items=[
                    CreateOrderItemDTO(product_id=p.id, quantity=random.randint(1, min(2, p.stock)))
                    for p in picked
                ],
                shipping_address=ShippingAddressDTO(
                    name=customer.name,
                    phone="9876543210",
                    address="12 MG Road",
                    city="Bengaluru",
                    state="Karnataka",
                    pincode="560001",
                ),
            )
            order = service.create_order(dto)
            for next_status in random.choice(STATUS_PATHS):
                service.apply_status_transition(order.id, next_status, admin_actor)
            orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
