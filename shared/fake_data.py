"""
Synthetic domain objects for API response bodies.
"""

import random
from typing import Any, Dict, List, Optional, Sequence

from faker import Faker

fake = Faker()

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")


def fake_users(rng: random.Random, user_types: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    users = []
    for _ in range(rng.randint(5, 14)):
        user = {
            "id": rng.randint(1, 9999),
            "name": fake.name(),
            "email": fake.email(),
            "city": fake.city(),
        }
        if user_types:
            user["joinDate"] = fake.date_of_birth().isoformat()
            user["userType"] = rng.choice(user_types)
        users.append(user)
    return users


def fake_orders(rng: random.Random, fulfillment_types: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    orders = []
    for _ in range(rng.randint(3, 9)):
        order = {
            "id": rng.randint(10000, 999998),
            "customer": fake.name(),
            "product": fake_product_name(),
            "total": rng.uniform(10.0, 500.0),
            "status": rng.choice(ORDER_STATUSES),
        }
        if fulfillment_types:
            order["fulfillmentType"] = rng.choice(fulfillment_types)
        orders.append(order)
    return orders


def fake_products(rng: random.Random, with_rating: bool = False) -> List[Dict[str, Any]]:
    products = []
    for _ in range(rng.randint(8, 19)):
        product = {
            "id": rng.randint(1, 999),
            "name": fake_product_name(),
            "price": rng.uniform(5.0, 200.0),
            "category": fake.word().title(),
            "inStock": rng.random() < 0.5,
        }
        if with_rating:
            product["rating"] = rng.uniform(1.0, 5.0)
        products.append(product)
    return products


def fake_cart_items(rng: random.Random) -> List[Dict[str, Any]]:
    return [
        {
            "productId": rng.randint(1, 999),
            "name": fake_product_name(),
            "price": rng.uniform(5.0, 100.0),
            "quantity": rng.randint(1, 4),
        }
        for _ in range(rng.randint(1, 5))
    ]


def fake_product_name() -> str:
    return f"{fake.color_name()} {fake.word().title()}"


def fake_person() -> Dict[str, str]:
    return {"name": fake.name(), "email": fake.email()}


def fake_token() -> str:
    return fake.uuid4()
