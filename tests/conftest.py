"""
Pytest configuration and fixtures for cart promotion tests.

Provides promotion and cart line builders shaped like the payloads the
promotion admin and cart services send.
"""

import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for local test runs without installation
_SRC = Path(__file__).resolve().parents[1] / "src"
if _SRC.exists() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from cart_promotions.models import CartLine, Promotion  # noqa: E402


def make_promotion(promotion_id=1, name="Promo", rules=None, **overrides) -> Promotion:
    """Build a promotion from camelCase fields."""
    data = {
        "id": promotion_id,
        "promotionName": name,
        "startDate": "2024-01-01T00:00:00Z",
        "endDate": "2099-12-31T23:59:59Z",
        "isActive": True,
        "promotionType": "percentage",
        "rules": rules,
    }
    data.update(overrides)
    return Promotion.model_validate(data)


def make_line(quantity=1, price="10.00", promotion_id=None, product_id=1, **extra) -> CartLine:
    """Build a cart line from camelCase fields."""
    data = {
        "productId": product_id,
        "quantity": quantity,
        "itemPrice": price,
        "promotionId": promotion_id,
    }
    data.update(extra)
    return CartLine.model_validate(data)


@pytest.fixture
def promotion_factory():
    return make_promotion


@pytest.fixture
def line_factory():
    return make_line


@pytest.fixture
def minimum_quantity_promotion() -> Promotion:
    """Scenario A promotion: at least four items."""
    return make_promotion(
        10,
        "Mix and Match",
        {"type": "minimum_quantity_same_promotion", "minimumQuantity": 4},
    )


@pytest.fixture
def buy_x_get_y_promotion() -> Promotion:
    """Scenario B promotion: buy two get one."""
    return make_promotion(
        20, "Buy 2 Get 1", {"type": "buy_x_get_y", "buyQuantity": 2, "getQuantity": 1}
    )


@pytest.fixture
def minimum_order_value_promotion() -> Promotion:
    """Scenario C promotion: spend R500."""
    return make_promotion(
        30, "Big Spender", {"type": "minimum_order_value", "minimumValue": 500}
    )


@pytest.fixture
def category_mix_promotion() -> Promotion:
    return make_promotion(
        40,
        "Pantry Mix",
        {
            "type": "category_mix",
            "minimumFromEach": 1,
            "totalMinimum": 3,
            "requiredCategories": [5, 6],
        },
    )


@pytest.fixture
def active_promotions(
    minimum_quantity_promotion,
    buy_x_get_y_promotion,
    minimum_order_value_promotion,
    category_mix_promotion,
) -> list[Promotion]:
    return [
        minimum_quantity_promotion,
        buy_x_get_y_promotion,
        minimum_order_value_promotion,
        category_mix_promotion,
    ]
