"""
Property-based tests for the promotion engine.

Uses Hypothesis to check the partition, threshold and arithmetic guarantees
across generated carts.
"""

from collections import Counter

import pytest

_hyp = pytest.importorskip("hypothesis")
from hypothesis import given, settings  # noqa: E402
from hypothesis import strategies as st  # noqa: E402

from cart_promotions import validate_cart  # noqa: E402
from cart_promotions.engine import count_free_items, evaluate_group, group_by_promotion  # noqa: E402
from cart_promotions.engine.evaluator import format_amount  # noqa: E402
from cart_promotions.models import CartLine, MessageType, Promotion  # noqa: E402

promotion_ids = st.one_of(st.none(), st.integers(min_value=1, max_value=5))

cart_lines = st.builds(
    lambda product_id, quantity, price, promotion_id, nested: CartLine(
        product_id=product_id,
        quantity=quantity,
        item_price=price,
        promotion_id=None if nested else promotion_id,
        product={"promotionInfo": {"promotionId": promotion_id}} if nested else None,
    ),
    product_id=st.integers(min_value=1, max_value=1000),
    quantity=st.integers(min_value=0, max_value=50),
    price=st.decimals(min_value=0, max_value=1000, places=2),
    promotion_id=promotion_ids,
    nested=st.booleans(),
)

# Raw service values: anything from plain prices to exponent strings far
# outside decimal precision, plus non-numeric junk.
raw_numbers = st.one_of(
    st.integers(),
    st.floats(allow_nan=True, allow_infinity=True),
    st.decimals(allow_nan=False, allow_infinity=False),
    st.builds(
        lambda mantissa, exponent: f"{mantissa}e{exponent}",
        st.integers(min_value=-999, max_value=999),
        st.integers(min_value=-999_999_999, max_value=999_999_999),
    ),
    st.text(max_size=8),
)

raw_cart_lines = st.builds(
    lambda quantity, price, promotion_id: {
        "productId": 1,
        "quantity": quantity,
        "itemPrice": price,
        "promotionId": promotion_id,
    },
    quantity=raw_numbers,
    price=raw_numbers,
    promotion_id=promotion_ids,
)


def _promotion(promotion_id: int, rules: dict) -> Promotion:
    return Promotion(id=promotion_id, promotion_name=f"Promo {promotion_id}", rules=rules)


rule_payloads = st.one_of(
    st.builds(
        lambda q: {"type": "minimum_quantity_same_promotion", "minimumQuantity": q},
        st.integers(min_value=0, max_value=30),
    ),
    st.builds(
        lambda v: {"type": "minimum_order_value", "minimumValue": str(v)},
        st.decimals(min_value=0, max_value=5000, places=2),
    ),
    st.builds(
        lambda b, g: {"type": "buy_x_get_y", "buyQuantity": b, "getQuantity": g},
        st.integers(min_value=1, max_value=5),
        st.integers(min_value=1, max_value=3),
    ),
    st.just({"type": "category_mix"}),
    st.just({"type": "none"}),
)

promotion_sets = st.lists(rule_payloads, min_size=0, max_size=5).map(
    lambda rules: [_promotion(index + 1, rule) for index, rule in enumerate(rules)]
)


@given(st.lists(cart_lines, max_size=20))
def test_grouping_is_a_partition(lines):
    groups = group_by_promotion(lines)
    grouped = [id(line) for group in groups.values() for line in group]
    ungrouped = [
        id(line)
        for line in lines
        if line.promotion_id is None
        and (line.product is None or line.product.promotion_info.promotion_id is None)
    ]

    assert Counter(grouped + ungrouped) == Counter(id(line) for line in lines)


@given(
    threshold=st.integers(min_value=0, max_value=40),
    quantities=st.lists(st.integers(min_value=0, max_value=10), max_size=8),
)
def test_quantity_threshold_gates_checkout(threshold, quantities):
    promotion = _promotion(
        1, {"type": "minimum_quantity_same_promotion", "minimumQuantity": threshold}
    )
    lines = [CartLine(product_id=i, quantity=q, promotion_id=1) for i, q in enumerate(quantities)]

    result = validate_cart(lines, [promotion])

    if not lines:
        assert result.messages == []
    else:
        assert result.can_proceed_to_checkout is (sum(quantities) >= threshold)


@given(
    quantity=st.integers(min_value=0, max_value=200),
    buy=st.integers(min_value=1, max_value=10),
    get=st.integers(min_value=1, max_value=10),
)
def test_buy_x_get_y_arithmetic(quantity, buy, get):
    free_items = count_free_items(quantity, buy, get)

    assert free_items == (quantity // (buy + get)) * get
    if quantity < buy + get:
        assert free_items == 0

    promotion = _promotion(1, {"type": "buy_x_get_y", "buyQuantity": buy, "getQuantity": get})
    result = evaluate_group(promotion, [CartLine(quantity=quantity, promotion_id=1)])
    assert result.can_proceed_to_checkout is (quantity >= buy + get)
    if quantity >= buy + get:
        assert f"You get {free_items} free item" in result.messages[0].message


@given(
    minimum=st.decimals(min_value=0, max_value=5000, places=2),
    lines=st.lists(cart_lines, max_size=10),
)
def test_order_value_never_blocks_checkout(minimum, lines):
    promotion = _promotion(1, {"type": "minimum_order_value", "minimumValue": str(minimum)})
    tagged = [line.model_copy(update={"promotion_id": 1}) for line in lines]

    result = evaluate_group(promotion, tagged)

    assert result.can_proceed_to_checkout is True
    total = sum((line.line_total for line in tagged), start=0)
    if total < minimum:
        assert result.suggestions[0].data["needed"] == format_amount(minimum - total)


@settings(max_examples=50)
@given(lines=st.lists(cart_lines, max_size=15), promotions=promotion_sets)
def test_validation_is_idempotent_and_never_errors(lines, promotions):
    first = validate_cart(lines, promotions)
    second = validate_cart(lines, promotions)

    assert first.model_dump_json() == second.model_dump_json()
    assert first.is_valid is True
    assert all(message.type != MessageType.ERROR for message in first.messages)


@settings(max_examples=100)
@given(lines=st.lists(raw_cart_lines, max_size=10), promotions=promotion_sets)
def test_validation_survives_arbitrary_numbers(lines, promotions):
    result = validate_cart(lines, promotions)

    assert result.is_valid is True
    for line in lines:
        assert CartLine.model_validate(line).line_total.is_finite()
