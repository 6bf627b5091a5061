"""
Data models for the promotion engine.

This module contains the promotion rule variants (a closed union keyed on
``type``), promotions, cart lines as the engine sees them, and the
validation verdict returned to the cart and checkout screens.

Field names are snake_case; the camelCase names used by the cart and
promotion services are accepted as aliases and used when serialising.
"""

import json
import logging
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .shared.exceptions import RuleParseError

logger = logging.getLogger(__name__)

PromotionId = int | str


class RuleType(str, Enum):
    """Discriminator values for promotion rules."""

    MINIMUM_QUANTITY = "minimum_quantity_same_promotion"
    MINIMUM_ORDER_VALUE = "minimum_order_value"
    BUY_X_GET_Y = "buy_x_get_y"
    CATEGORY_MIX = "category_mix"
    NONE = "none"


# Effective values for absent rule fields. An explicit 0 is never replaced.
#
# Coercion contract for incoming numbers (see to_decimal / to_int):
# - values that do not parse to a finite number within range count as absent:
#   rule fields take the default below, prices and quantities become 0
# - amounts are accepted up to MAX_AMOUNT and counts up to MAX_QUANTITY in
#   magnitude; beyond that cart arithmetic would exceed decimal precision
# - fractional counts are truncated toward zero ("2.9" -> 2)
RULE_DEFAULTS: dict[str, Any] = {
    "minimum_quantity": 2,
    "minimum_value": Decimal("100"),
    "buy_quantity": 2,
    "get_quantity": 1,
    "minimum_from_each": 1,
    "total_minimum": 2,
    "required_categories": (),
}

MAX_AMOUNT = Decimal("1e12")
MAX_QUANTITY = 1_000_000


class MessageType(str, Enum):
    """Severity of a validation message."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class SuggestionType(str, Enum):
    """Action a suggestion asks the shopper to take."""

    ADD_MORE = "add_more"
    REMOVE_ITEMS = "remove_items"
    CHANGE_QUANTITY = "change_quantity"
    SELECT_CATEGORY = "select_category"


# ================================
# LENIENT COERCION HELPERS
# ================================


def to_decimal(value: Any, limit: Decimal = MAX_AMOUNT) -> Decimal | None:
    """
    Parse a number or numeric string, returning None when it is unusable.

    Values whose magnitude exceeds ``limit`` are unusable as well.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not number.is_finite() or number.copy_abs() > limit:
        return None
    return number


def to_int(value: Any) -> int | None:
    number = to_decimal(value, limit=Decimal(MAX_QUANTITY))
    if number is None:
        return None
    return int(number)


def normalize_promotion_id(value: Any) -> PromotionId | None:
    """Normalise an id so that ``10`` and ``"10"`` address the same promotion."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if value.isdigit():
            return int(value)
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int):
        return value
    return str(value)


def parse_datetime(value: Any) -> datetime | None:
    """Parse ISO dates and datetimes; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unparsable promotion date {value!r}")
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class CamelModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# ================================
# PROMOTION RULES
# ================================


class SpecialPricing(CamelModel):
    """Price override applied once a minimum-quantity rule is met."""

    type: Literal["fixed_total", "extra_discount", "fixed_per_item"]
    value: Decimal

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v) -> Decimal:
        number = to_decimal(v)
        if number is None:
            raise ValueError("special pricing value must be numeric")
        return number


class MinimumQuantityRule(CamelModel):
    """Hard blocker: a minimum number of items under the same promotion."""

    type: Literal["minimum_quantity_same_promotion"] = "minimum_quantity_same_promotion"
    minimum_quantity: int | None = None
    special_pricing: SpecialPricing | None = None

    @field_validator("minimum_quantity", mode="before")
    @classmethod
    def parse_minimum_quantity(cls, v) -> int | None:
        return to_int(v)

    @field_validator("special_pricing", mode="wrap")
    @classmethod
    def drop_invalid_special_pricing(cls, v, handler):
        try:
            return handler(v)
        except ValidationError:
            logger.warning(f"Ignoring malformed special pricing {v!r}")
            return None

    @property
    def effective_minimum_quantity(self) -> int:
        if self.minimum_quantity is None:
            return RULE_DEFAULTS["minimum_quantity"]
        return self.minimum_quantity


class MinimumOrderValueRule(CamelModel):
    """Soft blocker: a minimum spend across the promotion's lines."""

    type: Literal["minimum_order_value"] = "minimum_order_value"
    minimum_value: Decimal | None = None

    @field_validator("minimum_value", mode="before")
    @classmethod
    def parse_minimum_value(cls, v) -> Decimal | None:
        return to_decimal(v)

    @property
    def effective_minimum_value(self) -> Decimal:
        if self.minimum_value is None:
            return RULE_DEFAULTS["minimum_value"]
        return self.minimum_value


class BuyXGetYRule(CamelModel):
    """Hard blocker: buy ``buy_quantity`` items and get ``get_quantity`` free."""

    type: Literal["buy_x_get_y"] = "buy_x_get_y"
    buy_quantity: int | None = None
    get_quantity: int | None = None
    get_discount_type: Literal["free", "percentage", "fixed"] | None = None
    get_discount_value: Decimal | None = None
    apply_to_lowest_price: bool | None = None

    @field_validator("buy_quantity", "get_quantity", mode="before")
    @classmethod
    def parse_quantities(cls, v) -> int | None:
        return to_int(v)

    @field_validator("get_discount_value", mode="before")
    @classmethod
    def parse_discount_value(cls, v) -> Decimal | None:
        return to_decimal(v)

    @field_validator("get_discount_type", mode="before")
    @classmethod
    def drop_unknown_discount_type(cls, v):
        if v not in ("free", "percentage", "fixed"):
            return None
        return v

    @field_validator("apply_to_lowest_price", mode="before")
    @classmethod
    def parse_flag(cls, v) -> bool | None:
        return v if isinstance(v, bool) else None

    @property
    def effective_buy_quantity(self) -> int:
        if self.buy_quantity is None:
            return RULE_DEFAULTS["buy_quantity"]
        return self.buy_quantity

    @property
    def effective_get_quantity(self) -> int:
        if self.get_quantity is None:
            return RULE_DEFAULTS["get_quantity"]
        return self.get_quantity


class CategoryMixRule(CamelModel):
    """Items drawn from several categories. Reported, not enforced."""

    type: Literal["category_mix"] = "category_mix"
    minimum_from_each: int | None = None
    total_minimum: int | None = None
    required_categories: tuple[PromotionId, ...] | None = None

    @field_validator("minimum_from_each", "total_minimum", mode="before")
    @classmethod
    def parse_minimums(cls, v) -> int | None:
        return to_int(v)

    @field_validator("required_categories", mode="before")
    @classmethod
    def parse_categories(cls, v):
        if v is None:
            return None
        if not isinstance(v, (list, tuple)):
            return None
        return tuple(
            category_id
            for category_id in (normalize_promotion_id(item) for item in v)
            if category_id is not None
        )

    @property
    def effective_minimum_from_each(self) -> int:
        if self.minimum_from_each is None:
            return RULE_DEFAULTS["minimum_from_each"]
        return self.minimum_from_each

    @property
    def effective_total_minimum(self) -> int:
        if self.total_minimum is None:
            return RULE_DEFAULTS["total_minimum"]
        return self.total_minimum

    @property
    def effective_required_categories(self) -> tuple[PromotionId, ...]:
        if self.required_categories is None:
            return RULE_DEFAULTS["required_categories"]
        return self.required_categories


class NoRule(CamelModel):
    """Always satisfied."""

    type: Literal["none"] = "none"


PromotionRule = Annotated[
    Union[
        MinimumQuantityRule,
        MinimumOrderValueRule,
        BuyXGetYRule,
        CategoryMixRule,
        NoRule,
    ],
    Field(discriminator="type"),
]

_RULE_ADAPTER: TypeAdapter[PromotionRule] = TypeAdapter(PromotionRule)

RULE_MODELS = (
    MinimumQuantityRule,
    MinimumOrderValueRule,
    BuyXGetYRule,
    CategoryMixRule,
    NoRule,
)


def parse_rule(raw: Any) -> PromotionRule:
    """
    Parse a stored rule payload into its rule variant.

    Args:
        raw: Rule model, mapping, or JSON string as stored on the promotion

    Returns:
        The matching rule variant

    Raises:
        RuleParseError: If the payload is not JSON, not a mapping, or has an
            unknown or missing ``type``
    """
    if isinstance(raw, RULE_MODELS):
        return raw

    payload = raw
    if isinstance(raw, (str, bytes)):
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RuleParseError("Rule payload is not valid JSON", raw, [str(e)])

    if not isinstance(payload, dict):
        raise RuleParseError("Rule payload must be a mapping", raw)

    rule_type = payload.get("type")
    if rule_type not in {member.value for member in RuleType}:
        raise RuleParseError(f"Unknown rule type {rule_type!r}", raw)

    try:
        return _RULE_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise RuleParseError(
            "Rule payload failed validation",
            raw,
            [error["msg"] for error in e.errors()],
        )


# ================================
# PROMOTIONS AND CART LINES
# ================================


class Promotion(CamelModel):
    """A promotion as supplied by the promotion admin service."""

    id: PromotionId
    promotion_name: str = ""
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool = True
    promotion_type: str = ""
    discount_value: Decimal | None = None
    minimum_order_value: Decimal | None = None
    rules: PromotionRule | None = None

    @field_validator("id", mode="before")
    @classmethod
    def parse_id(cls, v) -> PromotionId:
        promotion_id = normalize_promotion_id(v)
        if promotion_id is None:
            raise ValueError("promotion id is required")
        return promotion_id

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v) -> datetime | None:
        return parse_datetime(v)

    @field_validator("discount_value", "minimum_order_value", mode="before")
    @classmethod
    def parse_amounts(cls, v) -> Decimal | None:
        return to_decimal(v)

    @field_validator("rules", mode="before")
    @classmethod
    def parse_rules(cls, v):
        """Degrade unusable rule payloads to "no rules" instead of failing."""
        if v is None or v == "":
            return None
        try:
            return parse_rule(v)
        except RuleParseError as e:
            logger.warning(f"Ignoring promotion rules: {e}")
            return None


class PromotionInfo(CamelModel):
    """Promotion details embedded on a cart product."""

    promotion_id: PromotionId | None = None
    promotion_name: str | None = None

    @field_validator("promotion_id", mode="before")
    @classmethod
    def parse_promotion_id(cls, v) -> PromotionId | None:
        return normalize_promotion_id(v)


class CartProduct(CamelModel):
    """The product attached to a cart line."""

    id: PromotionId | None = None
    name: str | None = None
    price: Decimal | None = None
    promotion_id: PromotionId | None = None
    promotion_info: PromotionInfo | None = None
    category_ids: tuple[PromotionId, ...] = ()

    @field_validator("id", "promotion_id", mode="before")
    @classmethod
    def parse_ids(cls, v) -> PromotionId | None:
        return normalize_promotion_id(v)

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v) -> Decimal | None:
        return to_decimal(v)

    @field_validator("promotion_info", mode="wrap")
    @classmethod
    def drop_invalid_promotion_info(cls, v, handler):
        try:
            return handler(v)
        except ValidationError:
            return None

    @field_validator("category_ids", mode="before")
    @classmethod
    def parse_category_ids(cls, v):
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(
            category_id
            for category_id in (normalize_promotion_id(item) for item in v)
            if category_id is not None
        )


class CartLine(CamelModel):
    """A cart item as the engine sees it."""

    product_id: PromotionId | None = None
    quantity: int = 0
    item_price: Decimal = Decimal("0")
    promotion_id: PromotionId | None = None
    product: CartProduct | None = None

    @field_validator("product_id", "promotion_id", mode="before")
    @classmethod
    def parse_ids(cls, v) -> PromotionId | None:
        return normalize_promotion_id(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, v) -> int:
        quantity = to_int(v)
        return 0 if quantity is None else quantity

    @field_validator("item_price", mode="before")
    @classmethod
    def parse_item_price(cls, v) -> Decimal:
        price = to_decimal(v)
        return Decimal("0") if price is None else price

    @field_validator("product", mode="wrap")
    @classmethod
    def drop_invalid_product(cls, v, handler):
        try:
            return handler(v)
        except ValidationError:
            logger.debug(f"Ignoring malformed cart product {v!r}")
            return None

    @property
    def line_total(self) -> Decimal:
        return self.item_price * self.quantity


# ================================
# VALIDATION RESULTS
# ================================


class Message(CamelModel):
    """A message shown next to the cart for one promotion."""

    type: MessageType
    message: str
    promotion_name: str
    promotion_id: PromotionId


class Suggestion(CamelModel):
    """An action the shopper can take to qualify."""

    type: SuggestionType
    message: str
    action_text: str
    data: dict[str, Any] | None = None


class ValidationResult(CamelModel):
    """Verdict for a cart, or for one promotion group before aggregation."""

    is_valid: bool = True
    can_proceed_to_checkout: bool = True
    messages: list[Message] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)

    @classmethod
    def identity(cls) -> "ValidationResult":
        """Valid, checkout allowed, nothing to report."""
        return cls()


def coerce_cart_lines(lines) -> list[CartLine]:
    """Validate mappings into CartLine models, skipping unusable records."""
    coerced = []
    for line in lines or ():
        if isinstance(line, CartLine):
            coerced.append(line)
            continue
        try:
            coerced.append(CartLine.model_validate(line))
        except ValidationError as e:
            logger.warning(f"Skipping malformed cart line: {e.error_count()} errors")
    return coerced


def coerce_promotions(promotions) -> list[Promotion]:
    """Validate mappings into Promotion models, skipping unusable records."""
    coerced = []
    for promotion in promotions or ():
        if isinstance(promotion, Promotion):
            coerced.append(promotion)
            continue
        try:
            coerced.append(Promotion.model_validate(promotion))
        except ValidationError as e:
            logger.warning(f"Skipping malformed promotion record: {e.error_count()} errors")
    return coerced
