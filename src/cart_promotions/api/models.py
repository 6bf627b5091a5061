"""
Pydantic models for FastAPI requests and responses.

Bodies use the camelCase names the cart and checkout screens already send.
"""

from datetime import datetime

from pydantic import Field

from ..engine.pricing import SpecialPricingResult
from ..models import CamelModel, CartLine, Promotion, ValidationResult


class ValidateCartRequest(CamelModel):
    """Request model for cart validation."""

    cart_lines: list[CartLine] = Field(
        default_factory=list, description="Cart lines with price and promotion linkage"
    )
    active_promotions: list[Promotion] = Field(
        default_factory=list, description="Promotions currently offered"
    )


class ValidateCartResponse(ValidationResult):
    """Cart verdict plus a one-line summary of outstanding requirements."""

    summary: str = Field("", description="Empty when nothing is outstanding")


class TipsRequest(CamelModel):
    """Request model for promotion tips."""

    promotions: list[Promotion] = Field(default_factory=list)
    cart_lines: list[CartLine] = Field(default_factory=list)


class TipsResponse(CamelModel):
    """Response model for promotion tips."""

    tips: list[str]


class SpecialPricingRequest(CamelModel):
    """Request model for pricing one promotion group."""

    promotion: Promotion
    cart_lines: list[CartLine] = Field(
        default_factory=list, description="Lines tagged with the promotion"
    )


class SpecialPricingResponse(CamelModel):
    """Response model for special pricing; ``pricing`` is null when not applicable."""

    promotion_id: int | str
    pricing: SpecialPricingResult | None = None


class HealthCheckResponse(CamelModel):
    """Response model for health checks."""

    status: str
    version: str
    timestamp: datetime
