"""
FastAPI router for cart promotion endpoints.

Thin wrappers over the engine: every request gets a fresh correlation ID so
the engine's structured logs can be traced back to the call.
"""

import logging

from fastapi import APIRouter, Depends

from ..config.models import EngineSettings
from ..engine import (
    calculate_special_pricing,
    filter_live_promotions,
    generate_tips,
    group_by_promotion,
    summarize_violations,
    validate_cart,
)
from ..shared.logging_utils import get_structured_logger
from .dependencies import get_settings
from .models import (
    SpecialPricingRequest,
    SpecialPricingResponse,
    TipsRequest,
    TipsResponse,
    ValidateCartRequest,
    ValidateCartResponse,
)

logger = logging.getLogger(__name__)
structured_logger = get_structured_logger(__name__)

router = APIRouter(prefix="/api/promotions", tags=["promotions"])


def _start_request() -> str:
    correlation_id = structured_logger.generate_correlation_id()
    structured_logger.set_correlation_id(correlation_id)
    return correlation_id


@router.post(
    "/validate",
    response_model=ValidateCartResponse,
    summary="Validate a cart against active promotions",
    description=(
        "Returns messages and suggestions per promotion, plus the checkout gate"
    ),
)
def validate_cart_endpoint(
    request: ValidateCartRequest, settings: EngineSettings = Depends(get_settings)
):
    """Validate cart lines against the supplied promotions."""
    _start_request()
    promotions = request.active_promotions
    if settings.enforce_schedule:
        promotions = filter_live_promotions(promotions)

    result = validate_cart(request.cart_lines, promotions, settings)
    return ValidateCartResponse(
        **result.model_dump(),
        summary=summarize_violations(result),
    )


@router.post(
    "/tips",
    response_model=TipsResponse,
    summary="Marketing tips for promotions",
)
def promotion_tips(
    request: TipsRequest, settings: EngineSettings = Depends(get_settings)
):
    """Generate encouragement lines for the supplied promotions."""
    _start_request()
    tips = generate_tips(request.promotions, request.cart_lines, settings)
    structured_logger.debug("Generated promotion tips", tip_count=len(tips))
    return TipsResponse(tips=tips)


@router.post(
    "/special-pricing",
    response_model=SpecialPricingResponse,
    summary="Special pricing for one promotion group",
)
def special_pricing(request: SpecialPricingRequest):
    """Price the lines tagged with the promotion, if its rule is met."""
    _start_request()
    promotion = request.promotion
    lines = group_by_promotion(request.cart_lines).get(promotion.id, [])
    return SpecialPricingResponse(
        promotion_id=promotion.id,
        pricing=calculate_special_pricing(promotion, lines),
    )
