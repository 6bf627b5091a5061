"""Promotion schedule window checks."""

from collections.abc import Iterable
from datetime import UTC, datetime

from ..models import Promotion


def is_promotion_live(promotion: Promotion, now: datetime | None = None) -> bool:
    """
    Check whether a promotion is switched on and inside its date window.

    A missing start or end date leaves that side of the window open. Naive
    ``now`` values are taken as UTC.
    """
    if not promotion.is_active:
        return False

    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    if promotion.start_date is not None and now < promotion.start_date:
        return False
    if promotion.end_date is not None and now > promotion.end_date:
        return False
    return True


def filter_live_promotions(
    promotions: Iterable[Promotion], now: datetime | None = None
) -> list[Promotion]:
    """Keep the promotions that are live at ``now``."""
    now = now or datetime.now(UTC)
    return [promotion for promotion in promotions if is_promotion_live(promotion, now)]
