"""Partition cart lines by the promotion they are tagged with."""

from collections.abc import Iterable

from ..models import CartLine, PromotionId


def resolve_promotion_id(line: CartLine) -> PromotionId | None:
    """
    Find the promotion a cart line belongs to.

    Checked in order: the line itself, its product, and the product's
    embedded promotion info. The first non-empty id wins.
    """
    if line.promotion_id is not None:
        return line.promotion_id

    product = line.product
    if product is None:
        return None
    if product.promotion_id is not None:
        return product.promotion_id
    if product.promotion_info is not None:
        return product.promotion_info.promotion_id
    return None


def group_by_promotion(lines: Iterable[CartLine]) -> dict[PromotionId, list[CartLine]]:
    """
    Group cart lines by promotion id.

    Lines without a promotion are left out. Within a group, lines keep their
    cart order.

    Args:
        lines: Cart lines to partition

    Returns:
        Fresh mapping of promotion id to the lines tagged with it
    """
    groups: dict[PromotionId, list[CartLine]] = {}
    for line in lines:
        promotion_id = resolve_promotion_id(line)
        if promotion_id is None:
            continue
        groups.setdefault(promotion_id, []).append(line)
    return groups
