"""
Cart Promotions

Promotion validation engine for shopping carts:
- Grouping of cart lines by the promotion they are tagged with
- Per-rule evaluation (minimum quantity, minimum order value, buy X get Y, category mix)
- Aggregated checkout verdicts and shopper guidance
- Marketing tips for active promotions
"""

from .engine import generate_tips, validate_cart

__version__ = "1.0.0"
__author__ = "Cart Promotions"

__all__ = ["generate_tips", "validate_cart"]
