"""HTTP surface for cart promotion validation."""

from .router import router

__all__ = ["router"]
