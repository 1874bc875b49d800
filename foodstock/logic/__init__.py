"""Core business logic layer.

Subpackages:
- retry: retry policy and the operation executor shared by every screen
- alerts: expiration alert loading, dismissal and reminder fan-out
- products: add/update/delete/search use cases
"""
__all__ = ["retry", "alerts", "products"]
