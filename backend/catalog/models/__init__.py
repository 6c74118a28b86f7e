"""Aggregate model imports so Base.metadata sees every table."""

from catalog.models.product import Product  # noqa: F401
