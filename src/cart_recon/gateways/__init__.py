"""Gateways module - storefront boundaries for the cart action driver."""

from .base import StorefrontGateway

__all__ = ["StorefrontGateway"]
