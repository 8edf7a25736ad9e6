"""Analyzer module - turns rendered cart markup into observed rows."""

from .cart_parser import CartParseError, PriceFormatError, parse_cart_rows, parse_grand_total, parse_price

__all__ = ["CartParseError", "PriceFormatError", "parse_cart_rows", "parse_grand_total", "parse_price"]
