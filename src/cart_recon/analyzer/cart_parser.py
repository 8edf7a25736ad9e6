"""Parser for the rendered shopping cart of Advantage Online Shopping."""

import re
from decimal import Decimal, InvalidOperation

from bs4 import BeautifulSoup, Tag

from ..models import ObservedCartRow

CART_SELECTOR = "#shoppingCart"
ROW_SELECTOR = "tr[ng-repeat*='product in cart.productsInCart'].ng-scope"
NAME_SELECTOR = "label.roboto-regular.productName"
COLOR_SELECTOR = ".productColor"
QUANTITY_SELECTOR = "td.smollCell.quantityMobile label.ng-binding"
PRICE_SELECTOR = "p.price.roboto-regular"
TOTAL_SELECTOR = "#shoppingCart > table span.roboto-medium.ng-binding"


class PriceFormatError(ValueError):
    """Price text could not be turned into an amount."""


class CartParseError(ValueError):
    """The cart markup does not have the expected structure."""


def parse_price(text: str) -> Decimal:
    """Convert ``$1,234.56`` style text into a Decimal."""
    cleaned = text.replace("$", "").replace(",", "").strip()
    if not re.fullmatch(r"-?\d+(\.\d+)?", cleaned):
        raise PriceFormatError(
            f"Unable to parse price text '{text}'. Expected format: $X.XX or $X,XXX.XX"
        )
    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise PriceFormatError(f"Unable to parse price text '{text}'") from e


def parse_cart_rows(html: str) -> list[ObservedCartRow]:
    """Extract every product line of the cart, in display order."""
    soup = BeautifulSoup(html, "lxml")
    rows = []

    for index, tr in enumerate(soup.select(ROW_SELECTOR), start=1):
        name = _text(tr, NAME_SELECTOR, index)

        # Colour lives in the title attribute, not the text
        color = ""
        color_el = tr.select_one(COLOR_SELECTOR)
        if color_el is not None:
            color = (color_el.get("title") or "").strip()

        quantity_text = _text(tr, QUANTITY_SELECTOR, index)
        try:
            quantity = int(quantity_text)
        except ValueError as e:
            raise CartParseError(f"Row {index}: invalid quantity '{quantity_text}'") from e

        rows.append(ObservedCartRow(
            product_name=name,
            color=color,
            quantity=quantity,
            line_total=parse_price(_text(tr, PRICE_SELECTOR, index)),
        ))

    return rows


def parse_grand_total(html: str) -> Decimal:
    """Extract the cart summary total."""
    soup = BeautifulSoup(html, "lxml")
    total = soup.select_one(TOTAL_SELECTOR)
    if total is None:
        raise CartParseError("Cart total not found")
    return parse_price(total.get_text(strip=True))


def _text(row: Tag, selector: str, index: int) -> str:
    element = row.select_one(selector)
    if element is None:
        raise CartParseError(f"Row {index}: '{selector}' not found")
    return element.get_text(strip=True)
