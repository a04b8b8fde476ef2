"""
Display helpers for recommendation cards.

Prices are in rupees and shown on the lakh/crore scale used across the
listing pages.
"""

import re
from typing import Optional, Tuple

from ..domain.entities.property import Property
from ..domain.entities.recommendation import Intent

ONE_CRORE = 10_000_000
ONE_LAKH = 100_000

INTENT_HEADINGS = {
    Intent.INVESTMENT: (
        "Smart Investment Picks",
        "AI-curated properties with high investment potential based on your preferences"
    ),
    Intent.END_USE: (
        "Perfect Homes for You",
        "Handpicked homes that match your lifestyle and family needs"
    ),
    Intent.NONE: (
        "Recommended Properties",
        "Personalized property recommendations based on your search behavior"
    ),
}


def intent_heading(intent: Optional[str]) -> Tuple[str, str]:
    """Return (title, description) for a recommendation section"""
    return INTENT_HEADINGS[Intent.parse(intent)]


def property_slug(property: Property) -> str:
    parts = [property.name]
    if property.area:
        parts.append(property.area)
    if property.developer:
        parts.append(property.developer)

    slug = " ".join(parts).lower()
    slug = re.sub(r"[^a-z0-9 -]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip()


def _trim_number(value: float, decimals: int) -> str:
    if value == int(value):
        return str(int(value))
    return f"{round(value, decimals):.{decimals}f}".rstrip("0").rstrip(".")


def format_price(price: float) -> str:
    if price >= ONE_CRORE:
        return f"₹{_trim_number(price / ONE_CRORE, 2)} Cr"
    return f"₹{_trim_number(price / ONE_LAKH, 1)} Lakh"


def price_display(property: Property) -> str:
    starting_price = property.get_starting_price()
    if starting_price is None:
        return "Price on request"
    return format_price(starting_price)
