"""
Icon resolution.

An icon cell may already hold a glyph, may name one in plain text ("house"),
or may be missing. When neither cell form helps, the icon is derived from the
category. The result is never empty.
"""

import unicodedata
from typing import Dict, Optional, Tuple

from .models import DEFAULT_ICON

# Shared category → icon table (exact, lower-cased match). Consulted only for
# categories no keyword bucket claims.
_CATEGORY_GROUPS: Dict[str, Tuple[str, ...]] = {
    "🍎": (
        "food", "culver's", "chipotle", "mcdonald's", "pasta", "pizza",
        "restaurant", "groceries", "whole foods", "trader joe's",
    ),
    "🎉": ("party", "event", "wedding", "new year", "graduation", "anniversary"),
    "🏠": (
        "rent", "mortgage", "housing", "home", "apartment", "landlord",
        "real estate", "utility",
    ),
    "🎁": (
        "gift", "holiday", "christmas", "birthday", "present", "treat",
        "special", "gifting",
    ),
    "💳": ("credit", "payment", "bill", "debt", "subscription"),
    "🛒": (
        "shopping", "clothes", "electronics", "store", "mall", "walmart",
        "best buy", "target", "ebay",
    ),
    "🚗": ("car", "transport", "gas", "fuel", "ride", "uber", "lyft", "taxi"),
    "🏦": (
        "bank", "savings", "loan", "checking", "investment", "atm",
        "credit card", "finance", "check",
    ),
    "👟": (
        "shoes", "clothing", "sneakers", "athletic", "running shoes", "boots",
        "sandals", "slippers", "heels", "trainers", "kicks",
    ),
    "☕": (
        "coffee", "starbucks", "caribou", "cafe", "espresso", "latte",
        "cappuccino", "americano", "mocha", "cold brew", "iced coffee",
    ),
}

CATEGORY_ICONS: Dict[str, str] = {
    name: icon for icon, names in _CATEGORY_GROUPS.items() for name in names
}

# Keyword buckets, checked in order before the exact table.
CATEGORY_KEYWORD_ICONS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("food", "grocer", "restaurant"), "🛒"),
    (("transport", "travel", "gas"), "🚗"),
    (("home", "rent", "mortgage"), "🏠"),
    (("health", "medical"), "❤️"),
    (("entertainment", "fun"), "🎬"),
    (("income", "salary"), "💰"),
    (("saving", "invest"), "📈"),
    (("bill", "utility"), "📝"),
    (("cloth", "shop"), "👕"),
    (("tech", "electr"), "📱"),
)

# Plain-text icon names some exports use instead of glyphs.
ICON_NAMES: Dict[str, str] = {
    "house": "🏠",
    "home": "🏠",
    "car": "🚗",
    "cart": "🛒",
    "shopping cart": "🛒",
    "food": "🛒",
    "heart": "❤️",
    "health": "❤️",
    "movie": "🎬",
    "film": "🎬",
    "money": "💵",
    "cash": "💵",
    "dollar": "💵",
    "money bag": "💰",
    "moneybag": "💰",
    "chart": "📈",
    "chart up": "📈",
    "bank": "🏦",
    "gift": "🎁",
    "party": "🎉",
    "coffee": "☕",
    "phone": "📱",
    "shirt": "👕",
    "note": "📝",
    "card": "💳",
    "credit card": "💳",
    "shoe": "👟",
    "apple": "🍎",
}


def is_glyph(text: str) -> bool:
    """True when ``text`` contains a pictographic symbol character."""
    return any(unicodedata.category(char) == "So" for char in text)


def _icon_name_key(text: str) -> str:
    key = text.strip().strip(":").lower()
    return " ".join(key.replace("_", " ").replace("-", " ").split())


def icon_for_category(category: str, default: str = DEFAULT_ICON) -> str:
    """Default icon for a category: keyword buckets, then the exact table."""
    category_lower = category.strip().lower()

    for keywords, icon in CATEGORY_KEYWORD_ICONS:
        if any(keyword in category_lower for keyword in keywords):
            return icon

    return CATEGORY_ICONS.get(category_lower, default)


def resolve_icon(
    cell: Optional[str],
    category: str,
    default: str = DEFAULT_ICON,
) -> str:
    """Pick the icon for a record. Never returns an empty string."""
    text = (cell or "").strip()
    if text:
        if is_glyph(text):
            return text
        named = ICON_NAMES.get(_icon_name_key(text))
        if named:
            return named

    return icon_for_category(category, default=default)
