"""
Display helpers: two-decimal rounding and short quote summaries.

Amounts are only rounded here, at the output boundary. Stored quotes and
breakdowns keep full precision.
"""
from typing import Dict

from tree_quote.domain.constants import PricingConstants
from tree_quote.domain.models import PriceBreakdown, Quote, TreeItem
from tree_quote.services.domain.pricing_engine import tree_volume


def round_money(amount: float) -> float:
    """
    Round a monetary amount for display.

    Args:
        amount: Unrounded amount

    Returns:
        Amount rounded to two decimals
    """
    return round(amount, PricingConstants.MONEY_DECIMALS)


def format_money(amount: float) -> str:
    return f"{amount:.{PricingConstants.MONEY_DECIMALS}f}"


def format_volume(volume: float) -> str:
    return f"{volume:.{PricingConstants.VOLUME_DECIMALS}f} ft³"


def describe_tree(tree: TreeItem) -> str:
    """One-line label, e.g. "10' × 6' (47.77 ft³)"."""
    volume = tree_volume(tree.circumference, tree.height)
    return f"{tree.circumference:g}' × {tree.height:g}' ({format_volume(volume)})"


def breakdown_for_display(breakdown: PriceBreakdown) -> Dict[str, float]:
    """
    Round every field of a breakdown.

    Args:
        breakdown: Unrounded breakdown

    Returns:
        Field name to rounded value
    """
    return {name: round_money(value) for name, value in breakdown.model_dump().items()}


def tree_count_label(count: int) -> str:
    return f"{count} tree{'' if count == 1 else 's'} calculated"


def summarize_quote(quote: Quote) -> str:
    """
    Short history line for a saved quote.

    Args:
        quote: Saved quote

    Returns:
        e.g. "Jane Doe: 2 trees calculated, total 500.43"
    """
    label = quote.customer_name or quote.date
    return f"{label}: {tree_count_label(quote.tree_count)}, total {format_money(quote.total)}"
