"""
Domain service: Pricing engine for tree removal quotes.

Every function here is pure. The pricing configuration is always passed in
by the caller; nothing is read from a store or a module-level setting.

Pricing pipeline:
1. Approximate each trunk as a cylinder (C² · H / 12.56)
2. Price the combined volume per cubic foot and add the starting fee
3. Apply the discount if the discount toggle is on
4. Apply tax to the discounted amount if the tax toggle is on
"""
import math
import logging
from typing import Sequence

import numpy as np

from tree_quote.domain.constants import PricingConstants
from tree_quote.domain.models import TreeItem, PricingConfig, PriceBreakdown

logger = logging.getLogger(__name__)


def tree_volume(circumference: float, height: float) -> float:
    """
    Approximate the trunk volume of one tree.

    Args:
        circumference: Trunk circumference in feet
        height: Trunk height in feet

    Returns:
        Volume in cubic feet, or 0.0 if either measurement is not positive
    """
    if not (circumference > 0 and height > 0):
        return 0.0
    return circumference * circumference * height / PricingConstants.VOLUME_DIVISOR


def tree_volumes(trees: Sequence[TreeItem]) -> np.ndarray:
    """
    Vectorised per-tree volumes.

    Args:
        trees: Trees to measure

    Returns:
        Array of volumes in ft³, aligned with the input order
    """
    if not trees:
        return np.zeros(0, dtype=float)

    circumferences = np.array([t.circumference for t in trees], dtype=float)
    heights = np.array([t.height for t in trees], dtype=float)

    valid = (circumferences > 0) & (heights > 0)
    volumes = circumferences * circumferences * heights / PricingConstants.VOLUME_DIVISOR

    return np.where(valid, volumes, 0.0)


def total_volume(trees: Sequence[TreeItem]) -> float:
    """
    Combined volume of a set of trees.

    fsum is exactly rounded, so the result does not depend on tree order.
    """
    return math.fsum(tree_volumes(trees).tolist())


def compute_breakdown(
    trees: Sequence[TreeItem],
    config: PricingConfig,
    effective_discount_percent: float,
) -> PriceBreakdown:
    """
    Price a set of trees.

    An empty tree list is valid and prices to the starting fee alone.

    Args:
        trees: Trees being quoted
        config: Pricing configuration to apply
        effective_discount_percent: Discount for this quote, in percent.
            Only applied when config.show_discount is on.

    Returns:
        PriceBreakdown with unrounded amounts
    """
    volume = total_volume(trees)
    volume_cost = volume * config.price_per_cubic_foot
    subtotal = volume_cost + config.starting_fee

    if not effective_discount_percent > 0:
        effective_discount_percent = 0.0

    discount_amount = (
        subtotal * (effective_discount_percent / 100) if config.show_discount else 0.0
    )
    taxable_amount = subtotal - discount_amount
    tax_amount = taxable_amount * (config.tax_rate / 100) if config.show_tax else 0.0
    total = taxable_amount + tax_amount

    logger.debug(
        f"Priced {len(trees)} trees: volume={volume:.4f}, subtotal={subtotal:.4f}, "
        f"discount={discount_amount:.4f}, tax={tax_amount:.4f}, total={total:.4f}"
    )

    return PriceBreakdown(
        total_volume=volume,
        volume_cost=volume_cost,
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        total=total,
    )
