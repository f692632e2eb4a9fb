"""
Application service: In-progress quote composition.

A composer is owned by the caller (one per open calculator) and is never
persisted. It moves EMPTY -> COMPOSING as trees are added, and back to EMPTY
when the quote is saved or abandoned.
"""
import math
import logging
from enum import Enum
from typing import List, Optional

from tree_quote.domain.models import TreeItem, PricingConfig, PriceBreakdown
from tree_quote.services.domain.pricing_engine import compute_breakdown, tree_volume

logger = logging.getLogger(__name__)


class ComposerState(str, Enum):
    EMPTY = "empty"
    COMPOSING = "composing"


def is_valid_measurement(circumference: Optional[float], height: Optional[float]) -> bool:
    """True when both measurements are present, finite and positive."""
    if circumference is None or height is None:
        return False
    return (
        math.isfinite(circumference) and math.isfinite(height)
        and circumference > 0 and height > 0
    )


class QuoteComposer:
    """
    Trees, discount and customer label for the quote being composed.

    The measurement currently being entered (not yet added as a tree) is
    kept as a pending measurement. It is priced in the live preview and
    billed on save when valid, so a single-tree quote needs no explicit add.
    """

    def __init__(
        self,
        discount_percent: float = 0.0,
        customer_name: Optional[str] = None,
    ):
        """
        Initialize an empty composition.

        Args:
            discount_percent: Live discount for this quote. Edits here never
                change the configured default.
            customer_name: Optional label for the saved quote
        """
        self.discount_percent = discount_percent
        self.customer_name = customer_name
        self._initial_discount = discount_percent
        self._trees: List[TreeItem] = []
        self._pending_circumference: Optional[float] = None
        self._pending_height: Optional[float] = None

    @property
    def trees(self) -> List[TreeItem]:
        return list(self._trees)

    @property
    def state(self) -> ComposerState:
        return ComposerState.COMPOSING if self._trees else ComposerState.EMPTY

    # ------------------------------------------------------------
    # Pending measurement
    # ------------------------------------------------------------

    def set_measurement(
        self,
        circumference: Optional[float],
        height: Optional[float],
    ) -> None:
        self._pending_circumference = circumference
        self._pending_height = height

    def clear_measurement(self) -> None:
        self._pending_circumference = None
        self._pending_height = None

    @property
    def pending_volume(self) -> float:
        """Volume of the pending measurement, 0.0 when incomplete or invalid."""
        if not is_valid_measurement(self._pending_circumference, self._pending_height):
            return 0.0
        return tree_volume(self._pending_circumference, self._pending_height)

    def _pending_tree(self) -> Optional[TreeItem]:
        if not is_valid_measurement(self._pending_circumference, self._pending_height):
            return None
        return TreeItem(
            circumference=self._pending_circumference,
            height=self._pending_height,
        )

    # ------------------------------------------------------------
    # Trees
    # ------------------------------------------------------------

    def add_tree(
        self,
        circumference: Optional[float] = None,
        height: Optional[float] = None,
        notes: str = "",
    ) -> Optional[TreeItem]:
        """
        Add a measured tree to the composition.

        With no measurements given, the pending measurement is used and
        cleared once added.

        Args:
            circumference: Trunk circumference in feet
            height: Trunk height in feet
            notes: Free text

        Returns:
            The new TreeItem, or None if the measurements are not positive
        """
        from_pending = circumference is None and height is None
        if from_pending:
            circumference = self._pending_circumference
            height = self._pending_height

        if not is_valid_measurement(circumference, height):
            logger.debug(f"Ignoring invalid measurement: c={circumference}, h={height}")
            return None

        tree = TreeItem(circumference=circumference, height=height, notes=notes)
        self._trees.append(tree)

        if from_pending:
            self.clear_measurement()
        return tree

    def remove_tree(self, tree_id: str) -> bool:
        """
        Remove a tree by id.

        Returns:
            True if a tree was removed
        """
        remaining = [t for t in self._trees if t.id != tree_id]
        removed = len(remaining) != len(self._trees)
        self._trees = remaining
        return removed

    def billable_trees(self) -> List[TreeItem]:
        """
        Trees that a save would record.

        Returns:
            Added trees, followed by the pending measurement if it is valid
        """
        trees = list(self._trees)
        pending = self._pending_tree()
        if pending is not None:
            trees.append(pending)
        return trees

    def breakdown(self, config: PricingConfig) -> PriceBreakdown:
        """
        Live breakdown of the billable trees.

        Args:
            config: Current pricing configuration

        Returns:
            PriceBreakdown using this composition's discount percent
        """
        return compute_breakdown(self.billable_trees(), config, self.discount_percent)

    # ------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------

    def reset(self) -> None:
        """Return to EMPTY, discarding trees, pending input and label."""
        self._trees = []
        self.clear_measurement()
        self.customer_name = None
        self.discount_percent = self._initial_discount

    def abandon(self) -> None:
        logger.debug(f"Abandoning composition with {len(self._trees)} trees")
        self.reset()
