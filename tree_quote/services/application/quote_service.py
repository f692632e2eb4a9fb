"""
Application service: Orchestration layer for quote operations.
"""
import logging
from typing import Any, Callable, List, Optional, Protocol

from tree_quote.config import settings
from tree_quote.domain.models import PriceBreakdown, PricingConfig, Quote
from tree_quote.infrastructure.quote_store import QuoteStore
from tree_quote.services.application.quote_composer import QuoteComposer
from tree_quote.services.domain.pricing_engine import compute_breakdown

logger = logging.getLogger(__name__)


class Confirmer(Protocol):
    """Synchronous yes/no prompt shown before destructive actions."""

    def confirm(self, message: str) -> bool:
        ...


class CallbackConfirmer:
    """Adapts a plain callable (e.g. a dialog function) to Confirmer."""

    def __init__(self, callback: Callable[[str], bool]):
        self.callback = callback

    def confirm(self, message: str) -> bool:
        return bool(self.callback(message))


class QuoteService:
    """
    Application service for quote-related operations.

    Coordinates the composer, the pricing engine, the store and the
    confirmation prompt. No pricing arithmetic lives here.
    """

    def __init__(
        self,
        store: QuoteStore,
        confirmer: Confirmer,
        delete_confirmation_message: Optional[str] = None,
    ):
        """
        Initialize the service with dependencies.

        Args:
            store: Repository for configuration and history
            confirmer: Prompt consulted before deleting a quote
            delete_confirmation_message: Prompt text (defaults to settings)
        """
        self.store = store
        self.confirmer = confirmer
        self.delete_confirmation_message = (
            delete_confirmation_message or settings.delete_confirmation_message
        )

    # ------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------

    def pricing_config(self) -> PricingConfig:
        return self.store.load_config()

    def update_setting(self, field: str, value: Any) -> PricingConfig:
        """
        Change one pricing setting.

        Args:
            field: PricingConfig field name
            value: New value

        Returns:
            The configuration after the change

        Raises:
            ValueError: If field is not a pricing setting
        """
        return self.store.save_config_field(field, value)

    # ------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------

    def start_composition(self) -> QuoteComposer:
        """
        Open a new, empty composition.

        Returns:
            QuoteComposer seeded with the configured default discount
        """
        config = self.store.load_config()
        return QuoteComposer(discount_percent=config.default_discount_percent)

    def preview(self, composer: QuoteComposer) -> PriceBreakdown:
        return composer.breakdown(self.store.load_config())

    def save_composition(self, composer: QuoteComposer) -> Optional[Quote]:
        """
        Save the composition as a quote.

        This method orchestrates:
        1. Loading the current pricing configuration
        2. Pricing the billable trees
        3. Appending the quote to history
        4. Resetting the composer

        Args:
            composer: Composition to save

        Returns:
            The saved Quote, or None if there was nothing billable. The
            composer is left untouched in that case.
        """
        trees = composer.billable_trees()
        if not trees:
            logger.debug("Nothing billable in composition, not saving")
            return None

        config = self.store.load_config()
        breakdown = compute_breakdown(trees, config, composer.discount_percent)

        quote = self.store.append_quote(breakdown, trees, composer.customer_name)
        if quote is not None:
            composer.reset()
        return quote

    # ------------------------------------------------------------
    # History
    # ------------------------------------------------------------

    def history(self) -> List[Quote]:
        return self.store.list_history()

    def quote(self, quote_id: str) -> Optional[Quote]:
        return self.store.get_quote(quote_id)

    def delete_quote(self, quote_id: str) -> bool:
        """
        Delete a quote after the user confirms.

        Args:
            quote_id: Quote identifier

        Returns:
            True if the quote was deleted; False if the user declined or
            the quote was already gone
        """
        if not self.confirmer.confirm(self.delete_confirmation_message):
            logger.info(f"Deletion of quote {quote_id} cancelled by user")
            return False
        return self.store.delete_quote(quote_id)

    # ------------------------------------------------------------
    # Onboarding
    # ------------------------------------------------------------

    def needs_onboarding(self) -> bool:
        return not self.store.has_completed_onboarding()

    def complete_onboarding(self) -> None:
        self.store.set_onboarding_completed(True)

    def reset_onboarding(self) -> None:
        self.store.set_onboarding_completed(False)
