"""
Infrastructure layer: Quote store repository.

Owns the pricing configuration, the quote history and the onboarding flag,
each persisted as its own key-value slot. Every read validates the raw slot
against a schema and substitutes the documented default when it is missing
or malformed, so a damaged store never breaks the caller.
"""
import json
import math
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from tree_quote.domain.constants import StorageKeys, PricingConstants
from tree_quote.domain.models import PriceBreakdown, PricingConfig, Quote, TreeItem
from tree_quote.infrastructure.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotSpec:
    """Expected shape of one persisted scalar slot."""
    key: str
    field: str
    kind: type
    default: Any

    def accepts(self, value: Any) -> bool:
        """
        Check a decoded value against this slot's type.

        Numbers must be finite and non-negative; booleans are never
        accepted as numbers.
        """
        if self.kind is bool:
            return isinstance(value, bool)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        try:
            return math.isfinite(value) and value >= 0
        except OverflowError:
            return False


CONFIG_SCHEMA: Tuple[SlotSpec, ...] = (
    SlotSpec(StorageKeys.STARTING_FEE, "starting_fee", float,
             PricingConstants.DEFAULT_STARTING_FEE),
    SlotSpec(StorageKeys.PRICE_PER_CUBIC_FOOT, "price_per_cubic_foot", float,
             PricingConstants.DEFAULT_PRICE_PER_CUBIC_FOOT),
    SlotSpec(StorageKeys.TAX_RATE, "tax_rate", float,
             PricingConstants.DEFAULT_TAX_RATE),
    SlotSpec(StorageKeys.SHOW_TAX, "show_tax", bool,
             PricingConstants.DEFAULT_SHOW_TAX),
    SlotSpec(StorageKeys.SHOW_DISCOUNT, "show_discount", bool,
             PricingConstants.DEFAULT_SHOW_DISCOUNT),
    SlotSpec(StorageKeys.DEFAULT_DISCOUNT_PERCENT, "default_discount_percent", float,
             PricingConstants.DEFAULT_DISCOUNT_PERCENT),
)

ONBOARDING_SLOT = SlotSpec(
    StorageKeys.HAS_COMPLETED_ONBOARDING, "has_completed_onboarding", bool, False
)

_QUOTE_ADAPTER = TypeAdapter(Quote)


def utc_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """
    Render a timestamp as ISO-8601 with millisecond precision.

    UTC is written with a trailing 'Z', matching stores written by
    earlier versions of the calculator.
    """
    text = moment.isoformat(timespec="milliseconds")
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


class QuoteStore:
    """
    Repository for pricing configuration and quote history.

    Each mutating call is a single read-modify-write of one slot. Readers
    see another writer's changes on their next call; nothing is cached.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the store.

        Args:
            kv_store: Persistence collaborator holding the slots
            clock: Source of save timestamps (defaults to current UTC time)
        """
        self.kv_store = kv_store
        self.clock = clock or utc_timestamp
        self._schema: Dict[str, SlotSpec] = {spec.field: spec for spec in CONFIG_SCHEMA}

    # ------------------------------------------------------------
    # Slot decoding
    # ------------------------------------------------------------

    def _read_json(self, key: str) -> Tuple[bool, Any]:
        """
        Read and parse one slot.

        Returns:
            (found, value) where found is False for absent or unparsable slots
        """
        raw = self.kv_store.get(key)
        if raw is None:
            return False, None
        try:
            return True, json.loads(raw)
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning(f"Slot '{key}' holds unparsable data, using default: {e}")
            return False, None

    def _read_slot(self, spec: SlotSpec) -> Any:
        found, value = self._read_json(spec.key)
        if not found:
            return spec.default
        if not spec.accepts(value):
            logger.warning(
                f"Slot '{spec.key}' holds {value!r}, expected {spec.kind.__name__}; "
                f"using default {spec.default!r}"
            )
            return spec.default
        return value

    # ------------------------------------------------------------
    # Pricing configuration
    # ------------------------------------------------------------

    def load_config(self) -> PricingConfig:
        """
        Load the pricing configuration.

        Returns:
            PricingConfig built from the stored slots, with defaults for any
            slot that is absent or malformed
        """
        values = {spec.field: self._read_slot(spec) for spec in CONFIG_SCHEMA}
        return PricingConfig(**values)

    def save_config_field(self, field: str, value: Any) -> PricingConfig:
        """
        Persist one configuration field immediately.

        Args:
            field: PricingConfig field name (e.g. "tax_rate")
            value: New value

        Returns:
            The configuration after the write. Unchanged if the value was
            rejected.

        Raises:
            ValueError: If field is not a PricingConfig field
        """
        spec = self._schema.get(field)
        if spec is None:
            raise ValueError(f"Unknown pricing setting: {field}")

        if not spec.accepts(value):
            logger.warning(f"Rejected {type(value).__name__} value for setting '{field}'")
            return self.load_config()

        self.kv_store.set(spec.key, json.dumps(value))
        logger.info(f"Saved setting {field}={value!r}")
        return self.load_config()

    # ------------------------------------------------------------
    # Quote history
    # ------------------------------------------------------------

    def _read_history(self) -> List[Quote]:
        found, value = self._read_json(StorageKeys.QUOTE_HISTORY)
        if not found:
            return []
        if not isinstance(value, list):
            logger.warning(
                f"Slot '{StorageKeys.QUOTE_HISTORY}' does not hold a list, using empty history"
            )
            return []

        # Entries are validated one by one so a single bad entry is dropped
        # instead of the whole history.
        history = []
        for index, entry in enumerate(value):
            try:
                history.append(_QUOTE_ADAPTER.validate_python(entry))
            except ValidationError as e:
                logger.warning(
                    f"Dropping invalid entry {index} in slot '{StorageKeys.QUOTE_HISTORY}': "
                    f"{e.error_count()} errors"
                )
        return history

    def _write_history(self, history: Sequence[Quote]) -> None:
        payload = json.dumps([quote.to_storage() for quote in history])
        self.kv_store.set(StorageKeys.QUOTE_HISTORY, payload)

    def list_history(self) -> List[Quote]:
        """
        Saved quotes, most recent first.

        Returns:
            A fresh list on every call; the store is not modified
        """
        return self._read_history()

    def get_quote(self, quote_id: str) -> Optional[Quote]:
        """
        Look up a saved quote.

        Args:
            quote_id: Quote identifier

        Returns:
            The matching Quote, or None
        """
        for quote in self._read_history():
            if quote.id == quote_id:
                return quote
        return None

    def append_quote(
        self,
        breakdown: PriceBreakdown,
        trees: Sequence[TreeItem],
        customer_name: Optional[str] = None,
    ) -> Optional[Quote]:
        """
        Save a new quote at the head of the history.

        Args:
            breakdown: Breakdown computed for exactly these trees
            trees: Trees being quoted, in display order
            customer_name: Optional label; blank names are stored as absent

        Returns:
            The saved Quote, or None if trees is empty (nothing is written)
        """
        if not trees:
            logger.debug("Refusing to save a quote with no trees")
            return None

        name = customer_name.strip() if customer_name else None

        quote = Quote(
            date=format_timestamp(self.clock()),
            subtotal=breakdown.subtotal,
            tax_amount=breakdown.tax_amount,
            discount_amount=breakdown.discount_amount,
            total=breakdown.total,
            trees=list(trees),
            customer_name=name or None,
        )

        history = self._read_history()
        self._write_history([quote] + history)

        logger.info(
            f"Saved quote {quote.id} with {quote.tree_count} trees, total={quote.total:.2f}"
        )
        return quote

    def delete_quote(self, quote_id: str) -> bool:
        """
        Remove a quote from the history.

        Args:
            quote_id: Quote identifier

        Returns:
            True if a quote was removed; False if no quote had this id,
            in which case nothing is written
        """
        history = self._read_history()
        remaining = [quote for quote in history if quote.id != quote_id]

        if len(remaining) == len(history):
            logger.debug(f"Quote {quote_id} not in history, nothing to delete")
            return False

        self._write_history(remaining)
        logger.info(f"Deleted quote {quote_id}")
        return True

    # ------------------------------------------------------------
    # Onboarding
    # ------------------------------------------------------------

    def has_completed_onboarding(self) -> bool:
        return self._read_slot(ONBOARDING_SLOT)

    def set_onboarding_completed(self, completed: bool) -> None:
        self.kv_store.set(ONBOARDING_SLOT.key, json.dumps(bool(completed)))
