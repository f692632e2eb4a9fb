"""
Domain models for tree measurements, pricing configuration and quotes.

These models represent the core domain entities and should be independent
of any infrastructure concerns (key-value stores, files, prompts, etc.).
"""
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from tree_quote.domain.constants import PricingConstants


def new_id() -> str:
    """Generate an opaque, never-reused identifier."""
    return str(uuid4())


class TreeItem(BaseModel):
    """One measured tree."""
    id: str = Field(default_factory=new_id)
    circumference: float = Field(
        gt=0, allow_inf_nan=False, description="Trunk circumference in feet"
    )
    height: float = Field(
        gt=0, allow_inf_nan=False, description="Trunk height in feet"
    )
    notes: str = ""

    class Config:
        frozen = True


class PricingConfig(BaseModel):
    """Process-wide pricing configuration."""
    starting_fee: float = Field(
        default=PricingConstants.DEFAULT_STARTING_FEE,
        ge=0,
        description="Flat fee added to every quote"
    )
    price_per_cubic_foot: float = Field(
        default=PricingConstants.DEFAULT_PRICE_PER_CUBIC_FOOT,
        ge=0,
    )
    tax_rate: float = Field(
        default=PricingConstants.DEFAULT_TAX_RATE,
        ge=0,
        description="Tax rate in percent"
    )
    show_tax: bool = PricingConstants.DEFAULT_SHOW_TAX
    default_discount_percent: float = Field(
        default=PricingConstants.DEFAULT_DISCOUNT_PERCENT,
        ge=0,
    )
    show_discount: bool = PricingConstants.DEFAULT_SHOW_DISCOUNT

    class Config:
        frozen = True


class PriceBreakdown(BaseModel):
    """Monetary breakdown for a set of trees under one configuration."""
    total_volume: float = Field(description="Combined volume in ft³")
    volume_cost: float = Field(description="total_volume * price_per_cubic_foot")
    subtotal: float
    discount_amount: float
    taxable_amount: float
    tax_amount: float
    total: float

    class Config:
        frozen = True


class Quote(BaseModel):
    """A saved, immutable snapshot of a breakdown and its trees."""
    id: str = Field(default_factory=new_id)
    date: str = Field(description="ISO-8601 timestamp of the save")
    subtotal: float
    tax_amount: float = Field(alias="taxAmount")
    discount_amount: float = Field(alias="discountAmount")
    total: float
    trees: List[TreeItem] = Field(min_length=1)
    customer_name: Optional[str] = Field(default=None, alias="customerName")

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def tree_count(self) -> int:
        return len(self.trees)

    def to_storage(self) -> Dict[str, Any]:
        """
        Serialize to the JSON-compatible shape kept in the history slot.

        Returns:
            Dictionary with camelCase keys; customerName omitted when absent
        """
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> "Quote":
        """
        Rebuild a quote from its stored shape.

        Args:
            data: Dictionary produced by to_storage (or an earlier version)

        Returns:
            Quote instance

        Raises:
            pydantic.ValidationError: If the data does not describe a valid quote
        """
        return cls.model_validate(data)
